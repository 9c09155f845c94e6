"""
Test suite for sales: leads and lead-to-customer conversion
"""
from django.test import TestCase
from rest_framework import status
from pestcontrol.core.models import Activity
from pestcontrol.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from pestcontrol.parties.models import Customer
from pestcontrol.sales.models import Lead


class LeadTests(TestCase):
    """Test lead endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def test_create_lead(self):
        employee = TestDataFactory.create_employee(name='Ravi')
        data = {'name': 'Sunita', 'mobile': '9876543210', 'source': 'Referral', 'followed_by': employee.id}
        response = self.client.post('/api/leads/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'NEW')
        self.assertEqual(response.data['followed_by_name'], 'Ravi')
        self.assertTrue(Activity.objects.filter(type='lead_added').exists())

    def test_create_lead_invalid_mobile(self):
        response = self.client.post('/api/leads/', {'name': 'Sunita', 'mobile': '98765'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('mobile', response.data)

    def test_create_lead_cannot_start_converted(self):
        response = self.client.post(
            '/api/leads/', {'name': 'Sunita', 'mobile': '9876543210', 'status': 'CONVERTED'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_newest_first_with_filter(self):
        TestDataFactory.create_lead(name='First')
        TestDataFactory.create_lead(name='Second', status='LOST')
        response = self.client.get('/api/leads/')
        self.assertEqual([row['name'] for row in response.data], ['Second', 'First'])
        response = self.client.get('/api/leads/?status=LOST')
        self.assertEqual([row['name'] for row in response.data], ['Second'])

    def test_patch_status(self):
        lead = TestDataFactory.create_lead()
        response = self.client.patch(f'/api/leads/{lead.id}/', {'status': 'CONTACTED'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        lead.refresh_from_db()
        self.assertEqual(lead.status, 'CONTACTED')

    def test_patch_cannot_set_converted(self):
        lead = TestDataFactory.create_lead()
        response = self.client.patch(f'/api/leads/{lead.id}/', {'status': 'CONVERTED'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_converted_lead_status_is_locked(self):
        lead = TestDataFactory.create_lead(status='CONVERTED')
        response = self.client.patch(f'/api/leads/{lead.id}/', {'status': 'NEW'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class LeadConversionTests(TestCase):
    """Test lead conversion"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def test_convert_creates_linked_customer(self):
        lead = TestDataFactory.create_lead(name='Sunita', mobile='9876543210', address='Baner, Pune')
        response = self.client.post(f'/api/leads/{lead.id}/convert/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        customer = Customer.objects.get()
        self.assertEqual(customer.name, 'Sunita')
        self.assertEqual(customer.contact_number, '9876543210')
        self.assertEqual(customer.address, 'Baner, Pune')
        self.assertEqual(response.data['customer']['id'], customer.id)

        lead.refresh_from_db()
        self.assertEqual(lead.status, 'CONVERTED')
        self.assertEqual(lead.converted_customer, customer)
        self.assertTrue(Activity.objects.filter(type='lead_converted').exists())

    def test_convert_without_address(self):
        lead = TestDataFactory.create_lead(address='')
        self.client.post(f'/api/leads/{lead.id}/convert/')
        self.assertEqual(Customer.objects.get().address, 'Address Pending')

    def test_convert_twice_fails_without_side_effects(self):
        lead = TestDataFactory.create_lead()
        self.client.post(f'/api/leads/{lead.id}/convert/')
        first_customer = Customer.objects.get()

        response = self.client.post(f'/api/leads/{lead.id}/convert/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Lead already converted')
        self.assertEqual(Customer.objects.count(), 1)
        lead.refresh_from_db()
        self.assertEqual(lead.converted_customer, first_customer)

    def test_convert_unknown_lead(self):
        response = self.client.post('/api/leads/99999/convert/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_contacted_lead_can_be_converted(self):
        lead = TestDataFactory.create_lead(status='CONTACTED')
        response = self.client.post(f'/api/leads/{lead.id}/convert/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Lead.objects.get(pk=lead.pk).status, 'CONVERTED')

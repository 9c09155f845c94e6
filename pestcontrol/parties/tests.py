"""
Test suite for parties: customers, contracts, visits and the cascading
customer delete
"""
from datetime import date
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from pestcontrol.core.models import Activity
from pestcontrol.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from pestcontrol.jobs.models import Job
from pestcontrol.parties.models import Customer, Contract, Visit, VisitProduct


class CustomerTests(TestCase):
    """Test customer endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def test_create_customer_without_contract(self):
        data = {'name': 'Hotel Blue', 'contact_number': '9000000000', 'address': 'MG Road'}
        response = self.client.post('/api/customers/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Hotel Blue')
        self.assertEqual(response.data['contracts'], [])
        self.assertTrue(Activity.objects.filter(type='customer_added').exists())

    def test_create_customer_with_contract_and_visits(self):
        data = {
            'name': 'Hotel Blue',
            'contact_number': '9000000000',
            'address': 'MG Road',
            'contract': {
                'frequency': 'Quarterly',
                'start_date': '2024-01-01',
                'end_date': '2024-12-31',
                'contract_value': '10000',
                'gst': '1800',
                'total_amount': '11800',
                'service_dates': ['2024-01-15', '2024-04-15', '2024-07-15'],
            },
        }
        response = self.client.post('/api/customers/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        contract = Contract.objects.get(customer__name='Hotel Blue')
        self.assertEqual(contract.service_type, 'General')
        self.assertEqual(contract.frequency, 'Quarterly')
        self.assertEqual(contract.total_amount, Decimal('11800.00'))
        self.assertEqual(
            list(contract.visits.values_list('scheduled_date', 'status')),
            [(date(2024, 1, 15), 'PENDING'), (date(2024, 4, 15), 'PENDING'), (date(2024, 7, 15), 'PENDING')]
        )
        self.assertEqual(len(response.data['contracts'][0]['visits']), 3)

    def test_contract_allows_at_most_ten_service_dates(self):
        data = {
            'name': 'Hotel Blue',
            'contract': {'service_dates': [f'2024-01-{day:02d}' for day in range(1, 12)]},
        }
        response = self.client.post('/api/customers/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Customer.objects.count(), 0)

    def test_contract_end_before_start(self):
        data = {'name': 'Hotel Blue', 'contract': {'start_date': '2024-05-01', 'end_date': '2024-04-01'}}
        response = self.client.post('/api/customers/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_requires_name(self):
        response = self.client.post('/api/customers/', {'name': '  '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_from_lead_marks_it_converted(self):
        lead = TestDataFactory.create_lead(name='Hotel Blue')
        response = self.client.post('/api/customers/', {'name': 'Hotel Blue', 'lead_id': lead.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        lead.refresh_from_db()
        self.assertEqual(lead.status, 'CONVERTED')
        self.assertEqual(lead.converted_customer_id, response.data['id'])

    def test_create_from_converted_lead_creates_nothing(self):
        existing = TestDataFactory.create_customer()
        lead = TestDataFactory.create_lead(status='CONVERTED')
        lead.converted_customer = existing
        lead.save()
        response = self.client.post('/api/customers/', {'name': 'Second', 'lead_id': lead.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Lead already converted')
        self.assertFalse(Customer.objects.filter(name='Second').exists())
        lead.refresh_from_db()
        self.assertEqual(lead.converted_customer, existing)

    def test_list_and_search(self):
        TestDataFactory.create_customer(name='Hotel Blue')
        TestDataFactory.create_customer(name='City Hospital')
        response = self.client.get('/api/customers/?search=hosp')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['name'] for row in response.data], ['City Hospital'])

    def test_update(self):
        customer = TestDataFactory.create_customer(name='Hotel Blue')
        response = self.client.put(
            f'/api/customers/{customer.id}/',
            {'name': 'Hotel Blue Inn', 'contact_number': '9111111111', 'address': 'MG Road', 'email': 'a@b.com'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        customer.refresh_from_db()
        self.assertEqual(customer.name, 'Hotel Blue Inn')
        self.assertTrue(Activity.objects.filter(type='customer_updated').exists())

    def test_delete_cascades(self):
        customer = TestDataFactory.create_customer(name='Hotel Blue')
        contract = TestDataFactory.create_contract(customer, service_dates=[date(2024, 1, 1), date(2024, 2, 1)])
        product = TestDataFactory.create_product()
        visit = contract.visits.first()
        VisitProduct.objects.create(visit=visit, product=product, quantity=Decimal('1'))
        lead = TestDataFactory.create_lead(status='CONVERTED')
        lead.converted_customer = customer
        lead.save()
        employee = TestDataFactory.create_employee()
        job = Job.objects.create(
            bill_number='B-1', customer=customer, customer_name=customer.name,
            employee=employee, employee_name=employee.name, job_date='2024-01-01'
        )

        response = self.client.delete(f'/api/customers/{customer.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Customer.objects.filter(pk=customer.pk).exists())
        self.assertFalse(Contract.objects.exists())
        self.assertFalse(Visit.objects.exists())
        self.assertFalse(VisitProduct.objects.exists())

        lead.refresh_from_db()
        self.assertIsNone(lead.converted_customer)
        self.assertEqual(lead.status, 'NEW')

        job.refresh_from_db()
        self.assertIsNone(job.customer)
        self.assertEqual(job.customer_name, 'Hotel Blue')
        self.assertTrue(Activity.objects.filter(type='customer_deleted').exists())

    def test_delete_unknown_customer(self):
        response = self.client.delete('/api/customers/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_history(self):
        customer = TestDataFactory.create_customer(name='Hotel Blue')
        TestDataFactory.create_contract(customer, service_dates=[date(2024, 1, 1)])
        employee = TestDataFactory.create_employee()
        Job.objects.create(
            bill_number='B-1', customer=customer, customer_name=customer.name,
            employee=employee, employee_name=employee.name, job_date='2024-01-01'
        )
        response = self.client.get(f'/api/customers/{customer.id}/history/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['customer']['name'], 'Hotel Blue')
        self.assertEqual(len(response.data['contracts']), 1)
        self.assertEqual(len(response.data['contracts'][0]['visits']), 1)
        self.assertEqual([job['bill_number'] for job in response.data['jobs']], ['B-1'])


class VisitTests(TestCase):
    """Test visit completion"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())
        customer = TestDataFactory.create_customer(name='Hotel Blue')
        contract = TestDataFactory.create_contract(customer, service_dates=[date(2024, 1, 1)])
        self.visit = contract.visits.get()
        self.employee = TestDataFactory.create_employee(name='Ravi')
        self.product = TestDataFactory.create_product(quantity=Decimal('10'))

    def test_complete_records_products_without_moving_stock(self):
        data = {
            'employee': self.employee.id,
            'remarks': 'Kitchen treated',
            'products': [{'product': self.product.id, 'quantity': '2.5'}],
        }
        response = self.client.post(f'/api/visits/{self.visit.id}/complete/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'COMPLETED')
        self.assertEqual(response.data['assigned_employee_name'], 'Ravi')
        self.assertIsNotNone(response.data['completion_date'])
        self.assertEqual(len(response.data['products_used']), 1)

        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity_available, Decimal('10.000'))
        self.assertTrue(Activity.objects.filter(type='visit_completed').exists())

    def test_complete_twice_is_a_no_op(self):
        self.client.post(f'/api/visits/{self.visit.id}/complete/', {'remarks': 'first'}, format='json')
        response = self.client.post(
            f'/api/visits/{self.visit.id}/complete/',
            {'remarks': 'second', 'products': [{'product': self.product.id, 'quantity': '1'}]},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['remarks'], 'first')
        self.assertEqual(VisitProduct.objects.count(), 0)

    def test_complete_unknown_visit(self):
        response = self.client.post('/api/visits/99999/complete/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

"""
Test suite for reports: date-window report and dashboard
"""
from datetime import date, timedelta
from decimal import Decimal
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from pestcontrol.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from pestcontrol.jobs.models import Job
from pestcontrol.parties.models import Visit, VisitProduct
from pestcontrol.sales.models import Lead


class ReportTests(TestCase):
    """Test the date-window report"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())
        self.today = timezone.localdate()
        self.employee = TestDataFactory.create_employee(name='Ravi')
        self.customer = TestDataFactory.create_customer(name='Hotel Blue')

    def test_default_window_is_today(self):
        response = self.client.get('/api/reports/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['period']['from'], self.today.isoformat())
        self.assertEqual(response.data['period']['to'], self.today.isoformat())
        self.assertEqual(response.data['leads']['conversion_rate'], '0.0')

    def test_invalid_date(self):
        response = self.client.get('/api/reports/?from=01-02-2024')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_from_after_to(self):
        response = self.client.get('/api/reports/?from=2024-02-02&to=2024-02-01')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_completed_visits_in_window(self):
        contract = TestDataFactory.create_contract(
            self.customer, service_dates=[date(2024, 1, 1), date(2024, 2, 1)], service_type='Termite Control'
        )
        product = TestDataFactory.create_product(name='Gel', unit='ml')
        done, pending = contract.visits.order_by('scheduled_date')
        done.status = 'COMPLETED'
        done.completion_date = timezone.now()
        done.assigned_employee = self.employee
        done.save()
        VisitProduct.objects.create(visit=done, product=product, quantity=Decimal('250'))

        response = self.client.get(f'/api/reports/?from={self.today.isoformat()}&to={self.today.isoformat()}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['services']), 1)
        service = response.data['services'][0]
        self.assertEqual(service['customer_name'], 'Hotel Blue')
        self.assertEqual(service['service_type'], 'Termite Control')
        self.assertEqual(service['employee_name'], 'Ravi')
        self.assertEqual(service['products_used'][0]['unit'], 'ml')

        yesterday = (self.today - timedelta(days=1)).isoformat()
        response = self.client.get(f'/api/reports/?from={yesterday}&to={yesterday}')
        self.assertEqual(response.data['services'], [])

    def test_completed_jobs_and_revenue(self):
        Job.objects.create(
            bill_number='B-1', customer=self.customer, customer_name='Hotel Blue', employee=self.employee,
            employee_name='Ravi', job_date=self.today, amount=Decimal('1500'),
            status='completed', completed_at=timezone.now()
        )
        Job.objects.create(
            bill_number='B-2', customer_name='Other', employee_name='Ravi', job_date=self.today,
            amount=Decimal('999'), status='pending'
        )
        response = self.client.get('/api/reports/')
        self.assertEqual(response.data['jobs']['total'], 1)
        self.assertEqual(response.data['jobs']['revenue'], 1500.0)
        self.assertEqual(response.data['jobs']['list'][0]['bill_number'], 'B-1')

    def test_lead_conversion_rate(self):
        converted = TestDataFactory.create_lead(status='CONVERTED')
        converted.converted_customer = self.customer
        converted.save()
        TestDataFactory.create_lead()
        TestDataFactory.create_lead(status='LOST')

        response = self.client.get('/api/reports/')
        leads = response.data['leads']
        self.assertEqual(leads['total'], 3)
        self.assertEqual(leads['converted'], 1)
        self.assertEqual(leads['conversion_rate'], '33.3')
        converted_row = [row for row in leads['list'] if row['id'] == converted.id][0]
        self.assertEqual(converted_row['converted_to'], 'Hotel Blue')

    def test_leads_outside_window_are_excluded(self):
        lead = TestDataFactory.create_lead()
        Lead.objects.filter(pk=lead.pk).update(created_at=timezone.now() - timedelta(days=10))
        response = self.client.get('/api/reports/')
        self.assertEqual(response.data['leads']['total'], 0)


class DashboardTests(TestCase):
    """Test the dashboard summary"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def test_dashboard(self):
        today = timezone.localdate()
        TestDataFactory.create_employee()
        TestDataFactory.create_product(name='Low', quantity=Decimal('3'))
        TestDataFactory.create_product(name='Plenty', quantity=Decimal('300'))
        customer = TestDataFactory.create_customer(name='Hotel Blue')
        TestDataFactory.create_contract(customer, service_dates=[today + timedelta(days=1), today + timedelta(days=30)])
        Job.objects.create(
            bill_number='B-1', customer_name='City Hospital', employee_name='Ravi', job_date=today,
            next_service_date=today
        )
        TestDataFactory.create_lead()

        response = self.client.get('/api/reports/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        counts = response.data['counts']
        self.assertEqual(counts['employees'], 1)
        self.assertEqual(counts['products'], 2)
        self.assertEqual(counts['customers'], 1)
        self.assertEqual(counts['pending_jobs'], 1)
        self.assertEqual(counts['new_leads'], 1)
        self.assertEqual([row['name'] for row in response.data['low_stock']], ['Low'])
        self.assertEqual(
            [(row['source'], row['customer_name']) for row in response.data['upcoming_services']],
            [('job', 'City Hospital'), ('visit', 'Hotel Blue')]
        )
        self.assertEqual(Visit.objects.filter(status='PENDING').count(), 2)

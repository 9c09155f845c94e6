"""
Test suite for jobs: stock assignment, completion and the employee portal
"""
from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from pestcontrol.core.exceptions import DuplicateBillNumber
from pestcontrol.core.models import Activity
from pestcontrol.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from pestcontrol.inventory.models import EmployeeStock, StockMovement, StockReturnRequest
from pestcontrol.jobs import services
from pestcontrol.jobs.models import Job


class JobTestMixin:

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())
        self.employee = TestDataFactory.create_employee(name='Ravi', employee_id='EMP0001')
        self.customer = TestDataFactory.create_customer(name='Hotel Blue')
        self.product = TestDataFactory.create_product(name='Termite Gel', product_id='PRD0001', quantity=Decimal('50'))

    def assign(self, bill_number='B-100', lines=None, **extra):
        if lines is None:
            lines = [{'product': self.product.id, 'quantity': '20'}]
        data = {
            'bill_number': bill_number,
            'customer': self.customer.id,
            'employee': self.employee.id,
            'amount': '1500',
            'service_type': 'Termite Control',
            'products': lines,
        }
        data.update(extra)
        return self.client.post('/api/jobs/', data, format='json')

    def available(self):
        self.product.refresh_from_db()
        return self.product.quantity_available

    def held(self, product=None):
        line = EmployeeStock.objects.filter(employee=self.employee, product=product or self.product).first()
        return line.quantity if line else Decimal('0')


class JobAssignmentTests(JobTestMixin, TestCase):
    """Test job creation and stock assignment"""

    def test_assign_moves_stock_to_employee(self):
        response = self.assign()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'pending')
        self.assertEqual(response.data['customer_name'], 'Hotel Blue')
        self.assertEqual(response.data['employee_name'], 'Ravi')
        self.assertEqual(len(response.data['products']), 1)

        self.assertEqual(self.available(), Decimal('30.000'))
        self.assertEqual(self.held(), Decimal('20.000'))
        movement = StockMovement.objects.get(movement_type='assign')
        self.assertEqual(movement.reference, 'B-100')
        activity = Activity.objects.get(type='job_assigned')
        self.assertEqual(activity.description, 'Job B-100 assigned to Ravi for customer Hotel Blue')

    def test_assign_merges_into_existing_stock_in_hand(self):
        TestDataFactory.give_stock(self.employee, self.product, '3')
        self.assign()
        self.assertEqual(self.held(), Decimal('23.000'))

    def test_assign_more_than_available_is_rejected(self):
        response = self.assign(lines=[{'product': self.product.id, 'quantity': '50.001'}])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Insufficient stock', response.data['error'])
        self.assertEqual(Job.objects.count(), 0)
        self.assertEqual(self.available(), Decimal('50.000'))

    def test_assign_whole_balance_is_allowed(self):
        response = self.assign(lines=[{'product': self.product.id, 'quantity': '50'}])
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(self.available(), Decimal('0.000'))

    def test_rows_for_same_product_are_summed(self):
        lines = [
            {'product': self.product.id, 'quantity': '30'},
            {'product': self.product.id, 'quantity': '30'},
        ]
        response = self.assign(lines=lines)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.available(), Decimal('50.000'))
        self.assertEqual(self.held(), Decimal('0'))

        lines = [
            {'product': self.product.id, 'quantity': '20'},
            {'product': self.product.id, 'quantity': '10'},
        ]
        response = self.assign(lines=lines)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(response.data['products']), 1)
        self.assertEqual(self.available(), Decimal('20.000'))
        self.assertEqual(self.held(), Decimal('30.000'))

    def test_one_short_product_rejects_whole_job(self):
        spray = TestDataFactory.create_product(name='Spray', quantity=Decimal('2'))
        lines = [
            {'product': self.product.id, 'quantity': '10'},
            {'product': spray.id, 'quantity': '3'},
        ]
        response = self.assign(lines=lines)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.available(), Decimal('50.000'))
        self.assertFalse(EmployeeStock.objects.exists())
        self.assertFalse(StockMovement.objects.filter(movement_type='assign').exists())

    def test_duplicate_bill_number_any_case(self):
        self.assertEqual(self.assign(bill_number='B-100').status_code, status.HTTP_201_CREATED)
        response = self.assign(bill_number='b-100', lines=[{'product': self.product.id, 'quantity': '5'}])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Bill number b-100 already exists')
        self.assertEqual(Job.objects.count(), 1)
        self.assertEqual(self.available(), Decimal('30.000'))
        self.assertEqual(self.held(), Decimal('20.000'))

    def test_bill_number_taken_between_check_and_insert(self):
        self.assign(bill_number='B-100')
        # Simulate a concurrent assignment that passed the existence check
        with patch.object(Job.objects, 'filter') as job_filter:
            job_filter.return_value.exists.return_value = False
            with self.assertRaises(DuplicateBillNumber):
                services.assign_job(
                    self.employee,
                    [(self.product, Decimal('5'))],
                    'b-100',
                    customer=self.customer,
                    job_date=timezone.localdate(),
                )
        self.assertEqual(Job.objects.count(), 1)
        self.assertEqual(self.available(), Decimal('30.000'))
        self.assertEqual(self.held(), Decimal('20.000'))

    def test_zero_quantity_line_is_invalid(self):
        response = self.assign(lines=[{'product': self.product.id, 'quantity': '0'}])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('products', response.data)

    def test_no_products(self):
        response = self.assign(lines=[])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_inactive_employee(self):
        self.employee.is_active = False
        self.employee.save()
        response = self.assign()
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('employee', response.data)

    def test_customer_name_without_record(self):
        response = self.assign(customer=None, customer_name='Walk-in Client')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['customer_name'], 'Walk-in Client')
        self.assertIsNone(response.data['customer'])

    def test_list_filters(self):
        self.assign(bill_number='B-100', lines=[{'product': self.product.id, 'quantity': '1'}])
        self.assign(bill_number='C-200', lines=[{'product': self.product.id, 'quantity': '1'}])
        response = self.client.get('/api/jobs/?bill_number=c-2')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['bill_number'] for row in response.data], ['C-200'])
        response = self.client.get(f'/api/jobs/?employee={self.employee.id}&status=pending')
        self.assertEqual(len(response.data), 2)

    def test_upcoming_services(self):
        today = timezone.localdate()
        self.assign(bill_number='B-1', lines=[{'product': self.product.id, 'quantity': '1'}],
                    next_service_date=(today + timedelta(days=2)).isoformat())
        self.assign(bill_number='B-2', lines=[{'product': self.product.id, 'quantity': '1'}],
                    next_service_date=(today + timedelta(days=3)).isoformat())
        self.assign(bill_number='B-3', lines=[{'product': self.product.id, 'quantity': '1'}],
                    next_service_date=(today - timedelta(days=1)).isoformat())
        response = self.client.get('/api/jobs/upcoming/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['bill_number'] for row in response.data], ['B-1'])

    def test_patch_descriptive_fields_only(self):
        job_id = self.assign().data['id']
        response = self.client.patch(
            f'/api/jobs/{job_id}/',
            {'remarks': 'Gate code 1234', 'bill_number': 'X-1', 'status': 'completed'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        job = Job.objects.get(pk=job_id)
        self.assertEqual(job.remarks, 'Gate code 1234')
        self.assertEqual(job.bill_number, 'B-100')
        self.assertEqual(job.status, 'pending')

    def test_patch_rejects_negative_amount(self):
        job_id = self.assign().data['id']
        response = self.client.patch(f'/api/jobs/{job_id}/', {'amount': '-10'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('amount', response.data)
        self.assertEqual(Job.objects.get(pk=job_id).amount, Decimal('1500.00'))


class JobCompletionTests(JobTestMixin, TestCase):
    """Test job completion"""

    def setUp(self):
        super().setUp()
        self.job_id = self.assign().data['id']

    def complete(self, used, client=None, path=None):
        payload = {'products_used': [{'product': self.product.id, 'quantity_used': used}]}
        return (client or self.client).post(path or f'/api/jobs/{self.job_id}/complete/', payload, format='json')

    def test_completion_consumes_employee_stock_only(self):
        response = self.complete('15')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'completed')
        self.assertIsNotNone(response.data['completed_at'])
        self.assertEqual(Decimal(str(response.data['products'][0]['quantity_used'])), Decimal('15'))

        self.assertEqual(self.held(), Decimal('5.000'))
        self.assertEqual(self.available(), Decimal('30.000'))
        self.assertEqual(StockMovement.objects.filter(movement_type='consume').count(), 1)
        self.assertEqual(StockReturnRequest.objects.count(), 0)
        activity = Activity.objects.get(type='job_completed')
        self.assertEqual(activity.description, 'Job B-100 completed by Ravi')

    def test_completing_twice_is_a_no_op(self):
        self.complete('15')
        response = self.complete('5')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.held(), Decimal('5.000'))
        self.assertEqual(StockMovement.objects.filter(movement_type='consume').count(), 1)

    def test_used_cannot_exceed_assigned(self):
        response = self.complete('20.001')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Job.objects.get(pk=self.job_id).status, 'pending')
        self.assertEqual(self.held(), Decimal('20.000'))

    def test_used_cannot_be_negative(self):
        response = self.complete('-1')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_product_not_on_job(self):
        other = TestDataFactory.create_product()
        payload = {'products_used': [{'product': other.id, 'quantity_used': '1'}]}
        response = self.client.post(f'/api/jobs/{self.job_id}/complete/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_missing_lines_count_as_unused(self):
        response = self.client.post(f'/api/jobs/{self.job_id}/complete/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(str(response.data['products'][0]['quantity_used'])), Decimal('0'))
        self.assertEqual(self.held(), Decimal('20.000'))

    def test_employee_stock_is_floored_at_zero(self):
        # Employee already handed part of the stock back
        TestDataFactory.give_stock(self.employee, self.product, '4')
        self.complete('10')
        self.assertEqual(self.held(), Decimal('0'))
        self.assertFalse(EmployeeStock.objects.filter(employee=self.employee).exists())

    def test_full_stock_lifecycle(self):
        # PRD0001 has 50; assign 20 -> 30 left, employee holds 20 (done in setUp)
        self.assertEqual(self.available(), Decimal('30.000'))
        self.assertEqual(self.held(), Decimal('20.000'))

        # Employee completes the job using 15 through the portal
        portal = AuthenticatedAPIClient()
        portal.authenticate_employee(self.employee)
        response = self.complete('15', client=portal, path=f'/api/portal/jobs/{self.job_id}/complete/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.held(), Decimal('5.000'))
        self.assertEqual(self.available(), Decimal('30.000'))

        # Employee asks to return the remaining 5
        response = portal.post(
            '/api/portal/stock-returns/',
            {'bill_number': 'B-100', 'items': [{'product': self.product.id, 'quantity': '5'}]},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'pending')
        self.assertEqual(self.available(), Decimal('30.000'))

        # Admin approves
        response = self.client.post(f"/api/stock-returns/{response.data['id']}/approve/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.available(), Decimal('35.000'))
        self.assertEqual(self.held(), Decimal('0'))


class PortalJobTests(JobTestMixin, TestCase):
    """Test the employee portal job endpoints"""

    def setUp(self):
        super().setUp()
        self.job_id = self.assign().data['id']
        self.portal = AuthenticatedAPIClient()
        self.portal.authenticate_employee(self.employee)

    def test_lists_own_jobs(self):
        response = self.portal.get('/api/portal/jobs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data], [self.job_id])

    def test_other_employee_cannot_see_or_complete(self):
        other = TestDataFactory.create_employee()
        client = AuthenticatedAPIClient()
        client.authenticate_employee(other)
        self.assertEqual(client.get('/api/portal/jobs/').data, [])
        response = client.post(f'/api/portal/jobs/{self.job_id}/complete/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(Job.objects.get(pk=self.job_id).status, 'pending')

    def test_portal_rejects_admin_token(self):
        response = self.client.get('/api/portal/jobs/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

"""
Test suite for core: admin auth, display settings, activity log, helpers
and management commands
"""
import json
import os
import tempfile
from decimal import Decimal
from io import StringIO
from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase, override_settings
from rest_framework import status
from pestcontrol.core.models import Activity
from pestcontrol.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from pestcontrol.core.utils import record_activity, next_sequential_code, format_quantity
from pestcontrol.employees.models import Employee
from pestcontrol.inventory.models import Product, EmployeeStock, StockMovement, StockReturnRequest
from pestcontrol.jobs.models import Job
from pestcontrol.parties.models import Customer, Visit

User = get_user_model()


class AdminAuthTests(TestCase):
    """Test admin login and token handling"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()

    def test_login_returns_tokens_and_user(self):
        TestDataFactory.create_user(username='boss', password='secret123')
        response = self.client.post('/api/auth/login/', {'username': 'boss', 'password': 'secret123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['username'], 'boss')

    def test_login_wrong_password(self):
        TestDataFactory.create_user(username='boss', password='secret123')
        response = self.client.post('/api/auth/login/', {'username': 'boss', 'password': 'nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_rejects_non_staff_user(self):
        TestDataFactory.create_user(username='clerk', password='secret123', is_staff=False)
        response = self.client.post('/api/auth/login/', {'username': 'clerk', 'password': 'secret123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_requires_authentication(self):
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me(self):
        user = TestDataFactory.create_user(username='boss')
        self.client.authenticate_user(user)
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], 'boss')

    def test_employee_token_rejected_on_admin_endpoints(self):
        employee = TestDataFactory.create_employee()
        self.client.authenticate_employee(employee)
        response = self.client.get('/api/products/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class DisplaySettingsTests(TestCase):
    """Test display settings"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def test_defaults(self):
        response = self.client.get('/api/settings/display/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['company_name'], 'HPC - Hygiene Pest Control')
        self.assertEqual(response.data['panel_name'], 'Admin Panel')
        self.assertEqual(response.data['admin_name'], 'Admin')
        self.assertIsNone(response.data['logo_url'])

    def test_update_is_merged_over_defaults(self):
        response = self.client.put('/api/settings/display/', {'company_name': 'Bug Busters'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['company_name'], 'Bug Busters')
        self.assertEqual(response.data['panel_name'], 'Admin Panel')

        response = self.client.get('/api/settings/display/')
        self.assertEqual(response.data['company_name'], 'Bug Busters')


class ActivityTests(TestCase):
    """Test the capped activity log"""

    @override_settings(PESTCONTROL_ACTIVITY_LIMIT=3)
    def test_log_is_capped_to_newest_entries(self):
        for i in range(5):
            record_activity('product_added', f'Entry {i}')
        descriptions = list(Activity.objects.values_list('description', flat=True))
        self.assertEqual(descriptions, ['Entry 4', 'Entry 3', 'Entry 2'])

    def test_activity_list_endpoint(self):
        record_activity('lead_added', 'New lead Ravi added')
        record_activity('product_added', 'Product added')
        client = AuthenticatedAPIClient()
        client.authenticate_user(TestDataFactory.create_user())

        response = client.get('/api/activities/?type=lead_added')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['type_display'], 'Lead Added')


class UtilsTests(TestCase):
    """Test helper functions"""

    def test_next_sequential_code(self):
        self.assertEqual(next_sequential_code(Product.objects.all(), 'product_id', 'PRD'), 'PRD0001')
        TestDataFactory.create_product(product_id='PRD0009')
        TestDataFactory.create_product(product_id='PRD-OLD')
        self.assertEqual(next_sequential_code(Product.objects.all(), 'product_id', 'PRD'), 'PRD0010')

    def test_format_quantity(self):
        self.assertEqual(format_quantity(Decimal('20.000')), '20')
        self.assertEqual(format_quantity(Decimal('2.500')), '2.5')
        self.assertEqual(format_quantity(Decimal('0.000')), '0')


class ManagementCommandTests(TestCase):
    """Test management commands"""

    def test_ensure_admin_creates_and_resets(self):
        call_command('ensure_admin', username='owner', password='first-pass', stdout=StringIO())
        user = User.objects.get(username='owner')
        self.assertTrue(user.is_superuser)
        self.assertTrue(user.check_password('first-pass'))

        call_command('ensure_admin', username='owner', password='second-pass', stdout=StringIO())
        user.refresh_from_db()
        self.assertTrue(user.check_password('second-pass'))
        self.assertEqual(User.objects.filter(username='owner').count(), 1)

    def test_clear_data(self):
        TestDataFactory.create_product()
        TestDataFactory.create_customer()
        call_command('clear_data', confirm=True, stdout=StringIO())
        self.assertEqual(Product.objects.count(), 0)
        self.assertEqual(Customer.objects.count(), 0)

    def test_import_snapshot(self):
        snapshot = {
            'employees': [{
                'id': 'e1', 'employeeId': 'EMP0001', 'name': 'Ravi', 'fatherName': 'Mohan',
                'aadhaarNumber': '123412341234', 'mobileNumber': '9876543210', 'address': 'Pune',
                'dateOfJoining': '2024-01-10', 'password': 'pass1',
                'stockInHand': [{'productId': 'PRD0001', 'productName': 'Gel', 'quantityGiven': 5, 'unit': 'litres'}],
            }],
            'products': [{
                'id': 'p1', 'productId': 'PRD0001', 'productName': 'Gel', 'dateOfPurchase': '2024-01-01',
                'quantityPurchased': 50, 'quantityAvailable': 30, 'unit': 'litres',
                'supplierName': 'Acme', 'remarks': '',
            }],
            'customers': [{
                'id': 'c1', 'name': 'Hotel Blue', 'address': 'MG Road', 'contactNumber': '9000000000',
                'serviceType': 'Termite Control', 'contractStartDate': '2024-02-01',
                'contractEndDate': '2025-01-31', 'contractAmount': 5000,
                'serviceDates': ['2024-03-01', '2024-06-01'],
            }],
            'jobs': [{
                'id': 'j1', 'billNumber': 'B-100', 'customerId': 'c1', 'customerName': 'Hotel Blue',
                'employeeId': 'EMP0001', 'employeeName': 'Ravi', 'jobDate': '2024-03-01',
                'productsAssigned': [{'productId': 'PRD0001', 'productName': 'Gel', 'quantityGiven': 20, 'unit': 'litres'}],
                'productsUsed': [{'productId': 'PRD0001', 'productName': 'Gel', 'quantityGiven': 15, 'unit': 'litres'}],
                'amount': 1500, 'status': 'completed', 'remarks': '', 'createdAt': '2024-03-01T10:00:00Z',
            }],
            'activities': [
                {'id': 'a1', 'type': 'job_assigned', 'description': 'Job B-100 assigned', 'timestamp': '2024-03-01T09:00:00Z'},
                {'id': 'a2', 'type': 'unknown_type', 'description': 'ignored', 'timestamp': '2024-03-01T09:30:00Z'},
            ],
            'stockReturnRequests': [{
                'id': 'r1', 'employeeId': 'EMP0001', 'employeeName': 'Ravi', 'billNumber': 'B-100',
                'productsReturned': [{'productId': 'PRD0001', 'productName': 'Gel', 'quantityGiven': 2, 'unit': 'litres'}],
                'status': 'pending', 'requestedAt': '2024-03-02T10:00:00Z',
            }],
        }
        handle, path = tempfile.mkstemp(suffix='.json')
        with os.fdopen(handle, 'w') as f:
            json.dump(snapshot, f)
        try:
            call_command('import_snapshot', path, stdout=StringIO())
            employee = Employee.objects.get(employee_id='EMP0001')
            product = Product.objects.get(product_id='PRD0001')
            self.assertEqual(EmployeeStock.objects.get(employee=employee, product=product).quantity, Decimal('5.000'))

            # Re-running skips what exists and leaves live stock in hand alone
            EmployeeStock.objects.filter(employee=employee).update(quantity=Decimal('3'))
            call_command('import_snapshot', path, stdout=StringIO())
        finally:
            os.remove(path)

        self.assertEqual(Employee.objects.count(), 1)
        self.assertEqual(Product.objects.count(), 1)
        self.assertEqual(Customer.objects.count(), 1)
        self.assertEqual(Visit.objects.count(), 2)
        self.assertEqual(Job.objects.count(), 1)
        self.assertEqual(StockReturnRequest.objects.count(), 1)
        self.assertEqual(StockReturnRequest.objects.get().items.get().quantity, Decimal('2.000'))
        self.assertEqual(EmployeeStock.objects.get(employee=employee, product=product).quantity, Decimal('3.000'))
        self.assertEqual(StockMovement.objects.filter(movement_type='opening').count(), 1)

        employee = Employee.objects.get(employee_id='EMP0001')
        self.assertTrue(employee.check_password('pass1'))
        product = Product.objects.get(product_id='PRD0001')
        self.assertEqual(product.quantity_available, Decimal('30.000'))
        self.assertTrue(StockMovement.objects.filter(product=product, movement_type='opening').exists())
        self.assertEqual(Visit.objects.filter(contract__customer__name='Hotel Blue').count(), 2)
        job = Job.objects.get(bill_number='B-100')
        self.assertEqual(job.status, 'completed')
        self.assertEqual(job.products.get().quantity_used, Decimal('15.000'))
        self.assertEqual(Activity.objects.count(), 1)

    def test_check_stock_ledger_reports_drift(self):
        product = TestDataFactory.create_product(product_id='PRD0001', quantity=Decimal('10'))
        StockMovement.objects.create(product=product, movement_type='opening', quantity=Decimal('10'))
        out = StringIO()
        call_command('check_stock_ledger', stdout=out)
        self.assertIn('No discrepancies found', out.getvalue())

        Product.objects.filter(pk=product.pk).update(quantity_available=Decimal('7'))
        out = StringIO()
        call_command('check_stock_ledger', stdout=out)
        self.assertIn('Total Products with Discrepancies: 1', out.getvalue())

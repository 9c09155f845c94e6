"""
Test suite for employees: roster CRUD and the employee portal login
"""
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from pestcontrol.core.models import Activity
from pestcontrol.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from pestcontrol.employees.models import Employee
from pestcontrol.inventory.models import EmployeeStock


class EmployeeTests(TestCase):
    """Test employee endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_list_is_compact_and_sorted_by_name(self):
        TestDataFactory.create_employee(name='Zubin')
        TestDataFactory.create_employee(name='Anil')
        response = self.client.get('/api/employees/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['name'] for row in response.data], ['Anil', 'Zubin'])
        self.assertEqual(set(response.data[0].keys()), {'id', 'name', 'employee_id'})

    def test_list_detail_flag(self):
        TestDataFactory.create_employee(name='Anil')
        response = self.client.get('/api/employees/?detail=1')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('stock_in_hand', response.data[0])

    def test_create_generates_code_and_default_password(self):
        data = {
            'name': 'Ravi Kumar',
            'father_name': 'Mohan Kumar',
            'aadhaar_number': '1234 5678 9012',
            'mobile_number': '98765-43210',
        }
        response = self.client.post('/api/employees/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['employee_id'], 'EMP0001')
        self.assertEqual(response.data['aadhaar_number'], '123456789012')
        self.assertEqual(response.data['mobile_number'], '9876543210')
        self.assertNotIn('password', response.data)

        employee = Employee.objects.get(employee_id='EMP0001')
        self.assertTrue(employee.check_password('123456'))
        self.assertTrue(Activity.objects.filter(type='employee_added').exists())

    def test_create_next_code_follows_highest(self):
        TestDataFactory.create_employee(employee_id='EMP0007')
        response = self.client.post('/api/employees/', {'name': 'New Hire'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['employee_id'], 'EMP0008')

    def test_create_invalid_aadhaar(self):
        response = self.client.post('/api/employees/', {'name': 'Ravi', 'aadhaar_number': '1234'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('aadhaar_number', response.data)

    def test_create_invalid_mobile(self):
        response = self.client.post('/api/employees/', {'name': 'Ravi', 'mobile_number': '12345'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('mobile_number', response.data)

    def test_create_duplicate_code_any_case(self):
        TestDataFactory.create_employee(employee_id='EMP0001')
        response = self.client.post('/api/employees/', {'name': 'Ravi', 'employee_id': 'emp0001'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('employee_id', response.data)

    def test_detail_includes_stock_in_hand(self):
        employee = TestDataFactory.create_employee()
        product = TestDataFactory.create_product(name='Termite Gel')
        TestDataFactory.give_stock(employee, product, '4.5')
        response = self.client.get(f'/api/employees/{employee.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['stock_in_hand']), 1)
        self.assertEqual(response.data['stock_in_hand'][0]['product_name'], 'Termite Gel')
        self.assertEqual(Decimal(str(response.data['stock_in_hand'][0]['quantity'])), Decimal('4.5'))

    def test_update_password(self):
        employee = TestDataFactory.create_employee()
        response = self.client.patch(f'/api/employees/{employee.id}/', {'password': 'newpass'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        employee.refresh_from_db()
        self.assertTrue(employee.check_password('newpass'))

    def test_delete(self):
        employee = TestDataFactory.create_employee()
        response = self.client.delete(f'/api/employees/{employee.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Employee.objects.filter(pk=employee.pk).exists())
        self.assertTrue(Activity.objects.filter(type='employee_deleted').exists())

    def test_delete_blocked_while_holding_stock(self):
        employee = TestDataFactory.create_employee()
        product = TestDataFactory.create_product()
        TestDataFactory.give_stock(employee, product, '4')
        response = self.client.delete(f'/api/employees/{employee.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('cannot be deleted', response.data['error'])
        self.assertTrue(Employee.objects.filter(pk=employee.pk).exists())

    def test_delete_blocked_by_pending_return(self):
        employee = TestDataFactory.create_employee()
        product = TestDataFactory.create_product()
        TestDataFactory.give_stock(employee, product, '4')
        portal = AuthenticatedAPIClient()
        portal.authenticate_employee(employee)
        response = portal.post(
            '/api/portal/stock-returns/',
            {'items': [{'product': product.id, 'quantity': '4'}]},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        request_id = response.data['id']
        # Stock in hand cleared outside the return, request still pending
        EmployeeStock.objects.filter(employee=employee).delete()

        response = self.client.delete(f'/api/employees/{employee.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        self.client.post(f"/api/stock-returns/{request_id}/reject/")
        response = self.client.delete(f'/api/employees/{employee.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_not_found(self):
        response = self.client.get('/api/employees/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class PortalAuthTests(TestCase):
    """Test employee portal login"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.employee = TestDataFactory.create_employee(name='Ravi', employee_id='EMP0001', password='pass123')

    def test_login_accepts_lower_case_code(self):
        response = self.client.post('/api/portal/login/', {'employee_id': 'emp0001', 'password': 'pass123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertEqual(response.data['employee']['employee_id'], 'EMP0001')

    def test_login_wrong_password(self):
        response = self.client.post('/api/portal/login/', {'employee_id': 'EMP0001', 'password': 'wrong'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid Employee ID or Password')

    def test_login_inactive_employee(self):
        self.employee.is_active = False
        self.employee.save()
        response = self.client.post('/api/portal/login/', {'employee_id': 'EMP0001', 'password': 'pass123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_me_with_portal_token(self):
        response = self.client.post('/api/portal/login/', {'employee_id': 'EMP0001', 'password': 'pass123'}, format='json')
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        response = self.client.get('/api/portal/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'Ravi')

    def test_me_rejects_admin_token(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.get('/api/portal/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_requires_token(self):
        response = self.client.get('/api/portal/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

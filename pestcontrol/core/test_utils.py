"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from pestcontrol.employees.authentication import issue_employee_token
from pestcontrol.employees.models import Employee
from pestcontrol.inventory.models import Product, EmployeeStock
from pestcontrol.parties.models import Customer, Contract, Visit
from pestcontrol.sales.models import Lead
from decimal import Decimal
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, password='testpass123', is_staff=True, is_superuser=False):
        """Create a test admin user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        return User.objects.create_user(
            username=username,
            email=f'{username}@test.com',
            password=password,
            is_staff=is_staff,
            is_superuser=is_superuser
        )

    @staticmethod
    def create_employee(name=None, employee_id=None, password='123456', is_active=True):
        """Create a test employee"""
        if not name:
            name = f'Employee_{TestDataFactory.random_string(6)}'
        if not employee_id:
            employee_id = f'EMP{random.randint(1000, 9999)}{TestDataFactory.random_string(3).upper()}'
        employee = Employee(
            employee_id=employee_id,
            name=name,
            mobile_number=f'9{random.randint(100000000, 999999999)}',
            is_active=is_active,
        )
        employee.set_password(password)
        employee.save()
        return employee

    @staticmethod
    def create_product(name=None, product_id=None, quantity=None, unit='litres'):
        """Create a test product with the whole purchase in the warehouse"""
        if not name:
            name = f'Product_{TestDataFactory.random_string(6)}'
        if not product_id:
            product_id = f'PRD{random.randint(1000, 9999)}{TestDataFactory.random_string(3).upper()}'
        if quantity is None:
            quantity = Decimal('50.000')
        return Product.objects.create(
            product_id=product_id,
            name=name,
            unit=unit,
            quantity_purchased=quantity,
            quantity_available=quantity,
        )

    @staticmethod
    def give_stock(employee, product, quantity):
        """Put stock in an employee's hands without touching the warehouse"""
        line, _ = EmployeeStock.objects.update_or_create(
            employee=employee,
            product=product,
            defaults={'quantity': Decimal(quantity)},
        )
        return line

    @staticmethod
    def create_customer(name=None, contact_number=None, address='Test Address'):
        """Create a test customer"""
        if not name:
            name = f'Customer_{TestDataFactory.random_string(6)}'
        if not contact_number:
            contact_number = f'9{random.randint(100000000, 999999999)}'
        return Customer.objects.create(
            name=name,
            contact_number=contact_number,
            address=address
        )

    @staticmethod
    def create_contract(customer, service_dates=(), service_type='General'):
        """Create a test contract with a PENDING visit per service date"""
        today = timezone.localdate()
        contract = Contract.objects.create(
            customer=customer,
            service_type=service_type,
            start_date=today,
            end_date=today,
            contract_value=Decimal('1000.00'),
            total_amount=Decimal('1180.00'),
        )
        for scheduled_date in service_dates:
            Visit.objects.create(contract=contract, scheduled_date=scheduled_date)
        return contract

    @staticmethod
    def create_lead(name=None, mobile=None, address='', status='NEW', followed_by=None):
        """Create a test lead"""
        if not name:
            name = f'Lead_{TestDataFactory.random_string(6)}'
        if not mobile:
            mobile = f'9{random.randint(100000000, 999999999)}'
        return Lead.objects.create(
            name=name,
            mobile=mobile,
            address=address,
            source='Walk-in',
            status=status,
            followed_by=followed_by
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helpers"""

    def authenticate_user(self, user):
        """Authenticate the client as an admin panel user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def authenticate_employee(self, employee):
        """Authenticate the client with an employee portal token"""
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_employee_token(employee)}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()

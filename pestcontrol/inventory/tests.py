"""
Test suite for inventory: products, restock, stock ledger and the
two-phase stock return workflow
"""
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from pestcontrol.core.models import Activity
from pestcontrol.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from pestcontrol.inventory.models import Product, EmployeeStock, StockMovement, StockReturnRequest
from pestcontrol.jobs.models import Job, JobProduct


class ProductTests(TestCase):
    """Test product endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_product(self):
        data = {
            'name': 'Termite Gel',
            'unit': 'litres',
            'quantity_purchased': '50',
            'supplier_name': 'Acme Chemicals',
        }
        response = self.client.post('/api/products/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['product_id'], 'PRD0001')

        product = Product.objects.get(product_id='PRD0001')
        self.assertEqual(product.quantity_available, Decimal('50.000'))
        self.assertEqual(product.quantity_purchased, Decimal('50.000'))
        opening = StockMovement.objects.get(product=product)
        self.assertEqual(opening.movement_type, 'opening')
        self.assertEqual(opening.quantity, Decimal('50.000'))
        self.assertTrue(Activity.objects.filter(type='product_added').exists())

    def test_create_ignores_quantity_available_input(self):
        data = {'name': 'Spray', 'quantity_purchased': '10', 'quantity_available': '999'}
        response = self.client.post('/api/products/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Product.objects.get().quantity_available, Decimal('10.000'))

    def test_create_duplicate_product_id(self):
        TestDataFactory.create_product(product_id='PRD0001')
        response = self.client.post('/api/products/', {'name': 'Spray', 'product_id': 'prd0001'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('product_id', response.data)

    def test_create_invalid_unit(self):
        response = self.client.post('/api/products/', {'name': 'Spray', 'unit': 'gallons'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_does_not_touch_balances(self):
        product = TestDataFactory.create_product(quantity=Decimal('20'))
        response = self.client.patch(
            f'/api/products/{product.id}/',
            {'name': 'Renamed', 'quantity_purchased': '500'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        product.refresh_from_db()
        self.assertEqual(product.name, 'Renamed')
        self.assertEqual(product.quantity_purchased, Decimal('20.000'))
        self.assertEqual(product.quantity_available, Decimal('20.000'))

    def test_list_filters(self):
        TestDataFactory.create_product(name='Termite Gel', quantity=Decimal('5'), unit='litres')
        TestDataFactory.create_product(name='Rat Bait', quantity=Decimal('40'), unit='pieces')

        response = self.client.get('/api/products/?search=termite')
        self.assertEqual([row['name'] for row in response.data], ['Termite Gel'])

        response = self.client.get('/api/products/?unit=pieces')
        self.assertEqual([row['name'] for row in response.data], ['Rat Bait'])

        response = self.client.get('/api/products/?low_stock=1')
        self.assertEqual([row['name'] for row in response.data], ['Termite Gel'])

    def test_low_stock_endpoint_uses_threshold(self):
        TestDataFactory.create_product(name='At Threshold', quantity=Decimal('10'))
        TestDataFactory.create_product(name='Above Threshold', quantity=Decimal('10.001'))
        response = self.client.get('/api/products/low-stock/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['name'] for row in response.data], ['At Threshold'])
        self.assertTrue(response.data[0]['is_low_stock'])

    def test_delete_unused_product(self):
        product = TestDataFactory.create_product()
        response = self.client.delete(f'/api/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Product.objects.filter(pk=product.pk).exists())

    def test_delete_product_used_by_job(self):
        product = TestDataFactory.create_product()
        employee = TestDataFactory.create_employee()
        job = Job.objects.create(
            bill_number='B-1', customer_name='Someone', employee=employee,
            employee_name=employee.name, job_date='2024-01-01'
        )
        JobProduct.objects.create(job=job, product=product, quantity_assigned=Decimal('1'))
        response = self.client.delete(f'/api/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)
        self.assertTrue(Product.objects.filter(pk=product.pk).exists())


class RestockTests(TestCase):
    """Test restocking"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())
        self.product = TestDataFactory.create_product(name='Termite Gel', quantity=Decimal('50'))

    def test_restock_adds_to_purchased_and_available(self):
        response = self.client.post(f'/api/products/{self.product.id}/restock/', {'quantity': '5'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity_purchased, Decimal('55.000'))
        self.assertEqual(self.product.quantity_available, Decimal('55.000'))
        self.assertTrue(StockMovement.objects.filter(product=self.product, movement_type='restock').exists())
        activity = Activity.objects.get(type='stock_restocked')
        self.assertEqual(activity.description, 'Restocked Termite Gel (+5 litres). New Balance: 55 litres')

    def test_restock_rejects_non_positive_quantity(self):
        for quantity in ('0', '-3'):
            response = self.client.post(f'/api/products/{self.product.id}/restock/', {'quantity': quantity}, format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity_available, Decimal('50.000'))

    def test_restock_unknown_product(self):
        response = self.client.post('/api/products/99999/restock/', {'quantity': '5'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_movement_list_filter(self):
        self.client.post(f'/api/products/{self.product.id}/restock/', {'quantity': '5'}, format='json')
        response = self.client.get('/api/stock-movements/?movement_type=restock')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['product_code'], self.product.product_id)


class StockReturnTests(TestCase):
    """Test the request -> approve/reject stock return workflow"""

    def setUp(self):
        self.admin = AuthenticatedAPIClient()
        self.admin.authenticate_user(TestDataFactory.create_user())
        self.employee = TestDataFactory.create_employee(name='Ravi')
        self.portal = AuthenticatedAPIClient()
        self.portal.authenticate_employee(self.employee)
        self.product = TestDataFactory.create_product(name='Termite Gel', quantity=Decimal('30'))
        TestDataFactory.give_stock(self.employee, self.product, '5')

    def _request_return(self, quantity='5'):
        response = self.portal.post(
            '/api/portal/stock-returns/',
            {'bill_number': 'B-1', 'items': [{'product': self.product.id, 'quantity': quantity}]},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return response.data

    def _held(self):
        line = EmployeeStock.objects.filter(employee=self.employee, product=self.product).first()
        return line.quantity if line else Decimal('0')

    def test_request_does_not_move_stock(self):
        data = self._request_return()
        self.assertEqual(data['status'], 'pending')
        self.assertEqual(data['employee_name'], 'Ravi')
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity_available, Decimal('30.000'))
        self.assertEqual(self._held(), Decimal('5.000'))
        self.assertTrue(Activity.objects.filter(type='stock_return_requested').exists())

    def test_request_cannot_exceed_held_quantity(self):
        response = self.portal.post(
            '/api/portal/stock-returns/',
            {'items': [{'product': self.product.id, 'quantity': '6'}]},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(StockReturnRequest.objects.count(), 0)

    def test_pending_requests_count_against_held_quantity(self):
        self._request_return(quantity='3')
        response = self.portal.post(
            '/api/portal/stock-returns/',
            {'items': [{'product': self.product.id, 'quantity': '5'}]},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(StockReturnRequest.objects.count(), 1)

        # The unclaimed remainder can still be requested
        second = self._request_return(quantity='2')
        for request_id in (StockReturnRequest.objects.exclude(pk=second['id']).get().pk, second['id']):
            self.admin.post(f"/api/stock-returns/{request_id}/approve/")
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity_available, Decimal('35.000'))
        self.assertEqual(self._held(), Decimal('0'))

    def test_rejected_request_releases_its_claim(self):
        data = self._request_return(quantity='5')
        self.admin.post(f"/api/stock-returns/{data['id']}/reject/")
        self._request_return(quantity='5')

    def test_request_needs_items(self):
        response = self.portal.post('/api/portal/stock-returns/', {'items': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_approve_moves_stock_back_once(self):
        data = self._request_return()
        response = self.admin.post(f"/api/stock-returns/{data['id']}/approve/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'approved')
        self.assertIsNotNone(response.data['resolved_at'])
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity_available, Decimal('35.000'))
        self.assertEqual(self._held(), Decimal('0'))
        self.assertFalse(EmployeeStock.objects.filter(employee=self.employee).exists())

        # Approving again is a no-op
        response = self.admin.post(f"/api/stock-returns/{data['id']}/approve/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity_available, Decimal('35.000'))
        self.assertEqual(
            StockMovement.objects.filter(product=self.product, movement_type='return').count(), 1
        )

    def test_approve_floors_employee_side_at_zero(self):
        data = self._request_return(quantity='5')
        # Employee used some stock after filing the request
        TestDataFactory.give_stock(self.employee, self.product, '2')
        self.admin.post(f"/api/stock-returns/{data['id']}/approve/")
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity_available, Decimal('35.000'))
        self.assertEqual(self._held(), Decimal('0'))

    def test_reject_moves_nothing(self):
        data = self._request_return()
        response = self.admin.post(f"/api/stock-returns/{data['id']}/reject/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'rejected')
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity_available, Decimal('30.000'))
        self.assertEqual(self._held(), Decimal('5.000'))

    def test_resolved_request_is_terminal(self):
        data = self._request_return()
        self.admin.post(f"/api/stock-returns/{data['id']}/reject/")
        response = self.admin.post(f"/api/stock-returns/{data['id']}/approve/")
        self.assertEqual(response.data['status'], 'rejected')
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity_available, Decimal('30.000'))

    def test_admin_files_return_for_employee(self):
        response = self.admin.post(
            '/api/stock-returns/',
            {'employee': self.employee.id, 'items': [{'product': self.product.id, 'quantity': '2'}]},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['bill_number'], '')

    def test_admin_list_filter_by_status(self):
        first = self._request_return(quantity='2')
        self._request_return(quantity='1')
        self.admin.post(f"/api/stock-returns/{first['id']}/approve/")
        response = self.admin.get('/api/stock-returns/?status=pending')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_portal_lists_only_own_requests(self):
        self._request_return()
        other = TestDataFactory.create_employee()
        TestDataFactory.give_stock(other, self.product, '1')
        other_client = AuthenticatedAPIClient()
        other_client.authenticate_employee(other)
        response = other_client.get('/api/portal/stock-returns/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])

from decimal import Decimal
from django.db.models import Sum
from rest_framework import serializers
from pestcontrol.employees.models import Employee
from .models import Product, EmployeeStock, StockMovement, StockReturnRequest, StockReturnItem


class ProductSerializer(serializers.ModelSerializer):
    product_id = serializers.CharField(max_length=20, required=False, allow_blank=True)
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'product_id', 'name', 'unit', 'date_of_purchase', 'quantity_purchased',
            'quantity_available', 'is_low_stock', 'supplier_name', 'remarks', 'created_at', 'updated_at'
        ]
        read_only_fields = ['quantity_available', 'created_at', 'updated_at']

    def validate_product_id(self, value):
        value = (value or '').strip().upper()
        if not value:
            return value
        queryset = Product.objects.filter(product_id__iexact=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError('A product with this ID already exists.')
        return value

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError('Product name is required.')
        return value.strip()

    def validate_quantity_purchased(self, value):
        if value < 0:
            raise serializers.ValidationError('Quantity cannot be negative.')
        return value

    def update(self, instance, validated_data):
        # Balances only change through restock and job/return workflows
        validated_data.pop('quantity_purchased', None)
        if 'product_id' in validated_data and not validated_data['product_id']:
            validated_data.pop('product_id')
        return super().update(instance, validated_data)


class RestockSerializer(serializers.Serializer):
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3)

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError('Please enter a valid quantity')
        return value


class EmployeeStockSerializer(serializers.ModelSerializer):
    product_id = serializers.CharField(source='product.product_id', read_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True)
    unit = serializers.CharField(source='product.unit', read_only=True)

    class Meta:
        model = EmployeeStock
        fields = ['id', 'product', 'product_id', 'product_name', 'quantity', 'unit', 'updated_at']


class StockMovementSerializer(serializers.ModelSerializer):
    product_code = serializers.CharField(source='product.product_id', read_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True)
    employee_name = serializers.CharField(source='employee.name', read_only=True, default=None)

    class Meta:
        model = StockMovement
        fields = [
            'id', 'product', 'product_code', 'product_name', 'employee', 'employee_name',
            'movement_type', 'quantity', 'reference', 'created_at'
        ]


class StockReturnItemSerializer(serializers.ModelSerializer):
    product_id = serializers.CharField(source='product.product_id', read_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True)
    unit = serializers.CharField(source='product.unit', read_only=True)

    class Meta:
        model = StockReturnItem
        fields = ['id', 'product', 'product_id', 'product_name', 'quantity', 'unit']


class StockReturnRequestSerializer(serializers.ModelSerializer):
    items = StockReturnItemSerializer(many=True, read_only=True)
    employee_code = serializers.CharField(source='employee.employee_id', read_only=True)

    class Meta:
        model = StockReturnRequest
        fields = [
            'id', 'employee', 'employee_code', 'employee_name', 'bill_number', 'status',
            'items', 'requested_at', 'resolved_at'
        ]


class ReturnLineSerializer(serializers.Serializer):
    product = serializers.PrimaryKeyRelatedField(queryset=Product.objects.all())
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3)

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError('Quantity must be greater than 0')
        return value


class StockReturnCreateSerializer(serializers.Serializer):
    """
    Return request input.

    The employee comes from the serializer context (portal) or from the
    payload (admin filing on an employee's behalf). Each product may appear
    once and its quantity is capped at what the employee currently holds,
    less what their pending requests already claim.
    """
    employee = serializers.PrimaryKeyRelatedField(
        queryset=Employee.objects.all(),
        required=False,
    )
    bill_number = serializers.CharField(max_length=100, required=False, allow_blank=True)
    items = ReturnLineSerializer(many=True)

    def validate(self, attrs):
        employee = self.context.get('employee') or attrs.get('employee')
        if employee is None:
            raise serializers.ValidationError({'employee': 'Employee is required.'})
        attrs['employee'] = employee

        items = attrs.get('items') or []
        if not items:
            raise serializers.ValidationError({'items': 'Please select at least one item to return'})

        held = {
            line.product_id: line.quantity
            for line in EmployeeStock.objects.filter(employee=employee)
        }
        # Quantities already claimed by this employee's unresolved requests
        claimed = dict(
            StockReturnItem.objects.filter(request__employee=employee, request__status='pending')
            .order_by()
            .values_list('product')
            .annotate(total=Sum('quantity'))
        )
        seen = set()
        for line in items:
            product = line['product']
            if product.pk in seen:
                raise serializers.ValidationError({'items': f'{product.name} is listed more than once'})
            seen.add(product.pk)
            in_hand = held.get(product.pk, Decimal('0')) - claimed.get(product.pk, Decimal('0'))
            if in_hand < 0:
                in_hand = Decimal('0')
            if line['quantity'] > in_hand:
                raise serializers.ValidationError({
                    'items': f'Cannot return more {product.name} than held and not already pending ({in_hand})'
                })
        return attrs

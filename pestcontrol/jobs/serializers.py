from django.utils import timezone
from rest_framework import serializers
from pestcontrol.employees.models import Employee
from pestcontrol.inventory.models import Product
from pestcontrol.parties.models import Customer
from .models import Job, JobProduct


class JobProductSerializer(serializers.ModelSerializer):
    product_id = serializers.CharField(source='product.product_id', read_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True)
    unit = serializers.CharField(source='product.unit', read_only=True)

    class Meta:
        model = JobProduct
        fields = ['id', 'product', 'product_id', 'product_name', 'unit', 'quantity_assigned', 'quantity_used']


class JobSerializer(serializers.ModelSerializer):
    products = JobProductSerializer(many=True, read_only=True)
    employee_code = serializers.CharField(source='employee.employee_id', read_only=True, default=None)

    class Meta:
        model = Job
        fields = [
            'id', 'bill_number', 'customer', 'customer_name', 'employee', 'employee_code', 'employee_name',
            'job_date', 'amount', 'service_type', 'next_service_date', 'status', 'remarks',
            'products', 'completed_at', 'created_at', 'updated_at'
        ]
        read_only_fields = [
            'bill_number', 'customer', 'customer_name', 'employee', 'employee_name',
            'status', 'completed_at', 'created_at', 'updated_at'
        ]

    def validate_amount(self, value):
        if value < 0:
            raise serializers.ValidationError('Amount cannot be negative.')
        return value


class JobLineSerializer(serializers.Serializer):
    product = serializers.PrimaryKeyRelatedField(queryset=Product.objects.all())
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3)

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError('Please enter a valid quantity')
        return value


class JobAssignSerializer(serializers.Serializer):
    """Input for creating a job; stock checks happen in the assignment service"""
    bill_number = serializers.CharField(max_length=100)
    customer = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.all(), required=False, allow_null=True)
    customer_name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    employee = serializers.PrimaryKeyRelatedField(queryset=Employee.objects.all())
    job_date = serializers.DateField(required=False)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    service_type = serializers.CharField(max_length=100, required=False, allow_blank=True)
    next_service_date = serializers.DateField(required=False, allow_null=True)
    remarks = serializers.CharField(required=False, allow_blank=True)
    products = JobLineSerializer(many=True)

    def validate_bill_number(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Bill number is required.')
        return value

    def validate_employee(self, value):
        if not value.is_active:
            raise serializers.ValidationError('Employee is not active.')
        return value

    def validate_amount(self, value):
        if value < 0:
            raise serializers.ValidationError('Amount cannot be negative.')
        return value

    def validate_products(self, value):
        if not value:
            raise serializers.ValidationError('Please add at least one product')
        return value

    def validate(self, attrs):
        if attrs.get('customer') is None and not (attrs.get('customer_name') or '').strip():
            raise serializers.ValidationError({'customer': 'Please select a customer'})
        attrs.setdefault('job_date', timezone.localdate())
        return attrs


class JobUsedLineSerializer(serializers.Serializer):
    product = serializers.PrimaryKeyRelatedField(queryset=Product.objects.all())
    quantity_used = serializers.DecimalField(max_digits=12, decimal_places=3)

    def validate_quantity_used(self, value):
        if value < 0:
            raise serializers.ValidationError('Used quantity cannot be negative.')
        return value


class JobCompletionSerializer(serializers.Serializer):
    """
    Used quantities for a job, checked against what was assigned.

    Needs the job in context. Assigned products left out count as unused.
    """
    products_used = JobUsedLineSerializer(many=True, required=False)

    def validate(self, attrs):
        job = self.context['job']
        assigned = {line.product_id: line for line in job.products.select_related('product')}
        quantities = {}
        for line in attrs.get('products_used', []):
            product = line['product']
            if product.pk not in assigned:
                raise serializers.ValidationError({'products_used': f'{product.name} was not assigned to this job'})
            if product.pk in quantities:
                raise serializers.ValidationError({'products_used': f'{product.name} is listed more than once'})
            limit = assigned[product.pk].quantity_assigned
            if line['quantity_used'] > limit:
                raise serializers.ValidationError({
                    'products_used': f'Used quantity for {product.name} cannot exceed assigned quantity ({limit})'
                })
            quantities[product.pk] = line['quantity_used']
        attrs['quantities'] = quantities
        return attrs

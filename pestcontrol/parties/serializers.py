from rest_framework import serializers
from pestcontrol.employees.models import Employee
from pestcontrol.inventory.models import Product
from pestcontrol.sales.models import Lead
from .models import Customer, Contract, Visit, VisitProduct

MAX_SERVICE_DATES = 10


class VisitProductSerializer(serializers.ModelSerializer):
    product_id = serializers.CharField(source='product.product_id', read_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True)
    unit = serializers.CharField(source='product.unit', read_only=True)

    class Meta:
        model = VisitProduct
        fields = ['id', 'product', 'product_id', 'product_name', 'quantity', 'unit']


class VisitSerializer(serializers.ModelSerializer):
    assigned_employee_name = serializers.CharField(source='assigned_employee.name', read_only=True, default=None)
    products_used = VisitProductSerializer(many=True, read_only=True)

    class Meta:
        model = Visit
        fields = [
            'id', 'contract', 'scheduled_date', 'status', 'completion_date',
            'assigned_employee', 'assigned_employee_name', 'remarks', 'products_used'
        ]
        read_only_fields = ['status', 'completion_date']


class ContractSerializer(serializers.ModelSerializer):
    visits = VisitSerializer(many=True, read_only=True)

    class Meta:
        model = Contract
        fields = [
            'id', 'customer', 'service_type', 'frequency', 'start_date', 'end_date',
            'contract_value', 'gst', 'total_amount', 'terms', 'visits', 'created_at'
        ]


class CustomerSerializer(serializers.ModelSerializer):
    contracts = ContractSerializer(many=True, read_only=True)

    class Meta:
        model = Customer
        fields = ['id', 'name', 'contact_number', 'address', 'email', 'contracts', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError('Customer name is required.')
        return value.strip()


class ContractInputSerializer(serializers.Serializer):
    service_type = serializers.CharField(max_length=100, required=False, default='General')
    frequency = serializers.CharField(max_length=50, required=False, default='Once')
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    contract_value = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=0)
    gst = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=0)
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=0)
    terms = serializers.CharField(required=False, allow_blank=True, default='')
    service_dates = serializers.ListField(
        child=serializers.DateField(),
        required=False,
        max_length=MAX_SERVICE_DATES,
    )

    def validate_service_type(self, value):
        return value.strip() or 'General'

    def validate_frequency(self, value):
        return value.strip() or 'Once'

    def validate(self, attrs):
        start_date = attrs.get('start_date')
        end_date = attrs.get('end_date')
        if start_date and end_date and end_date < start_date:
            raise serializers.ValidationError({'end_date': 'End date cannot be before start date.'})
        return attrs


class CustomerCreateSerializer(CustomerSerializer):
    """Customer with an optional first contract and the lead it converts"""
    contract = ContractInputSerializer(required=False, write_only=True)
    lead_id = serializers.PrimaryKeyRelatedField(
        queryset=Lead.objects.all(),
        required=False,
        allow_null=True,
        write_only=True,
    )

    class Meta(CustomerSerializer.Meta):
        fields = CustomerSerializer.Meta.fields + ['contract', 'lead_id']


class VisitProductInputSerializer(serializers.Serializer):
    product = serializers.PrimaryKeyRelatedField(queryset=Product.objects.all())
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3)

    def validate_quantity(self, value):
        if value < 0:
            raise serializers.ValidationError('Quantity cannot be negative.')
        return value


class VisitCompleteSerializer(serializers.Serializer):
    employee = serializers.PrimaryKeyRelatedField(queryset=Employee.objects.all(), required=False, allow_null=True)
    completion_date = serializers.DateTimeField(required=False, allow_null=True)
    remarks = serializers.CharField(required=False, allow_blank=True)
    products = VisitProductInputSerializer(many=True, required=False)

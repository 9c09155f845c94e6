from django.conf import settings
from rest_framework import serializers
from pestcontrol.core.utils import next_sequential_code
from pestcontrol.inventory.serializers import EmployeeStockSerializer
from .models import Employee
from .validators import validate_aadhaar, validate_mobile


class EmployeeListSerializer(serializers.ModelSerializer):
    class Meta:
        model = Employee
        fields = ['id', 'name', 'employee_id']


class EmployeeSerializer(serializers.ModelSerializer):
    employee_id = serializers.CharField(max_length=20, required=False, allow_blank=True)
    password = serializers.CharField(write_only=True, required=False, allow_blank=True)
    # Length is checked after separators are stripped
    aadhaar_number = serializers.CharField(required=False, allow_blank=True)
    mobile_number = serializers.CharField(required=False, allow_blank=True)
    emergency_contact = serializers.CharField(required=False, allow_blank=True)
    stock_in_hand = EmployeeStockSerializer(many=True, read_only=True)

    class Meta:
        model = Employee
        fields = [
            'id', 'employee_id', 'name', 'father_name', 'aadhaar_number', 'date_of_birth',
            'mobile_number', 'emergency_contact', 'address', 'date_of_joining', 'password',
            'is_active', 'stock_in_hand', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_employee_id(self, value):
        value = (value or '').strip().upper()
        if not value:
            return value
        queryset = Employee.objects.filter(employee_id__iexact=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError('An employee with this ID already exists.')
        return value

    def validate_aadhaar_number(self, value):
        return validate_aadhaar(value)

    def validate_mobile_number(self, value):
        return validate_mobile(value)

    def validate_emergency_contact(self, value):
        return validate_mobile(value)

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError('Name is required.')
        return value.strip()

    def create(self, validated_data):
        password = validated_data.pop('password', None) or settings.PESTCONTROL_DEFAULT_EMPLOYEE_PASSWORD
        if not validated_data.get('employee_id'):
            validated_data['employee_id'] = next_sequential_code(Employee.objects.all(), 'employee_id', 'EMP')
        employee = Employee(**validated_data)
        employee.set_password(password)
        employee.save()
        return employee

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        if 'employee_id' in validated_data and not validated_data['employee_id']:
            validated_data.pop('employee_id')
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance


class EmployeeLoginSerializer(serializers.Serializer):
    employee_id = serializers.CharField(max_length=20)
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        employee = Employee.objects.filter(
            employee_id=attrs['employee_id'].strip().upper(),
            is_active=True,
        ).first()
        if employee is None or not employee.check_password(attrs['password']):
            raise serializers.ValidationError('Invalid Employee ID or Password')
        attrs['employee'] = employee
        return attrs

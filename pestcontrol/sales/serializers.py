from rest_framework import serializers
from pestcontrol.employees.validators import validate_mobile
from .models import Lead


class LeadSerializer(serializers.ModelSerializer):
    followed_by_name = serializers.CharField(source='followed_by.name', read_only=True, default=None)
    converted_customer_name = serializers.CharField(source='converted_customer.name', read_only=True, default=None)

    class Meta:
        model = Lead
        fields = [
            'id', 'name', 'mobile', 'address', 'source', 'status', 'followed_by', 'followed_by_name',
            'converted_customer', 'converted_customer_name', 'created_at', 'updated_at'
        ]
        read_only_fields = ['converted_customer', 'created_at', 'updated_at']

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError('Name is required.')
        return value.strip()

    def validate_mobile(self, value):
        return validate_mobile(value)

    def validate_status(self, value):
        if value == 'CONVERTED':
            raise serializers.ValidationError('Use lead conversion to mark a lead as converted.')
        if self.instance is not None and self.instance.status == 'CONVERTED' and value != 'CONVERTED':
            raise serializers.ValidationError('A converted lead cannot change status.')
        return value

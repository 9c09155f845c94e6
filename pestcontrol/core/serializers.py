from django.contrib.auth import get_user_model
from rest_framework import serializers
from .models import Setting, Activity

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'first_name', 'last_name', 'is_active', 'is_staff', 'is_superuser']


class SettingSerializer(serializers.ModelSerializer):
    class Meta:
        model = Setting
        fields = ['id', 'key', 'value', 'description', 'updated_at']


class DisplaySettingsSerializer(serializers.Serializer):
    company_name = serializers.CharField(max_length=200, required=False)
    panel_name = serializers.CharField(max_length=200, required=False)
    admin_name = serializers.CharField(max_length=200, required=False)
    logo_url = serializers.CharField(max_length=500, required=False, allow_null=True, allow_blank=True)


class ActivitySerializer(serializers.ModelSerializer):
    type_display = serializers.CharField(source='get_type_display', read_only=True)

    class Meta:
        model = Activity
        fields = ['id', 'type', 'type_display', 'description', 'created_at']

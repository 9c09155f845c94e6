from django.contrib import admin
from .models import Employee


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ['employee_id', 'name', 'mobile_number', 'date_of_joining', 'is_active']
    list_filter = ['is_active', 'date_of_joining']
    search_fields = ['employee_id', 'name', 'mobile_number']
    ordering = ['employee_id']
    exclude = ['password']
    readonly_fields = ['created_at', 'updated_at']

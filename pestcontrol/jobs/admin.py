from django.contrib import admin
from .models import Job, JobProduct


class JobProductInline(admin.TabularInline):
    model = JobProduct
    extra = 0
    readonly_fields = ['product', 'quantity_assigned', 'quantity_used']


@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    list_display = ['bill_number', 'customer_name', 'employee_name', 'job_date', 'amount', 'status', 'next_service_date']
    list_filter = ['status', 'job_date']
    search_fields = ['bill_number', 'customer_name', 'employee_name']
    inlines = [JobProductInline]

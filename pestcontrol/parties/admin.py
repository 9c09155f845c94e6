from django.contrib import admin
from .models import Customer, Contract, Visit, VisitProduct


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['name', 'contact_number', 'email', 'created_at']
    search_fields = ['name', 'contact_number', 'address']


class VisitInline(admin.TabularInline):
    model = Visit
    extra = 0


@admin.register(Contract)
class ContractAdmin(admin.ModelAdmin):
    list_display = ['customer', 'service_type', 'frequency', 'start_date', 'end_date', 'total_amount']
    list_filter = ['service_type', 'frequency']
    search_fields = ['customer__name']
    inlines = [VisitInline]


class VisitProductInline(admin.TabularInline):
    model = VisitProduct
    extra = 0


@admin.register(Visit)
class VisitAdmin(admin.ModelAdmin):
    list_display = ['contract', 'scheduled_date', 'status', 'completion_date', 'assigned_employee']
    list_filter = ['status']
    inlines = [VisitProductInline]

from django.contrib import admin
from .models import Product, EmployeeStock, StockMovement, StockReturnRequest, StockReturnItem


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['product_id', 'name', 'unit', 'quantity_purchased', 'quantity_available', 'supplier_name']
    list_filter = ['unit']
    search_fields = ['product_id', 'name', 'supplier_name']
    ordering = ['product_id']
    readonly_fields = ['quantity_available', 'created_at', 'updated_at']


@admin.register(EmployeeStock)
class EmployeeStockAdmin(admin.ModelAdmin):
    list_display = ['employee', 'product', 'quantity', 'updated_at']
    search_fields = ['employee__name', 'employee__employee_id', 'product__name']


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = ['product', 'movement_type', 'quantity', 'employee', 'reference', 'created_at']
    list_filter = ['movement_type', 'created_at']
    search_fields = ['product__name', 'reference']
    readonly_fields = ['product', 'employee', 'movement_type', 'quantity', 'reference', 'created_at']


class StockReturnItemInline(admin.TabularInline):
    model = StockReturnItem
    extra = 0


@admin.register(StockReturnRequest)
class StockReturnRequestAdmin(admin.ModelAdmin):
    list_display = ['id', 'employee_name', 'bill_number', 'status', 'requested_at', 'resolved_at']
    list_filter = ['status']
    search_fields = ['employee_name', 'bill_number']
    inlines = [StockReturnItemInline]

from django.contrib import admin
from .models import Lead


@admin.register(Lead)
class LeadAdmin(admin.ModelAdmin):
    list_display = ['name', 'mobile', 'source', 'status', 'followed_by', 'converted_customer', 'created_at']
    list_filter = ['status', 'source']
    search_fields = ['name', 'mobile']
    readonly_fields = ['converted_customer']

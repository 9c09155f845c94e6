from django.contrib import admin
from .models import Setting, Activity


@admin.register(Setting)
class SettingAdmin(admin.ModelAdmin):
    list_display = ['key', 'value', 'updated_at']
    search_fields = ['key', 'description']
    ordering = ['key']
    readonly_fields = ['updated_at']


@admin.register(Activity)
class ActivityAdmin(admin.ModelAdmin):
    list_display = ['type', 'description', 'created_at']
    list_filter = ['type', 'created_at']
    search_fields = ['description']
    ordering = ['-created_at']
    readonly_fields = ['type', 'description', 'created_at']

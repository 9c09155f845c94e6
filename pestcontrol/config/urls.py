"""
URL configuration for the pest-control backend.

All JSON endpoints live under /api/; the Django admin is kept for support staff.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Pest Control Operations Admin"
admin.site.site_title = "Pest Control Operations Admin Portal"
admin.site.index_title = "Welcome to the Pest Control Operations Admin"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('pestcontrol.core.urls')),
    path('api/', include('pestcontrol.employees.urls')),
    path('api/', include('pestcontrol.inventory.urls')),
    path('api/', include('pestcontrol.parties.urls')),
    path('api/', include('pestcontrol.jobs.urls')),
    path('api/', include('pestcontrol.sales.urls')),
    path('api/', include('pestcontrol.reports.urls')),
]

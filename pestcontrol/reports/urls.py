from django.urls import path
from .views import report, dashboard

urlpatterns = [
    path('reports/', report, name='report'),
    path('reports/dashboard/', dashboard, name='report-dashboard'),
]

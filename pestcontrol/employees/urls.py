from django.urls import path
from .views import employee_list_create, employee_detail, portal_login, portal_me

urlpatterns = [
    # Employee endpoints
    path('employees/', employee_list_create, name='employee-list-create'),
    path('employees/<int:pk>/', employee_detail, name='employee-detail'),

    # Employee portal endpoints
    path('portal/login/', portal_login, name='portal-login'),
    path('portal/me/', portal_me, name='portal-me'),
]

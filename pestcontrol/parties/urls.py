from django.urls import path
from .views import customer_list_create, customer_detail, customer_history, visit_complete

urlpatterns = [
    # Customer endpoints
    path('customers/', customer_list_create, name='customer-list-create'),
    path('customers/<int:pk>/', customer_detail, name='customer-detail'),
    path('customers/<int:pk>/history/', customer_history, name='customer-history'),

    # Visit endpoints
    path('visits/<int:pk>/complete/', visit_complete, name='visit-complete'),
]

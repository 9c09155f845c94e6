from django.urls import path
from .views import lead_list_create, lead_detail, lead_convert

urlpatterns = [
    path('leads/', lead_list_create, name='lead-list-create'),
    path('leads/<int:pk>/', lead_detail, name='lead-detail'),
    path('leads/<int:pk>/convert/', lead_convert, name='lead-convert'),
]

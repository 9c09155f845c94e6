from django.urls import path
from .views import (
    job_list_create, job_detail, job_complete, job_upcoming,
    portal_job_list, portal_job_complete,
)

urlpatterns = [
    # Job endpoints
    path('jobs/', job_list_create, name='job-list-create'),
    path('jobs/upcoming/', job_upcoming, name='job-upcoming'),
    path('jobs/<int:pk>/', job_detail, name='job-detail'),
    path('jobs/<int:pk>/complete/', job_complete, name='job-complete'),

    # Employee portal endpoints
    path('portal/jobs/', portal_job_list, name='portal-job-list'),
    path('portal/jobs/<int:pk>/complete/', portal_job_complete, name='portal-job-complete'),
]

import django_filters
from .models import Job


class JobFilter(django_filters.FilterSet):
    """Filter for Job list"""
    status = django_filters.ChoiceFilter(choices=Job.STATUS_CHOICES)
    employee = django_filters.NumberFilter(field_name='employee_id')
    customer = django_filters.NumberFilter(field_name='customer_id')
    bill_number = django_filters.CharFilter(field_name='bill_number', lookup_expr='icontains')
    date_from = django_filters.DateFilter(field_name='job_date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='job_date', lookup_expr='lte')

    class Meta:
        model = Job
        fields = ['status', 'employee', 'customer', 'bill_number', 'date_from', 'date_to']

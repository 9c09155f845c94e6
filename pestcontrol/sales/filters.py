import django_filters
from django.db.models import Q
from .models import Lead


class LeadFilter(django_filters.FilterSet):
    """Filter for Lead list"""
    search = django_filters.CharFilter(method='filter_search', label='Search')
    status = django_filters.ChoiceFilter(choices=Lead.STATUS_CHOICES)
    followed_by = django_filters.NumberFilter(field_name='followed_by_id')
    source = django_filters.CharFilter(field_name='source', lookup_expr='iexact')

    class Meta:
        model = Lead
        fields = ['search', 'status', 'followed_by', 'source']

    def filter_search(self, queryset, name, value):
        if not value:
            return queryset
        return queryset.filter(Q(name__icontains=value) | Q(mobile__icontains=value))

import django_filters
from django.conf import settings
from django.db.models import Q
from .models import Product, StockMovement, StockReturnRequest


class ProductFilter(django_filters.FilterSet):
    """Filter for Product list"""
    search = django_filters.CharFilter(method='filter_search', label='Search')
    unit = django_filters.ChoiceFilter(choices=Product.UNIT_CHOICES)
    low_stock = django_filters.CharFilter(method='filter_low_stock', label='Low Stock')

    class Meta:
        model = Product
        fields = ['search', 'unit', 'low_stock']

    def filter_search(self, queryset, name, value):
        value = (value or '').strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) |
            Q(product_id__icontains=value) |
            Q(supplier_name__icontains=value)
        )

    def filter_low_stock(self, queryset, name, value):
        threshold = settings.PESTCONTROL_LOW_STOCK_THRESHOLD
        if value in ('1', 'true', 'True'):
            return queryset.filter(quantity_available__lte=threshold)
        if value in ('0', 'false', 'False'):
            return queryset.filter(quantity_available__gt=threshold)
        return queryset


class StockMovementFilter(django_filters.FilterSet):
    product = django_filters.NumberFilter(field_name='product_id')
    employee = django_filters.NumberFilter(field_name='employee_id')
    movement_type = django_filters.ChoiceFilter(choices=StockMovement.MOVEMENT_TYPE_CHOICES)
    date_from = django_filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    date_to = django_filters.DateFilter(field_name='created_at', lookup_expr='date__lte')

    class Meta:
        model = StockMovement
        fields = ['product', 'employee', 'movement_type', 'date_from', 'date_to']


class StockReturnFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=StockReturnRequest.STATUS_CHOICES)
    employee = django_filters.NumberFilter(field_name='employee_id')

    class Meta:
        model = StockReturnRequest
        fields = ['status', 'employee']

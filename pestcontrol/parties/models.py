from django.db import models
from decimal import Decimal


class Customer(models.Model):
    """Customers"""
    name = models.CharField(max_length=200)
    contact_number = models.CharField(max_length=20, blank=True)
    address = models.TextField(blank=True)
    email = models.EmailField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'customers'
        ordering = ['-created_at', '-id']


class Contract(models.Model):
    """Service contract; each scheduled service date is a Visit"""
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name='contracts')
    service_type = models.CharField(max_length=100, default='General')
    frequency = models.CharField(max_length=50, default='Once')
    start_date = models.DateField()
    end_date = models.DateField()
    contract_value = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    gst = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    terms = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.customer.name} - {self.service_type} ({self.frequency})"

    class Meta:
        db_table = 'contracts'
        ordering = ['-start_date', '-id']


class Visit(models.Model):
    STATUS_CHOICES = [
        ('PENDING', 'Pending'),
        ('COMPLETED', 'Completed'),
    ]

    contract = models.ForeignKey(Contract, on_delete=models.PROTECT, related_name='visits')
    scheduled_date = models.DateField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='PENDING')
    completion_date = models.DateTimeField(null=True, blank=True)
    assigned_employee = models.ForeignKey(
        'employees.Employee', on_delete=models.SET_NULL, null=True, blank=True, related_name='visits'
    )
    remarks = models.TextField(blank=True)

    def __str__(self):
        return f"Visit {self.scheduled_date} - {self.status}"

    class Meta:
        db_table = 'visits'
        ordering = ['scheduled_date', 'id']
        indexes = [
            models.Index(fields=['status', 'completion_date'], name='idx_visit_status_completed'),
        ]


class VisitProduct(models.Model):
    """Products recorded against a visit; informational only, balances are not touched"""
    visit = models.ForeignKey(Visit, on_delete=models.CASCADE, related_name='products_used')
    product = models.ForeignKey('inventory.Product', on_delete=models.PROTECT, related_name='visit_lines')
    quantity = models.DecimalField(max_digits=12, decimal_places=3)

    class Meta:
        db_table = 'visit_products'

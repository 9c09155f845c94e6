from django.conf import settings
from django.db import models
from decimal import Decimal


class Product(models.Model):
    """Chemicals and consumables held in the warehouse"""
    UNIT_CHOICES = [
        ('litres', 'Litres'),
        ('ml', 'Millilitres'),
        ('kg', 'Kilograms'),
        ('mg', 'Milligrams'),
        ('pieces', 'Pieces'),
    ]

    product_id = models.CharField(max_length=20, unique=True)
    name = models.CharField(max_length=200)
    unit = models.CharField(max_length=10, choices=UNIT_CHOICES, default='pieces')
    date_of_purchase = models.DateField(null=True, blank=True)
    # Lifetime total bought; only restocks increase it
    quantity_purchased = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0.000'))
    # Running warehouse balance
    quantity_available = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0.000'))
    supplier_name = models.CharField(max_length=200, blank=True)
    remarks = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.product_id})"

    @property
    def is_low_stock(self):
        return self.quantity_available <= settings.PESTCONTROL_LOW_STOCK_THRESHOLD

    class Meta:
        db_table = 'products'
        ordering = ['product_id']


class EmployeeStock(models.Model):
    """Stock currently carried by an employee"""
    employee = models.ForeignKey('employees.Employee', on_delete=models.CASCADE, related_name='stock_in_hand')
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='employee_stock')
    quantity = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0.000'))
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.employee.employee_id} - {self.product.product_id}: {self.quantity}"

    class Meta:
        db_table = 'employee_stock'
        unique_together = [['employee', 'product']]
        ordering = ['product__product_id']


class StockMovement(models.Model):
    """Append-only ledger of every balance change"""
    MOVEMENT_TYPE_CHOICES = [
        ('opening', 'Opening Stock'),
        ('restock', 'Restock'),
        ('assign', 'Assigned to Employee'),
        ('consume', 'Used on Job'),
        ('return', 'Returned to Warehouse'),
    ]

    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='movements')
    employee = models.ForeignKey('employees.Employee', on_delete=models.SET_NULL, null=True, blank=True, related_name='stock_movements')
    movement_type = models.CharField(max_length=20, choices=MOVEMENT_TYPE_CHOICES)
    quantity = models.DecimalField(max_digits=12, decimal_places=3)
    reference = models.CharField(max_length=100, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.movement_type} {self.quantity} {self.product.product_id}"

    class Meta:
        db_table = 'stock_movements'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['product', 'movement_type'], name='idx_movement_product_type'),
        ]


class StockReturnRequest(models.Model):
    """Employee request to hand unused stock back to the warehouse"""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('approved', 'Approved'),
        ('rejected', 'Rejected'),
    ]

    employee = models.ForeignKey('employees.Employee', on_delete=models.CASCADE, related_name='stock_return_requests')
    employee_name = models.CharField(max_length=200, blank=True)
    bill_number = models.CharField(max_length=100, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    requested_at = models.DateTimeField(auto_now_add=True)
    resolved_at = models.DateTimeField(null=True, blank=True)

    def __str__(self):
        return f"Return #{self.pk} ({self.employee_name}) - {self.status}"

    class Meta:
        db_table = 'stock_return_requests'
        ordering = ['-requested_at', '-id']


class StockReturnItem(models.Model):
    request = models.ForeignKey(StockReturnRequest, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='return_items')
    quantity = models.DecimalField(max_digits=12, decimal_places=3)

    class Meta:
        db_table = 'stock_return_items'

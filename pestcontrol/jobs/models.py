from django.db import models
from django.db.models.functions import Lower
from decimal import Decimal


class Job(models.Model):
    """A billed service; assigning it hands stock to the employee"""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('completed', 'Completed'),
    ]

    bill_number = models.CharField(max_length=100)
    customer = models.ForeignKey('parties.Customer', on_delete=models.SET_NULL, null=True, blank=True, related_name='jobs')
    customer_name = models.CharField(max_length=200)
    employee = models.ForeignKey('employees.Employee', on_delete=models.SET_NULL, null=True, blank=True, related_name='jobs')
    employee_name = models.CharField(max_length=200)
    job_date = models.DateField()
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    service_type = models.CharField(max_length=100, blank=True)
    next_service_date = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    remarks = models.TextField(blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Job {self.bill_number} ({self.status})"

    class Meta:
        db_table = 'jobs'
        ordering = ['-job_date', '-id']
        constraints = [
            models.UniqueConstraint(Lower('bill_number'), name='uniq_job_bill_number_ci'),
        ]
        indexes = [
            models.Index(fields=['next_service_date'], name='idx_job_next_service'),
        ]


class JobProduct(models.Model):
    """Product line of a job: assigned at creation, used filled on completion"""
    job = models.ForeignKey(Job, on_delete=models.CASCADE, related_name='products')
    product = models.ForeignKey('inventory.Product', on_delete=models.PROTECT, related_name='job_lines')
    quantity_assigned = models.DecimalField(max_digits=12, decimal_places=3)
    quantity_used = models.DecimalField(max_digits=12, decimal_places=3, null=True, blank=True)

    def __str__(self):
        return f"{self.job.bill_number} - {self.product.product_id}"

    class Meta:
        db_table = 'job_products'
        unique_together = [['job', 'product']]

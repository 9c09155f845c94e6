from django.db import models


class Lead(models.Model):
    """Sales enquiry; converted into a Customer exactly once"""
    STATUS_CHOICES = [
        ('NEW', 'New'),
        ('CONTACTED', 'Contacted'),
        ('CONVERTED', 'Converted'),
        ('LOST', 'Lost'),
    ]

    name = models.CharField(max_length=200)
    mobile = models.CharField(max_length=20)
    address = models.TextField(blank=True)
    source = models.CharField(max_length=100, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='NEW')
    followed_by = models.ForeignKey(
        'employees.Employee', on_delete=models.SET_NULL, null=True, blank=True, related_name='leads'
    )
    converted_customer = models.ForeignKey(
        'parties.Customer', on_delete=models.SET_NULL, null=True, blank=True, related_name='converted_leads'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.status})"

    class Meta:
        db_table = 'leads'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['created_at'], name='idx_lead_created'),
        ]

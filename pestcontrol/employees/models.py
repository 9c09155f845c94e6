from django.contrib.auth.hashers import make_password, check_password
from django.db import models


class Employee(models.Model):
    """Field staff; each employee carries stock between warehouse and jobs"""
    employee_id = models.CharField(max_length=20, unique=True)
    name = models.CharField(max_length=200)
    father_name = models.CharField(max_length=200, blank=True)
    aadhaar_number = models.CharField(max_length=12, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    mobile_number = models.CharField(max_length=10, blank=True)
    emergency_contact = models.CharField(max_length=10, blank=True)
    address = models.TextField(blank=True)
    date_of_joining = models.DateField(null=True, blank=True)
    password = models.CharField(max_length=128)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Lets DRF permission classes treat a portal-authenticated employee as a user
    is_authenticated = True

    def __str__(self):
        return f"{self.name} ({self.employee_id})"

    def set_password(self, raw_password):
        self.password = make_password(raw_password)

    def check_password(self, raw_password):
        return check_password(raw_password, self.password)

    class Meta:
        db_table = 'employees'
        ordering = ['name']

# Generated manually
import django.db.models.deletion
import django.db.models.functions.text
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('employees', '0001_initial'),
        ('inventory', '0001_initial'),
        ('parties', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Job',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('bill_number', models.CharField(max_length=100)),
                ('customer_name', models.CharField(max_length=200)),
                ('employee_name', models.CharField(max_length=200)),
                ('job_date', models.DateField()),
                ('amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('service_type', models.CharField(blank=True, max_length=100)),
                ('next_service_date', models.DateField(blank=True, null=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('completed', 'Completed')], default='pending', max_length=20)),
                ('remarks', models.TextField(blank=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('customer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='jobs', to='parties.customer')),
                ('employee', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='jobs', to='employees.employee')),
            ],
            options={
                'db_table': 'jobs',
                'ordering': ['-job_date', '-id'],
                'indexes': [models.Index(fields=['next_service_date'], name='idx_job_next_service')],
                'constraints': [models.UniqueConstraint(django.db.models.functions.text.Lower('bill_number'), name='uniq_job_bill_number_ci')],
            },
        ),
        migrations.CreateModel(
            name='JobProduct',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity_assigned', models.DecimalField(decimal_places=3, max_digits=12)),
                ('quantity_used', models.DecimalField(blank=True, decimal_places=3, max_digits=12, null=True)),
                ('job', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='products', to='jobs.job')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='job_lines', to='inventory.product')),
            ],
            options={
                'db_table': 'job_products',
                'unique_together': {('job', 'product')},
            },
        ),
    ]

# Generated manually
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Setting',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('key', models.CharField(max_length=100, unique=True)),
                ('value', models.TextField(blank=True)),
                ('description', models.TextField(blank=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'settings',
            },
        ),
        migrations.CreateModel(
            name='Activity',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(choices=[('employee_added', 'Employee Added'), ('employee_updated', 'Employee Updated'), ('employee_deleted', 'Employee Deleted'), ('product_added', 'Product Added'), ('product_updated', 'Product Updated'), ('product_deleted', 'Product Deleted'), ('customer_added', 'Customer Added'), ('customer_updated', 'Customer Updated'), ('customer_deleted', 'Customer Deleted'), ('job_assigned', 'Job Assigned'), ('job_completed', 'Job Completed'), ('stock_return_requested', 'Stock Return Requested'), ('stock_return_approved', 'Stock Return Approved'), ('stock_return_rejected', 'Stock Return Rejected'), ('stock_restocked', 'Stock Restocked'), ('lead_added', 'Lead Added'), ('lead_converted', 'Lead Converted'), ('visit_completed', 'Visit Completed')], max_length=50)),
                ('description', models.TextField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'activities',
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['-created_at'], name='idx_activity_created')],
            },
        ),
    ]

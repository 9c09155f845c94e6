"""
Management command to clear all business data from the database
Usage: python manage.py clear_data [--confirm] [--keep-settings]
"""
from django.core.management.base import BaseCommand
from django.db import transaction
from pestcontrol.core.models import Activity, Setting
from pestcontrol.employees.models import Employee
from pestcontrol.inventory.models import Product, EmployeeStock, StockMovement, StockReturnRequest, StockReturnItem
from pestcontrol.jobs.models import Job, JobProduct
from pestcontrol.parties.models import Customer, Contract, Visit, VisitProduct
from pestcontrol.sales.models import Lead


class Command(BaseCommand):
    help = 'Clear employees, products, jobs, customers, leads and activity from database'

    def add_arguments(self, parser):
        parser.add_argument(
            '--confirm',
            action='store_true',
            help='Skip confirmation prompt',
        )
        parser.add_argument(
            '--keep-settings',
            action='store_true',
            help='Keep display settings',
        )

    def handle(self, *args, **options):
        if not options['confirm']:
            self.stdout.write(self.style.WARNING('WARNING: This will delete ALL:'))
            self.stdout.write('  - Jobs (and related: job products)')
            self.stdout.write('  - Stock return requests, stock movements and employee stock')
            self.stdout.write('  - Customers (and related: contracts, visits)')
            self.stdout.write('  - Leads')
            self.stdout.write('  - Products and employees')
            self.stdout.write('  - Activity log')
            self.stdout.write('')

            confirm = input('Type "YES" to confirm: ')
            if confirm != 'YES':
                self.stdout.write(self.style.ERROR('Operation cancelled.'))
                return

        self.stdout.write('Starting data cleanup...')

        # Children before parents; PROTECTed references must go first
        steps = [
            ('Job Products', JobProduct),
            ('Jobs', Job),
            ('Stock Return Items', StockReturnItem),
            ('Stock Return Requests', StockReturnRequest),
            ('Visit Products', VisitProduct),
            ('Visits', Visit),
            ('Contracts', Contract),
            ('Leads', Lead),
            ('Customers', Customer),
            ('Stock Movements', StockMovement),
            ('Employee Stock', EmployeeStock),
            ('Products', Product),
            ('Employees', Employee),
            ('Activities', Activity),
        ]
        if not options['keep_settings']:
            steps.append(('Settings', Setting))

        with transaction.atomic():
            for label, model in steps:
                deleted, _ = model.objects.all().delete()
                self.stdout.write(self.style.SUCCESS(f'  ✓ {label} deleted ({deleted})'))

        self.stdout.write(self.style.SUCCESS('\nData cleanup complete.'))

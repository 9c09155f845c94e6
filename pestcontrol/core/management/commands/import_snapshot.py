"""
Management command to import a legacy browser snapshot (the single JSON
document the old front end kept in local storage) into the database.

Usage: python manage.py import_snapshot snapshot.json [--dry-run]

Expected top-level keys: employees, products, customers, jobs,
stockReturnRequests, activities. Records that already exist are skipped so
the command can be re-run: employees, products and jobs by their code,
customers by name and contact number, return requests by employee, bill
number and request time. Stock in hand is only seeded for employees
created by this run.
"""
import json
from decimal import Decimal, InvalidOperation
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from pestcontrol.core.models import Activity
from pestcontrol.core.utils import next_sequential_code
from pestcontrol.employees.models import Employee
from pestcontrol.inventory.models import Product, EmployeeStock, StockMovement, StockReturnRequest, StockReturnItem
from pestcontrol.jobs.models import Job, JobProduct
from pestcontrol.parties.models import Customer, Contract, Visit

ACTIVITY_TYPES = {choice for choice, _ in Activity.TYPE_CHOICES}
UNITS = {choice for choice, _ in Product.UNIT_CHOICES}


class DryRun(Exception):
    pass


def to_decimal(value):
    try:
        return Decimal(str(value if value not in (None, '') else 0))
    except InvalidOperation:
        return Decimal('0')


def to_date(value):
    if not value:
        return None
    return parse_date(str(value)[:10])


def to_datetime(value):
    if not value:
        return None
    parsed = parse_datetime(str(value))
    if parsed is not None and timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


class Command(BaseCommand):
    help = 'Import a legacy local-storage JSON snapshot into the database'

    def add_arguments(self, parser):
        parser.add_argument('path', help='Path to the snapshot JSON file')
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Run the import and roll it back, printing what would be created',
        )

    def handle(self, *args, **options):
        try:
            with open(options['path'], 'r', encoding='utf-8') as f:
                snapshot = json.load(f)
        except OSError as e:
            raise CommandError(f"Cannot read {options['path']}: {e}")
        except json.JSONDecodeError as e:
            raise CommandError(f"Invalid JSON in {options['path']}: {e}")

        if not isinstance(snapshot, dict):
            raise CommandError('Snapshot must be a JSON object')

        self.stdout.write("=" * 80)
        self.stdout.write(self.style.SUCCESS("IMPORTING LEGACY SNAPSHOT"))
        self.stdout.write("=" * 80)

        self.counts = {}
        try:
            with transaction.atomic():
                employees, new_employees = self.import_employees(snapshot.get('employees') or [])
                products = self.import_products(snapshot.get('products') or [])
                self.import_stock_in_hand(snapshot.get('employees') or [], new_employees, products)
                customers = self.import_customers(snapshot.get('customers') or [])
                self.import_jobs(snapshot.get('jobs') or [], employees, products, customers)
                self.import_stock_returns(snapshot.get('stockReturnRequests') or [], employees, products)
                self.import_activities(snapshot.get('activities') or [])
                if options['dry_run']:
                    raise DryRun()
        except DryRun:
            self.stdout.write(self.style.WARNING("Dry run: all changes rolled back"))

        self.stdout.write("")
        for label, (created, skipped) in self.counts.items():
            self.stdout.write(f"  {label}: {created} created, {skipped} skipped")
        self.stdout.write(self.style.SUCCESS("Import complete"))

    def count(self, label, created=0, skipped=0):
        total_created, total_skipped = self.counts.get(label, (0, 0))
        self.counts[label] = (total_created + created, total_skipped + skipped)

    def import_employees(self, rows):
        """Returns (all legacy employee code -> Employee, only the ones created now)"""
        by_code = {}
        created = {}
        for row in rows:
            code = (row.get('employeeId') or '').strip().upper()
            existing = Employee.objects.filter(employee_id__iexact=code).first() if code else None
            if existing:
                by_code[code] = existing
                self.count('Employees', skipped=1)
                continue
            if not code:
                code = next_sequential_code(Employee.objects.all(), 'employee_id', 'EMP')
            employee = Employee(
                employee_id=code,
                name=row.get('name') or code,
                father_name=row.get('fatherName') or '',
                aadhaar_number=(row.get('aadhaarNumber') or '')[:12],
                date_of_birth=to_date(row.get('dateOfBirth')),
                mobile_number=(row.get('mobileNumber') or '')[:10],
                emergency_contact=(row.get('emergencyContact') or '')[:10],
                address=row.get('address') or '',
                date_of_joining=to_date(row.get('dateOfJoining')),
            )
            employee.set_password(row.get('password') or settings.PESTCONTROL_DEFAULT_EMPLOYEE_PASSWORD)
            employee.save()
            by_code[code] = employee
            created[code] = employee
            self.count('Employees', created=1)
        return by_code, created

    def import_products(self, rows):
        """Returns legacy product code -> Product"""
        by_code = {}
        for row in rows:
            code = (row.get('productId') or '').strip().upper()
            existing = Product.objects.filter(product_id__iexact=code).first() if code else None
            if existing:
                by_code[code] = existing
                self.count('Products', skipped=1)
                continue
            if not code:
                code = next_sequential_code(Product.objects.all(), 'product_id', 'PRD')
            available = to_decimal(row.get('quantityAvailable'))
            product = Product.objects.create(
                product_id=code,
                name=row.get('productName') or code,
                unit=row.get('unit') if row.get('unit') in UNITS else 'pieces',
                date_of_purchase=to_date(row.get('dateOfPurchase')),
                quantity_purchased=to_decimal(row.get('quantityPurchased')),
                quantity_available=available,
                supplier_name=row.get('supplierName') or '',
                remarks=row.get('remarks') or '',
            )
            # The imported balance becomes the ledger's opening entry
            StockMovement.objects.create(
                product=product,
                movement_type='opening',
                quantity=available,
                reference='snapshot import',
            )
            by_code[code] = product
            self.count('Products', created=1)
        return by_code

    def import_stock_in_hand(self, rows, employees, products):
        for row in rows:
            employee = employees.get((row.get('employeeId') or '').strip().upper())
            if employee is None:
                continue
            for line in row.get('stockInHand') or []:
                product = products.get((line.get('productId') or '').strip().upper())
                quantity = to_decimal(line.get('quantityGiven'))
                if product is None or quantity <= 0:
                    self.count('Stock in hand', skipped=1)
                    continue
                EmployeeStock.objects.update_or_create(
                    employee=employee,
                    product=product,
                    defaults={'quantity': quantity},
                )
                self.count('Stock in hand', created=1)

    def import_customers(self, rows):
        """Returns legacy customer id -> Customer"""
        by_id = {}
        for row in rows:
            name = row.get('name') or 'Unnamed customer'
            contact_number = row.get('contactNumber') or ''
            existing = Customer.objects.filter(name=name, contact_number=contact_number).first()
            if existing:
                by_id[row.get('id')] = existing
                self.count('Customers', skipped=1)
                continue
            customer = Customer.objects.create(
                name=name,
                contact_number=contact_number,
                address=row.get('address') or '',
                email=row.get('email') or '',
            )
            by_id[row.get('id')] = customer
            self.count('Customers', created=1)

            service_dates = [to_date(value) for value in (row.get('serviceDates') or [])]
            service_dates = [value for value in service_dates if value is not None]
            if not (row.get('serviceType') or row.get('contractStartDate') or service_dates):
                continue
            today = timezone.localdate()
            amount = to_decimal(row.get('contractAmount'))
            contract = Contract.objects.create(
                customer=customer,
                service_type=row.get('serviceType') or 'General',
                frequency=row.get('frequency') or 'Once',
                start_date=to_date(row.get('contractStartDate')) or today,
                end_date=to_date(row.get('contractEndDate')) or to_date(row.get('contractStartDate')) or today,
                contract_value=amount,
                total_amount=amount,
            )
            Visit.objects.bulk_create([
                Visit(contract=contract, scheduled_date=value, status='PENDING')
                for value in service_dates[:10]
            ])
            self.count('Contracts', created=1)
        return by_id

    def import_jobs(self, rows, employees, products, customers):
        """Jobs carry no stock effect here; balances come from the products and stock in hand"""
        for row in rows:
            bill_number = (row.get('billNumber') or '').strip()
            if not bill_number or Job.objects.filter(bill_number__iexact=bill_number).exists():
                self.count('Jobs', skipped=1)
                continue
            employee = employees.get((row.get('employeeId') or '').strip().upper())
            customer = customers.get(row.get('customerId'))
            completed = row.get('status') == 'completed'
            job = Job.objects.create(
                bill_number=bill_number,
                customer=customer,
                customer_name=row.get('customerName') or (customer.name if customer else ''),
                employee=employee,
                employee_name=row.get('employeeName') or (employee.name if employee else ''),
                job_date=to_date(row.get('jobDate')) or timezone.localdate(),
                amount=to_decimal(row.get('amount')),
                service_type=row.get('serviceType') or '',
                next_service_date=to_date(row.get('nextServiceDate')),
                status='completed' if completed else 'pending',
                remarks=row.get('remarks') or '',
                completed_at=to_datetime(row.get('createdAt')) if completed else None,
            )
            used = {
                (line.get('productId') or '').strip().upper(): to_decimal(line.get('quantityGiven'))
                for line in row.get('productsUsed') or []
            }
            for line in row.get('productsAssigned') or []:
                code = (line.get('productId') or '').strip().upper()
                product = products.get(code)
                if product is None:
                    continue
                JobProduct.objects.get_or_create(
                    job=job,
                    product=product,
                    defaults={
                        'quantity_assigned': to_decimal(line.get('quantityGiven')),
                        'quantity_used': used.get(code, Decimal('0')) if completed else None,
                    },
                )
            self.count('Jobs', created=1)

    def import_stock_returns(self, rows, employees, products):
        for row in rows:
            employee = employees.get((row.get('employeeId') or '').strip().upper())
            if employee is None:
                self.count('Stock returns', skipped=1)
                continue
            bill_number = row.get('billNumber') or ''
            requested_at = to_datetime(row.get('requestedAt'))
            existing = StockReturnRequest.objects.filter(employee=employee, bill_number=bill_number)
            if requested_at:
                existing = existing.filter(requested_at=requested_at)
            if existing.exists():
                self.count('Stock returns', skipped=1)
                continue
            status = row.get('status') if row.get('status') in ('pending', 'approved', 'rejected') else 'pending'
            stock_return = StockReturnRequest.objects.create(
                employee=employee,
                employee_name=row.get('employeeName') or employee.name,
                bill_number=bill_number,
                status=status,
                resolved_at=to_datetime(row.get('resolvedAt')),
            )
            if requested_at:
                StockReturnRequest.objects.filter(pk=stock_return.pk).update(requested_at=requested_at)
            for line in row.get('productsReturned') or []:
                product = products.get((line.get('productId') or '').strip().upper())
                if product is None:
                    continue
                StockReturnItem.objects.create(
                    request=stock_return,
                    product=product,
                    quantity=to_decimal(line.get('quantityGiven')),
                )
            self.count('Stock returns', created=1)

    def import_activities(self, rows):
        # Oldest first so the newest entries survive the cap
        rows = sorted(rows, key=lambda row: row.get('timestamp') or '')
        rows = rows[-settings.PESTCONTROL_ACTIVITY_LIMIT:]
        for row in rows:
            if row.get('type') not in ACTIVITY_TYPES:
                self.count('Activities', skipped=1)
                continue
            description = row.get('description') or ''
            timestamp = to_datetime(row.get('timestamp'))
            if timestamp and Activity.objects.filter(
                type=row['type'], description=description, created_at=timestamp
            ).exists():
                self.count('Activities', skipped=1)
                continue
            activity = Activity.objects.create(type=row['type'], description=description)
            if timestamp:
                Activity.objects.filter(pk=activity.pk).update(created_at=timestamp)
            self.count('Activities', created=1)

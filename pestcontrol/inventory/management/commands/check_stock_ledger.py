"""
Django management command to check product balances against the stock ledger

Usage: python manage.py check_stock_ledger [--product PRD0001] [--show-all]
"""
from decimal import Decimal
from django.core.management.base import BaseCommand
from django.db.models import Sum
from pestcontrol.core.utils import format_quantity
from pestcontrol.inventory.models import Product, EmployeeStock, StockMovement

# Sign of each movement type as seen from the warehouse
WAREHOUSE_SIGN = {
    'opening': 1,
    'restock': 1,
    'assign': -1,
    'consume': 0,
    'return': 1,
}


def expected_warehouse_balance(product):
    totals = dict(
        StockMovement.objects.filter(product=product)
        .order_by()
        .values_list('movement_type')
        .annotate(total=Sum('quantity'))
    )
    expected = Decimal('0.000')
    for movement_type, sign in WAREHOUSE_SIGN.items():
        expected += sign * (totals.get(movement_type) or Decimal('0.000'))
    return expected


class Command(BaseCommand):
    help = 'Check warehouse balances against the stock movement ledger'

    def add_arguments(self, parser):
        parser.add_argument(
            '--product',
            help='Check a single product code only',
        )
        parser.add_argument(
            '--show-all',
            action='store_true',
            help='Show all products, not just discrepancies',
        )

    def handle(self, *args, **options):
        product_code = options.get('product')
        show_all = options.get('show_all', False)

        self.stdout.write("=" * 80)
        self.stdout.write(self.style.SUCCESS("WAREHOUSE vs LEDGER ANALYSIS"))
        self.stdout.write("=" * 80)
        self.stdout.write("")

        products = Product.objects.all().order_by('product_id')
        if product_code:
            products = products.filter(product_id__iexact=product_code)

        self.stdout.write(f"Total Products: {products.count()}")
        self.stdout.write("")

        discrepancies = []
        for product in products:
            expected = expected_warehouse_balance(product)
            difference = product.quantity_available - expected
            in_hand = EmployeeStock.objects.filter(product=product).aggregate(
                total=Sum('quantity')
            )['total'] or Decimal('0.000')

            if difference != 0:
                discrepancies.append((product, expected, difference))

            if show_all or difference != 0:
                self.stdout.write(f"Product: {product.name} ({product.product_id})")
                self.stdout.write(f"  Warehouse Balance: {format_quantity(product.quantity_available)} {product.unit}")
                self.stdout.write(f"  Ledger Balance: {format_quantity(expected)} {product.unit}")
                self.stdout.write(f"  With Employees: {format_quantity(in_hand)} {product.unit}")
                if difference != 0:
                    self.stdout.write(self.style.WARNING(f"  Difference: {format_quantity(difference)}"))
                else:
                    self.stdout.write(self.style.SUCCESS("  In sync"))
                self.stdout.write("")

        self.stdout.write("=" * 80)
        self.stdout.write(self.style.SUCCESS("DISCREPANCIES SUMMARY"))
        self.stdout.write("=" * 80)
        self.stdout.write(f"Total Products with Discrepancies: {len(discrepancies)}")

        if discrepancies:
            for product, expected, difference in discrepancies:
                self.stdout.write(self.style.WARNING(
                    f"  - {product.product_id}: balance {format_quantity(product.quantity_available)}, "
                    f"ledger {format_quantity(expected)}, diff {format_quantity(difference)}"
                ))
        else:
            self.stdout.write(self.style.SUCCESS("No discrepancies found"))

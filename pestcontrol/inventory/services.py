"""
Warehouse and employee stock operations.

Every function here runs in one transaction: either all of its balance
changes land or none do. Quantities are validated by the serializers that
call in; these functions only enforce the state rules.
"""
import logging
from decimal import Decimal
from django.db import transaction
from django.utils import timezone
from pestcontrol.core.utils import record_activity, next_sequential_code, format_quantity
from .models import Product, EmployeeStock, StockMovement, StockReturnRequest, StockReturnItem

logger = logging.getLogger('pestcontrol.inventory')

ZERO = Decimal('0.000')


def add_to_employee_stock(employee, product, quantity):
    """Merge quantity into the employee's line for this product"""
    line, _ = EmployeeStock.objects.select_for_update().get_or_create(
        employee=employee,
        product=product,
        defaults={'quantity': ZERO},
    )
    line.quantity += quantity
    line.save(update_fields=['quantity', 'updated_at'])
    return line


def remove_from_employee_stock(employee, product, quantity):
    """
    Take quantity off the employee's line, flooring at zero.

    Lines that reach zero are dropped. Returns the remaining quantity.
    """
    line = EmployeeStock.objects.select_for_update().filter(employee=employee, product=product).first()
    if line is None:
        return ZERO
    remaining = max(ZERO, line.quantity - quantity)
    if remaining > 0:
        line.quantity = remaining
        line.save(update_fields=['quantity', 'updated_at'])
    else:
        line.delete()
    return remaining


def create_product(validated_data):
    """Register a product; the whole purchased quantity starts in the warehouse"""
    with transaction.atomic():
        if not validated_data.get('product_id'):
            validated_data['product_id'] = next_sequential_code(Product.objects.all(), 'product_id', 'PRD')
        quantity = validated_data.get('quantity_purchased') or ZERO
        product = Product.objects.create(quantity_available=quantity, **validated_data)
        if quantity > 0:
            StockMovement.objects.create(
                product=product,
                movement_type='opening',
                quantity=quantity,
                reference=product.product_id,
            )

    logger.info(f"Product {product.product_id} added with {quantity} {product.unit}")
    record_activity(
        'product_added',
        f"Product {product.name} ({product.product_id}) added with {format_quantity(quantity)} {product.unit}",
    )
    return product


def restock_product(product, quantity):
    """Add newly bought stock: purchased total and warehouse balance grow together"""
    with transaction.atomic():
        product.quantity_purchased += quantity
        product.quantity_available += quantity
        product.save(update_fields=['quantity_purchased', 'quantity_available', 'updated_at'])
        StockMovement.objects.create(
            product=product,
            movement_type='restock',
            quantity=quantity,
            reference=product.product_id,
        )

    logger.info(f"Restocked {product.product_id} +{quantity}, balance {product.quantity_available}")
    record_activity(
        'stock_restocked',
        f"Restocked {product.name} (+{format_quantity(quantity)} {product.unit}). "
        f"New Balance: {format_quantity(product.quantity_available)} {product.unit}",
    )
    return product


def request_stock_return(employee, lines, bill_number=''):
    """
    File a pending return for (product, quantity) lines.

    No stock moves until an admin approves the request.
    """
    with transaction.atomic():
        stock_return = StockReturnRequest.objects.create(
            employee=employee,
            employee_name=employee.name,
            bill_number=bill_number or '',
        )
        StockReturnItem.objects.bulk_create([
            StockReturnItem(request=stock_return, product=product, quantity=quantity)
            for product, quantity in lines
        ])

    logger.info(f"Stock return #{stock_return.pk} requested by {employee.employee_id} ({len(lines)} lines)")
    if bill_number:
        description = f"Stock return requested for Job {bill_number} by {employee.name}"
    else:
        description = f"Manual stock return requested by {employee.name}"
    record_activity('stock_return_requested', description)
    return stock_return


def _describe_resolution(stock_return, verb):
    if stock_return.bill_number:
        return f"Stock return {verb} for Job {stock_return.bill_number} ({stock_return.employee_name})"
    return f"Manual stock return {verb} for {stock_return.employee_name}"


def approve_stock_return(stock_return):
    """
    Move the requested quantities from the employee back to the warehouse.

    Only a pending request can be approved; anything else is returned
    untouched. The employee side is floored at zero, the warehouse always
    receives the requested quantity.
    """
    with transaction.atomic():
        locked = StockReturnRequest.objects.select_for_update().get(pk=stock_return.pk)
        if locked.status != 'pending':
            logger.info(f"Stock return #{locked.pk} already {locked.status}, approval ignored")
            return locked

        reference = locked.bill_number or f"RET-{locked.pk}"
        for item in locked.items.select_related('product'):
            product = Product.objects.select_for_update().get(pk=item.product_id)
            product.quantity_available += item.quantity
            product.save(update_fields=['quantity_available', 'updated_at'])
            remove_from_employee_stock(locked.employee, product, item.quantity)
            StockMovement.objects.create(
                product=product,
                employee=locked.employee,
                movement_type='return',
                quantity=item.quantity,
                reference=reference,
            )

        locked.status = 'approved'
        locked.resolved_at = timezone.now()
        locked.save(update_fields=['status', 'resolved_at'])

    logger.info(f"Stock return #{locked.pk} approved")
    record_activity('stock_return_approved', _describe_resolution(locked, 'approved'))
    return locked


def reject_stock_return(stock_return):
    """Close a pending request without moving any stock"""
    with transaction.atomic():
        locked = StockReturnRequest.objects.select_for_update().get(pk=stock_return.pk)
        if locked.status != 'pending':
            logger.info(f"Stock return #{locked.pk} already {locked.status}, rejection ignored")
            return locked
        locked.status = 'rejected'
        locked.resolved_at = timezone.now()
        locked.save(update_fields=['status', 'resolved_at'])

    logger.info(f"Stock return #{locked.pk} rejected")
    record_activity('stock_return_rejected', _describe_resolution(locked, 'rejected'))
    return locked

"""
Job assignment and completion.

Assignment moves stock from the warehouse to the employee; completion
consumes from the employee only. Whatever is left over stays with the
employee until a return request is approved.
"""
import logging
from django.db import IntegrityError, transaction
from django.utils import timezone
from pestcontrol.core.exceptions import DuplicateBillNumber, InsufficientStock, InvalidAssignment
from pestcontrol.core.utils import record_activity, format_quantity
from pestcontrol.inventory.models import Product, StockMovement
from pestcontrol.inventory.services import ZERO, add_to_employee_stock, remove_from_employee_stock
from .models import Job, JobProduct

logger = logging.getLogger('pestcontrol.jobs')


def merge_lines(lines):
    """Sum (product, quantity) lines per product, keeping first-seen order"""
    merged = {}
    for product, quantity in lines:
        if product.pk in merged:
            merged[product.pk] = (merged[product.pk][0], merged[product.pk][1] + quantity)
        else:
            merged[product.pk] = (product, quantity)
    return merged


def assign_job(employee, lines, bill_number, customer=None, customer_name='', **job_fields):
    """
    Create a pending job and hand its products to the employee.

    Rejected without any change when the bill number is already used (any
    case) or when a product's total across all lines exceeds its warehouse
    balance.
    """
    bill_number = bill_number.strip()
    customer_name = customer.name if customer is not None else customer_name

    with transaction.atomic():
        if Job.objects.filter(bill_number__iexact=bill_number).exists():
            logger.warning(f"Rejected job assignment: bill number {bill_number} already exists")
            raise DuplicateBillNumber(f"Bill number {bill_number} already exists")

        merged = merge_lines(lines)
        if not merged:
            raise InvalidAssignment('Please add at least one product')

        products = {
            product.pk: product
            for product in Product.objects.select_for_update().filter(pk__in=merged.keys())
        }
        for product_pk, (requested, quantity) in merged.items():
            if quantity <= 0:
                raise InvalidAssignment(f"Please enter a valid quantity for {requested.name}")
            product = products[product_pk]
            if quantity > product.quantity_available:
                logger.warning(
                    f"Rejected job {bill_number}: {product.product_id} requested {quantity}, "
                    f"available {product.quantity_available}"
                )
                raise InsufficientStock(
                    f"Insufficient stock for {product.name}. "
                    f"Available: {format_quantity(product.quantity_available)} {product.unit}"
                )

        # A concurrent assignment can take the bill number after the check above
        try:
            with transaction.atomic():
                job = Job.objects.create(
                    bill_number=bill_number,
                    customer=customer,
                    customer_name=customer_name,
                    employee=employee,
                    employee_name=employee.name,
                    **job_fields,
                )
        except IntegrityError:
            logger.warning(f"Rejected job assignment: bill number {bill_number} taken concurrently")
            raise DuplicateBillNumber(f"Bill number {bill_number} already exists")

        for product_pk, (_, quantity) in merged.items():
            product = products[product_pk]
            product.quantity_available -= quantity
            product.save(update_fields=['quantity_available', 'updated_at'])
            JobProduct.objects.create(job=job, product=product, quantity_assigned=quantity)
            add_to_employee_stock(employee, product, quantity)
            StockMovement.objects.create(
                product=product,
                employee=employee,
                movement_type='assign',
                quantity=quantity,
                reference=bill_number,
            )

    logger.info(f"Job {bill_number} assigned to {employee.employee_id} ({len(merged)} products)")
    record_activity(
        'job_assigned',
        f"Job {bill_number} assigned to {employee.name} for customer {customer_name}",
    )
    return job


def complete_job(job, quantities_used):
    """
    Mark a job completed and consume what was used from the employee's stock.

    ``quantities_used`` maps product pk to quantity; assigned products missing
    from it count as zero. Callers validate 0 <= used <= assigned. The
    warehouse balance does not change. Completing a completed job returns it
    unchanged.
    """
    with transaction.atomic():
        locked = Job.objects.select_for_update().get(pk=job.pk)
        if locked.status == 'completed':
            logger.info(f"Job {locked.bill_number} already completed, ignored")
            return locked

        for line in locked.products.select_related('product'):
            used = quantities_used.get(line.product_id, ZERO)
            line.quantity_used = used
            line.save(update_fields=['quantity_used'])
            if used > 0 and locked.employee_id is not None:
                remove_from_employee_stock(locked.employee, line.product, used)
                StockMovement.objects.create(
                    product=line.product,
                    employee=locked.employee,
                    movement_type='consume',
                    quantity=used,
                    reference=locked.bill_number,
                )

        locked.status = 'completed'
        locked.completed_at = timezone.now()
        locked.save(update_fields=['status', 'completed_at', 'updated_at'])

    logger.info(f"Job {locked.bill_number} completed")
    record_activity('job_completed', f"Job {locked.bill_number} completed by {locked.employee_name}")
    return locked

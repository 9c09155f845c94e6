"""
Customer, contract and visit operations.

Contracts and visits are PROTECTed foreign keys, so removing a customer
has to go through delete_customer, which clears them in dependency order.
"""
import logging
from django.db import transaction
from django.utils import timezone
from pestcontrol.core.utils import record_activity
from pestcontrol.sales.models import Lead
from pestcontrol.sales.services import lock_unconverted_lead, mark_lead_converted
from .models import Customer, Contract, Visit, VisitProduct

logger = logging.getLogger('pestcontrol.parties')


def create_customer(customer_data, contract_data=None, lead=None):
    """
    Create a customer, optionally with a contract whose service dates become
    PENDING visits, and optionally converting the lead it came from.

    All writes share one transaction.
    """
    with transaction.atomic():
        if lead is not None:
            lead = lock_unconverted_lead(lead)

        customer = Customer.objects.create(**customer_data)

        contract = None
        if contract_data is not None:
            contract_data = dict(contract_data)
            service_dates = contract_data.pop('service_dates', None) or []
            today = timezone.localdate()
            contract_data.setdefault('start_date', today)
            contract_data.setdefault('end_date', today)
            contract = Contract.objects.create(customer=customer, **contract_data)
            Visit.objects.bulk_create([
                Visit(contract=contract, scheduled_date=scheduled_date, status='PENDING')
                for scheduled_date in service_dates
            ])

        if lead is not None:
            mark_lead_converted(lead, customer)

    logger.info(
        f"Customer #{customer.pk} created"
        + (f" with contract #{contract.pk}" if contract else "")
        + (f" from lead #{lead.pk}" if lead else "")
    )
    record_activity('customer_added', f"Customer {customer.name} added")
    if lead is not None:
        record_activity('lead_converted', f"Lead {lead.name} converted to customer")
    return customer


def delete_customer(customer):
    """
    Delete a customer with its contracts and visits.

    Leads converted into this customer are kept, unlinked and set back to NEW.
    Jobs keep their denormalized customer name.
    """
    name = customer.name
    customer_pk = customer.pk
    with transaction.atomic():
        contract_ids = list(Contract.objects.filter(customer=customer).values_list('id', flat=True))
        if contract_ids:
            Visit.objects.filter(contract_id__in=contract_ids).delete()
        Contract.objects.filter(customer=customer).delete()
        unlinked = Lead.objects.filter(converted_customer=customer).update(
            converted_customer=None,
            status='NEW',
            updated_at=timezone.now(),
        )
        customer.delete()

    logger.info(f"Customer #{customer_pk} deleted ({len(contract_ids)} contracts, {unlinked} leads unlinked)")
    record_activity('customer_deleted', f"Customer {name} deleted")


def complete_visit(visit, employee=None, completion_date=None, products=(), remarks=None):
    """
    Record a visit as done, with who did it and what was used.

    Products are recorded for reporting only; no stock balance moves. A visit
    that is already completed is returned unchanged.
    """
    with transaction.atomic():
        locked = Visit.objects.select_for_update().get(pk=visit.pk)
        if locked.status == 'COMPLETED':
            logger.info(f"Visit #{locked.pk} already completed, ignored")
            return locked

        locked.status = 'COMPLETED'
        locked.completion_date = completion_date or timezone.now()
        if employee is not None:
            locked.assigned_employee = employee
        if remarks is not None:
            locked.remarks = remarks
        locked.save()
        VisitProduct.objects.bulk_create([
            VisitProduct(visit=locked, product=product, quantity=quantity)
            for product, quantity in products
        ])

    customer_name = locked.contract.customer.name
    logger.info(f"Visit #{locked.pk} completed for customer #{locked.contract.customer_id}")
    record_activity('visit_completed', f"Service visit completed for {customer_name}")
    return locked

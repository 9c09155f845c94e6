"""Lead conversion"""
import logging
from django.db import transaction
from pestcontrol.core.exceptions import LeadAlreadyConverted
from pestcontrol.core.utils import record_activity
from pestcontrol.parties.models import Customer
from .models import Lead

logger = logging.getLogger('pestcontrol.sales')

PENDING_ADDRESS = 'Address Pending'


def lock_unconverted_lead(lead):
    """Re-read the lead under a row lock; must be called inside a transaction"""
    locked = Lead.objects.select_for_update().get(pk=lead.pk)
    if locked.status == 'CONVERTED':
        logger.warning(f"Lead #{locked.pk} already converted to customer #{locked.converted_customer_id}")
        raise LeadAlreadyConverted('Lead already converted')
    return locked


def mark_lead_converted(lead, customer):
    lead.status = 'CONVERTED'
    lead.converted_customer = customer
    lead.save(update_fields=['status', 'converted_customer', 'updated_at'])
    return lead


def convert_lead(lead):
    """
    Create a customer from the lead's name, mobile and address and link it
    back to the lead.

    Both writes happen in one transaction. A lead that is already converted
    raises LeadAlreadyConverted and nothing is created.
    """
    with transaction.atomic():
        locked = lock_unconverted_lead(lead)
        customer = Customer.objects.create(
            name=locked.name,
            contact_number=locked.mobile,
            address=locked.address or PENDING_ADDRESS,
        )
        mark_lead_converted(locked, customer)

    logger.info(f"Lead #{locked.pk} converted to customer #{customer.pk}")
    record_activity('lead_converted', f"Lead {locked.name} converted to customer")
    return locked, customer

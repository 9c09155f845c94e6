import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.conf import settings
from django.db.models import Sum, DecimalField
from django.utils import timezone
from datetime import datetime, timedelta
from decimal import Decimal

from pestcontrol.core.models import Activity
from pestcontrol.core.serializers import ActivitySerializer
from pestcontrol.employees.models import Employee
from pestcontrol.inventory.models import Product, StockReturnRequest
from pestcontrol.inventory.serializers import ProductSerializer
from pestcontrol.jobs.models import Job
from pestcontrol.parties.models import Customer, Visit
from pestcontrol.sales.models import Lead

logger = logging.getLogger('pestcontrol.reports')

RECENT_ACTIVITY_COUNT = 10


def _parse_date(value, default):
    if not value:
        return default
    return datetime.strptime(value, '%Y-%m-%d').date()


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def report(request):
    """Completed services and lead conversion for a date window (default: today)"""
    today = timezone.localdate()
    try:
        date_from = _parse_date(request.query_params.get('from', None), today)
        date_to = _parse_date(request.query_params.get('to', None), today)
    except ValueError:
        return Response({'error': 'Invalid date format. Use YYYY-MM-DD'}, status=status.HTTP_400_BAD_REQUEST)
    if date_from > date_to:
        return Response({'error': "'from' date cannot be after 'to' date"}, status=status.HTTP_400_BAD_REQUEST)

    # 1. Completed visits
    visits = Visit.objects.filter(
        status='COMPLETED',
        completion_date__date__gte=date_from,
        completion_date__date__lte=date_to,
    ).select_related(
        'contract__customer', 'assigned_employee'
    ).prefetch_related('products_used__product').order_by('-completion_date')

    services = []
    for visit in visits:
        customer = visit.contract.customer
        services.append({
            'id': visit.id,
            'date': visit.completion_date,
            'customer_name': customer.name,
            'customer_address': customer.address,
            'customer_contact': customer.contact_number,
            'service_type': visit.contract.service_type,
            'employee_name': visit.assigned_employee.name if visit.assigned_employee else 'Unassigned',
            'products_used': [
                {
                    'product_name': line.product.name,
                    'quantity': line.quantity,
                    'unit': line.product.unit,
                }
                for line in visit.products_used.all()
            ],
        })

    # 2. Completed jobs
    jobs = Job.objects.filter(
        status='completed',
        completed_at__date__gte=date_from,
        completed_at__date__lte=date_to,
    ).prefetch_related('products__product').order_by('-completed_at')

    job_rows = []
    for job in jobs:
        job_rows.append({
            'id': job.id,
            'bill_number': job.bill_number,
            'date': job.completed_at,
            'customer_name': job.customer_name,
            'employee_name': job.employee_name,
            'service_type': job.service_type,
            'amount': float(job.amount),
            'products_used': [
                {
                    'product_name': line.product.name,
                    'quantity': line.quantity_used or Decimal('0.000'),
                    'unit': line.product.unit,
                }
                for line in job.products.all()
            ],
        })
    job_revenue = jobs.aggregate(total=Sum('amount', output_field=DecimalField()))['total'] or Decimal('0.00')

    # 3. Leads created in the window
    leads = Lead.objects.filter(
        created_at__date__gte=date_from,
        created_at__date__lte=date_to,
    ).select_related('converted_customer', 'followed_by').order_by('-created_at')

    total_leads = len(leads)
    converted_leads = sum(1 for lead in leads if lead.converted_customer_id)
    conversion_rate = (converted_leads / total_leads) * 100 if total_leads > 0 else 0

    return Response({
        'period': {
            'from': date_from.isoformat(),
            'to': date_to.isoformat()
        },
        'services': services,
        'jobs': {
            'total': len(job_rows),
            'revenue': float(job_revenue),
            'list': job_rows,
        },
        'leads': {
            'total': total_leads,
            'converted': converted_leads,
            'conversion_rate': f"{conversion_rate:.1f}",
            'list': [
                {
                    'id': lead.id,
                    'name': lead.name,
                    'mobile': lead.mobile,
                    'source': lead.source,
                    'status': lead.status,
                    'created_at': lead.created_at,
                    'converted_to': lead.converted_customer.name if lead.converted_customer else None,
                    'employee_name': lead.followed_by.name if lead.followed_by else None,
                }
                for lead in leads
            ],
        },
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard(request):
    """Headline counts, low stock, upcoming services and recent activity"""
    today = timezone.localdate()
    until = today + timedelta(days=settings.PESTCONTROL_UPCOMING_SERVICE_DAYS)

    low_stock = Product.objects.filter(
        quantity_available__lte=settings.PESTCONTROL_LOW_STOCK_THRESHOLD
    ).order_by('quantity_available', 'product_id')

    upcoming = []
    for job in Job.objects.filter(next_service_date__gte=today, next_service_date__lte=until).order_by('next_service_date'):
        upcoming.append({
            'source': 'job',
            'id': job.id,
            'date': job.next_service_date,
            'customer_name': job.customer_name,
            'service_type': job.service_type,
            'reference': job.bill_number,
        })
    visits = Visit.objects.filter(
        status='PENDING', scheduled_date__gte=today, scheduled_date__lte=until
    ).select_related('contract__customer').order_by('scheduled_date')
    for visit in visits:
        upcoming.append({
            'source': 'visit',
            'id': visit.id,
            'date': visit.scheduled_date,
            'customer_name': visit.contract.customer.name,
            'service_type': visit.contract.service_type,
            'reference': f"Contract #{visit.contract_id}",
        })
    upcoming.sort(key=lambda item: item['date'])

    return Response({
        'counts': {
            'employees': Employee.objects.filter(is_active=True).count(),
            'products': Product.objects.count(),
            'customers': Customer.objects.count(),
            'pending_jobs': Job.objects.filter(status='pending').count(),
            'completed_jobs': Job.objects.filter(status='completed').count(),
            'pending_stock_returns': StockReturnRequest.objects.filter(status='pending').count(),
            'new_leads': Lead.objects.filter(status='NEW').count(),
        },
        'low_stock': ProductSerializer(low_stock, many=True).data,
        'upcoming_services': upcoming,
        'recent_activity': ActivitySerializer(Activity.objects.all()[:RECENT_ACTIVITY_COUNT], many=True).data,
    })

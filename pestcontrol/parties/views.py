import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q, Prefetch
from django.shortcuts import get_object_or_404
from pestcontrol.core.utils import record_activity
from pestcontrol.jobs.models import Job
from pestcontrol.jobs.serializers import JobSerializer
from .models import Customer, Contract, Visit
from .serializers import (
    CustomerSerializer, CustomerCreateSerializer, ContractSerializer,
    VisitSerializer, VisitCompleteSerializer
)
from . import services

logger = logging.getLogger('pestcontrol.parties')


def _customer_queryset():
    visits = Visit.objects.select_related('assigned_employee').prefetch_related('products_used__product')
    contracts = Contract.objects.prefetch_related(Prefetch('visits', queryset=visits))
    return Customer.objects.prefetch_related(Prefetch('contracts', queryset=contracts))


# Customer views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def customer_list_create(request):
    """List customers with contracts and visits, or create a customer"""
    if request.method == 'GET':
        queryset = _customer_queryset().order_by('-created_at', '-id')
        search = request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) | Q(contact_number__icontains=search) | Q(address__icontains=search)
            )
        serializer = CustomerSerializer(queryset, many=True)
        return Response(serializer.data)

    serializer = CustomerCreateSerializer(data=request.data)
    if serializer.is_valid():
        data = dict(serializer.validated_data)
        contract_data = data.pop('contract', None)
        lead = data.pop('lead_id', None)
        customer = services.create_customer(data, contract_data=contract_data, lead=lead)
        return Response(CustomerSerializer(_customer_queryset().get(pk=customer.pk)).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def customer_detail(request, pk):
    """Retrieve, update or delete a customer"""
    customer = get_object_or_404(_customer_queryset(), pk=pk)

    if request.method == 'GET':
        return Response(CustomerSerializer(customer).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = CustomerSerializer(customer, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            customer = serializer.save()
            record_activity('customer_updated', f"Customer {customer.name} updated")
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        services.delete_customer(customer)
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def customer_history(request, pk):
    """Service history: contracts with their visits, and jobs billed to the customer"""
    customer = get_object_or_404(_customer_queryset(), pk=pk)
    jobs = Job.objects.filter(customer=customer).prefetch_related('products__product').order_by('-job_date', '-id')
    return Response({
        'customer': {
            'id': customer.id,
            'name': customer.name,
            'contact_number': customer.contact_number,
            'address': customer.address,
            'email': customer.email,
        },
        'contracts': ContractSerializer(customer.contracts.all(), many=True).data,
        'jobs': JobSerializer(jobs, many=True).data,
    })


# Visit views
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def visit_complete(request, pk):
    """Mark a scheduled visit as completed"""
    visit = get_object_or_404(Visit, pk=pk)
    serializer = VisitCompleteSerializer(data=request.data)
    if serializer.is_valid():
        data = serializer.validated_data
        visit = services.complete_visit(
            visit,
            employee=data.get('employee'),
            completion_date=data.get('completion_date'),
            products=[(line['product'], line['quantity']) for line in data.get('products', [])],
            remarks=data.get('remarks'),
        )
        visit = Visit.objects.select_related('assigned_employee').prefetch_related('products_used__product').get(pk=visit.pk)
        return Response(VisitSerializer(visit).data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from pestcontrol.core.utils import record_activity
from pestcontrol.parties.serializers import CustomerSerializer
from .filters import LeadFilter
from .models import Lead
from .serializers import LeadSerializer
from . import services

logger = logging.getLogger('pestcontrol.sales')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def lead_list_create(request):
    """List leads, newest first, or add a lead"""
    if request.method == 'GET':
        queryset = Lead.objects.select_related('followed_by', 'converted_customer')
        filterset = LeadFilter(request.query_params, queryset=queryset)
        return Response(LeadSerializer(filterset.qs, many=True).data)

    serializer = LeadSerializer(data=request.data)
    if serializer.is_valid():
        lead = serializer.save()
        logger.info(f"Lead #{lead.pk} created")
        record_activity('lead_added', f"New lead {lead.name} added")
        return Response(LeadSerializer(lead).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def lead_detail(request, pk):
    """Retrieve a lead or update its details and follow-up status"""
    lead = get_object_or_404(Lead, pk=pk)

    if request.method == 'GET':
        return Response(LeadSerializer(lead).data)

    serializer = LeadSerializer(lead, data=request.data, partial=True)
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def lead_convert(request, pk):
    """Turn a lead into a customer"""
    lead = get_object_or_404(Lead, pk=pk)
    lead, customer = services.convert_lead(lead)
    return Response({
        'lead': LeadSerializer(lead).data,
        'customer': CustomerSerializer(customer).data,
    })

import logging
from datetime import timedelta
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, authentication_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.conf import settings
from django.shortcuts import get_object_or_404
from django.utils import timezone
from pestcontrol.employees.authentication import EmployeeJWTAuthentication
from .filters import JobFilter
from .models import Job
from .serializers import JobSerializer, JobAssignSerializer, JobCompletionSerializer
from . import services

logger = logging.getLogger('pestcontrol.jobs')


def _job_queryset():
    return Job.objects.select_related('employee').prefetch_related('products__product')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def job_list_create(request):
    """List jobs or assign a new job"""
    if request.method == 'GET':
        filterset = JobFilter(request.query_params, queryset=_job_queryset())
        serializer = JobSerializer(filterset.qs, many=True)
        return Response(serializer.data)

    serializer = JobAssignSerializer(data=request.data)
    if serializer.is_valid():
        data = dict(serializer.validated_data)
        lines = [(line['product'], line['quantity']) for line in data.pop('products')]
        job = services.assign_job(lines=lines, **data)
        return Response(JobSerializer(_job_queryset().get(pk=job.pk)).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def job_detail(request, pk):
    """Retrieve a job or edit its descriptive fields"""
    job = get_object_or_404(_job_queryset(), pk=pk)

    if request.method == 'GET':
        return Response(JobSerializer(job).data)

    serializer = JobSerializer(job, data=request.data, partial=True)
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def job_complete(request, pk):
    """Complete a job with the quantities actually used"""
    job = get_object_or_404(Job, pk=pk)
    return _complete(request, job)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def job_upcoming(request):
    """Jobs whose next service falls between today and the look-ahead window"""
    today = timezone.localdate()
    until = today + timedelta(days=settings.PESTCONTROL_UPCOMING_SERVICE_DAYS)
    jobs = _job_queryset().filter(
        next_service_date__gte=today,
        next_service_date__lte=until,
    ).order_by('next_service_date', 'id')
    return Response(JobSerializer(jobs, many=True).data)


# Employee portal
@api_view(['GET'])
@authentication_classes([EmployeeJWTAuthentication])
@permission_classes([IsAuthenticated])
def portal_job_list(request):
    """Jobs assigned to the logged-in employee"""
    queryset = _job_queryset().filter(employee=request.user)
    job_status = request.query_params.get('status', None)
    if job_status:
        queryset = queryset.filter(status=job_status)
    return Response(JobSerializer(queryset, many=True).data)


@api_view(['POST'])
@authentication_classes([EmployeeJWTAuthentication])
@permission_classes([IsAuthenticated])
def portal_job_complete(request, pk):
    job = get_object_or_404(Job, pk=pk, employee=request.user)
    return _complete(request, job)


def _complete(request, job):
    if job.status == 'completed':
        return Response(JobSerializer(_job_queryset().get(pk=job.pk)).data)

    serializer = JobCompletionSerializer(data=request.data, context={'job': job})
    if serializer.is_valid():
        services.complete_job(job, serializer.validated_data['quantities'])
        return Response(JobSerializer(_job_queryset().get(pk=job.pk)).data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

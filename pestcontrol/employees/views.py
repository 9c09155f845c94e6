import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, authentication_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from django.db.models import Q
from django.shortcuts import get_object_or_404
from pestcontrol.core.utils import record_activity
from .authentication import EmployeeJWTAuthentication, issue_employee_token
from .models import Employee
from .serializers import EmployeeSerializer, EmployeeListSerializer, EmployeeLoginSerializer

logger = logging.getLogger('pestcontrol.employees')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def employee_list_create(request):
    """List employees (compact, by name) or create a new employee"""
    if request.method == 'GET':
        queryset = Employee.objects.all().order_by('name')
        search = request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(Q(name__icontains=search) | Q(employee_id__icontains=search))
        if request.query_params.get('detail') in ('1', 'true'):
            queryset = queryset.prefetch_related('stock_in_hand__product')
            return Response(EmployeeSerializer(queryset, many=True).data)
        return Response(EmployeeListSerializer(queryset, many=True).data)

    serializer = EmployeeSerializer(data=request.data)
    if serializer.is_valid():
        employee = serializer.save()
        logger.info(f"Employee {employee.employee_id} created")
        record_activity('employee_added', f"Employee {employee.name} ({employee.employee_id}) added")
        return Response(EmployeeSerializer(employee).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def employee_detail(request, pk):
    """Retrieve, update or delete an employee"""
    employee = get_object_or_404(Employee, pk=pk)

    if request.method == 'GET':
        return Response(EmployeeSerializer(employee).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = EmployeeSerializer(employee, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            employee = serializer.save()
            record_activity('employee_updated', f"Employee {employee.name} ({employee.employee_id}) updated")
            return Response(EmployeeSerializer(employee).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if employee.stock_in_hand.filter(quantity__gt=0).exists() or \
                employee.stock_return_requests.filter(status='pending').exists():
            return Response(
                {'error': 'Employee holds stock or has pending return requests and cannot be deleted'},
                status=status.HTTP_400_BAD_REQUEST
            )
        description = f"Employee {employee.name} ({employee.employee_id}) deleted"
        employee.delete()
        logger.info(description)
        record_activity('employee_deleted', description)
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def portal_login(request):
    """Employee portal login with employee ID and password"""
    serializer = EmployeeLoginSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Failed portal login for {request.data.get('employee_id')!r}")
        return Response({'error': 'Invalid Employee ID or Password'}, status=status.HTTP_400_BAD_REQUEST)

    employee = serializer.validated_data['employee']
    return Response({
        'access': issue_employee_token(employee),
        'employee': EmployeeSerializer(employee).data,
    })


@api_view(['GET'])
@authentication_classes([EmployeeJWTAuthentication])
@permission_classes([IsAuthenticated])
def portal_me(request):
    """Logged-in employee with current stock in hand"""
    return Response(EmployeeSerializer(request.user).data)

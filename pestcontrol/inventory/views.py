import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, authentication_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.conf import settings
from django.db.models import ProtectedError
from django.shortcuts import get_object_or_404
from pestcontrol.core.utils import record_activity
from pestcontrol.employees.authentication import EmployeeJWTAuthentication
from .filters import ProductFilter, StockMovementFilter, StockReturnFilter
from .models import Product, StockMovement, StockReturnRequest
from .serializers import (
    ProductSerializer, RestockSerializer, StockMovementSerializer,
    StockReturnRequestSerializer, StockReturnCreateSerializer
)
from . import services

logger = logging.getLogger('pestcontrol.inventory')


# Product views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def product_list_create(request):
    """List products or add a new product"""
    if request.method == 'GET':
        filterset = ProductFilter(request.query_params, queryset=Product.objects.all())
        serializer = ProductSerializer(filterset.qs, many=True)
        return Response(serializer.data)

    serializer = ProductSerializer(data=request.data)
    if serializer.is_valid():
        product = services.create_product(dict(serializer.validated_data))
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def product_detail(request, pk):
    """Retrieve, update or delete a product"""
    product = get_object_or_404(Product, pk=pk)

    if request.method == 'GET':
        return Response(ProductSerializer(product).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ProductSerializer(product, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            product = serializer.save()
            record_activity('product_updated', f"Product {product.name} ({product.product_id}) updated")
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        description = f"Product {product.name} ({product.product_id}) deleted"
        try:
            product.delete()
        except ProtectedError:
            return Response(
                {'error': 'Product is used by jobs, visits or return requests and cannot be deleted'},
                status=status.HTTP_400_BAD_REQUEST
            )
        logger.info(description)
        record_activity('product_deleted', description)
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def product_restock(request, pk):
    """Add purchased stock to a product"""
    product = get_object_or_404(Product, pk=pk)
    serializer = RestockSerializer(data=request.data)
    if serializer.is_valid():
        product = services.restock_product(product, serializer.validated_data['quantity'])
        return Response(ProductSerializer(product).data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def product_low_stock(request):
    """Products at or below the low stock threshold"""
    products = Product.objects.filter(
        quantity_available__lte=settings.PESTCONTROL_LOW_STOCK_THRESHOLD
    ).order_by('quantity_available', 'product_id')
    return Response(ProductSerializer(products, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stock_movement_list(request):
    """Stock ledger, newest first"""
    queryset = StockMovement.objects.select_related('product', 'employee')
    filterset = StockMovementFilter(request.query_params, queryset=queryset)
    serializer = StockMovementSerializer(filterset.qs, many=True)
    return Response(serializer.data)


# Stock return views (admin)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def stock_return_list_create(request):
    """List return requests or file one on behalf of an employee"""
    if request.method == 'GET':
        queryset = StockReturnRequest.objects.select_related('employee').prefetch_related('items__product')
        filterset = StockReturnFilter(request.query_params, queryset=queryset)
        return Response(StockReturnRequestSerializer(filterset.qs, many=True).data)

    serializer = StockReturnCreateSerializer(data=request.data)
    if serializer.is_valid():
        stock_return = _create_return(serializer.validated_data)
        return Response(StockReturnRequestSerializer(stock_return).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stock_return_detail(request, pk):
    stock_return = get_object_or_404(StockReturnRequest, pk=pk)
    return Response(StockReturnRequestSerializer(stock_return).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def stock_return_approve(request, pk):
    """Approve a pending return; already resolved requests are left as they are"""
    stock_return = get_object_or_404(StockReturnRequest, pk=pk)
    stock_return = services.approve_stock_return(stock_return)
    return Response(StockReturnRequestSerializer(stock_return).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def stock_return_reject(request, pk):
    """Reject a pending return; already resolved requests are left as they are"""
    stock_return = get_object_or_404(StockReturnRequest, pk=pk)
    stock_return = services.reject_stock_return(stock_return)
    return Response(StockReturnRequestSerializer(stock_return).data)


# Stock return views (employee portal)
@api_view(['GET', 'POST'])
@authentication_classes([EmployeeJWTAuthentication])
@permission_classes([IsAuthenticated])
def portal_stock_return_list_create(request):
    """The logged-in employee's return requests"""
    employee = request.user
    if request.method == 'GET':
        queryset = StockReturnRequest.objects.filter(employee=employee).prefetch_related('items__product')
        return Response(StockReturnRequestSerializer(queryset, many=True).data)

    serializer = StockReturnCreateSerializer(data=request.data, context={'employee': employee})
    if serializer.is_valid():
        stock_return = _create_return(serializer.validated_data)
        return Response(StockReturnRequestSerializer(stock_return).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


def _create_return(validated_data):
    lines = [(line['product'], line['quantity']) for line in validated_data['items']]
    return services.request_stock_return(
        validated_data['employee'],
        lines,
        bill_number=validated_data.get('bill_number', ''),
    )

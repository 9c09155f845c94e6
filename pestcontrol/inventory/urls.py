from django.urls import path
from .views import (
    product_list_create, product_detail, product_restock, product_low_stock,
    stock_movement_list,
    stock_return_list_create, stock_return_detail, stock_return_approve, stock_return_reject,
    portal_stock_return_list_create,
)

urlpatterns = [
    # Product endpoints
    path('products/', product_list_create, name='product-list-create'),
    path('products/low-stock/', product_low_stock, name='product-low-stock'),
    path('products/<int:pk>/', product_detail, name='product-detail'),
    path('products/<int:pk>/restock/', product_restock, name='product-restock'),

    # Stock ledger endpoints
    path('stock-movements/', stock_movement_list, name='stock-movement-list'),

    # Stock return endpoints
    path('stock-returns/', stock_return_list_create, name='stock-return-list-create'),
    path('stock-returns/<int:pk>/', stock_return_detail, name='stock-return-detail'),
    path('stock-returns/<int:pk>/approve/', stock_return_approve, name='stock-return-approve'),
    path('stock-returns/<int:pk>/reject/', stock_return_reject, name='stock-return-reject'),

    # Employee portal endpoints
    path('portal/stock-returns/', portal_stock_return_list_create, name='portal-stock-return-list-create'),
]

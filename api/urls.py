"""
API URL Configuration
"""
from django.urls import path
from .views import (
    CategoryDetailView,
    CategoryListView,
    HealthCheckView,
    OrderCreateView,
    OrderDetailView,
    OrderStatusView,
    ProductDetailView,
    ProductListView,
)

app_name = 'api'

urlpatterns = [
    # Catalog
    path('products/', ProductListView.as_view(), name='product-list'),
    path('products/<int:product_id>/', ProductDetailView.as_view(), name='product-detail'),
    path('categories/', CategoryListView.as_view(), name='category-list'),
    path('categories/<slug:slug>/', CategoryDetailView.as_view(), name='category-detail'),

    # Orders
    path('orders/', OrderCreateView.as_view(), name='order-create'),
    path('orders/<str:order_id>/', OrderDetailView.as_view(), name='order-detail'),
    path('orders/<str:order_id>/status/', OrderStatusView.as_view(), name='order-status'),

    # Health check
    path('health/', HealthCheckView.as_view(), name='health'),
]

from django.urls import path

from .views import ProductDetailPageView, ProductListPageView

app_name = 'storefront'

urlpatterns = [
    path('', ProductListPageView.as_view(), name='product-list'),
    path('<slug:slug>/', ProductDetailPageView.as_view(), name='product-detail'),
]

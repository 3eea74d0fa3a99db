"""
URL configuration for the Storefront
"""
from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    # Frontend
    path('', RedirectView.as_view(pattern_name='storefront:product-list', permanent=False), name='home'),
    path('products/', include('apps.storefront.urls')),

    # Admin
    path('admin/', admin.site.urls),

    # API endpoints
    path('api/', include('api.urls')),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]

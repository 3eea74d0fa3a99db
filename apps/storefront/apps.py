from django.apps import AppConfig


class StorefrontConfig(AppConfig):
    default_auto_field = 'django.db.models.AutoField'
    name = 'apps.storefront'
    verbose_name = 'Storefront - Listing Pages'

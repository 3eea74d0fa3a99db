from django.apps import AppConfig


class ShopConfig(AppConfig):
    default_auto_field = 'django.db.models.AutoField'
    name = 'apps.shop'
    verbose_name = 'Shop - Catalog & Orders'

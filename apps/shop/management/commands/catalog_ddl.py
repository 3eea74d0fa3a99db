"""
Print the canonical MySQL DDL for the catalog and order tables.

Run: python manage.py catalog_ddl > schema.sql
"""
from django.core.management.base import BaseCommand

from apps.shop.schemas import render_ddl


class Command(BaseCommand):
    help = "Print the catalog/order schema as MySQL DDL with named constraints"

    def handle(self, *args, **options):
        self.stdout.write(render_ddl(), ending='')

from decimal import Decimal

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from apps.shop.checkout import CartLine, Courier, Recipient, place_order
from apps.shop.models import Category, Product, ProductImage, User


@pytest.fixture(autouse=True)
def clear_throttle_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def category(db):
    return Category.objects.create(name="Sports", slug="sports")


@pytest.fixture
def other_category(db):
    return Category.objects.create(name="Kitchen", slug="kitchen")


@pytest.fixture
def make_product(db, category):
    def _make(name, price="10.00", stock=10, category=category, description=None, images=()):
        product = Product.objects.create(
            name=name,
            slug=name.lower().replace(" ", "-"),
            description=description,
            price=Decimal(price),
            stock=stock,
            category=category,
            weight=500,
        )
        for path in images:
            ProductImage.objects.create(product=product, image=path)
        return product
    return _make


@pytest.fixture
def product(make_product):
    return make_product("Yoga Mat", price="19.99", stock=5, description="Non-slip mat", images=["/img/mat.jpg"])


@pytest.fixture
def user(db):
    customer = User(name="Budi Santoso", email="budi@example.com")
    customer.set_password("secret-pass")
    customer.save()
    return customer


@pytest.fixture
def recipient():
    return Recipient(
        name="Budi Santoso",
        phone="081234567890",
        email="budi@example.com",
        address="Jl. Merdeka No. 10, Bandung",
        postal_code="40115",
    )


@pytest.fixture
def order_for(user, recipient):
    """Place an order for `{product: quantity}` through checkout."""
    def _order(quantities, shipping_cost="15000.00"):
        return place_order(
            user=user,
            lines=[CartLine(product_id=p.pk, quantity=q) for p, q in quantities.items()],
            recipient=recipient,
            shipping_cost=Decimal(shipping_cost),
            courier=Courier(name="jne", service="reg"),
        )
    return _order

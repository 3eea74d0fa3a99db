from decimal import Decimal

import pytest

from apps.core.exceptions import ConflictError, NotFoundError, ReferentialIntegrityError, ValidationException
from apps.shop import catalog
from apps.shop.models import Category, Product, ProductImage

pytestmark = pytest.mark.django_db


def test_create_category_generates_slug():
    category = catalog.create_category("  Home & Garden ")
    assert category.name == "Home & Garden"
    assert category.slug == "home-garden"


def test_create_category_rejects_duplicates_and_blanks(category):
    with pytest.raises(ConflictError):
        catalog.create_category("sports")
    with pytest.raises(ValidationException):
        catalog.create_category("   ")


def test_list_categories_search_and_paginate(category, other_category):
    page = catalog.list_categories(q="kit")
    assert [c.name for c in page.categories] == ["Kitchen"]

    page = catalog.list_categories(page=2, per_page=1)
    assert [c.name for c in page.categories] == ["Sports"]
    assert page.total == 2
    assert page.total_pages == 2


def test_delete_category_with_products_is_rejected(category, product):
    with pytest.raises(ReferentialIntegrityError):
        catalog.delete_category(category)
    assert Category.objects.filter(pk=category.pk).exists()


def test_delete_empty_category(other_category):
    catalog.delete_category(other_category)
    with pytest.raises(NotFoundError):
        catalog.get_category("kitchen")


def test_create_product(category):
    product = catalog.create_product(
        {"name": "Tennis Racket", "price": "120.50", "stock": "4", "categoryId": str(category.pk), "weight": 300},
        images=["/img/racket-1.jpg", "", "/img/racket-2.jpg"],
    )
    assert product.slug == "tennis-racket"
    assert product.price == Decimal("120.50")
    assert product.stock == 4
    assert product.weight == 300
    assert list(product.images.values_list("image", flat=True)) == ["/img/racket-1.jpg", "/img/racket-2.jpg"]


@pytest.mark.parametrize("data, error", [
    ({"price": "1.00"}, ValidationException),
    ({"name": "Thing", "price": "abc"}, ValidationException),
    ({"name": "Thing", "price": "-1"}, ValidationException),
    ({"name": "Thing", "price": "1.00"}, ValidationException),
    ({"name": "Thing", "price": "1.00", "categoryId": 9999}, NotFoundError),
])
def test_create_product_validation(category, data, error):
    with pytest.raises(error):
        catalog.create_product(data)


def test_create_product_rejects_duplicate_name(product, category):
    with pytest.raises(ConflictError):
        catalog.create_product({"name": "yoga mat", "price": "5.00", "categoryId": category.pk})


def test_update_product_reslugs_on_rename(product, category):
    updated = catalog.update_product(
        product,
        {"name": "Travel Yoga Mat", "price": "24.00", "categoryId": category.pk},
        images=["/img/travel.jpg"],
    )
    assert updated.slug == "travel-yoga-mat"
    assert updated.price == Decimal("24.00")
    assert updated.images.count() == 2


def test_delete_product_removes_images(product):
    catalog.delete_product(product)
    assert not Product.objects.filter(pk=product.pk).exists()
    assert not ProductImage.objects.exists()


def test_delete_ordered_product_is_rejected(product, order_for):
    order_for({product: 1})
    with pytest.raises(ReferentialIntegrityError):
        catalog.delete_product(product)
    assert Product.objects.filter(pk=product.pk).exists()
    assert product.images.count() == 1

"""
Catalog management: categories, products and their images.

Deletes never cascade. A category with products, or a product that has been
ordered, is rejected with ReferentialIntegrityError.
"""
import logging
import math
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional

from django.db import transaction

from apps.core.exceptions import (
    ConflictError,
    NotFoundError,
    ReferentialIntegrityError,
    ValidationException,
)
from apps.core.utils import generate_unique_slug, parse_int
from .models import Category, OrderItem, Product, ProductImage

logger = logging.getLogger(__name__)

DIMENSION_FIELDS = ('height', 'length', 'weight', 'width')


@dataclass
class CategoryPage:
    categories: List[Category] = field(default_factory=list)
    total: int = 0
    page: int = 1
    per_page: int = 10

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.per_page) if self.per_page else 0


def list_categories(q: str = "", page: int = 1, per_page: int = 10) -> CategoryPage:
    queryset = Category.objects.all()
    if q:
        queryset = queryset.filter(name__icontains=q)
    total = queryset.count()
    offset = (page - 1) * per_page
    return CategoryPage(
        categories=list(queryset[offset:offset + per_page]),
        total=total,
        page=page,
        per_page=per_page,
    )


def get_category(slug: str) -> Category:
    category = Category.objects.filter(slug=slug).first()
    if category is None:
        raise NotFoundError("Category", slug)
    return category


def create_category(name: str) -> Category:
    name = (name or "").strip()
    if not name:
        raise ValidationException("Name is required", field="name")
    if Category.objects.filter(name__iexact=name).exists():
        raise ConflictError("Category already exists", field="name")

    category = Category.objects.create(
        name=name,
        slug=generate_unique_slug(Category, name),
    )
    logger.info(f"Created category {category.slug}")
    return category


def delete_category(category: Category):
    if category.products.exists():
        logger.warning(f"Refusing to delete category {category.slug}: products still reference it")
        raise ReferentialIntegrityError("category", "products")
    category.delete()
    logger.info(f"Deleted category {category.slug}")


def _clean_product_data(data: Dict[str, Any]) -> Dict[str, Any]:
    name = (data.get('name') or "").strip()
    if not name:
        raise ValidationException("Name is required", field="name")

    try:
        price = Decimal(str(data.get('price')))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationException("Valid price is required", field="price")
    if not price.is_finite() or price < 0:
        raise ValidationException("Valid price is required", field="price")

    category_id = parse_int(data.get('categoryId', data.get('category_id')))
    if category_id is None:
        raise ValidationException("Valid category ID is required", field="categoryId")
    category = Category.objects.filter(pk=category_id).first()
    if category is None:
        raise NotFoundError("Category", category_id)

    cleaned = {
        'name': name,
        'description': (data.get('description') or "").strip() or None,
        'price': price,
        'stock': parse_int(data.get('stock'), 0),
        'category': category,
    }
    for dim in DIMENSION_FIELDS:
        cleaned[dim] = parse_int(data.get(dim))
    return cleaned


def _attach_images(product: Product, images: Optional[Iterable[str]]) -> List[ProductImage]:
    paths = [path for path in (images or []) if path]
    return ProductImage.objects.bulk_create(
        [ProductImage(product=product, image=path) for path in paths]
    )


@transaction.atomic
def create_product(data: Dict[str, Any], images: Optional[Iterable[str]] = None) -> Product:
    cleaned = _clean_product_data(data)
    if Product.objects.filter(name__iexact=cleaned['name']).exists():
        raise ConflictError("Product already exists", field="name")

    product = Product.objects.create(
        slug=generate_unique_slug(Product, cleaned['name']),
        **cleaned
    )
    _attach_images(product, images)
    logger.info(f"Created product {product.slug}")
    return product


@transaction.atomic
def update_product(product: Product, data: Dict[str, Any], images: Optional[Iterable[str]] = None) -> Product:
    cleaned = _clean_product_data(data)
    if Product.objects.filter(name__iexact=cleaned['name']).exclude(pk=product.pk).exists():
        raise ConflictError("Product with this name already exists", field="name")

    if cleaned['name'] != product.name:
        product.slug = generate_unique_slug(Product, cleaned['name'], exclude_id=product.pk)
    for key, value in cleaned.items():
        setattr(product, key, value)
    product.save()
    _attach_images(product, images)
    logger.info(f"Updated product {product.slug}")
    return product


@transaction.atomic
def delete_product(product: Product):
    if OrderItem.objects.filter(product=product).exists():
        logger.warning(f"Refusing to delete product {product.slug}: it has been ordered")
        raise ReferentialIntegrityError("product", "order items")
    # Images reference the product, so they go first
    product.images.all().delete()
    product.delete()
    logger.info(f"Deleted product {product.slug}")

"""
Product Listing - filtered, sorted, paginated catalog queries

This module implements:
1. The fixed sort-option lookup shared by the API and the listing page
2. Search / category filtering
3. Sold-count annotation (quantities on shipped or delivered orders)
4. Offset pagination with total / totalPages counters
"""
import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional

from django.db.models import Q, QuerySet, Sum
from django.db.models.functions import Coalesce

from apps.core.exceptions import NotFoundError
from .models import Order, Product

logger = logging.getLogger(__name__)


SORT_ASC = 'asc'
SORT_DESC = 'desc'


@dataclass(frozen=True)
class SortSpec:
    """A (field, order) pair as sent to the listing endpoint."""
    field: str
    order: str

    def as_params(self) -> dict:
        return {"sortBy": self.field, "sortOrder": self.order}


# Sort choices offered by the listing page
SORT_OPTIONS = {
    "newest": SortSpec("id", SORT_DESC),
    "price_low": SortSpec("price", SORT_ASC),
    "price_high": SortSpec("price", SORT_DESC),
    "popular": SortSpec("soldCount", SORT_DESC),
    "rating": SortSpec("rating", SORT_DESC),
}

DEFAULT_SORT_OPTION = "newest"
DEFAULT_SORT = SORT_OPTIONS[DEFAULT_SORT_OPTION]

# API field name -> queryset column
ORDERABLE_COLUMNS = {
    "id": "id",
    "name": "name",
    "price": "price",
    "stock": "stock",
    "soldCount": "sold_count",
}

DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 100


def resolve_sort_option(choice: Optional[str]) -> SortSpec:
    """Map a sort choice to its (field, order); anything unknown is newest first."""
    return SORT_OPTIONS.get(choice or "", DEFAULT_SORT)


def resolve_ordering(sort_by: Optional[str], sort_order: Optional[str] = None) -> SortSpec:
    """
    Resolve the endpoint's sortBy/sortOrder pair.

    `sortBy` may be a sort choice ("price_low") or a column name ("price")
    combined with `sortOrder`. Unrecognized values resolve to (id, desc).
    """
    if sort_by in SORT_OPTIONS:
        return SORT_OPTIONS[sort_by]
    if sort_by in ORDERABLE_COLUMNS:
        order = SORT_ASC if (sort_order or "").lower() == SORT_ASC else SORT_DESC
        return SortSpec(sort_by, order)
    return DEFAULT_SORT


@dataclass
class ListingQuery:
    """Parameters of one listing request."""
    q: str = ""
    category_id: Optional[int] = None
    sort_by: str = "id"
    sort_order: str = SORT_DESC
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE
    with_sold_count: bool = False

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


@dataclass
class ProductPage:
    """One page of products plus pagination counters."""
    products: List[Product] = field(default_factory=list)
    total: int = 0
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE
    sort: SortSpec = DEFAULT_SORT

    @property
    def total_pages(self) -> int:
        if self.per_page <= 0:
            return 0
        return math.ceil(self.total / self.per_page)


def sold_count_expression():
    return Coalesce(
        Sum(
            "order_items__quantity",
            filter=Q(order_items__order__status__in=Order.SOLD_STATUSES),
        ),
        0,
    )


def filter_products(q: str = "", category_id: Optional[int] = None) -> QuerySet:
    queryset = Product.objects.all()
    q = (q or "").strip()
    if q:
        queryset = queryset.filter(Q(name__icontains=q) | Q(description__icontains=q))
    if category_id is not None:
        queryset = queryset.filter(category_id=category_id)
    return queryset


def list_products(query: ListingQuery) -> ProductPage:
    """
    Return the requested page of products.

    Sold counts are annotated over the whole filtered set, so ordering by
    soldCount is consistent across pages.
    """
    queryset = filter_products(query.q, query.category_id)
    total = queryset.count()

    sort = resolve_ordering(query.sort_by, query.sort_order)
    column = ORDERABLE_COLUMNS.get(sort.field)
    if column is None:
        # e.g. "rating": offered by the page but not stored
        logger.debug(f"No stored column for sort field '{sort.field}', ordering by id desc")
        column, direction = "id", SORT_DESC
    else:
        direction = sort.order

    if query.with_sold_count or column == "sold_count":
        queryset = queryset.annotate(sold_count=sold_count_expression())

    prefix = "" if direction == SORT_ASC else "-"
    ordering = [f"{prefix}{column}"]
    if column != "id":
        ordering.append("-id")

    products = list(
        queryset.order_by(*ordering)
        .select_related("category")
        .prefetch_related("images")[query.offset:query.offset + query.per_page]
    )

    logger.info(
        f"Listing q='{query.q}' category={query.category_id} sort={sort.field}:{direction} "
        f"page={query.page}/{query.per_page} -> {len(products)} of {total}"
    )

    return ProductPage(
        products=products,
        total=total,
        page=query.page,
        per_page=query.per_page,
        sort=sort,
    )


def get_product_by_slug(slug: str, with_sold_count: bool = False) -> Product:
    queryset = Product.objects.select_related("category").prefetch_related("images")
    if with_sold_count:
        queryset = queryset.annotate(sold_count=sold_count_expression())
    product = queryset.filter(slug=slug).first()
    if product is None:
        raise NotFoundError("Product", slug)
    return product

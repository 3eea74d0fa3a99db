"""
Checkout - order placement and order status transitions

Placing an order is all-or-nothing: product rows are locked, stock is
validated and decremented, and the order plus its item snapshots are written
inside a single transaction.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.db import transaction
from django.db.models import F

from apps.core.exceptions import (
    InsufficientStockError,
    InvalidStatusTransitionError,
    NotFoundError,
    ValidationException,
)
from apps.core.utils import generate_order_number, quantize_money
from .models import Order, OrderItem, Product, User

logger = logging.getLogger(__name__)


@dataclass
class CartLine:
    product_id: int
    quantity: int


@dataclass
class Recipient:
    name: str
    phone: str
    email: str
    address: str
    postal_code: str


@dataclass
class Courier:
    name: Optional[str] = None
    service: Optional[str] = None
    insurance: Decimal = Decimal('0.00')
    delivery_type: Optional[str] = None


def _validate_lines(lines: List[CartLine]):
    limits = settings.CHECKOUT
    if not lines:
        raise ValidationException("No items to order", field="items")
    if len(lines) > limits['max_items_per_order']:
        raise ValidationException(
            f"Maximum {limits['max_items_per_order']} items allowed per order", field="items"
        )
    for index, line in enumerate(lines, 1):
        if line.quantity <= 0 or line.quantity > limits['max_quantity_per_item']:
            raise ValidationException(
                f"Invalid quantity at item {index} (must be 1-{limits['max_quantity_per_item']})",
                field="items"
            )


def _merge_lines(lines: List[CartLine]) -> Dict[int, int]:
    """Collapse repeated products into one quantity per product, keeping order."""
    merged: Dict[int, int] = {}
    for line in lines:
        merged[line.product_id] = merged.get(line.product_id, 0) + line.quantity
    return merged


@transaction.atomic
def place_order(
    *,
    user: User,
    lines: List[CartLine],
    recipient: Recipient,
    shipping_cost: Decimal,
    courier: Optional[Courier] = None,
    order_note: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Order:
    """
    Create an order with item snapshots and decrement stock, atomically.

    Raises InsufficientStockError (nothing written) when any product lacks stock.
    """
    _validate_lines(lines)
    courier = courier or Courier()
    quantities = _merge_lines(lines)

    # Lock in primary-key order so concurrent checkouts cannot deadlock
    products = {
        p.pk: p
        for p in Product.objects.select_for_update()
        .select_related('category')
        .filter(pk__in=quantities.keys())
        .order_by('pk')
    }

    subtotal = Decimal('0.00')
    for product_id, quantity in quantities.items():
        product = products.get(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        available = product.stock or 0
        if available < quantity:
            raise InsufficientStockError(product.name, available, quantity)
        subtotal += product.price * quantity

    shipping_cost = quantize_money(shipping_cost)
    insurance = quantize_money(courier.insurance or 0)
    store = settings.STORE

    order = Order.objects.create(
        order_number=generate_order_number(),
        user=user,
        subtotal=quantize_money(subtotal),
        shipping_cost=shipping_cost,
        total=quantize_money(subtotal + shipping_cost + insurance),
        recipient_name=recipient.name,
        phone=recipient.phone,
        email=recipient.email,
        address=recipient.address,
        postal_code=recipient.postal_code,
        shipper_name=store['owner_name'],
        shipper_phone=store['phone'],
        shipper_email=store['email'],
        origin_address=store['address'],
        origin_note=store['note'] or None,
        origin_postal_code=store['postal_code'],
        courier_name=courier.name,
        courier_service=courier.service,
        courier_insurance=insurance,
        delivery_type=courier.delivery_type,
        order_note=order_note,
        metadata=metadata,
        status=Order.STATUS_PENDING,
    )

    items = []
    for product_id, quantity in quantities.items():
        product = products[product_id]
        items.append(OrderItem.snapshot(order, product, quantity))
        Product.objects.filter(pk=product_id).update(stock=F('stock') - quantity)
    OrderItem.objects.bulk_create(items)

    transaction.on_commit(lambda: logger.info(
        f"Order {order.order_number} placed for user {user.pk}: "
        f"{len(items)} lines, total {order.total}"
    ))
    return order


@transaction.atomic
def transition_order(order: Order, status: str) -> Order:
    """
    Move an order to `status`, writing only the status column.

    The row is locked and re-read first, so the check runs against the
    committed status rather than a possibly stale instance.
    """
    valid = {choice for choice, _ in Order.STATUS_CHOICES}
    if status not in valid:
        raise ValidationException(f"Invalid status value '{status}'", field="status")

    locked = Order.objects.select_for_update().get(pk=order.pk)
    if not locked.can_transition_to(status):
        raise InvalidStatusTransitionError(locked.status, status)

    previous = locked.status
    locked.status = status
    locked.save(update_fields=['status'])
    order.status = status
    logger.info(f"Order {order.order_number} status {previous} -> {status}")
    return order


def get_order(order_id: str) -> Order:
    order = (
        Order.objects.select_related('user')
        .prefetch_related('items')
        .filter(pk=order_id)
        .first()
    )
    if order is None:
        raise NotFoundError("Order", order_id)
    return order

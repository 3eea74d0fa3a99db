"""
Utility functions for the Storefront project
"""
import random
import string
import time
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

from django.utils.text import slugify

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal('0.01')


def generate_unique_slug(model, base: str, exclude_id: Optional[int] = None, field: str = 'slug') -> str:
    """
    Slugify `base` and append -1, -2, ... until no other row of `model` uses it.
    `exclude_id` skips the row being edited.
    """
    slug = slugify(base) or 'item'
    unique_slug = slug
    count = 1

    while True:
        queryset = model.objects.filter(**{field: unique_slug})
        if exclude_id is not None:
            queryset = queryset.exclude(pk=exclude_id)
        if not queryset.exists():
            break
        unique_slug = f"{slug}-{count}"
        count += 1

    return unique_slug


def generate_order_number() -> str:
    """ORD-<last 8 digits of the ms timestamp>-<6 random base36 chars>."""
    timestamp = str(int(time.time() * 1000))
    alphabet = string.digits + string.ascii_uppercase
    suffix = ''.join(random.choices(alphabet, k=6))
    return f"ORD-{timestamp[-8:]}-{suffix}"


def quantize_money(value: Any) -> Decimal:
    """Round a monetary amount to 2 decimal places."""
    return Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def parse_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    """
    Lenient integer parsing for query strings: returns `default` instead of raising.
    """
    if value is None or value == '':
        return default
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default

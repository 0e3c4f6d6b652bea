"""Selectors for read-only cart queries."""

from decimal import Decimal
from typing import Optional

from .models import Cart


def get_cart_for_user(*, user) -> Cart:
    """Return the user's cart, creating it if missing."""

    cart, _ = Cart.objects.get_or_create(user=user)
    return cart


def get_locked_cart(*, user_id: int) -> Optional[Cart]:
    """Return the user's cart locked FOR UPDATE, or None if the user has none.

    Must run inside a transaction; the lock is held until it commits.
    """

    return Cart.objects.select_for_update().filter(user_id=user_id).first()


def cart_lines(*, cart: Cart):
    return list(cart.items.select_related("variant", "variant__product").order_by("id"))


def cart_totals(*, cart: Cart):
    """Compute cart totals from live variant prices.

    Lines whose variant has no price are left out of the subtotal and counted
    in `unpriced_items`; checkout rejects such carts.
    """

    subtotal = Decimal("0.00")
    item_count = 0
    unpriced = 0
    for item in cart_lines(cart=cart):
        item_count += int(item.quantity)
        line_total = item.line_total
        if line_total is None:
            unpriced += 1
            continue
        subtotal += line_total
    return {
        "subtotal": subtotal,
        "total": subtotal,
        "item_count": item_count,
        "unpriced_items": unpriced,
    }

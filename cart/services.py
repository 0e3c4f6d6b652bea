"""Cart services: mutations under the per-user cart lock.

Every mutation locks the user's Cart row first, the same lock checkout
takes, so cart edits and checkout for one user never interleave.
"""

import logging

from catalog.models import ProductVariant
from catalog.selectors import get_variant
from common.exceptions import InvalidOperation, NotFound
from django.db import transaction

from .models import Cart, CartItem
from .selectors import get_cart_for_user

logger = logging.getLogger("storefront.cart")


class CartError(InvalidOperation):
    """Raised for cart mutation failures."""

    code = "cart_error"


def _lock_cart(*, user) -> Cart:
    cart = get_cart_for_user(user=user)
    return Cart.objects.select_for_update().get(pk=cart.pk)


def _get_item(*, cart: Cart, item_id: int) -> CartItem:
    try:
        return CartItem.objects.select_for_update().get(id=item_id, cart=cart)
    except CartItem.DoesNotExist:
        raise NotFound("cart item", f"Cart item not found with id: {item_id}")


@transaction.atomic
def add_item(*, user, variant_id: int, quantity: int) -> CartItem:
    """Add a variant to the user's cart.

    A variant already in the cart has its quantity increased instead of
    getting a second line.
    """

    if quantity <= 0:
        raise CartError("Quantity must be positive")
    cart = _lock_cart(user=user)
    variant = get_variant(variant_id)
    if variant is None:
        raise NotFound("variant", f"Product variant not found with id: {variant_id}")
    if variant.status != ProductVariant.STATUS_ACTIVE:
        raise CartError("Variant is not available")

    item = CartItem.objects.select_for_update().filter(cart=cart, variant=variant).first()
    if item is not None:
        item.quantity = int(item.quantity) + quantity
        item.save(update_fields=["quantity", "updated_at"])
        event = "cart.item_updated"
    else:
        item = CartItem.objects.create(cart=cart, variant=variant, quantity=quantity)
        event = "cart.item_added"
    cart.save(update_fields=["updated_at"])
    logger.info(
        event,
        extra={
            "event": event,
            "cart_id": cart.id,
            "user_id": getattr(user, "id", None),
            "variant_id": variant.id,
            "quantity": item.quantity,
        },
    )
    return item


@transaction.atomic
def update_item_quantity(*, user, item_id: int, quantity: int) -> CartItem:
    """Set a cart item's quantity."""

    if quantity <= 0:
        raise CartError("Quantity must be positive")
    cart = _lock_cart(user=user)
    item = _get_item(cart=cart, item_id=item_id)
    item.quantity = quantity
    item.save(update_fields=["quantity", "updated_at"])
    logger.info(
        "cart.item_updated",
        extra={
            "event": "cart.item_updated",
            "cart_id": cart.id,
            "user_id": getattr(user, "id", None),
            "variant_id": item.variant_id,
            "quantity": quantity,
        },
    )
    return item


@transaction.atomic
def remove_item(*, user, item_id: int) -> None:
    """Remove an item from the cart."""

    cart = _lock_cart(user=user)
    item = _get_item(cart=cart, item_id=item_id)
    item.delete()
    logger.info(
        "cart.item_removed",
        extra={
            "event": "cart.item_removed",
            "cart_id": cart.id,
            "user_id": getattr(user, "id", None),
            "item_id": item_id,
        },
    )


@transaction.atomic
def clear_cart(*, user) -> int:
    """Delete every item in the user's cart; returns how many were removed."""

    cart = _lock_cart(user=user)
    removed, _ = CartItem.objects.filter(cart=cart).delete()
    logger.info(
        "cart.cleared",
        extra={"event": "cart.cleared", "cart_id": cart.id, "user_id": getattr(user, "id", None), "removed": removed},
    )
    return removed

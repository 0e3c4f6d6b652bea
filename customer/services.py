"""Customer domain services for address mutations and ownership checks.

Keep business rules here and keep views thin.
"""

import logging

from common.exceptions import InvalidOperation, InvalidState, NotFound
from django.db import transaction

from .models import ShippingAddress

logger = logging.getLogger("storefront.customer")

ADDRESS_FIELDS = ("title", "address_type", "street", "city", "state", "zip_code", "country")


def validate_shipping_address(*, user_id: int, address_id: int) -> ShippingAddress:
    """Return the address if it exists and belongs to `user_id`.

    Raises NotFound when the address is missing and InvalidOperation when it
    belongs to someone else.
    """

    try:
        address = ShippingAddress.objects.get(id=address_id)
    except ShippingAddress.DoesNotExist:
        raise NotFound("address", f"Shipping address not found with id: {address_id}")
    if address.user_id != user_id:
        raise InvalidOperation("address not owned")
    return address


@transaction.atomic
def create_address(*, user, **fields) -> ShippingAddress:
    data = {k: v for k, v in fields.items() if k in ADDRESS_FIELDS}
    address = ShippingAddress(user=user, **data)
    address.full_clean()
    address.save()
    logger.info(
        "address.created",
        extra={"event": "address.created", "address_id": address.id, "user_id": user.id},
    )
    return address


@transaction.atomic
def update_address(*, user_id: int, address_id: int, **fields) -> ShippingAddress:
    address = validate_shipping_address(user_id=user_id, address_id=address_id)
    changed = []
    for name, value in fields.items():
        if name in ADDRESS_FIELDS:
            setattr(address, name, value)
            changed.append(name)
    if changed:
        address.full_clean()
        address.save(update_fields=[*changed, "updated_at"])
    return address


@transaction.atomic
def delete_address(*, user_id: int, address_id: int) -> None:
    """Delete an address unless an order still references it."""

    address = validate_shipping_address(user_id=user_id, address_id=address_id)
    in_use = address.orders.count()
    if in_use:
        raise InvalidState(f"Cannot delete address as it is being used by {in_use} order(s)")
    address.delete()
    logger.info(
        "address.deleted",
        extra={"event": "address.deleted", "address_id": address_id, "user_id": user_id},
    )

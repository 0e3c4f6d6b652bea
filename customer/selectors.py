"""Read-only data access helpers for the customer app."""

from typing import Optional

from django.db.models import QuerySet

from .models import ShippingAddress


def list_addresses(user_id: int, address_type: Optional[str] = None) -> QuerySet[ShippingAddress]:
    """Return all addresses owned by the given user id, optionally by type."""

    qs = ShippingAddress.objects.filter(user_id=user_id)
    if address_type:
        qs = qs.filter(address_type=address_type)
    return qs.order_by("id")


def get_default_address(user_id: int) -> Optional[ShippingAddress]:
    """Return the user's first address, used to preselect one at checkout."""

    return list_addresses(user_id).first()


def count_addresses(user_id: int) -> int:
    return ShippingAddress.objects.filter(user_id=user_id).count()

"""Read-only catalog lookups consumed by the cart and checkout."""

from decimal import Decimal
from typing import Optional

from .models import ProductVariant


def get_variant(variant_id: int) -> Optional[ProductVariant]:
    """Return a variant with its product loaded, or None if missing."""

    return ProductVariant.objects.select_related("product").filter(id=variant_id).first()


def current_unit_price(variant: ProductVariant) -> Optional[Decimal]:
    """Return the variant's price at call time, falling back to the product base price."""

    return variant.current_price

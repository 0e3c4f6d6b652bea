"""Discount ledger services: code lookup, applicability and previews."""

import datetime
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from common.exceptions import InvalidArgument
from django.conf import settings
from django.utils import timezone

from .models import DiscountCode
from .policies import calculate_discount

logger = logging.getLogger("storefront.discounts")

CENT = Decimal("0.01")


def normalize_code(raw: Optional[str]) -> str:
    return (raw or "").strip()


def get_discount_code(raw: str) -> DiscountCode:
    """Return the DiscountCode matching `raw` exactly (after trimming).

    Raises InvalidArgument for unknown codes.
    """

    code = normalize_code(raw)
    try:
        return DiscountCode.objects.get(code=code)
    except DiscountCode.DoesNotExist:
        raise InvalidArgument("unknown discount code")


def is_applicable(code: DiscountCode, today: Optional[datetime.date] = None) -> bool:
    return code.is_applicable(today or timezone.localdate())


def resolve_checkout_discount(raw: Optional[str], *, today: Optional[datetime.date] = None) -> Optional[DiscountCode]:
    """Resolve the discount code supplied at checkout.

    Blank input means no discount. Unknown codes always fail; inactive or
    expired codes fail too when `CHECKOUT_ENFORCE_DISCOUNT_VALIDITY` is on.
    """

    if not normalize_code(raw):
        return None
    discount = get_discount_code(raw)
    enforce = getattr(settings, "CHECKOUT_ENFORCE_DISCOUNT_VALIDITY", True)
    if enforce and not is_applicable(discount, today):
        logger.info(
            "discount.rejected",
            extra={"event": "discount.rejected", "code": discount.code, "reason": "not_applicable"},
        )
        raise InvalidArgument("discount code is not applicable")
    return discount


def quote_discount(*, code: DiscountCode, subtotal: Decimal, today: Optional[datetime.date] = None) -> dict:
    """Describe what `code` would take off `subtotal` without persisting anything."""

    applicable = is_applicable(code, today)
    amount = calculate_discount(code, subtotal) if applicable else Decimal("0.00")
    total = (subtotal - amount).quantize(CENT, rounding=ROUND_HALF_UP)
    return {
        "code": code.code,
        "applicable": applicable,
        "subtotal": subtotal,
        "discount": subtotal - total,
        "total": total,
    }


def preview_discount(*, user, code: str) -> dict:
    """Preview `code` against the user's cart at live prices."""

    from cart.selectors import cart_totals, get_cart_for_user

    discount = get_discount_code(code)
    totals = cart_totals(cart=get_cart_for_user(user=user))
    quote = quote_discount(code=discount, subtotal=totals["subtotal"])
    logger.info(
        "discount.previewed",
        extra={
            "event": "discount.previewed",
            "user_id": getattr(user, "id", None),
            "code": discount.code,
            "applicable": quote["applicable"],
        },
    )
    return quote

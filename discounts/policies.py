"""Discount policies: how much a code takes off a subtotal.

Each policy is a plain function ``(code, subtotal) -> Decimal`` registered
under a `DiscountCode.discount_type` value. `calculate_discount` dispatches
to the registered policy and clamps the result to ``0 <= amount <= subtotal``
so no policy can push an order total below zero.
"""

from decimal import Decimal
from typing import Callable, Dict

from common.choices import DiscountType
from common.exceptions import InvalidState

from .models import DiscountCode

ZERO = Decimal("0.00")
HUNDRED = Decimal("100")

DiscountPolicy = Callable[[DiscountCode, Decimal], Decimal]

_POLICIES: Dict[str, DiscountPolicy] = {}


def register_policy(discount_type: str) -> Callable[[DiscountPolicy], DiscountPolicy]:
    """Register a policy function for a discount type."""

    def decorator(func: DiscountPolicy) -> DiscountPolicy:
        _POLICIES[str(discount_type)] = func
        return func

    return decorator


def get_policy(discount_type: str) -> DiscountPolicy:
    try:
        return _POLICIES[str(discount_type)]
    except KeyError:
        raise InvalidState(f"No discount policy registered for type: {discount_type}")


@register_policy(DiscountType.FLAT)
def flat_amount(code: DiscountCode, subtotal: Decimal) -> Decimal:
    return Decimal(code.discount_amount)


@register_policy(DiscountType.PERCENT)
def percentage(code: DiscountCode, subtotal: Decimal) -> Decimal:
    # Unrounded; the order total is rounded once after subtraction
    return subtotal * Decimal(code.discount_amount) / HUNDRED


def calculate_discount(code: DiscountCode, subtotal: Decimal) -> Decimal:
    """Return the amount to subtract from `subtotal`, within ``[0, subtotal]``."""

    if subtotal <= ZERO:
        return ZERO
    amount = get_policy(code.discount_type)(code, subtotal)
    if amount < ZERO:
        return ZERO
    return min(amount, subtotal)

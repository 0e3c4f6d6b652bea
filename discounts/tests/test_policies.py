from decimal import Decimal

import pytest
from common.exceptions import InvalidState
from discounts import policies
from discounts.models import DiscountCode
from discounts.policies import calculate_discount, register_policy


def _code(discount_type=DiscountCode.TYPE_FLAT, amount="10.00"):
    return DiscountCode(code="TEST", discount_type=discount_type, discount_amount=Decimal(amount))


def test_flat_discount_is_the_fixed_amount():
    assert calculate_discount(_code(amount="10.00"), Decimal("35.00")) == Decimal("10.00")


def test_flat_discount_clamps_to_subtotal():
    assert calculate_discount(_code(amount="1000.00"), Decimal("35.00")) == Decimal("35.00")


def test_percent_discount_is_unrounded_fraction_of_subtotal():
    amount = calculate_discount(_code(DiscountCode.TYPE_PERCENT, "15.00"), Decimal("19.99"))
    assert amount == Decimal("2.9985")


def test_hundred_percent_discount_equals_subtotal():
    assert calculate_discount(_code(DiscountCode.TYPE_PERCENT, "100.00"), Decimal("42.50")) == Decimal("42.50")


def test_zero_subtotal_yields_zero_discount():
    assert calculate_discount(_code(amount="5.00"), Decimal("0.00")) == Decimal("0.00")


def test_unknown_discount_type_raises_invalid_state():
    with pytest.raises(InvalidState):
        calculate_discount(_code("bogus"), Decimal("10.00"))


def test_negative_policy_result_clamps_to_zero():
    @register_policy("rebate")
    def rebate(code, subtotal):
        return Decimal("-3.00")

    try:
        assert calculate_discount(_code("rebate"), Decimal("10.00")) == Decimal("0.00")
    finally:
        policies._POLICIES.pop("rebate", None)


def test_registered_policy_is_used_for_its_type():
    @register_policy("first_item_free")
    def first_item_free(code, subtotal):
        return Decimal("4.00")

    try:
        assert calculate_discount(_code("first_item_free"), Decimal("12.00")) == Decimal("4.00")
    finally:
        policies._POLICIES.pop("first_item_free", None)


def test_calculation_is_deterministic():
    code = _code(DiscountCode.TYPE_PERCENT, "33.00")
    results = {calculate_discount(code, Decimal("77.77")) for _ in range(5)}
    assert len(results) == 1

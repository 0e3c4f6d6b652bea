from decimal import Decimal

import pytest
from cart.models import Cart, CartItem
from cart.selectors import cart_totals, get_cart_for_user
from cart.services import CartError, add_item, clear_cart, remove_item, update_item_quantity
from cart.tests.factories import UserFactory
from catalog.models import ProductVariant
from catalog.tests.factories import ProductFactory, ProductVariantFactory
from common.exceptions import InvalidOperation, NotFound

pytestmark = pytest.mark.django_db


def test_get_cart_for_user_creates_one_cart_per_user():
    user = UserFactory()
    first = get_cart_for_user(user=user)
    second = get_cart_for_user(user=user)
    assert first.id == second.id
    assert Cart.objects.filter(user=user).count() == 1


def test_add_item_creates_line():
    user = UserFactory()
    variant = ProductVariantFactory()

    item = add_item(user=user, variant_id=variant.id, quantity=2)

    assert item.quantity == 2
    assert item.cart.user_id == user.id


def test_add_same_variant_increments_quantity():
    user = UserFactory()
    variant = ProductVariantFactory()

    first = add_item(user=user, variant_id=variant.id, quantity=2)
    second = add_item(user=user, variant_id=variant.id, quantity=3)

    assert first.id == second.id
    assert second.quantity == 5
    assert CartItem.objects.filter(cart__user=user).count() == 1


@pytest.mark.parametrize("quantity", [0, -1])
def test_add_item_rejects_non_positive_quantity(quantity):
    user = UserFactory()
    variant = ProductVariantFactory()
    with pytest.raises(CartError):
        add_item(user=user, variant_id=variant.id, quantity=quantity)


def test_cart_error_is_an_invalid_operation():
    assert issubclass(CartError, InvalidOperation)


def test_add_unknown_variant_raises_not_found():
    user = UserFactory()
    with pytest.raises(NotFound):
        add_item(user=user, variant_id=999999, quantity=1)


def test_add_inactive_variant_is_rejected():
    user = UserFactory()
    variant = ProductVariantFactory(status=ProductVariant.STATUS_INACTIVE)
    with pytest.raises(CartError):
        add_item(user=user, variant_id=variant.id, quantity=1)


def test_update_item_quantity_sets_value():
    user = UserFactory()
    item = add_item(user=user, variant_id=ProductVariantFactory().id, quantity=1)

    updated = update_item_quantity(user=user, item_id=item.id, quantity=4)

    assert updated.quantity == 4


def test_update_other_users_item_is_not_found():
    owner = UserFactory()
    intruder = UserFactory()
    item = add_item(user=owner, variant_id=ProductVariantFactory().id, quantity=1)

    with pytest.raises(NotFound):
        update_item_quantity(user=intruder, item_id=item.id, quantity=2)
    item.refresh_from_db()
    assert item.quantity == 1


def test_remove_item_deletes_line():
    user = UserFactory()
    item = add_item(user=user, variant_id=ProductVariantFactory().id, quantity=1)

    remove_item(user=user, item_id=item.id)

    assert not CartItem.objects.filter(id=item.id).exists()


def test_clear_cart_removes_items_but_keeps_cart():
    user = UserFactory()
    add_item(user=user, variant_id=ProductVariantFactory().id, quantity=1)
    add_item(user=user, variant_id=ProductVariantFactory().id, quantity=2)
    cart_id = get_cart_for_user(user=user).id

    removed = clear_cart(user=user)

    assert removed == 2
    assert Cart.objects.filter(id=cart_id).exists()
    assert CartItem.objects.filter(cart_id=cart_id).count() == 0


def test_cart_totals_follow_live_variant_prices():
    user = UserFactory()
    variant = ProductVariantFactory(price=Decimal("10.00"))
    add_item(user=user, variant_id=variant.id, quantity=2)
    cart = get_cart_for_user(user=user)
    assert cart_totals(cart=cart)["subtotal"] == Decimal("20.00")

    variant.price = Decimal("12.50")
    variant.save(update_fields=["price"])

    totals = cart_totals(cart=cart)
    assert totals["subtotal"] == Decimal("25.00")
    assert totals["item_count"] == 2


def test_cart_totals_fall_back_to_product_base_price_and_skip_unpriced_lines():
    user = UserFactory()
    fallback = ProductVariantFactory(price=None, product=ProductFactory(base_price=Decimal("7.00")))
    unpriced = ProductVariantFactory(price=None, product=ProductFactory(base_price=None))
    add_item(user=user, variant_id=fallback.id, quantity=3)
    add_item(user=user, variant_id=unpriced.id, quantity=1)

    totals = cart_totals(cart=get_cart_for_user(user=user))

    assert totals["subtotal"] == Decimal("21.00")
    assert totals["unpriced_items"] == 1

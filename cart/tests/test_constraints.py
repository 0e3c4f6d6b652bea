import pytest
from cart.models import Cart, CartItem
from cart.tests.factories import CartFactory, UserFactory
from catalog.tests.factories import ProductVariantFactory
from django.db import IntegrityError, transaction


@pytest.mark.django_db
def test_unique_variant_per_cart_constraint():
    cart = CartFactory()
    variant = ProductVariantFactory()
    CartItem.objects.create(cart=cart, variant=variant, quantity=1)

    with pytest.raises(IntegrityError):
        CartItem.objects.create(cart=cart, variant=variant, quantity=2)


@pytest.mark.django_db
def test_quantity_positive_constraint():
    cart = CartFactory()
    with pytest.raises(IntegrityError):
        CartItem.objects.create(cart=cart, variant=ProductVariantFactory(), quantity=0)


@pytest.mark.django_db
def test_one_cart_per_user():
    user = UserFactory()
    Cart.objects.create(user=user)
    with pytest.raises(IntegrityError), transaction.atomic():
        Cart.objects.create(user=user)


def test_cart_item_stores_no_price():
    field_names = {f.name for f in CartItem._meta.get_fields()}
    assert "unit_price" not in field_names

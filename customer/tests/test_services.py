import pytest
from cart.tests.factories import UserFactory
from common.exceptions import InvalidOperation, InvalidState, NotFound
from customer.models import ShippingAddress
from customer.selectors import count_addresses, get_default_address, list_addresses
from customer.services import create_address, delete_address, update_address, validate_shipping_address
from customer.tests.factories import ShippingAddressFactory
from django.core.exceptions import ValidationError
from orders.tests.factories import OrderFactory

pytestmark = pytest.mark.django_db


def test_validate_shipping_address_returns_owned_address():
    address = ShippingAddressFactory()
    assert validate_shipping_address(user_id=address.user_id, address_id=address.id) == address


def test_validate_shipping_address_missing_is_not_found():
    user = UserFactory()
    with pytest.raises(NotFound) as exc:
        validate_shipping_address(user_id=user.id, address_id=987654)
    assert exc.value.entity == "address"


def test_validate_shipping_address_of_other_user_is_invalid_operation():
    address = ShippingAddressFactory()
    stranger = UserFactory()
    with pytest.raises(InvalidOperation) as exc:
        validate_shipping_address(user_id=stranger.id, address_id=address.id)
    assert exc.value.message == "address not owned"


def test_create_address_runs_model_validation():
    user = UserFactory()
    with pytest.raises(ValidationError):
        create_address(
            user=user,
            title="Bad zip",
            street="1 Main St",
            city="Springfield",
            state="IL",
            zip_code="!!",
            country="US",
        )
    assert count_addresses(user.id) == 0


def test_create_and_update_address():
    user = UserFactory()
    address = create_address(
        user=user,
        title="Office",
        address_type=ShippingAddress.TYPE_OFFICE,
        street="1 Market St",
        city="San Francisco",
        state="CA",
        zip_code="94105",
        country="US",
    )

    updated = update_address(user_id=user.id, address_id=address.id, city="Oakland")

    assert updated.city == "Oakland"
    assert ShippingAddress.objects.get(id=address.id).city == "Oakland"


def test_update_address_of_other_user_is_refused():
    address = ShippingAddressFactory(city="Springfield")
    with pytest.raises(InvalidOperation):
        update_address(user_id=UserFactory().id, address_id=address.id, city="Elsewhere")


def test_delete_unused_address():
    address = ShippingAddressFactory()
    delete_address(user_id=address.user_id, address_id=address.id)
    assert not ShippingAddress.objects.filter(id=address.id).exists()


def test_delete_address_used_by_an_order_is_refused():
    address = ShippingAddressFactory()
    OrderFactory(user=address.user, shipping_address=address)

    with pytest.raises(InvalidState) as exc:
        delete_address(user_id=address.user_id, address_id=address.id)

    assert "1 order(s)" in exc.value.message
    assert ShippingAddress.objects.filter(id=address.id).exists()


def test_selectors_scope_to_user_and_pick_first_as_default():
    user = UserFactory()
    first = ShippingAddressFactory(user=user)
    ShippingAddressFactory(user=user, address_type=ShippingAddress.TYPE_OFFICE)
    ShippingAddressFactory()

    assert count_addresses(user.id) == 2
    assert list(list_addresses(user.id, address_type=ShippingAddress.TYPE_OFFICE).values_list("user_id", flat=True)) == [
        user.id
    ]
    assert get_default_address(user.id) == first
    assert get_default_address(UserFactory().id) is None

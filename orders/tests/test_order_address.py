import pytest
from common.exceptions import InvalidOperation, NotFound
from customer.tests.factories import ShippingAddressFactory
from orders.models import Order
from orders.services import assign_address_to_order, get_order_shipping_address
from orders.tests.factories import OrderFactory

pytestmark = pytest.mark.django_db


def test_assign_address_to_created_order():
    order = OrderFactory()
    new_address = ShippingAddressFactory(user=order.user)

    updated = assign_address_to_order(order_id=order.id, address_id=new_address.id)

    assert updated.shipping_address_id == new_address.id
    assert get_order_shipping_address(order.id) == new_address


@pytest.mark.parametrize("status", [Order.STATUS_PAID, Order.STATUS_SHIPPED, Order.STATUS_CANCELED])
def test_assign_address_after_creation_stage_is_refused(status):
    order = OrderFactory(status=status)
    new_address = ShippingAddressFactory(user=order.user)
    with pytest.raises(InvalidOperation):
        assign_address_to_order(order_id=order.id, address_id=new_address.id)


def test_assign_foreign_address_is_refused():
    order = OrderFactory()
    original = order.shipping_address_id
    with pytest.raises(InvalidOperation):
        assign_address_to_order(order_id=order.id, address_id=ShippingAddressFactory().id)
    order.refresh_from_db()
    assert order.shipping_address_id == original


def test_assign_to_unknown_order_is_not_found():
    with pytest.raises(NotFound):
        assign_address_to_order(order_id=424242, address_id=ShippingAddressFactory().id)


def test_unassigned_shipping_address_is_none():
    order = OrderFactory(shipping_address=None)
    assert get_order_shipping_address(order.id) is None


def test_shipping_address_of_unknown_order_is_not_found():
    with pytest.raises(NotFound):
        get_order_shipping_address(424242)

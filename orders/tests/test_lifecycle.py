import pytest
from common.choices import OrderStatus, PaymentStatus
from common.exceptions import InvalidOperation
from orders import lifecycle
from orders.lifecycle import InvalidTransition, next_order_status, next_payment_status
from orders.models import Order, Payment
from orders.services import (
    cancel_order,
    capture_payment,
    deliver_order,
    pay_order,
    record_payment,
    ship_order,
)
from orders.tests.factories import OrderFactory, PaymentFactory


@pytest.mark.parametrize(
    "current,event,expected",
    [
        (OrderStatus.CREATED, lifecycle.PAY, OrderStatus.PAID),
        (OrderStatus.CREATED, lifecycle.CANCEL, OrderStatus.CANCELED),
        (OrderStatus.PAID, lifecycle.SHIP, OrderStatus.SHIPPED),
        (OrderStatus.PAID, lifecycle.CANCEL, OrderStatus.CANCELED),
        (OrderStatus.SHIPPED, lifecycle.DELIVER, OrderStatus.DELIVERED),
    ],
)
def test_allowed_order_transitions(current, event, expected):
    assert next_order_status(current, event) == expected
    assert next_order_status(str(current.value), event) == expected


@pytest.mark.parametrize(
    "current,event",
    [
        (OrderStatus.CREATED, lifecycle.SHIP),
        (OrderStatus.CREATED, lifecycle.DELIVER),
        (OrderStatus.PAID, lifecycle.PAY),
        (OrderStatus.SHIPPED, lifecycle.CANCEL),
        (OrderStatus.DELIVERED, lifecycle.CANCEL),
        (OrderStatus.CANCELED, lifecycle.PAY),
        ("bogus", lifecycle.PAY),
        (OrderStatus.CREATED, "refund"),
    ],
)
def test_illegal_order_transitions_raise(current, event):
    with pytest.raises(InvalidTransition) as exc:
        next_order_status(current, event)
    assert isinstance(exc.value, InvalidOperation)


def test_terminal_statuses_allow_no_events():
    for status in (OrderStatus.DELIVERED, OrderStatus.CANCELED):
        assert lifecycle.is_terminal(status)
        assert lifecycle.allowed_order_events(status) == []
    assert set(lifecycle.allowed_order_events(OrderStatus.CREATED)) == {lifecycle.PAY, lifecycle.CANCEL}


def test_payment_transitions_only_from_pending():
    assert next_payment_status(PaymentStatus.PENDING, lifecycle.CAPTURE) == PaymentStatus.COMPLETED
    assert next_payment_status(PaymentStatus.PENDING, lifecycle.FAIL) == PaymentStatus.FAILED
    with pytest.raises(InvalidTransition):
        next_payment_status(PaymentStatus.COMPLETED, lifecycle.FAIL)
    with pytest.raises(InvalidTransition):
        next_payment_status(PaymentStatus.FAILED, lifecycle.CAPTURE)


@pytest.mark.django_db
def test_happy_path_through_delivery():
    order = OrderFactory()

    pay_order(order)
    ship_order(order)
    delivered = deliver_order(order)

    assert delivered.status == Order.STATUS_DELIVERED
    order.refresh_from_db()
    assert order.status == Order.STATUS_DELIVERED


@pytest.mark.django_db
def test_repeating_an_event_is_a_no_op():
    order = OrderFactory(status=Order.STATUS_PAID)
    assert pay_order(order).status == Order.STATUS_PAID

    order = OrderFactory(status=Order.STATUS_CANCELED)
    assert cancel_order(order).status == Order.STATUS_CANCELED


@pytest.mark.django_db
@pytest.mark.parametrize("status", [Order.STATUS_CREATED, Order.STATUS_PAID])
def test_cancel_before_shipping(status):
    order = OrderFactory(status=status)
    assert cancel_order(order).status == Order.STATUS_CANCELED


@pytest.mark.django_db
def test_cancel_after_shipping_is_refused():
    order = OrderFactory(status=Order.STATUS_SHIPPED)
    with pytest.raises(InvalidTransition):
        cancel_order(order)
    order.refresh_from_db()
    assert order.status == Order.STATUS_SHIPPED


@pytest.mark.django_db
def test_status_change_is_logged(caplog):
    order = OrderFactory()
    with caplog.at_level("INFO", logger="storefront.orders"):
        pay_order(order)
    records = [r for r in caplog.records if r.getMessage() == "order_status_changed"]
    assert len(records) == 1
    assert records[0].status_from == "created"
    assert records[0].status_to == "paid"


@pytest.mark.django_db
def test_successful_capture_completes_payment_and_pays_order():
    payment = PaymentFactory()

    result = capture_payment(payment.order, succeeded=True)

    assert result.status == Payment.STATUS_COMPLETED
    payment.order.refresh_from_db()
    assert payment.order.status == Order.STATUS_PAID


@pytest.mark.django_db
def test_failed_capture_leaves_order_unchanged():
    payment = PaymentFactory()

    result = capture_payment(payment.order, succeeded=False)

    assert result.status == Payment.STATUS_FAILED
    payment.order.refresh_from_db()
    assert payment.order.status == Order.STATUS_CREATED


@pytest.mark.django_db
def test_repeated_capture_is_a_no_op_and_opposite_outcome_is_refused():
    payment = PaymentFactory()
    capture_payment(payment.order, succeeded=True)
    assert capture_payment(payment.order, succeeded=True).status == Payment.STATUS_COMPLETED
    with pytest.raises(InvalidTransition):
        capture_payment(payment.order, succeeded=False)


@pytest.mark.django_db
def test_capture_without_payment_is_invalid():
    with pytest.raises(InvalidOperation):
        capture_payment(OrderFactory(), succeeded=True)


@pytest.mark.django_db
def test_record_payment_once_per_order():
    order = OrderFactory()

    payment = record_payment(order, method="bank_transfer")

    assert payment.status == Payment.STATUS_PENDING
    assert payment.amount == order.total_amount
    with pytest.raises(InvalidOperation):
        record_payment(order, method="card")

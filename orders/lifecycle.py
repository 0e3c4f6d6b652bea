"""Order and payment status transitions.

Pure functions over explicit transition tables. Services apply the returned
status under a row lock; nothing here touches the database.
"""

from common.choices import OrderStatus, PaymentStatus
from common.exceptions import InvalidOperation

PAY = "pay"
SHIP = "ship"
DELIVER = "deliver"
CANCEL = "cancel"
ORDER_EVENTS = (PAY, SHIP, DELIVER, CANCEL)

CAPTURE = "capture"
FAIL = "fail"
PAYMENT_EVENTS = (CAPTURE, FAIL)

ORDER_TRANSITIONS = {
    (OrderStatus.CREATED, PAY): OrderStatus.PAID,
    (OrderStatus.CREATED, CANCEL): OrderStatus.CANCELED,
    (OrderStatus.PAID, SHIP): OrderStatus.SHIPPED,
    (OrderStatus.PAID, CANCEL): OrderStatus.CANCELED,
    (OrderStatus.SHIPPED, DELIVER): OrderStatus.DELIVERED,
}

PAYMENT_TRANSITIONS = {
    (PaymentStatus.PENDING, CAPTURE): PaymentStatus.COMPLETED,
    (PaymentStatus.PENDING, FAIL): PaymentStatus.FAILED,
}

TERMINAL_ORDER_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELED})


class InvalidTransition(InvalidOperation):
    """The event is not allowed from the current status."""

    code = "invalid_transition"

    def __init__(self, current: str, event: str):
        super().__init__(f"Cannot {event} from status {current}")
        self.current = current
        self.event = event


def next_order_status(current: str, event: str) -> OrderStatus:
    try:
        return ORDER_TRANSITIONS[(OrderStatus(current), event)]
    except (KeyError, ValueError):
        raise InvalidTransition(str(current), event)


def next_payment_status(current: str, event: str) -> PaymentStatus:
    try:
        return PAYMENT_TRANSITIONS[(PaymentStatus(current), event)]
    except (KeyError, ValueError):
        raise InvalidTransition(str(current), event)


def target_status(event: str) -> OrderStatus:
    """Status an order event leads to, regardless of where it starts."""

    for (_, evt), target in ORDER_TRANSITIONS.items():
        if evt == event:
            return target
    raise InvalidOperation(f"Unknown order event: {event}")


def allowed_order_events(current: str) -> list[str]:
    return [event for (status, event) in ORDER_TRANSITIONS if status == current]


def is_terminal(current: str) -> bool:
    return current in TERMINAL_ORDER_STATUSES

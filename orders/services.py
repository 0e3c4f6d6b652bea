import hashlib
import json
import logging
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Optional, Tuple

from cart.models import CartItem
from cart.selectors import cart_lines, get_locked_cart
from catalog.selectors import current_unit_price
from common.exceptions import InvalidArgument, InvalidOperation, InvalidState, NotFound
from customer.models import ShippingAddress
from customer.services import validate_shipping_address
from discounts.models import DiscountCode
from discounts.policies import calculate_discount
from discounts.services import resolve_checkout_discount
from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.utils import timezone

from . import lifecycle
from .models import IdempotencyKey, Order, OrderItem, Payment

logger = logging.getLogger("storefront.orders")

ZERO = Decimal("0.00")
CENT = Decimal("0.01")


def round_money(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def price_order(subtotal: Decimal, discount: Optional[DiscountCode]) -> Tuple[Decimal, Decimal]:
    """Return ``(total, discount_amount)`` for an exact subtotal.

    The total is clamped at zero and rounded once; the discount amount is
    whatever was actually taken off.
    """

    reduction = calculate_discount(discount, subtotal) if discount is not None else ZERO
    total = round_money(max(ZERO, subtotal - reduction))
    return total, subtotal - total


def format_order_number(order_id: int) -> str:
    prefix = getattr(settings, "ORDER_NUMBER_PREFIX", "ORD")
    return f"{prefix}-{int(order_id):06d}"


@transaction.atomic
def create_order(
    *,
    user_id: int,
    shipping_address_id: int,
    discount_code: Optional[str] = None,
    payment_method: Optional[str] = None,
) -> Order:
    """Convert the user's cart into an Order.

    Checks run in order and the first failure wins: user exists, cart is
    non-empty, address exists and is owned by the user, discount code is
    known (and applicable unless `CHECKOUT_ENFORCE_DISCOUNT_VALIDITY` is off).
    The cart row stays locked until commit, so a concurrent checkout for the
    same user waits and then finds the cart empty.

    Any failure raises before commit and leaves no rows behind.
    """

    user = get_user_model().objects.filter(id=user_id).first()
    if user is None:
        raise NotFound("user", f"User not found with id: {user_id}")

    cart = get_locked_cart(user_id=user.id)
    items = cart_lines(cart=cart) if cart is not None else []
    if not items:
        raise InvalidOperation("empty cart")

    address = validate_shipping_address(user_id=user.id, address_id=shipping_address_id)
    discount = resolve_checkout_discount(discount_code)

    lines = []
    subtotal = ZERO
    for item in items:
        unit_price = current_unit_price(item.variant)
        if unit_price is None:
            raise InvalidState("variant missing price")
        subtotal += unit_price * Decimal(int(item.quantity))
        lines.append((item, unit_price))

    total, discount_amount = price_order(subtotal, discount)

    order = Order.objects.create(
        user=user,
        placed_at=timezone.now(),
        status=Order.STATUS_CREATED,
        subtotal_amount=subtotal,
        discount_amount=discount_amount,
        total_amount=total,
        discount_code=discount,
        shipping_address=address,
    )
    OrderItem.objects.bulk_create(
        [
            OrderItem(
                order=order,
                variant=item.variant,
                product_title=item.variant.product.title,
                variant_sku=item.variant.sku,
                quantity=item.quantity,
                unit_price=unit_price,
            )
            for item, unit_price in lines
        ]
    )
    order.number = format_order_number(order.id)
    order.save(update_fields=["number"])

    method = (payment_method or "").strip()
    if method:
        Payment.objects.create(order=order, method=method, amount=total, status=Payment.STATUS_PENDING)

    CartItem.objects.filter(cart=cart).delete()
    cart.save(update_fields=["updated_at"])

    logger.info(
        "order.created",
        extra={
            "event": "order.created",
            "order_id": order.id,
            "order_number": order.number,
            "user_id": user.id,
            "cart_id": cart.id,
            "item_count": len(lines),
            "subtotal": subtotal,
            "discount": discount_amount,
            "total": total,
            "discount_code": discount.code if discount is not None else None,
            "payment_method": method or None,
        },
    )
    return order


def _lock_order(order_id: int) -> Order:
    try:
        return Order.objects.select_for_update().get(pk=order_id)
    except Order.DoesNotExist:
        raise NotFound("order", f"Order not found with id: {order_id}")


@transaction.atomic
def apply_order_event(order: Order, event: str) -> Order:
    """Move an order along the lifecycle under a row lock.

    Applying an event whose target is the current status is a no-op.
    """

    locked = _lock_order(order.pk)
    if locked.status == lifecycle.target_status(event):
        return locked
    prev = locked.status
    locked.status = lifecycle.next_order_status(prev, event)
    locked.save(update_fields=["status", "updated_at"])
    order.status = locked.status
    logger.info(
        "order_status_changed",
        extra={
            "event": "order_status_changed",
            "order_id": locked.id,
            "user_id": locked.user_id,
            "status_from": str(prev),
            "status_to": str(locked.status),
            "trigger": event,
        },
    )
    return locked


def pay_order(order: Order) -> Order:
    return apply_order_event(order, lifecycle.PAY)


def ship_order(order: Order) -> Order:
    return apply_order_event(order, lifecycle.SHIP)


def deliver_order(order: Order) -> Order:
    return apply_order_event(order, lifecycle.DELIVER)


def cancel_order(order: Order) -> Order:
    """Cancel an order that has not shipped yet."""

    return apply_order_event(order, lifecycle.CANCEL)


@transaction.atomic
def record_payment(order: Order, *, method: str) -> Payment:
    """Attach a PENDING payment for the order total to an order without one."""

    method = (method or "").strip()
    if not method:
        raise InvalidArgument("payment method must not be blank")
    locked = _lock_order(order.pk)
    if Payment.objects.filter(order=locked).exists():
        raise InvalidOperation("order already has a payment")
    payment = Payment.objects.create(
        order=locked, method=method, amount=locked.total_amount, status=Payment.STATUS_PENDING
    )
    logger.info(
        "payment.recorded",
        extra={"event": "payment.recorded", "order_id": locked.id, "payment_id": payment.id, "method": method},
    )
    return payment


@transaction.atomic
def capture_payment(order: Order, *, succeeded: bool) -> Payment:
    """Settle the order's pending payment.

    Success completes the payment and pays the order; failure marks the
    payment FAILED and leaves the order as it is. Repeating the same outcome
    is a no-op.
    """

    locked = _lock_order(order.pk)
    payment = Payment.objects.select_for_update().filter(order=locked).first()
    if payment is None:
        raise InvalidOperation("order has no payment")
    event = lifecycle.CAPTURE if succeeded else lifecycle.FAIL
    target = Payment.STATUS_COMPLETED if succeeded else Payment.STATUS_FAILED
    if payment.status == target:
        return payment
    prev = payment.status
    payment.status = lifecycle.next_payment_status(prev, event)
    payment.save(update_fields=["status", "updated_at"])
    if succeeded:
        pay_order(locked)
        order.status = locked.status
    logger.info(
        "payment.captured" if succeeded else "payment.failed",
        extra={
            "event": "payment.captured" if succeeded else "payment.failed",
            "order_id": locked.id,
            "payment_id": payment.id,
            "status_from": str(prev),
            "status_to": str(payment.status),
        },
    )
    return payment


@transaction.atomic
def assign_address_to_order(*, order_id: int, address_id: int) -> Order:
    """Rebind the shipping address of an order that is still CREATED."""

    order = _lock_order(order_id)
    if order.status != Order.STATUS_CREATED:
        raise InvalidOperation(f"Cannot change the address of an order in status {order.status}")
    address = validate_shipping_address(user_id=order.user_id, address_id=address_id)
    prev = order.shipping_address_id
    order.shipping_address = address
    order.save(update_fields=["shipping_address", "updated_at"])
    logger.info(
        "order.address_assigned",
        extra={
            "event": "order.address_assigned",
            "order_id": order.id,
            "address_from": prev,
            "address_to": address.id,
        },
    )
    return order


def get_order_shipping_address(order_id: int) -> Optional[ShippingAddress]:
    """Return the order's shipping address, or None when unassigned."""

    order = Order.objects.select_related("shipping_address").filter(pk=order_id).first()
    if order is None:
        raise NotFound("order", f"Order not found with id: {order_id}")
    return order.shipping_address


def with_idempotency(
    *,
    key: str,
    user,
    path: str,
    method: str,
    handler: Callable[[], Tuple[dict, int]],
    request_hash: Optional[str] = None,
) -> Tuple[dict, int]:
    """Run handler idempotently and persist its response for the given key and scope.

    - Scope is derived from the caller: for authenticated users, "user:<id>"; otherwise "anon".
    - If a record exists and the stored `request_hash` differs from the provided one, returns 409.
    - If a record exists but response is not yet stored, returns 409 to indicate in-progress.
    - Expired records are discarded and the request runs again.
    - If the handler raises, the record is dropped so the key can be retried.
    """

    scope = f"user:{getattr(user, 'id', None)}" if getattr(user, "id", None) else "anon"
    method = str(method).upper()
    path = str(path)
    now = timezone.now()
    ttl = timedelta(hours=int(getattr(settings, "IDEMPOTENCY_TTL_HOURS", 24)))

    IdempotencyKey.objects.filter(key=key, scope=scope, path=path, method=method, expires_at__lte=now).delete()
    try:
        with transaction.atomic():
            idem = IdempotencyKey.objects.create(
                key=key,
                user=user if getattr(user, "id", None) else None,
                scope=scope,
                path=path,
                method=method,
                request_hash=request_hash,
                expires_at=now + ttl,
            )
    except IntegrityError:
        idem = IdempotencyKey.objects.get(key=key, scope=scope, path=path, method=method)
        if idem.request_hash and request_hash and idem.request_hash != request_hash:
            return {"detail": "Idempotency key reused with different request payload"}, 409
        if idem.response_json is not None and idem.response_code is not None:
            logger.info(
                "idempotency.replayed",
                extra={"event": "idempotency.replayed", "scope": scope, "path": path, "key": key},
            )
            return idem.response_json, int(idem.response_code)
        return {"detail": "Request in progress"}, 409

    try:
        body, code = handler()
    except Exception:
        IdempotencyKey.objects.filter(id=idem.id).delete()
        raise

    def _json_safe(value):
        if isinstance(value, Decimal):
            return str(value)
        if isinstance(value, dict):
            return {k: _json_safe(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [_json_safe(v) for v in value]
        return value

    safe_body = _json_safe(body)
    IdempotencyKey.objects.filter(id=idem.id).update(response_json=safe_body, response_code=code)
    return safe_body, code


def compute_request_hash(data: Optional[dict]) -> Optional[str]:
    """Compute a canonical SHA256 hash of the request body.

    Uses sorted keys JSON representation to stabilize the hash across equivalent payloads.
    Returns None when data is falsy.
    """
    if not data:
        return None
    try:
        payload = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    except (TypeError, ValueError):
        return None
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def purge_expired_idempotency_keys(*, now=None) -> int:
    now = now or timezone.now()
    deleted, _ = IdempotencyKey.objects.filter(expires_at__lt=now).delete()
    return deleted

"""Orders API endpoints.

Checkout, order history, shipping-address management, cancellation and the
payment provider webhook. Views translate domain errors into responses and
leave the rules to `orders.services`.
"""

import hmac

from common.choices import OrderStatus
from common.exceptions import DomainError, api_error_response
from customer.serializers import ShippingAddressSerializer
from django.conf import settings
from django.http import Http404
from django_filters import rest_framework as filters
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from rest_framework import generics, status
from rest_framework import serializers as rf_serializers
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import Order
from .serializers import AssignAddressSerializer, CheckoutSerializer, OrderSerializer, PaymentWebhookSerializer
from .services import (
    assign_address_to_order,
    cancel_order,
    capture_payment,
    compute_request_hash,
    create_order,
    get_order_shipping_address,
    with_idempotency,
)

ErrorSerializer = inline_serializer(
    name="OrderError",
    fields={"detail": rf_serializers.CharField(), "code": rf_serializers.CharField()},
)

IDEMPOTENCY_HEADER = OpenApiParameter(
    name="Idempotency-Key",
    location=OpenApiParameter.HEADER,
    required=False,
    description="Makes the request idempotent within user+path+method",
    type=str,
)

ORDER_EXAMPLE = {
    "id": 1,
    "number": "ORD-000001",
    "status": "created",
    "placed_at": "2026-01-01T12:00:00Z",
    "items": [
        {
            "id": 10,
            "variant": 555,
            "product_title": "Merino Crew Sweater",
            "variant_sku": "MCS-M-NVY",
            "quantity": 2,
            "unit_price": "10.00",
            "line_total": "20.00",
        },
        {
            "id": 11,
            "variant": 556,
            "product_title": "HDMI 2.1 Cable 2m",
            "variant_sku": "HDMI-2M",
            "quantity": 3,
            "unit_price": "5.00",
            "line_total": "15.00",
        },
    ],
    "subtotal_amount": "35.00",
    "discount_amount": "10.00",
    "total_amount": "25.00",
    "discount_code": "SAVE10",
    "has_discount": True,
    "shipping_address": {"id": 3, "title": "Home", "city": "Springfield"},
    "payment": None,
    "allowed_events": ["pay", "cancel"],
    "is_final": False,
}


def _owned_order(request, order_id: int) -> Order:
    try:
        return Order.objects.get(pk=order_id, user_id=request.user.id)
    except Order.DoesNotExist:
        raise Http404


def _respond(request, handler, *, user, request_hash):
    """Run `handler`, idempotently when an `Idempotency-Key` header is present.

    Domain errors become error responses here and are never stored, so a
    retry with the same key runs again once the cause is fixed.
    """

    idem_key = request.headers.get("Idempotency-Key")
    try:
        if idem_key:
            body, code = with_idempotency(
                key=idem_key,
                user=user,
                path=str(request.path),
                method=str(request.method),
                request_hash=request_hash,
                handler=handler,
            )
        else:
            body, code = handler()
    except DomainError as exc:
        return api_error_response(exc)
    return Response(body, status=code)


class OrderFilterSet(filters.FilterSet):
    status = filters.ChoiceFilter(choices=OrderStatus.choices)
    number = filters.CharFilter(field_name="number")
    start = filters.IsoDateTimeFilter(field_name="placed_at", lookup_expr="gte")
    end = filters.IsoDateTimeFilter(field_name="placed_at", lookup_expr="lte")

    class Meta:
        model = Order
        fields = ["status", "number", "start", "end"]


class DefaultPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = "page_size"


class OrderListView(generics.ListAPIView):
    """List authenticated user's orders, newest first.

    Filters:
    - `status`: one of the OrderStatus values
    - `number`: exact match of order number
    - `start`: ISO date/time; `placed_at >= start`
    - `end`: ISO date/time; `placed_at <= end`
    """

    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer
    pagination_class = DefaultPagination
    filterset_class = OrderFilterSet
    ordering_fields = ["placed_at", "id", "total_amount"]
    search_fields = ["number"]
    throttle_scope = "orders"

    def get_queryset(self):
        return (
            Order.objects.filter(user_id=self.request.user.id)
            .select_related("discount_code", "shipping_address")
            .prefetch_related("items")
            .order_by("-id")
        )

    @extend_schema(
        tags=["Orders"],
        summary="List orders",
        description="List current user's orders with optional filters and pagination.",
        parameters=[
            OpenApiParameter(name="page", description="Page number", required=False, type=int),
            OpenApiParameter(name="page_size", description="Items per page", required=False, type=int),
        ],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class CheckoutView(APIView):
    """Convert the authenticated user's cart into an order.

    Idempotent when `Idempotency-Key` is provided: a repeated request replays
    the stored response instead of placing a second order.
    """

    permission_classes = [IsAuthenticated]
    throttle_scope = "checkout"

    @extend_schema(
        tags=["Orders"],
        summary="Checkout",
        description=(
            "Creates an order from the cart, applying the optional discount code and binding the shipping address. "
            "When `payment_method` is given a pending payment for the order total is recorded."
        ),
        parameters=[IDEMPOTENCY_HEADER],
        request=CheckoutSerializer,
        responses={201: OrderSerializer, 400: ErrorSerializer, 404: ErrorSerializer, 409: ErrorSerializer},
        examples=[
            OpenApiExample(
                "Checkout with discount",
                value={"shipping_address_id": 3, "discount_code": "SAVE10", "payment_method": "card"},
                request_only=True,
            ),
            OpenApiExample("Created", value=ORDER_EXAMPLE, response_only=True),
            OpenApiExample(
                "Empty cart",
                value={"detail": "empty cart", "code": "invalid_operation"},
                response_only=True,
                status_codes=["400"],
            ),
        ],
    )
    def post(self, request):
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        params = serializer.validated_data

        def _handler():
            order = create_order(
                user_id=request.user.id,
                shipping_address_id=params["shipping_address_id"],
                discount_code=params.get("discount_code"),
                payment_method=params.get("payment_method"),
            )
            return OrderSerializer(order, context={"request": request}).data, status.HTTP_201_CREATED

        return _respond(request, _handler, user=request.user, request_hash=compute_request_hash(dict(params)))


class OrderDetailView(generics.RetrieveAPIView):
    """Retrieve a single order for the authenticated user."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "orders"
    serializer_class = OrderSerializer

    def get_queryset(self):
        return Order.objects.filter(user_id=self.request.user.id).select_related("discount_code", "shipping_address")

    def get_object(self):
        try:
            return self.get_queryset().get(id=int(self.kwargs["order_id"]))
        except (Order.DoesNotExist, ValueError):
            raise Http404("Not found.")

    @extend_schema(
        tags=["Orders"],
        summary="Get order detail",
        examples=[OpenApiExample("Order", value=ORDER_EXAMPLE, response_only=True)],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class OrderShippingAddressView(APIView):
    """Read or replace the shipping address bound to an order."""

    permission_classes = [IsAuthenticated]

    @property
    def throttle_scope(self) -> str:
        return "orders" if self.request.method in ("GET", "HEAD") else "orders_write"

    @extend_schema(
        tags=["Orders"],
        summary="Get order shipping address",
        description="Returns 404 when the order has no shipping address assigned.",
        responses={200: ShippingAddressSerializer, 404: ErrorSerializer},
    )
    def get(self, request, order_id: int):
        order = _owned_order(request, order_id)
        address = get_order_shipping_address(order.id)
        if address is None:
            return Response(
                {"detail": "Shipping address not assigned", "code": "not_found"},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(ShippingAddressSerializer(address).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Orders"],
        summary="Assign order shipping address",
        description="Rebinds the shipping address of an order that has not been paid yet.",
        request=AssignAddressSerializer,
        responses={200: ShippingAddressSerializer, 400: ErrorSerializer, 404: ErrorSerializer},
        examples=[OpenApiExample("Assign", value={"address_id": 4}, request_only=True)],
    )
    def put(self, request, order_id: int):
        order = _owned_order(request, order_id)
        serializer = AssignAddressSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            order = assign_address_to_order(order_id=order.id, address_id=serializer.validated_data["address_id"])
        except DomainError as exc:
            return api_error_response(exc)
        return Response(ShippingAddressSerializer(order.shipping_address).data, status=status.HTTP_200_OK)


class OrderCancelView(APIView):
    """Cancel an order for the authenticated owner.

    Idempotent when `Idempotency-Key` is provided. Returns 409 on key reuse with different payload.
    """

    permission_classes = [IsAuthenticated]
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Orders"],
        summary="Cancel order",
        description="Cancels the order unless it has shipped. Cancelling a canceled order is a no-op.",
        parameters=[IDEMPOTENCY_HEADER],
        request=None,
        responses={200: OrderSerializer, 400: ErrorSerializer},
        examples=[
            OpenApiExample("Canceled", value={"id": 1, "status": "canceled"}, response_only=True),
            OpenApiExample(
                "Shipped",
                value={"detail": "Cannot cancel from status shipped", "code": "invalid_transition"},
                response_only=True,
                status_codes=["400"],
            ),
        ],
    )
    def post(self, request, order_id: int):
        order = _owned_order(request, order_id)

        def _handler():
            updated = cancel_order(order)
            return OrderSerializer(updated, context={"request": request}).data, status.HTTP_200_OK

        return _respond(
            request, _handler, user=request.user, request_hash=compute_request_hash(getattr(request, "data", None))
        )


class OrderPaymentWebhookView(APIView):
    """Webhook endpoint settling order payments from payment provider events.

    When `PAYMENT_WEBHOOK_SECRET` is configured the request must carry it in
    the `X-Webhook-Secret` header. Idempotent when `Idempotency-Key` is provided.
    """

    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Orders"],
        summary="Payment webhook",
        description=(
            "Consumes a payment provider webhook.\n"
            "`payment_succeeded` completes the order's pending payment and marks the order paid; "
            "`payment_failed` marks the payment failed and leaves the order unchanged."
        ),
        parameters=[
            IDEMPOTENCY_HEADER,
            OpenApiParameter(
                name="X-Webhook-Secret",
                location=OpenApiParameter.HEADER,
                required=False,
                description="Shared secret, required when the server has one configured",
                type=str,
            ),
        ],
        request=PaymentWebhookSerializer,
        responses={200: OrderSerializer, 400: ErrorSerializer, 403: ErrorSerializer, 404: ErrorSerializer},
        examples=[
            OpenApiExample(
                "Webhook Success",
                value={"order_id": 123, "event": "payment_succeeded"},
                request_only=True,
            ),
            OpenApiExample("Paid", value={"id": 123, "status": "paid"}, response_only=True),
        ],
    )
    def post(self, request):
        secret = getattr(settings, "PAYMENT_WEBHOOK_SECRET", "")
        if secret and not hmac.compare_digest(str(request.headers.get("X-Webhook-Secret", "")), secret):
            return Response({"detail": "Invalid webhook secret", "code": "forbidden"}, status=status.HTTP_403_FORBIDDEN)

        serializer = PaymentWebhookSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            order = Order.objects.get(pk=serializer.validated_data["order_id"])
        except Order.DoesNotExist:
            raise Http404
        succeeded = serializer.validated_data["event"] == PaymentWebhookSerializer.EVENT_SUCCEEDED

        def _handler():
            capture_payment(order, succeeded=succeeded)
            order.refresh_from_db()
            return OrderSerializer(order, context={"request": request}).data, status.HTTP_200_OK

        return _respond(
            request, _handler, user=None, request_hash=compute_request_hash(dict(serializer.validated_data))
        )

"""DRF serializers for Orders.

Order amounts are read from the persisted columns; they are fixed at
checkout and never recomputed from current prices.
"""

from customer.serializers import ShippingAddressSerializer
from rest_framework import serializers

from .lifecycle import allowed_order_events, is_terminal
from .models import Order, OrderItem, Payment


class OrderItemSerializer(serializers.ModelSerializer):
    """API representation of an order line item."""

    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "variant",
            "product_title",
            "variant_sku",
            "quantity",
            "unit_price",
            "line_total",
        ]
        read_only_fields = fields


class PaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = ["id", "method", "amount", "status", "created_at", "updated_at"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """API representation for an order."""

    items = OrderItemSerializer(many=True, read_only=True)
    discount_code = serializers.SlugRelatedField(slug_field="code", read_only=True)
    has_discount = serializers.BooleanField(read_only=True)
    shipping_address = ShippingAddressSerializer(read_only=True)
    payment = serializers.SerializerMethodField()
    allowed_events = serializers.SerializerMethodField()
    is_final = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "number",
            "status",
            "placed_at",
            "items",
            "subtotal_amount",
            "discount_amount",
            "total_amount",
            "discount_code",
            "has_discount",
            "shipping_address",
            "payment",
            "allowed_events",
            "is_final",
        ]
        read_only_fields = fields

    def get_payment(self, obj: Order):
        payment = Payment.objects.filter(order_id=obj.id).first()
        if payment is None:
            return None
        return PaymentSerializer(payment).data

    def get_allowed_events(self, obj: Order) -> list[str]:
        return allowed_order_events(obj.status)

    def get_is_final(self, obj: Order) -> bool:
        return is_terminal(obj.status)


class CheckoutSerializer(serializers.Serializer):
    """Input for converting the cart into an order."""

    shipping_address_id = serializers.IntegerField()
    discount_code = serializers.CharField(max_length=30, required=False, allow_blank=True, allow_null=True)
    payment_method = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)


class AssignAddressSerializer(serializers.Serializer):
    address_id = serializers.IntegerField()


class PaymentWebhookSerializer(serializers.Serializer):
    EVENT_SUCCEEDED = "payment_succeeded"
    EVENT_FAILED = "payment_failed"

    order_id = serializers.IntegerField()
    event = serializers.ChoiceField(choices=[EVENT_SUCCEEDED, EVENT_FAILED])

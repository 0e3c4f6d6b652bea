"""Cart serializers for read and write operations."""

from rest_framework import serializers

from .models import CartItem
from .selectors import cart_lines, cart_totals
from .services import add_item, update_item_quantity


class CartItemReadSerializer(serializers.ModelSerializer):
    """Read serializer for a cart item priced at the variant's current price."""

    variant_id = serializers.IntegerField(source="variant.id")
    sku = serializers.CharField(source="variant.sku")
    product_title = serializers.CharField(source="variant.product.title")
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True, allow_null=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True, allow_null=True)

    class Meta:
        model = CartItem
        fields = [
            "id",
            "variant_id",
            "sku",
            "product_title",
            "quantity",
            "unit_price",
            "line_total",
        ]


class CartReadSerializer(serializers.Serializer):
    """Cart summary: lines at current prices plus totals.

    `unpriced_items` counts lines whose variant has no price anywhere; a cart
    with any of them cannot be checked out.
    """

    id = serializers.IntegerField()
    items = CartItemReadSerializer(many=True)
    item_count = serializers.IntegerField()
    unpriced_items = serializers.IntegerField()
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    checkout_ready = serializers.BooleanField()

    @classmethod
    def from_cart(cls, *, cart):
        lines = cart_lines(cart=cart)
        totals = cart_totals(cart=cart)
        return cls(
            {
                "id": cart.id,
                "items": lines,
                **totals,
                "checkout_ready": bool(lines) and totals["unpriced_items"] == 0,
            }
        )


class AddItemSerializer(serializers.Serializer):
    """Write serializer for adding an item to the cart."""

    variant_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, default=1)

    def create(self, validated_data):  # type: ignore[override]
        user = self.context["request"].user
        return add_item(user=user, **validated_data)


class UpdateItemQuantitySerializer(serializers.Serializer):
    """Write serializer for updating a cart item quantity."""

    quantity = serializers.IntegerField(min_value=1)

    def update(self, instance, validated_data):  # type: ignore[override]
        user = self.context["request"].user
        return update_item_quantity(user=user, item_id=instance.id, quantity=validated_data["quantity"])

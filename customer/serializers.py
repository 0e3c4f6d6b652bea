"""Serializers for the customer domain."""

from __future__ import annotations

from drf_spectacular.utils import OpenApiExample, extend_schema_serializer
from rest_framework import serializers

from .models import ShippingAddress

__all__ = ["ShippingAddressSerializer"]


@extend_schema_serializer(
    examples=[
        OpenApiExample(
            "Home address",
            value={
                "id": 10,
                "title": "Home",
                "address_type": "home",
                "street": "123 Main St",
                "city": "Springfield",
                "state": "IL",
                "zip_code": "62704",
                "country": "US",
                "in_use": False,
            },
            response_only=True,
        ),
    ]
)
class ShippingAddressSerializer(serializers.ModelSerializer):
    """Serialize a shipping address.

    `in_use` reports whether any order references the address; such
    addresses cannot be deleted.
    """

    in_use = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = ShippingAddress
        fields = (
            "id",
            "title",
            "address_type",
            "street",
            "city",
            "state",
            "zip_code",
            "country",
            "in_use",
        )
        read_only_fields = ("id", "in_use")

    def get_in_use(self, obj: ShippingAddress) -> bool:
        return obj.orders.exists()

    def validate_title(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Title cannot be blank")
        return value

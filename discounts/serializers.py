"""Serializers for the discount preview endpoint."""

from rest_framework import serializers


class DiscountPreviewQuerySerializer(serializers.Serializer):
    code = serializers.CharField(max_length=30)

    def validate_code(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Code cannot be blank")
        return value


class DiscountPreviewSerializer(serializers.Serializer):
    """What a code would take off the current cart."""

    code = serializers.CharField()
    applicable = serializers.BooleanField()
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)
    discount = serializers.DecimalField(max_digits=12, decimal_places=2)
    total = serializers.DecimalField(max_digits=12, decimal_places=2)

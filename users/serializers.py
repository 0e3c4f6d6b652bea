from customer.selectors import count_addresses, get_default_address
from django.contrib.auth import get_user_model
from rest_framework import serializers


class UserMeSerializer(serializers.ModelSerializer):
    """Profile of the signed-in user plus the address book summary checkout needs."""

    address_count = serializers.SerializerMethodField()
    default_address_id = serializers.SerializerMethodField()

    class Meta:
        model = get_user_model()
        fields = ["id", "username", "email", "first_name", "last_name", "address_count", "default_address_id"]
        read_only_fields = fields

    def get_address_count(self, obj) -> int:
        return count_addresses(obj.id)

    def get_default_address_id(self, obj) -> int | None:
        address = get_default_address(obj.id)
        return address.id if address is not None else None

"""Customer domain models.

A user's address book. Orders reference a shipping address, and checkout
requires that the address belongs to the purchasing user.
"""

from common.choices import AddressType
from django.conf import settings
from django.core.validators import RegexValidator
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class ShippingAddress(TimeStampedModel):
    """Delivery address owned by exactly one user."""

    TYPE_HOME = AddressType.HOME
    TYPE_OFFICE = AddressType.OFFICE
    TYPE_PICKUP = AddressType.PICKUP
    TYPE_CHOICES = AddressType.choices

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="shipping_addresses")
    title = models.CharField(max_length=120, help_text="Label shown at checkout, e.g. 'Home'")
    address_type = models.CharField(max_length=16, choices=TYPE_CHOICES, default=TYPE_HOME)
    street = models.CharField(max_length=200)
    city = models.CharField(max_length=80)
    state = models.CharField(max_length=80)
    zip_code = models.CharField(
        max_length=12,
        validators=[RegexValidator(r"^[A-Za-z0-9\- ]{1,12}$", message="Use standard alphanumeric postal/zip code")],
    )
    country = models.CharField(max_length=80)

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["user", "address_type"], name="address_user_type_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "street", "city", "zip_code", "country"],
                name="unique_shipping_address_per_user",
            )
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.title} - {self.street}, {self.city}, {self.state} {self.zip_code}, {self.country}"

"""Cart app models.

Each user owns exactly one cart. The cart row doubles as the per-user lock
taken by cart mutations and by checkout; it is emptied on checkout, never
deleted.
"""

from decimal import Decimal
from typing import Optional

from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Cart(TimeStampedModel):
    """Shopping cart bound to a user."""

    user = models.OneToOneField(settings.AUTH_USER_MODEL, related_name="cart", on_delete=models.CASCADE)

    class Meta:
        ordering = ["-updated_at"]

    def __str__(self) -> str:  # pragma: no cover
        return f"Cart#{self.id} ({self.user_id})"


class CartItem(TimeStampedModel):
    """Line item in a shopping cart for a product variant.

    No price is stored; the variant's current price is read on display and
    again at checkout.
    """

    cart = models.ForeignKey(Cart, related_name="items", on_delete=models.CASCADE)
    variant = models.ForeignKey("catalog.ProductVariant", related_name="cart_items", on_delete=models.CASCADE)
    quantity = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["cart", "variant"], name="unique_variant_per_cart"),
            models.CheckConstraint(
                name="quantity_positive",
                condition=models.Q(quantity__gte=1),
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"CartItem#{self.id} cart={self.cart_id} variant={self.variant_id} qty={self.quantity}"

    @property
    def unit_price(self) -> Optional[Decimal]:
        return self.variant.current_price

    @property
    def line_total(self) -> Optional[Decimal]:
        price = self.unit_price
        if price is None:
            return None
        return price * Decimal(int(self.quantity))

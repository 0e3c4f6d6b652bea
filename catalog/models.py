"""Catalog app models.

Only the pieces checkout consumes live here: products and their purchasable
variants. A variant's price is authoritative only at the moment it is read.
"""

from decimal import Decimal

from common.choices import ActiveInactive, DraftPublished
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Product(TimeStampedModel):
    """Core product entity carrying the base price shared by its variants."""

    STATUS_DRAFT = DraftPublished.DRAFT
    STATUS_PUBLISHED = DraftPublished.PUBLISHED
    STATUS_CHOICES = DraftPublished.choices

    title = models.CharField(max_length=200)
    slug = models.SlugField(max_length=220, unique=True)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_DRAFT, db_index=True)
    base_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    class Meta:
        ordering = ["title"]
        constraints = [
            models.CheckConstraint(
                name="product_base_price_non_negative",
                condition=models.Q(base_price__gte=0) | models.Q(base_price__isnull=True),
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return self.title


class ProductVariant(TimeStampedModel):
    """Variant SKU under a product (e.g., size/color).

    `price` overrides the product's `base_price` when set.
    """

    STATUS_ACTIVE = ActiveInactive.ACTIVE
    STATUS_INACTIVE = ActiveInactive.INACTIVE
    STATUS_CHOICES = ActiveInactive.choices

    product = models.ForeignKey(Product, related_name="variants", on_delete=models.CASCADE)
    sku = models.CharField(max_length=64, unique=True)
    size = models.CharField(max_length=50, blank=True)
    color = models.CharField(max_length=30, blank=True)
    image_url = models.URLField(max_length=1000, blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_ACTIVE)

    class Meta:
        ordering = ["sku"]
        constraints = [
            models.CheckConstraint(
                name="variant_price_non_negative",
                condition=models.Q(price__gte=0) | models.Q(price__isnull=True),
            ),
        ]
        indexes = [
            models.Index(fields=["product", "status"], name="variant_product_status_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.product.title} [{self.sku}]"

    @property
    def current_price(self) -> Decimal | None:
        if self.price is not None:
            return self.price
        return self.product.base_price

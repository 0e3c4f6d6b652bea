"""Discount app models."""

import datetime
from decimal import Decimal

from common.choices import DiscountType
from django.core.validators import MinLengthValidator, MinValueValidator
from django.db import models
from django.utils import timezone


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class DiscountCode(TimeStampedModel):
    """Promotional code reducing an order's total.

    `discount_amount` is a currency amount for flat codes and a percentage
    (0-100) for percent codes. A code is applicable iff it is active and its
    expiry date has not passed.
    """

    TYPE_FLAT = DiscountType.FLAT
    TYPE_PERCENT = DiscountType.PERCENT
    TYPE_CHOICES = DiscountType.choices

    code = models.CharField(max_length=30, unique=True, validators=[MinLengthValidator(3)])
    discount_type = models.CharField(max_length=16, choices=TYPE_CHOICES, default=TYPE_FLAT)
    discount_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    expiry_date = models.DateField()
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        ordering = ["code"]
        constraints = [
            models.CheckConstraint(name="discount_amount_non_negative", condition=models.Q(discount_amount__gte=0)),
            models.CheckConstraint(
                name="discount_percent_at_most_100",
                condition=~models.Q(discount_type="percent") | models.Q(discount_amount__lte=100),
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return self.code

    def is_applicable(self, today: datetime.date | None = None) -> bool:
        today = today or timezone.localdate()
        return bool(self.is_active) and self.expiry_date >= today

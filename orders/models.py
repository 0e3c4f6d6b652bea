"""Order ledger models.

Orders are immutable snapshots of a checkout: line prices are copied from
the catalog at creation time and totals are stored, not recomputed.
"""

from decimal import Decimal

from common.choices import OrderStatus, PaymentStatus
from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Order(TimeStampedModel):
    """Purchase order capturing a snapshot of a user's checkout.

    Totals are denormalized to support reporting and auditability.
    `discount_amount` is the reduction actually applied, so
    ``total_amount == subtotal_amount - discount_amount`` always holds.
    """

    STATUS_CREATED = OrderStatus.CREATED
    STATUS_PAID = OrderStatus.PAID
    STATUS_SHIPPED = OrderStatus.SHIPPED
    STATUS_DELIVERED = OrderStatus.DELIVERED
    STATUS_CANCELED = OrderStatus.CANCELED
    STATUS_CHOICES = OrderStatus.choices

    user = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="orders", on_delete=models.CASCADE)
    number = models.CharField(max_length=32, unique=True, null=True, blank=True, db_index=True)
    placed_at = models.DateTimeField(db_index=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_CREATED, db_index=True)
    subtotal_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    discount_code = models.ForeignKey(
        "discounts.DiscountCode",
        related_name="orders",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
    )
    shipping_address = models.ForeignKey(
        "customer.ShippingAddress",
        related_name="orders",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
    )

    class Meta:
        ordering = ["-id"]
        indexes = [
            models.Index(fields=["user", "status", "placed_at"], name="order_user_status_placed_idx"),
        ]
        constraints = [
            models.CheckConstraint(name="order_total_non_negative", condition=models.Q(total_amount__gte=0)),
            models.CheckConstraint(name="order_subtotal_non_negative", condition=models.Q(subtotal_amount__gte=0)),
            models.CheckConstraint(name="order_discount_non_negative", condition=models.Q(discount_amount__gte=0)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Order#{self.id} user={self.user_id} status={self.status}"

    @property
    def has_discount(self) -> bool:
        return self.discount_code_id is not None


class OrderItem(TimeStampedModel):
    """Line item within an order.

    Snapshots core product info for auditability (title, SKU, unit price).
    """

    order = models.ForeignKey(Order, related_name="items", on_delete=models.CASCADE)
    variant = models.ForeignKey("catalog.ProductVariant", related_name="order_items", on_delete=models.PROTECT)
    product_title = models.CharField(max_length=200, blank=True)
    variant_sku = models.CharField(max_length=64, blank=True)
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["order", "variant"], name="orderitem_order_variant_idx"),
        ]
        constraints = [
            models.CheckConstraint(name="orderitem_price_non_negative", condition=models.Q(unit_price__gte=0)),
            models.CheckConstraint(name="orderitem_quantity_positive", condition=models.Q(quantity__gte=1)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"OrderItem#{self.id} order={self.order_id} variant={self.variant_id} qty={self.quantity}"

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * Decimal(int(self.quantity))


class Payment(TimeStampedModel):
    """Payment record for an order. Execution happens at an external provider."""

    STATUS_PENDING = PaymentStatus.PENDING
    STATUS_COMPLETED = PaymentStatus.COMPLETED
    STATUS_FAILED = PaymentStatus.FAILED
    STATUS_CHOICES = PaymentStatus.choices

    order = models.OneToOneField(Order, related_name="payment", on_delete=models.CASCADE)
    method = models.CharField(max_length=50)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)

    class Meta:
        ordering = ["-id"]
        constraints = [
            models.CheckConstraint(name="payment_amount_non_negative", condition=models.Q(amount__gte=0)),
            models.CheckConstraint(name="payment_method_not_blank", condition=~models.Q(method="")),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Payment#{self.id} order={self.order_id} status={self.status}"


class IdempotencyKey(TimeStampedModel):
    """Stores idempotent request results to prevent duplicate processing."""

    key = models.CharField(max_length=128)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.CASCADE)
    scope = models.CharField(max_length=128)
    path = models.CharField(max_length=255)
    method = models.CharField(max_length=16)
    request_hash = models.CharField(max_length=64, null=True, blank=True)
    response_code = models.IntegerField(null=True, blank=True)
    response_json = models.JSONField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["key", "scope", "path", "method"], name="uniq_idem_scope_path_method"),
        ]
        indexes = [
            models.Index(fields=["expires_at"], name="idem_expires_at_idx"),
        ]

"""Shared enumerations and choices used across apps."""

from django.db import models


class ActiveInactive(models.TextChoices):
    ACTIVE = "active", "Active"
    INACTIVE = "inactive", "Inactive"


class DraftPublished(models.TextChoices):
    DRAFT = "draft", "Draft"
    PUBLISHED = "published", "Published"


class OrderStatus(models.TextChoices):
    """Lifecycle statuses for orders.

    CREATED is assigned by checkout; every later state is reached through
    `orders.lifecycle.next_order_status`.
    """

    CREATED = "created", "Created"
    PAID = "paid", "Paid"
    SHIPPED = "shipped", "Shipped"
    DELIVERED = "delivered", "Delivered"
    CANCELED = "canceled", "Canceled"


class PaymentStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    COMPLETED = "completed", "Completed"
    FAILED = "failed", "Failed"


class AddressType(models.TextChoices):
    HOME = "home", "Home"
    OFFICE = "office", "Office"
    PICKUP = "pickup", "Pickup"


class DiscountType(models.TextChoices):
    """Shapes of promotional discount; each maps to a registered policy."""

    FLAT = "flat", "Flat amount"
    PERCENT = "percent", "Percentage"

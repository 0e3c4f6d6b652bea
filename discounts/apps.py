"""Django app configuration for the Discounts app."""

from django.apps import AppConfig


class DiscountsConfig(AppConfig):
    """AppConfig for the discount ledger (promotional codes)."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "discounts"

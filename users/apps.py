"""Django app configuration for the users app."""

from django.apps import AppConfig


class UsersConfig(AppConfig):
    """Authentication endpoints on top of the default user model."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "users"

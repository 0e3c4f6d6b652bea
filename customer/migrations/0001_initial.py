import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ShippingAddress",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("title", models.CharField(help_text="Label shown at checkout, e.g. 'Home'", max_length=120)),
                (
                    "address_type",
                    models.CharField(
                        choices=[("home", "Home"), ("office", "Office"), ("pickup", "Pickup")],
                        default="home",
                        max_length=16,
                    ),
                ),
                ("street", models.CharField(max_length=200)),
                ("city", models.CharField(max_length=80)),
                ("state", models.CharField(max_length=80)),
                (
                    "zip_code",
                    models.CharField(
                        max_length=12,
                        validators=[
                            django.core.validators.RegexValidator(
                                "^[A-Za-z0-9\\- ]{1,12}$", message="Use standard alphanumeric postal/zip code"
                            )
                        ],
                    ),
                ),
                ("country", models.CharField(max_length=80)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="shipping_addresses",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
                "indexes": [models.Index(fields=["user", "address_type"], name="address_user_type_idx")],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("user", "street", "city", "zip_code", "country"),
                        name="unique_shipping_address_per_user",
                    )
                ],
            },
        ),
    ]

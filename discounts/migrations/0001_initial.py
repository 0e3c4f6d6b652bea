from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="DiscountCode",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "code",
                    models.CharField(
                        max_length=30, unique=True, validators=[django.core.validators.MinLengthValidator(3)]
                    ),
                ),
                (
                    "discount_type",
                    models.CharField(
                        choices=[("flat", "Flat amount"), ("percent", "Percentage")], default="flat", max_length=16
                    ),
                ),
                (
                    "discount_amount",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                ("expiry_date", models.DateField()),
                ("is_active", models.BooleanField(db_index=True, default=True)),
            ],
            options={
                "ordering": ["code"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("discount_amount__gte", 0)), name="discount_amount_non_negative"
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("discount_type", "percent"), _negated=True),
                            ("discount_amount__lte", 100),
                            _connector="OR",
                        ),
                        name="discount_percent_at_most_100",
                    ),
                ],
            },
        ),
    ]

"""Seed demo discount codes for local development.

Creates a couple of fixed codes plus a batch of random ones. Randomness is
confined to this command; checkout never generates codes.
"""

import random
import string
from datetime import timedelta
from decimal import Decimal

from discounts.models import DiscountCode
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

FIXED_CODES = [
    {"code": "SAVE10", "discount_type": DiscountCode.TYPE_FLAT, "discount_amount": Decimal("10.00")},
    {"code": "TENOFF", "discount_type": DiscountCode.TYPE_PERCENT, "discount_amount": Decimal("10.00")},
]


class Command(BaseCommand):
    help = "Seed demo discount codes (fixed SAVE10/TENOFF plus random codes)"

    def add_arguments(self, parser):
        parser.add_argument("--count", type=int, default=5, help="Number of random codes to create")
        parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible data")

    @transaction.atomic
    def handle(self, *args, **options):
        rng = random.Random(options["seed"])
        today = timezone.localdate()
        created = 0

        for spec in FIXED_CODES:
            _, was_created = DiscountCode.objects.get_or_create(
                code=spec["code"],
                defaults={**spec, "expiry_date": today + timedelta(days=365), "is_active": True},
            )
            created += int(was_created)

        for _ in range(max(0, options["count"])):
            code = "".join(rng.choices(string.ascii_uppercase + string.digits, k=8))
            discount_type = rng.choice([DiscountCode.TYPE_FLAT, DiscountCode.TYPE_PERCENT])
            if discount_type == DiscountCode.TYPE_PERCENT:
                amount = Decimal(rng.randint(5, 50))
            else:
                amount = Decimal(rng.randint(100, 5000)) / Decimal(100)
            _, was_created = DiscountCode.objects.get_or_create(
                code=code,
                defaults={
                    "discount_type": discount_type,
                    "discount_amount": amount.quantize(Decimal("0.01")),
                    "expiry_date": today + timedelta(days=rng.randint(-30, 180)),
                    "is_active": rng.random() > 0.2,
                },
            )
            created += int(was_created)

        self.stdout.write(self.style.SUCCESS(f"Discount seed complete ({created} new codes)."))

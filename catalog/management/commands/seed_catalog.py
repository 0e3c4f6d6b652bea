"""Seed a small catalog for local development.

Creates a few products with variants. Re-running is idempotent; existing rows
are reused by slug/sku.
"""

from decimal import Decimal

from catalog.models import Product, ProductVariant
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils.text import slugify

PRODUCTS = [
    {
        "title": "Studio Monitor Speakers",
        "description": "High-fidelity nearfield monitors for accurate mixing.",
        "base_price": Decimal("299.99"),
        "variants": [
            {"sku": "SMS-BLK", "color": "Black", "size": "", "price": None},
            {"sku": "SMS-WHT", "color": "White", "size": "", "price": Decimal("309.99")},
        ],
    },
    {
        "title": "Merino Crew Sweater",
        "description": "Lightweight merino wool sweater.",
        "base_price": Decimal("79.00"),
        "variants": [
            {"sku": "MCS-S-NVY", "color": "Navy", "size": "S", "price": None},
            {"sku": "MCS-M-NVY", "color": "Navy", "size": "M", "price": None},
            {"sku": "MCS-L-GRY", "color": "Grey", "size": "L", "price": Decimal("84.00")},
        ],
    },
    {
        "title": "HDMI 2.1 Cable 2m",
        "description": "Ultra High Speed HDMI cable supporting 8K video.",
        "base_price": Decimal("19.99"),
        "variants": [
            {"sku": "HDMI-2M", "color": "Black", "size": "2m", "price": None},
        ],
    },
]


class Command(BaseCommand):
    help = "Seed initial catalog data (products and variants)"

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding catalog data...")
        created_variants = 0
        for p in PRODUCTS:
            prod, _ = Product.objects.get_or_create(
                slug=slugify(p["title"]),
                defaults={
                    "title": p["title"],
                    "description": p["description"],
                    "status": Product.STATUS_PUBLISHED,
                    "base_price": p["base_price"],
                },
            )
            for v in p["variants"]:
                _, created = ProductVariant.objects.get_or_create(
                    sku=v["sku"],
                    defaults={"product": prod, "color": v["color"], "size": v["size"], "price": v["price"]},
                )
                created_variants += int(created)

        self.stdout.write(self.style.SUCCESS(f"Catalog seed complete ({created_variants} new variants)."))

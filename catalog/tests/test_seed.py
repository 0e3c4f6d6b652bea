import pytest
from catalog.models import Product, ProductVariant
from django.core.management import call_command


@pytest.mark.django_db
def test_seed_catalog_is_rerunnable():
    call_command("seed_catalog")
    products, variants = Product.objects.count(), ProductVariant.objects.count()
    assert products == 3
    assert variants == 6

    call_command("seed_catalog")
    assert Product.objects.count() == products
    assert ProductVariant.objects.count() == variants


@pytest.mark.django_db
def test_seeded_variants_are_priced():
    call_command("seed_catalog")
    for variant in ProductVariant.objects.select_related("product"):
        assert variant.current_price is not None

from decimal import Decimal

import pytest
from cart.models import Cart
from cart.tests.factories import UserFactory
from catalog.tests.factories import ProductVariantFactory
from rest_framework.test import APIClient

pytestmark = pytest.mark.django_db


@pytest.fixture
def user():
    return UserFactory()


@pytest.fixture
def client(user):
    api = APIClient()
    api.force_authenticate(user=user)
    return api


def test_cart_detail_initial_empty(client):
    resp = client.get("/api/v1/cart/")
    assert resp.status_code == 200
    body = resp.json()
    assert "id" in body
    assert body["items"] == []
    assert body["item_count"] == 0
    assert body["subtotal"] == "0.00"
    assert body["total"] == "0.00"
    assert body["checkout_ready"] is False


def test_add_item_endpoint_creates_item(client):
    variant = ProductVariantFactory(price=Decimal("4.50"))

    resp = client.post("/api/v1/cart/items/", {"variant_id": variant.id, "quantity": 2}, format="json")
    assert resp.status_code == 201
    item_id = resp.json()["id"]

    body = client.get("/api/v1/cart/").json()
    assert len(body["items"]) == 1
    line = body["items"][0]
    assert line["id"] == item_id
    assert line["sku"] == variant.sku
    assert line["unit_price"] == "4.50"
    assert line["line_total"] == "9.00"
    assert body["subtotal"] == "9.00"
    assert body["unpriced_items"] == 0
    assert body["checkout_ready"] is True


def test_adding_same_variant_twice_increments(client):
    variant = ProductVariantFactory()
    client.post("/api/v1/cart/items/", {"variant_id": variant.id, "quantity": 1}, format="json")
    resp = client.post("/api/v1/cart/items/", {"variant_id": variant.id, "quantity": 2}, format="json")
    assert resp.status_code == 201
    assert resp.json()["quantity"] == 3


def test_add_unknown_variant_returns_404(client):
    resp = client.post("/api/v1/cart/items/", {"variant_id": 424242, "quantity": 1}, format="json")
    assert resp.status_code == 404
    assert resp.json()["code"] == "not_found"


def test_add_zero_quantity_is_rejected(client):
    variant = ProductVariantFactory()
    resp = client.post("/api/v1/cart/items/", {"variant_id": variant.id, "quantity": 0}, format="json")
    assert resp.status_code == 400


def test_update_item_quantity_endpoint(client):
    variant = ProductVariantFactory()
    item_id = client.post("/api/v1/cart/items/", {"variant_id": variant.id, "quantity": 2}, format="json").json()["id"]

    resp = client.patch(f"/api/v1/cart/items/{item_id}/", {"quantity": 3}, format="json")
    assert resp.status_code == 200
    assert resp.json() == {"id": item_id, "quantity": 3}


def test_delete_item_endpoint(client):
    variant = ProductVariantFactory()
    item_id = client.post("/api/v1/cart/items/", {"variant_id": variant.id, "quantity": 2}, format="json").json()["id"]

    resp = client.delete(f"/api/v1/cart/items/{item_id}/delete/")
    assert resp.status_code == 204
    assert client.get("/api/v1/cart/").json()["items"] == []


def test_clear_endpoint_keeps_cart(client, user):
    client.post("/api/v1/cart/items/", {"variant_id": ProductVariantFactory().id, "quantity": 1}, format="json")
    cart_id = Cart.objects.get(user=user).id

    resp = client.post("/api/v1/cart/clear/")
    assert resp.status_code == 200
    assert resp.json() == {"status": "cleared", "removed": 1}
    assert Cart.objects.filter(id=cart_id).exists()


def test_unauthenticated_requests_are_rejected():
    client = APIClient()
    assert client.get("/api/v1/cart/").status_code == 401
    assert client.post("/api/v1/cart/items/", {"variant_id": 1, "quantity": 1}, format="json").status_code == 401


def test_cross_user_item_access_returns_404(client):
    variant = ProductVariantFactory()
    item_id = client.post("/api/v1/cart/items/", {"variant_id": variant.id, "quantity": 2}, format="json").json()["id"]

    other = APIClient()
    other.force_authenticate(user=UserFactory())
    assert other.patch(f"/api/v1/cart/items/{item_id}/", {"quantity": 3}, format="json").status_code == 404
    assert other.delete(f"/api/v1/cart/items/{item_id}/delete/").status_code == 404

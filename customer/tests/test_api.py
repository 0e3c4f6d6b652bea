import pytest
from cart.tests.factories import UserFactory
from customer.models import ShippingAddress
from customer.tests.factories import ShippingAddressFactory
from orders.tests.factories import OrderFactory
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

pytestmark = pytest.mark.django_db

URL = "/api/v1/customer/addresses/"


@pytest.fixture
def user():
    return UserFactory()


@pytest.fixture
def auth_client(user):
    client = APIClient()
    access = AccessToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
    return client


def _payload(**overrides):
    data = {
        "title": "Home",
        "address_type": "home",
        "street": "123 Main St",
        "city": "Springfield",
        "state": "IL",
        "zip_code": "62704",
        "country": "US",
    }
    data.update(overrides)
    return data


def test_list_returns_only_own_addresses(auth_client, user):
    mine = ShippingAddressFactory(user=user)
    ShippingAddressFactory()

    resp = auth_client.get(URL)

    assert resp.status_code == 200
    ids = [row["id"] for row in resp.json()["results"]]
    assert ids == [mine.id]


def test_create_address(auth_client, user):
    resp = auth_client.post(URL, _payload(), format="json")

    assert resp.status_code == 201
    body = resp.json()
    assert body["in_use"] is False
    assert ShippingAddress.objects.get(id=body["id"]).user_id == user.id


def test_create_address_with_invalid_zip_is_rejected(auth_client):
    resp = auth_client.post(URL, _payload(zip_code="$$$"), format="json")
    assert resp.status_code == 400
    assert "zip_code" in resp.json()


def test_blank_title_is_rejected(auth_client):
    resp = auth_client.post(URL, _payload(title="   "), format="json")
    assert resp.status_code == 400


def test_patch_address(auth_client, user):
    address = ShippingAddressFactory(user=user)
    resp = auth_client.patch(f"{URL}{address.id}/", {"city": "Chicago"}, format="json")
    assert resp.status_code == 200
    assert resp.json()["city"] == "Chicago"


def test_other_users_address_is_not_found(auth_client):
    address = ShippingAddressFactory()
    assert auth_client.get(f"{URL}{address.id}/").status_code == 404
    assert auth_client.delete(f"{URL}{address.id}/").status_code == 404


def test_delete_unused_address(auth_client, user):
    address = ShippingAddressFactory(user=user)
    resp = auth_client.delete(f"{URL}{address.id}/")
    assert resp.status_code == 204
    assert not ShippingAddress.objects.filter(id=address.id).exists()


def test_delete_address_in_use_conflicts(auth_client, user):
    address = ShippingAddressFactory(user=user)
    OrderFactory(user=user, shipping_address=address)

    resp = auth_client.delete(f"{URL}{address.id}/")

    assert resp.status_code == 409
    assert resp.json()["code"] == "invalid_state"
    assert auth_client.get(f"{URL}{address.id}/").json()["in_use"] is True


def test_requires_authentication():
    assert APIClient().get(URL).status_code == 401

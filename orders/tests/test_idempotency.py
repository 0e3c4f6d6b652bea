from datetime import timedelta

import pytest
from cart.tests.factories import UserFactory
from django.core.management import call_command
from django.utils import timezone
from orders.models import IdempotencyKey
from orders.services import compute_request_hash, with_idempotency

pytestmark = pytest.mark.django_db


def _run(user, handler, key="k-1", request_hash=None):
    return with_idempotency(
        key=key,
        user=user,
        path="/api/v1/orders/checkout/",
        method="post",
        handler=handler,
        request_hash=request_hash,
    )


def test_stored_response_is_replayed_without_rerunning_handler():
    user = UserFactory()
    calls = []

    def handler():
        calls.append(1)
        return {"id": len(calls)}, 201

    assert _run(user, handler) == ({"id": 1}, 201)
    assert _run(user, handler) == ({"id": 1}, 201)
    assert len(calls) == 1


def test_keys_are_scoped_per_user():
    calls = []

    def handler():
        calls.append(1)
        return {"n": len(calls)}, 201

    _run(UserFactory(), handler)
    _run(UserFactory(), handler)
    assert len(calls) == 2


def test_handler_exception_releases_the_key():
    user = UserFactory()

    def boom():
        raise RuntimeError("provider down")

    with pytest.raises(RuntimeError):
        _run(user, boom)
    assert not IdempotencyKey.objects.filter(key="k-1").exists()

    assert _run(user, lambda: ({"ok": True}, 201)) == ({"ok": True}, 201)


def test_expired_key_runs_again():
    user = UserFactory()
    _run(user, lambda: ({"n": 1}, 201))
    IdempotencyKey.objects.update(expires_at=timezone.now() - timedelta(minutes=1))

    assert _run(user, lambda: ({"n": 2}, 201)) == ({"n": 2}, 201)


def test_ttl_follows_setting(settings):
    settings.IDEMPOTENCY_TTL_HOURS = 2
    user = UserFactory()
    _run(user, lambda: ({}, 201))
    idem = IdempotencyKey.objects.get(key="k-1")
    assert idem.expires_at - idem.created_at < timedelta(hours=2, minutes=1)
    assert idem.method == "POST"
    assert idem.scope == f"user:{user.id}"


def test_request_hash_is_order_insensitive():
    assert compute_request_hash({"a": 1, "b": 2}) == compute_request_hash({"b": 2, "a": 1})
    assert compute_request_hash({}) is None


def test_cleanup_command_deletes_only_expired_keys():
    user = UserFactory()
    _run(user, lambda: ({}, 201), key="fresh")
    _run(user, lambda: ({}, 201), key="stale")
    IdempotencyKey.objects.filter(key="stale").update(expires_at=timezone.now() - timedelta(hours=1))

    call_command("cleanup_idempotency", "--dry-run")
    assert IdempotencyKey.objects.count() == 2

    call_command("cleanup_idempotency")
    assert list(IdempotencyKey.objects.values_list("key", flat=True)) == ["fresh"]

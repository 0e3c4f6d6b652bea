from .base import BASE_DIR
from .base import REST_FRAMEWORK as BASE_REST_FRAMEWORK
from .base import *  # noqa

DEBUG = False

# Local SQLite file keeps tests independent of DATABASE_ENGINE in the environment
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "test_db.sqlite3",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

# Manifest storage needs collectstatic; plain storage is enough for tests
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}

# Relax throttling for tests to reduce flakiness
REST_FRAMEWORK = {**BASE_REST_FRAMEWORK}
REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {
    **BASE_REST_FRAMEWORK.get("DEFAULT_THROTTLE_RATES", {}),
    "user": "10000/min",
    "anon": "10000/min",
    "cart": "1000/min",
    "cart_write": "1000/min",
    "addresses": "1000/min",
    "addresses_write": "1000/min",
    "discounts": "1000/min",
    "orders": "1000/min",
    "orders_write": "1000/min",
    "checkout": "1000/min",
    "signin": "1000/min",
    "token_refresh": "1000/min",
    "profile": "1000/min",
}

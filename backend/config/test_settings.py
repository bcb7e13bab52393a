import os

os.environ.setdefault("PAYSTACK_USE_STUB", "true")
from .settings import *  # noqa: E402,F401,F403

DEBUG = False
SECRET_KEY = "test-secret-key"

DATABASES = {
    "default": env.db("TEST_DATABASE_URL", default="sqlite://:memory:"),  # noqa: F405
}

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
CACHES = {"default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"}}
PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

PAYSTACK_USE_STUB = True
PAYSTACK_SECRET_KEY = "sk_test_webhook_secret"
PAYSTACK_CALLBACK_URL = ""
PAYSTACK_CURRENCY = "NGN"
FRONTEND_URL = "https://app.test"

# Let app loggers reach the root logger so caplog can observe them.
for _logger in LOGGING["loggers"].values():  # noqa: F405
    _logger["propagate"] = True
    _logger["handlers"] = []

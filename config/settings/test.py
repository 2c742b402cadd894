# config/settings/test.py
from .base import *  # noqa

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

EMTCT_DUE_SOON_DAYS = 14
EMTCT_DEFAULT_FACILITY = "Central Hub"
EMTCT_DEFAULT_DISTRICT = "National"
EMTCT_STORE_KEY = "emtct_infants"
EMTCT_SEED_DEMO_DATA = False

LOGGING["loggers"]["emtct_core"]["level"] = "WARNING"

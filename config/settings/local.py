# config/settings/local.py
from .base import *  # noqa

DEBUG = os.getenv("DJANGO_DEBUG", "1") == "1"

# SQLite keeps local runs dependency-free; set DB_ENGINE=postgresql to use base settings.
if os.getenv("DB_ENGINE", "sqlite") == "sqlite":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": os.getenv("DB_NAME", str(BASE_DIR / "db.sqlite3")),
        }
    }

EMTCT_SEED_DEMO_DATA = os.getenv("EMTCT_SEED_DEMO_DATA", "1") == "1"

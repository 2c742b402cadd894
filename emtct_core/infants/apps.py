# emtct_core/infants/apps.py
from __future__ import annotations

from django.apps import AppConfig


class InfantsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "emtct_core.infants"

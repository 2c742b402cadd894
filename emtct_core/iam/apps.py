# emtct_core/iam/apps.py
from django.apps import AppConfig


class IamConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "emtct_core.iam"

    def ready(self) -> None:
        # registers the OpenAPI auth extension
        from emtct_core.iam import openapi  # noqa: F401

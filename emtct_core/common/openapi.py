# emtct_core/common/openapi.py
from __future__ import annotations

from drf_spectacular.openapi import AutoSchema


class EMTCTAutoSchema(AutoSchema):
    """
    Groups operations by Django app when a view does not set tags via extend_schema:
    emtct_core.infants.api.views -> "Infants".
    """

    def get_tags(self):
        module = getattr(self.view.__class__, "__module__", "") or ""
        parts = module.split(".")
        if len(parts) >= 2 and parts[0] == "emtct_core":
            return [parts[1].replace("_", " ").title()]
        return super().get_tags()

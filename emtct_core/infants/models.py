# emtct_core/infants/models.py
from __future__ import annotations

from django.db import models

from emtct_core.common.models import TimeStampedModel


class KeyValueEntry(TimeStampedModel):
    """
    Durable JSON document keyed by name.
    The infant register lives under settings.EMTCT_STORE_KEY as a list of record dicts.
    """
    key = models.CharField(max_length=128, unique=True)
    value = models.JSONField(default=list)

    class Meta:
        db_table = "infants_key_value_entry"

    def __str__(self) -> str:
        return self.key

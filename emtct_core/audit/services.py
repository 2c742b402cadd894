# emtct_core/audit/services.py
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Iterable

from django.db import transaction

from emtct_core.audit.models import AuditLogEntry


@dataclass(frozen=True)
class AuditEntry:
    timestamp: datetime
    user: str
    infant_id: str
    field: str
    old_value: str
    new_value: str

    def to_dict(self) -> dict:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data


def entry_from_row(row: AuditLogEntry) -> AuditEntry:
    return AuditEntry(
        timestamp=row.occurred_at,
        user=row.actor_email,
        infant_id=row.infant_id,
        field=row.field,
        old_value=row.old_value,
        new_value=row.new_value,
    )


class AuditService:
    """
    Central audit writer.
    Rows are append-only; one row per changed field.
    """

    @staticmethod
    @transaction.atomic
    def log_many(entries: Iterable[AuditEntry]) -> int:
        rows = [
            AuditLogEntry(
                occurred_at=e.timestamp,
                actor_email=e.user,
                infant_id=e.infant_id,
                field=e.field,
                old_value=e.old_value,
                new_value=e.new_value,
            )
            for e in entries
        ]
        AuditLogEntry.objects.bulk_create(rows)
        return len(rows)

    @staticmethod
    @transaction.atomic
    def clear() -> int:
        """Remove every audit row. Only used when the whole register is replaced."""
        deleted, _ = AuditLogEntry.objects.all().delete()
        return deleted

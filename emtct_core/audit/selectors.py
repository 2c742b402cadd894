# emtct_core/audit/selectors.py
from __future__ import annotations

from emtct_core.audit.models import AuditLogEntry
from emtct_core.audit.services import AuditEntry, entry_from_row


def list_audit_entries(*, infant_id: str | None = None) -> list[AuditEntry]:
    qs = AuditLogEntry.objects.all()
    if infant_id:
        qs = qs.filter(infant_id=infant_id)
    return [entry_from_row(row) for row in qs.order_by("id")]

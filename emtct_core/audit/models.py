# emtct_core/audit/models.py
from django.db import models


class AuditLogEntry(models.Model):
    """
    Immutable field-level change record for an infant.
    old_value / new_value hold JSON snapshots of the field before and after.
    """
    id = models.BigAutoField(primary_key=True)

    occurred_at = models.DateTimeField(db_index=True)
    actor_email = models.CharField(max_length=254, db_index=True)
    infant_id = models.CharField(max_length=32, db_index=True)
    field = models.CharField(max_length=64)

    old_value = models.TextField()
    new_value = models.TextField()

    class Meta:
        db_table = "audit_log_entry"
        ordering = ["id"]
        indexes = [
            models.Index(fields=["infant_id", "occurred_at"], name="audit_log_infant_time_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.infant_id}.{self.field} by {self.actor_email}"

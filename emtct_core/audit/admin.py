# emtct_core/audit/admin.py
from django.contrib import admin

from emtct_core.audit.models import AuditLogEntry


@admin.register(AuditLogEntry)
class AuditLogEntryAdmin(admin.ModelAdmin):
    list_display = ("occurred_at", "actor_email", "infant_id", "field", "old_value", "new_value")
    list_filter = ("field",)
    search_fields = ("infant_id", "actor_email")
    readonly_fields = ("occurred_at", "actor_email", "infant_id", "field", "old_value", "new_value")
    ordering = ("-occurred_at",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

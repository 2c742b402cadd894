# emtct_core/infants/admin.py
from django.contrib import admin

from emtct_core.infants.models import KeyValueEntry


@admin.register(KeyValueEntry)
class KeyValueEntryAdmin(admin.ModelAdmin):
    list_display = ("key", "created_at", "updated_at")
    search_fields = ("key",)
    readonly_fields = ("created_at", "updated_at")

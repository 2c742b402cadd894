# emtct_core/audit/api/serializers.py
from rest_framework import serializers


class AuditEntrySerializer(serializers.Serializer):
    timestamp = serializers.DateTimeField(read_only=True)
    user = serializers.CharField(read_only=True)
    infant_id = serializers.CharField(read_only=True)
    field = serializers.CharField(read_only=True)
    old_value = serializers.CharField(read_only=True)
    new_value = serializers.CharField(read_only=True)

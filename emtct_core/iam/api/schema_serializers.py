# emtct_core/iam/api/schema_serializers.py
from __future__ import annotations

from rest_framework import serializers


class LoginRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()


class FocalPointSerializer(serializers.Serializer):
    email = serializers.EmailField()
    name = serializers.CharField()
    role = serializers.CharField()
    facility = serializers.CharField(allow_null=True, required=False)
    district = serializers.CharField(allow_null=True, required=False)
    status = serializers.CharField()


class LoginResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()
    user = FocalPointSerializer()
    access = serializers.CharField()
    refresh = serializers.CharField()


class RefreshResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()
    access = serializers.CharField()


class LogoutResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()


class ScopeSerializer(serializers.Serializer):
    level = serializers.CharField()
    facility = serializers.CharField(allow_null=True, required=False)
    district = serializers.CharField(allow_null=True, required=False)


class MeResponseSerializer(serializers.Serializer):
    user = FocalPointSerializer()
    scope = ScopeSerializer()


class FacilitySerializer(serializers.Serializer):
    name = serializers.CharField()
    code = serializers.CharField()
    district = serializers.CharField()


class DistrictSerializer(serializers.Serializer):
    name = serializers.CharField()
    region = serializers.CharField()


class DirectoryResponseSerializer(serializers.Serializer):
    users = FocalPointSerializer(many=True)
    facilities = FacilitySerializer(many=True)
    districts = DistrictSerializer(many=True)

# emtct_core/audit/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from emtct_core.audit.api.serializers import AuditEntrySerializer
from emtct_core.common.permissions import FocalPointPermission
from emtct_core.infants.wiring import get_repository


class AuditEntryViewSet(viewsets.ViewSet):
    """
    Field-level change history, limited to infants the caller can see.
    """
    permission_classes = [IsAuthenticated, FocalPointPermission]
    serializer_class = AuditEntrySerializer

    @extend_schema(
        tags=["Audit"],
        responses={200: AuditEntrySerializer(many=True)},
        parameters=[
            OpenApiParameter(
                name="infant_id",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Only entries for this infant (e.g. INF-1001).",
            ),
        ],
    )
    def list(self, request):
        entries = get_repository().audit_for_user(
            request.user,
            infant_id=request.query_params.get("infant_id") or None,
        )
        return Response(AuditEntrySerializer(entries, many=True).data, status=status.HTTP_200_OK)

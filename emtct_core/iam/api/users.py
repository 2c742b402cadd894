# emtct_core/iam/api/users.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from emtct_core.common.permissions import AdminOnlyPermission
from emtct_core.facilities.registry import MOCK_DISTRICTS, list_facilities
from emtct_core.iam.api.schema_serializers import DirectoryResponseSerializer
from emtct_core.iam.directory import MOCK_USERS


class UserDirectoryView(APIView):
    """Focal points, facilities and districts known to the system (admin only)."""
    permission_classes = [IsAuthenticated, AdminOnlyPermission]

    @extend_schema(
        parameters=[
            OpenApiParameter("district", OpenApiTypes.STR, OpenApiParameter.QUERY, required=False,
                             description="Only list facilities in this district."),
        ],
        responses={200: DirectoryResponseSerializer},
        tags=["IAM"],
    )
    def get(self, request):
        return Response(
            {
                "users": [u.to_dict() for u in MOCK_USERS],
                "facilities": [f.to_dict() for f in list_facilities(district=request.query_params.get("district"))],
                "districts": [d.to_dict() for d in MOCK_DISTRICTS],
            },
            status=status.HTTP_200_OK,
        )

# emtct_core/iam/api/me.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from emtct_core.iam.api.schema_serializers import MeResponseSerializer
from emtct_core.iam.directory import UserRole

SCOPE_LEVELS = {
    UserRole.FACILITY: "facility",
    UserRole.DISTRICT: "district",
    UserRole.ADMIN: "national",
}


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: MeResponseSerializer}, tags=["IAM"])
    def get(self, request):
        user = request.user
        return Response(
            {
                "user": user.to_dict(),
                "scope": {
                    "level": SCOPE_LEVELS.get(user.role, "none"),
                    "facility": user.facility,
                    "district": user.district,
                },
            },
            status=status.HTTP_200_OK,
        )

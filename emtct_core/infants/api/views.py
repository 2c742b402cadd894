# emtct_core/infants/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from emtct_core.common.api.exceptions import (
    DomainNotFound,
    DomainPermissionDenied,
    DomainValidationError,
    PersistenceUnavailable,
)
from emtct_core.common.permissions import FocalPointPermission
from emtct_core.iam.scope import sees_caseload, sees_names
from emtct_core.infants.api.serializers import (
    ChangeStatusSerializer,
    DashboardSerializer,
    FinalOutcomeSerializer,
    InfantRegisterSerializer,
    InfantSerializer,
    RecordTestSerializer,
    ReminderSerializer,
)
from emtct_core.infants.errors import InfantNotFound, InvalidRegistration, OutOfScope, PersistenceFailed
from emtct_core.infants.results import Result
from emtct_core.infants.selectors import filter_infants, parse_as_of
from emtct_core.infants.stats import facility_caseload, status_breakdown
from emtct_core.infants.updates import ChangeStatus, InfantDraft, RecordFinalOutcome, RecordTestResult
from emtct_core.infants.wiring import get_repository

_ERROR_TYPES = (
    (InfantNotFound, DomainNotFound),
    (OutOfScope, DomainPermissionDenied),
    (InvalidRegistration, DomainValidationError),
    (PersistenceFailed, PersistenceUnavailable),
)

AS_OF_PARAM = OpenApiParameter(
    name="as_of",
    type=OpenApiTypes.STR,
    location=OpenApiParameter.QUERY,
    required=False,
    description="Evaluate due/overdue as of this date (YYYY-MM-DD) or ISO datetime. Defaults to now.",
)


def unwrap(result: Result):
    """Return the value of a successful Result or raise the matching API error."""
    if result.ok:
        return result.value
    err = result.error
    for domain_type, api_type in _ERROR_TYPES:
        if isinstance(err, domain_type):
            raise api_type(detail=err.message, code=err.code, details=err.details)
    raise DomainValidationError(detail=err.message, code=err.code, details=err.details)


def output_context(request, repo, now=None) -> dict:
    return {
        "request": request,
        "show_names": sees_names(request.user),
        "now": now or repo.clock(),
        "window_days": repo.due_soon_days,
    }


class InfantViewSet(viewsets.ViewSet):
    """
    Scoped infant register.
    Every lookup and mutation goes through the repository, which applies
    facility / district scope and returns explicit refusals.
    """
    permission_classes = [IsAuthenticated, FocalPointPermission]
    serializer_class = InfantSerializer

    def _respond(self, request, repo, result: Result, *, http_status=status.HTTP_200_OK) -> Response:
        infant = unwrap(result)
        return Response(InfantSerializer(infant, context=output_context(request, repo)).data, status=http_status)

    @extend_schema(
        parameters=[
            OpenApiParameter("q", OpenApiTypes.STR, OpenApiParameter.QUERY, required=False,
                             description="Case-insensitive match on infant id or name."),
            OpenApiParameter("status", OpenApiTypes.STR, OpenApiParameter.QUERY, required=False,
                             description="Infant status, or All."),
        ],
        responses={200: InfantSerializer(many=True)},
    )
    def list(self, request):
        repo = get_repository()
        rows = filter_infants(
            repo.list_for_user(request.user),
            q=request.query_params.get("q"),
            status=request.query_params.get("status"),
        )
        return Response(InfantSerializer(rows, many=True, context=output_context(request, repo)).data)

    @extend_schema(responses={200: InfantSerializer})
    def retrieve(self, request, pk=None):
        repo = get_repository()
        return self._respond(request, repo, repo.get_for_user(request.user, pk))

    @extend_schema(request=InfantRegisterSerializer, responses={201: InfantSerializer})
    def create(self, request):
        ser = InfantRegisterSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        repo = get_repository()
        result = repo.register_infant(request.user, InfantDraft(**ser.validated_data))
        return self._respond(request, repo, result, http_status=status.HTTP_201_CREATED)

    @extend_schema(request=RecordTestSerializer, responses={200: InfantSerializer})
    @action(detail=True, methods=["post"], url_path="tests")
    def record_test(self, request, pk=None):
        ser = RecordTestSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        repo = get_repository()
        result = repo.update_infant(request.user, pk, RecordTestResult(**ser.validated_data))
        return self._respond(request, repo, result)

    @extend_schema(request=ChangeStatusSerializer, responses={200: InfantSerializer})
    @action(detail=True, methods=["post"], url_path="status")
    def change_status(self, request, pk=None):
        ser = ChangeStatusSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        repo = get_repository()
        result = repo.update_infant(request.user, pk, ChangeStatus(**ser.validated_data))
        return self._respond(request, repo, result)

    @extend_schema(request=FinalOutcomeSerializer, responses={200: InfantSerializer})
    @action(detail=True, methods=["post"], url_path="final-outcome")
    def final_outcome(self, request, pk=None):
        ser = FinalOutcomeSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        repo = get_repository()
        result = repo.update_infant(request.user, pk, RecordFinalOutcome(**ser.validated_data))
        return self._respond(request, repo, result)


class DashboardView(APIView):
    permission_classes = [IsAuthenticated, FocalPointPermission]

    @extend_schema(parameters=[AS_OF_PARAM], responses={200: DashboardSerializer})
    def get(self, request):
        repo = get_repository()
        now = parse_as_of(request.query_params.get("as_of")) or repo.clock()
        infants = repo.list_for_user(request.user)
        context = output_context(request, repo, now)

        return Response(
            {
                "as_of": now.isoformat(),
                "stats": repo.stats_for_user(request.user, now).to_dict(),
                "reminders": ReminderSerializer(repo.reminders_for_user(request.user, now), many=True, context=context).data,
                "status_breakdown": status_breakdown(infants),
                "facility_caseload": facility_caseload(infants) if sees_caseload(request.user) else [],
            },
            status=status.HTTP_200_OK,
        )


class RemindersView(APIView):
    permission_classes = [IsAuthenticated, FocalPointPermission]

    @extend_schema(parameters=[AS_OF_PARAM], responses={200: ReminderSerializer(many=True)})
    def get(self, request):
        repo = get_repository()
        now = parse_as_of(request.query_params.get("as_of")) or repo.clock()
        reminders = repo.reminders_for_user(request.user, now)
        return Response(ReminderSerializer(reminders, many=True, context=output_context(request, repo, now)).data)

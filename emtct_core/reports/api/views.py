# emtct_core/reports/api/views.py
from __future__ import annotations

import logging

from django.http import HttpResponse
from django.utils import timezone
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from emtct_core.common.permissions import FocalPointPermission
from emtct_core.infants.wiring import get_repository
from emtct_core.reports.exports import render_csv, render_printable, report_filename

logger = logging.getLogger(__name__)


class InfantCsvExportView(APIView):
    """Scoped register as CSV (one row per infant, N/A for missing results)."""
    permission_classes = [IsAuthenticated, FocalPointPermission]

    @extend_schema(tags=["Reports"], responses={(200, "text/csv"): OpenApiTypes.STR})
    def get(self, request):
        infants = get_repository().list_for_user(request.user)
        filename = report_filename(timezone.localdate())
        logger.info("CSV export of %d infants for %s", len(infants), request.user.email)

        response = HttpResponse(render_csv(infants), content_type="text/csv; charset=utf-8")
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        return response


class PrintableReportView(APIView):
    permission_classes = [IsAuthenticated, FocalPointPermission]

    @extend_schema(tags=["Reports"], responses={(200, "text/html"): OpenApiTypes.STR})
    def get(self, request):
        infants = get_repository().list_for_user(request.user)
        html = render_printable(request.user, infants, generated_at=timezone.now())
        return HttpResponse(html, content_type="text/html; charset=utf-8")

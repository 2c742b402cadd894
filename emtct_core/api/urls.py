# emtct_core/api/urls.py
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from emtct_core.audit.api.views import AuditEntryViewSet
from emtct_core.iam.api.auth import LoginView, LogoutView, RefreshView
from emtct_core.iam.api.me import MeView
from emtct_core.iam.api.users import UserDirectoryView
from emtct_core.infants.api.views import DashboardView, InfantViewSet, RemindersView
from emtct_core.reports.api.views import InfantCsvExportView, PrintableReportView

router = DefaultRouter()
router.register(r"infants", InfantViewSet, basename="infant")
router.register(r"audit/entries", AuditEntryViewSet, basename="audit-entry")

urlpatterns = [
    path("auth/login/", LoginView.as_view(), name="auth-login"),
    path("auth/refresh/", RefreshView.as_view(), name="auth-refresh"),
    path("auth/logout/", LogoutView.as_view(), name="auth-logout"),
    path("me/", MeView.as_view(), name="me"),
    path("users/", UserDirectoryView.as_view(), name="user-directory"),
    path("dashboard/", DashboardView.as_view(), name="dashboard"),
    path("reminders/", RemindersView.as_view(), name="reminders"),
    path("reports/infants.csv", InfantCsvExportView.as_view(), name="report-infants-csv"),
    path("reports/print/", PrintableReportView.as_view(), name="report-print"),
    path("", include(router.urls)),
]

# emtct_core/iam/api/auth.py
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any

from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from emtct_core.iam.api.schema_serializers import (
    LoginRequestSerializer,
    LoginResponseSerializer,
    LogoutResponseSerializer,
    RefreshResponseSerializer,
)
from emtct_core.iam.directory import find_user
from emtct_core.iam.tokens import issue_tokens

logger = logging.getLogger(__name__)


def _seconds(value: Any) -> int:
    """JWT lifetime setting (timedelta or seconds) -> cookie max_age."""
    if isinstance(value, timedelta):
        return int(value.total_seconds())
    return int(value)


def _cookie_names() -> tuple[str, str]:
    jwt_cfg = getattr(settings, "SIMPLE_JWT", {}) or {}
    return jwt_cfg.get("AUTH_COOKIE", "emtct_access"), jwt_cfg.get("AUTH_COOKIE_REFRESH", "emtct_refresh")


def _set_cookie(response: Response, name: str, value: str, lifetime) -> None:
    jwt_cfg = getattr(settings, "SIMPLE_JWT", {}) or {}
    response.set_cookie(
        name,
        value,
        max_age=_seconds(lifetime),
        httponly=bool(jwt_cfg.get("AUTH_COOKIE_HTTP_ONLY", True)),
        secure=bool(jwt_cfg.get("AUTH_COOKIE_SECURE", False)),
        samesite=jwt_cfg.get("AUTH_COOKIE_SAMESITE", "Lax"),
        path="/",
    )


def _set_auth_cookies(response: Response, *, access: str, refresh: str | None = None) -> None:
    jwt_cfg = getattr(settings, "SIMPLE_JWT", {}) or {}
    access_name, refresh_name = _cookie_names()
    _set_cookie(response, access_name, access, jwt_cfg.get("ACCESS_TOKEN_LIFETIME", timedelta(minutes=30)))
    if refresh is not None:
        _set_cookie(response, refresh_name, refresh, jwt_cfg.get("REFRESH_TOKEN_LIFETIME", timedelta(days=7)))


def _clear_auth_cookies(response: Response) -> None:
    access_name, refresh_name = _cookie_names()
    response.delete_cookie(access_name, path="/")
    response.delete_cookie(refresh_name, path="/")


class LoginView(APIView):
    """Mock login: a known, active directory email is enough."""
    permission_classes = [AllowAny]

    @extend_schema(
        request=LoginRequestSerializer,
        responses={200: LoginResponseSerializer},
        tags=["IAM"],
    )
    def post(self, request):
        serializer = LoginRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = find_user(serializer.validated_data["email"])
        if user is None or not user.is_active:
            logger.warning("Login refused for %s", serializer.validated_data["email"])
            raise AuthenticationFailed("No active focal point is registered with this email.")

        tokens = issue_tokens(user)
        logger.info("Login for %s (%s)", user.email, user.role)

        res = Response(
            {"detail": "login ok", "user": user.to_dict(), **tokens},
            status=status.HTTP_200_OK,
        )
        _set_auth_cookies(res, access=tokens["access"], refresh=tokens["refresh"])
        return res


class RefreshView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(
        request=None,
        responses={200: RefreshResponseSerializer},
        tags=["IAM"],
    )
    def post(self, request):
        _, refresh_name = _cookie_names()
        raw = request.COOKIES.get(refresh_name) or request.data.get("refresh")
        if not raw:
            raise InvalidToken("No refresh token supplied.")

        try:
            refresh = RefreshToken(raw)
        except TokenError as exc:
            raise InvalidToken(str(exc)) from exc

        access = str(refresh.access_token)
        res = Response({"detail": "refreshed", "access": access}, status=status.HTTP_200_OK)
        _set_auth_cookies(res, access=access)
        return res


class LogoutView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        request=None,
        responses={200: LogoutResponseSerializer},
        tags=["IAM"],
    )
    def post(self, request):
        res = Response({"detail": "logged out"}, status=status.HTTP_200_OK)
        _clear_auth_cookies(res)
        return res

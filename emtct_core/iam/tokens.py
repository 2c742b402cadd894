# emtct_core/iam/tokens.py
from __future__ import annotations

from rest_framework_simplejwt.tokens import RefreshToken

from emtct_core.iam.auth import EMAIL_CLAIM
from emtct_core.iam.directory import FocalPoint


def issue_tokens(user: FocalPoint) -> dict[str, str]:
    """Access + refresh pair for a directory user (no database user row involved)."""
    refresh = RefreshToken()
    refresh[EMAIL_CLAIM] = user.email
    refresh["role"] = str(user.role)
    return {"access": str(refresh.access_token), "refresh": str(refresh)}

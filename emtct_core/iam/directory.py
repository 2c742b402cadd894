# emtct_core/iam/directory.py
"""
Static focal-point directory.

There is no user table: login is a lookup by email in MOCK_USERS, and the
authenticated principal on every request is a FocalPoint instance.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional

from django.db import models


class UserRole(models.TextChoices):
    FACILITY = "Facility EMTCT Focal Point", "Facility EMTCT Focal Point"
    DISTRICT = "District EMTCT Focal Point", "District EMTCT Focal Point"
    ADMIN = "System Admin", "System Admin"


class UserStatus(models.TextChoices):
    ACTIVE = "Active", "Active"
    INACTIVE = "Inactive", "Inactive"


@dataclass(frozen=True)
class FocalPoint:
    email: str
    name: str
    role: UserRole
    facility: Optional[str] = None
    district: Optional[str] = None
    status: UserStatus = UserStatus.ACTIVE

    # DRF / Django request.user contract
    is_authenticated = True
    is_anonymous = False

    @property
    def id(self) -> str:
        return self.email

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def to_dict(self) -> dict:
        data = asdict(self)
        data["role"] = str(self.role)
        data["status"] = str(self.status)
        return data


MOCK_USERS: tuple[FocalPoint, ...] = (
    FocalPoint(
        email="admin@emtct.gov",
        name="Sarah Drasner",
        role=UserRole.ADMIN,
    ),
    FocalPoint(
        email="kampala.lead@emtct.gov",
        name="John Doe",
        role=UserRole.DISTRICT,
        district="Kampala",
    ),
    FocalPoint(
        email="kibuli.focal@emtct.gov",
        name="Mary Jane",
        role=UserRole.FACILITY,
        facility="Kibuli Health Centre",
        district="Kampala",
    ),
)


def find_user(email: str | None) -> FocalPoint | None:
    if not email:
        return None
    needle = str(email).strip().lower()
    for user in MOCK_USERS:
        if user.email.lower() == needle:
            return user
    return None

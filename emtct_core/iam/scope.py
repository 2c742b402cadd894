# emtct_core/iam/scope.py
from __future__ import annotations

from emtct_core.iam.directory import FocalPoint, UserRole


def in_scope(user: FocalPoint, infant) -> bool:
    """
    Admin sees everything, District its district, Facility its facility.
    Any other role sees nothing.
    """
    role = getattr(user, "role", None)
    if role == UserRole.ADMIN:
        return True
    if role == UserRole.DISTRICT:
        return bool(user.district) and infant.district == user.district
    if role == UserRole.FACILITY:
        return bool(user.facility) and infant.facility == user.facility
    return False


def sees_names(user: FocalPoint) -> bool:
    """Only facility focal points see infant names; rollup roles get them masked."""
    return getattr(user, "role", None) == UserRole.FACILITY


def sees_caseload(user: FocalPoint) -> bool:
    return getattr(user, "role", None) in (UserRole.DISTRICT, UserRole.ADMIN)

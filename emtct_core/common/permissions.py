# emtct_core/common/permissions.py
from __future__ import annotations

from rest_framework.permissions import BasePermission

from emtct_core.iam.directory import UserRole

ROLE_FACILITY = UserRole.FACILITY
ROLE_DISTRICT = UserRole.DISTRICT
ROLE_ADMIN = UserRole.ADMIN

ALL_ROLES = {ROLE_FACILITY, ROLE_DISTRICT, ROLE_ADMIN}


class BaseRolePermission(BasePermission):
    """
    Role-based access on top of IsAuthenticated.
    Subclasses list allowed roles per view action; unknown actions are denied.
    Record-level scope (facility / district) is enforced by the repository, not here.
    """
    message = "You do not have permission to perform this action."

    allowed_roles_per_action: dict[str, set] = {}
    default_roles: set | None = None

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not user or not getattr(user, "is_authenticated", False):
            return False

        role = getattr(user, "role", None)
        action = getattr(view, "action", None)
        allowed = self.allowed_roles_per_action.get(action, self.default_roles)
        if allowed is None:
            return False
        return role in allowed


class FocalPointPermission(BaseRolePermission):
    """Any directory role may read and record follow-up for infants in its own scope."""
    default_roles = ALL_ROLES


class AdminOnlyPermission(BaseRolePermission):
    message = "Only system administrators can view the user directory."
    default_roles = {ROLE_ADMIN}

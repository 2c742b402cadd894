# emtct_core/infants/errors.py
from __future__ import annotations


class InfantServiceError(Exception):
    """
    Base class for every reason the repository can refuse or fail a request.
    Instances are returned inside a failed Result; the API layer decides how to surface them.
    """
    code = "infant_service_error"
    default_message = "The request could not be completed."

    def __init__(self, message: str | None = None, *, details: dict | None = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)


class InfantNotFound(InfantServiceError):
    code = "infant_not_found"
    default_message = "Infant not found."

    def __init__(self, infant_id: str):
        super().__init__(f"Infant {infant_id} not found.", details={"infant_id": infant_id})
        self.infant_id = infant_id


class OutOfScope(InfantServiceError):
    code = "out_of_scope"
    default_message = "This infant is outside your facility/district scope."


class InvalidRegistration(InfantServiceError):
    code = "invalid_registration"

    def __init__(self, field: str, message: str | None = None):
        super().__init__(message or f"{field} is required.", details={"field": field})
        self.field = field


class PersistenceFailed(InfantServiceError):
    code = "persistence_failed"
    default_message = "The change is applied but could not be saved to storage."


class StoreUnavailable(Exception):
    """Raised by store implementations when the durable backend cannot be read or written."""

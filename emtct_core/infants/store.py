# emtct_core/infants/store.py
from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import Any

from django.db import DatabaseError, transaction

from emtct_core.audit.selectors import list_audit_entries
from emtct_core.audit.services import AuditEntry, AuditService
from emtct_core.infants.errors import StoreUnavailable
from emtct_core.infants.models import KeyValueEntry


class InfantStore(ABC):
    """
    Durable backing for InfantRepository.
    Infants are stored as one JSON document (list of record dicts) under a single key.
    Implementations raise StoreUnavailable when the backend cannot be used.
    """

    @abstractmethod
    def load_infants(self) -> list[dict[str, Any]] | None:
        """Return the stored list, or None when nothing has been written yet."""

    @abstractmethod
    def save_infants(self, docs: list[dict[str, Any]]) -> None:
        ...

    @abstractmethod
    def load_audit(self) -> list[AuditEntry]:
        ...

    @abstractmethod
    def append_audit(self, entries: list[AuditEntry]) -> None:
        ...

    @abstractmethod
    def clear_audit(self) -> None:
        """Drop the whole audit history (register reset)."""


class MemoryStore(InfantStore):
    """Process-local store used by tests and the shell."""

    def __init__(self, docs: list[dict[str, Any]] | None = None):
        self._docs = copy.deepcopy(docs) if docs is not None else None
        self._audit: list[AuditEntry] = []

    def load_infants(self):
        return copy.deepcopy(self._docs) if self._docs is not None else None

    def save_infants(self, docs):
        self._docs = copy.deepcopy(docs)

    def load_audit(self):
        return list(self._audit)

    def append_audit(self, entries):
        self._audit.extend(entries)

    def clear_audit(self):
        self._audit = []


class DatabaseStore(InfantStore):
    def __init__(self, key: str):
        self.key = key

    def load_infants(self):
        try:
            entry = KeyValueEntry.objects.filter(key=self.key).first()
        except DatabaseError as exc:
            raise StoreUnavailable(f"Could not read {self.key!r}.") from exc
        return entry.value if entry is not None else None

    def save_infants(self, docs):
        try:
            with transaction.atomic():
                KeyValueEntry.objects.update_or_create(key=self.key, defaults={"value": docs})
        except DatabaseError as exc:
            raise StoreUnavailable(f"Could not write {self.key!r}.") from exc

    def load_audit(self):
        try:
            return list_audit_entries()
        except DatabaseError as exc:
            raise StoreUnavailable("Could not read the audit log.") from exc

    def append_audit(self, entries):
        try:
            AuditService.log_many(entries)
        except DatabaseError as exc:
            raise StoreUnavailable("Could not write the audit log.") from exc

    def clear_audit(self):
        try:
            AuditService.clear()
        except DatabaseError as exc:
            raise StoreUnavailable("Could not clear the audit log.") from exc

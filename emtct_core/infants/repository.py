# emtct_core/infants/repository.py
"""
Access-scoped infant repository.

Holds the infant register and the audit log in memory, loaded once from an
InfantStore, and writes both back synchronously after every mutation.

Every call that can be refused returns a Result instead of raising or silently
doing nothing. Mutations run under one re-entrant lock.
"""
from __future__ import annotations

import logging
import random
import threading
from typing import Callable, Optional

from django.conf import settings
from django.utils import timezone

from emtct_core.audit.services import AuditEntry
from emtct_core.iam.directory import FocalPoint, UserRole
from emtct_core.iam.scope import in_scope
from emtct_core.infants.errors import (
    InfantNotFound,
    InvalidRegistration,
    OutOfScope,
    PersistenceFailed,
    StoreUnavailable,
)
from emtct_core.infants.records import FIELD_KEYS, SLOT_ATTRS, InfantRecord, InfantStatus, Prophylaxis, snapshot
from emtct_core.infants.reminders import Reminder, build_reminders
from emtct_core.infants.results import Result
from emtct_core.infants.schedule import build_schedule, parse_dob
from emtct_core.infants.stats import DashboardStats, compute_stats
from emtct_core.infants.store import InfantStore
from emtct_core.infants.updates import InfantDraft, InfantUpdate

logger = logging.getLogger(__name__)

ID_PREFIX = "INF-"
ID_RANGE = (1000, 9999)


class InfantRepository:
    def __init__(
        self,
        store: InfantStore,
        *,
        clock: Callable[[], object] = timezone.now,
        due_soon_days: Optional[float] = None,
    ):
        self.store = store
        self.clock = clock
        self.due_soon_days = due_soon_days
        self._lock = threading.RLock()

        docs = store.load_infants() or []
        self._infants: list[InfantRecord] = [InfantRecord.from_dict(d) for d in docs]
        self._audit: list[AuditEntry] = list(store.load_audit())
        # entries not yet accepted by the store, oldest first
        self._pending_audit: list[AuditEntry] = []

    @property
    def is_empty(self) -> bool:
        return not self._infants

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------

    def all_infants(self) -> list[InfantRecord]:
        return list(self._infants)

    def list_for_user(self, user: FocalPoint) -> list[InfantRecord]:
        return [infant for infant in self._infants if in_scope(user, infant)]

    def get_for_user(self, user: FocalPoint, infant_id: str) -> Result[InfantRecord]:
        infant = self._find(infant_id)
        if infant is None:
            return Result.failure(InfantNotFound(infant_id))
        if not in_scope(user, infant):
            return self._deny(user, infant_id, "read")
        return Result.success(infant)

    def stats_for_user(self, user: FocalPoint, now=None) -> DashboardStats:
        return compute_stats(self.list_for_user(user), now or self.clock(), window_days=self.due_soon_days)

    def reminders_for_user(self, user: FocalPoint, now=None) -> list[Reminder]:
        return build_reminders(self.list_for_user(user), now or self.clock(), window_days=self.due_soon_days)

    def audit_for_user(self, user: FocalPoint, infant_id: str | None = None) -> list[AuditEntry]:
        if user.is_admin:
            visible = None
        else:
            visible = {infant.id for infant in self.list_for_user(user)}

        entries = []
        for entry in self._audit:
            if infant_id and entry.infant_id != infant_id:
                continue
            if visible is not None and entry.infant_id not in visible:
                continue
            entries.append(entry)
        return entries

    # ------------------------------------------------------------------
    # writes
    # ------------------------------------------------------------------

    def register_infant(self, user: FocalPoint, draft: InfantDraft) -> Result[InfantRecord]:
        role = getattr(user, "role", None)
        if role == UserRole.FACILITY and not user.facility:
            logger.warning("Registration refused: %s has no facility assigned", user.email)
            return Result.failure(OutOfScope("Your account is not assigned to a facility."))

        for field in ("infant_name", "mother_id"):
            if not str(getattr(draft, field) or "").strip():
                return Result.failure(InvalidRegistration(field))
        try:
            dob = parse_dob(draft.dob)
        except InvalidRegistration as exc:
            return Result.failure(exc)
        try:
            prophylaxis = Prophylaxis(draft.prophylaxis or Prophylaxis.NVP)
        except ValueError:
            return Result.failure(InvalidRegistration("prophylaxis", f"Unknown prophylaxis regimen: {draft.prophylaxis}."))
        schedule = build_schedule(dob)

        with self._lock:
            record = InfantRecord(
                id=self._next_id(),
                infant_name=str(draft.infant_name).strip(),
                mother_id=str(draft.mother_id).strip(),
                dob=dob,
                facility=user.facility or settings.EMTCT_DEFAULT_FACILITY,
                district=user.district or settings.EMTCT_DEFAULT_DISTRICT,
                prophylaxis=prophylaxis,
                status=InfantStatus.ACTIVE,
                final_outcome=None,
                **{SLOT_ATTRS[slot]: test for slot, test in schedule.items()},
            )
            self._infants.append(record)
            logger.info("Registered infant %s at %s by %s", record.id, record.facility, user.email)

            if not self._flush():
                return Result.failure(PersistenceFailed(), value=record)
        return Result.success(record)

    def update_infant(self, user: FocalPoint, infant_id: str, update: InfantUpdate) -> Result[InfantRecord]:
        with self._lock:
            index = self._index_of(infant_id)
            if index is None:
                return Result.failure(InfantNotFound(infant_id))
            current = self._infants[index]
            if not in_scope(user, current):
                return self._deny(user, infant_id, "update")

            now = self.clock()
            changed = {}
            entries = []
            for attr, value in update.changes(current).items():
                old, new = snapshot(getattr(current, attr)), snapshot(value)
                if old == new:
                    continue
                changed[attr] = value
                entries.append(
                    AuditEntry(
                        timestamp=now,
                        user=user.email,
                        infant_id=infant_id,
                        field=FIELD_KEYS[attr],
                        old_value=old,
                        new_value=new,
                    )
                )

            if not changed:
                return Result.success(current)

            updated = current.with_changes(**changed)
            self._infants[index] = updated
            self._audit.extend(entries)
            self._pending_audit.extend(entries)
            logger.info(
                "Updated infant %s (%s) by %s",
                infant_id,
                ", ".join(e.field for e in entries),
                user.email,
            )

            if not self._flush():
                return Result.failure(PersistenceFailed(), value=updated)
        return Result.success(updated)

    def replace_all(self, records: list[InfantRecord]) -> Result[list[InfantRecord]]:
        """
        Swap the whole register (demo seeding and `seed_infants --reset`).
        The audit history belongs to the replaced infants and is cleared with them.
        """
        with self._lock:
            self._infants = list(records)
            self._audit = []
            self._pending_audit = []
            logger.info("Replacing infant register with %d records; audit history cleared", len(records))

            cleared = self._clear_audit()
            if not self._flush_infants() or not cleared:
                return Result.failure(PersistenceFailed(), value=list(records))
        return Result.success(list(records))

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------

    def _find(self, infant_id: str) -> InfantRecord | None:
        index = self._index_of(infant_id)
        return self._infants[index] if index is not None else None

    def _index_of(self, infant_id: str) -> int | None:
        for i, infant in enumerate(self._infants):
            if infant.id == infant_id:
                return i
        return None

    def _next_id(self) -> str:
        taken = {infant.id for infant in self._infants}
        low, high = ID_RANGE
        free = [n for n in range(low, high + 1) if f"{ID_PREFIX}{n}" not in taken]
        if free:
            return f"{ID_PREFIX}{random.choice(free)}"

        n = high + 1
        while f"{ID_PREFIX}{n}" in taken:
            n += 1
        return f"{ID_PREFIX}{n}"

    def _deny(self, user: FocalPoint, infant_id: str, action: str) -> Result:
        logger.warning("Denied %s of infant %s for %s (out of scope)", action, infant_id, getattr(user, "email", None))
        return Result.failure(OutOfScope(f"Infant {infant_id} is outside your facility/district scope."))

    def _flush_infants(self) -> bool:
        try:
            self.store.save_infants([infant.to_dict() for infant in self._infants])
        except StoreUnavailable:
            logger.exception("Could not persist the infant register")
            return False
        return True

    def _flush_audit(self) -> bool:
        if not self._pending_audit:
            return True
        try:
            self.store.append_audit(list(self._pending_audit))
        except StoreUnavailable:
            logger.exception("Could not persist %d audit entries; kept for the next write", len(self._pending_audit))
            return False
        self._pending_audit = []
        return True

    def _clear_audit(self) -> bool:
        try:
            self.store.clear_audit()
        except StoreUnavailable:
            logger.exception("Could not clear the audit log")
            return False
        return True

    def _flush(self) -> bool:
        # attempt both writes; unsent audit entries stay pending
        saved = self._flush_infants()
        audited = self._flush_audit()
        return saved and audited

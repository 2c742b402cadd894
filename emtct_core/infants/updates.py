# emtct_core/infants/updates.py
"""
Typed change requests accepted by InfantRepository.update_infant().

Each variant reports the attribute values it wants on the record; the repository
diffs them against the current record, writes audit rows for real changes, and
replaces the record in one step.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

from emtct_core.infants.records import (
    SLOT_ATTRS,
    FinalOutcome,
    InfantRecord,
    InfantStatus,
    LabResult,
    Prophylaxis,
    ScheduledTest,
    ScheduleSlot,
)


class InfantUpdate:
    def changes(self, current: InfantRecord) -> dict[str, Any]:
        raise NotImplementedError


@dataclass(frozen=True)
class RecordTestResult(InfantUpdate):
    slot: ScheduleSlot
    done_date: date
    result: LabResult

    def changes(self, current: InfantRecord) -> dict[str, Any]:
        slot = ScheduleSlot(self.slot)
        existing = current.test(slot)
        # due date belongs to the schedule and is never edited here
        updated = ScheduledTest(
            due_date=existing.due_date,
            done_date=self.done_date,
            result=LabResult(self.result),
        )
        return {SLOT_ATTRS[slot]: updated}


@dataclass(frozen=True)
class ChangeStatus(InfantUpdate):
    status: InfantStatus

    def changes(self, current: InfantRecord) -> dict[str, Any]:
        return {"status": InfantStatus(self.status)}


@dataclass(frozen=True)
class RecordFinalOutcome(InfantUpdate):
    """A negative final outcome discharges the infant; anything else keeps them active."""
    outcome: FinalOutcome

    def changes(self, current: InfantRecord) -> dict[str, Any]:
        outcome = FinalOutcome(self.outcome)
        status = InfantStatus.DISCHARGED if outcome == FinalOutcome.NEGATIVE else InfantStatus.ACTIVE
        return {"final_outcome": outcome, "status": status}


@dataclass(frozen=True)
class InfantDraft:
    """Registration input. Facility, district, id and schedule are assigned by the repository."""
    infant_name: str
    mother_id: str
    dob: Any
    prophylaxis: Prophylaxis = Prophylaxis.NVP

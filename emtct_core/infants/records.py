# emtct_core/infants/records.py
"""
In-memory records for exposed infants under follow-up.

The persisted document shape (camelCase keys) is what the dashboard has always
written to storage, so `to_dict()` / `from_dict()` must stay lossless:

    {
      "id": "INF-1001", "infantName": "...", "motherId": "...", "dob": "2024-01-01",
      "facility": "...", "district": "...", "prophylaxis": "NVP", "status": "Active",
      "pcr1": {"dueDate": "2024-02-12", "doneDate": null, "result": null},
      ...
      "finalOutcome": null
    }
"""
from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from datetime import date
from typing import Any, Iterator

from django.db import models
from django.utils.dateparse import parse_date


class LabResult(models.TextChoices):
    POSITIVE = "Positive", "Positive"
    NEGATIVE = "Negative", "Negative"
    PENDING = "Pending", "Pending"


class InfantStatus(models.TextChoices):
    ACTIVE = "Active", "Active"
    DISCHARGED = "Discharged", "Discharged"
    LOST_TO_FOLLOW_UP = "Lost to Follow Up", "Lost to Follow Up"
    DECEASED = "Deceased", "Deceased"


class FinalOutcome(models.TextChoices):
    POSITIVE = "Positive", "Positive"
    NEGATIVE = "Negative", "Negative"
    INDETERMINATE = "Indeterminate", "Indeterminate"


class Prophylaxis(models.TextChoices):
    NVP = "NVP", "Daily NVP"
    AZT_NVP = "AZT/NVP", "AZT + NVP (High Risk)"
    OTHER = "Other", "Other"
    NONE = "None", "None"


class ScheduleSlot(models.TextChoices):
    """The five scheduled diagnostic tests, in schedule order."""
    PCR1 = "pcr1", "PCR 1 (6wk)"
    PCR2 = "pcr2", "PCR 2 (9mo)"
    ANTIBODY_12MO = "antibody12mo", "Antibody (12mo)"
    RAPID_TEST_18MO = "rapidTest18mo", "Rapid Test (18mo)"
    ANTIBODY_24MO = "antibody24mo", "Antibody (24mo)"


# ScheduleSlot -> InfantRecord attribute
SLOT_ATTRS = {
    ScheduleSlot.PCR1: "pcr1",
    ScheduleSlot.PCR2: "pcr2",
    ScheduleSlot.ANTIBODY_12MO: "antibody_12mo",
    ScheduleSlot.RAPID_TEST_18MO: "rapid_test_18mo",
    ScheduleSlot.ANTIBODY_24MO: "antibody_24mo",
}

# InfantRecord attribute -> persisted document key
FIELD_KEYS = {
    "id": "id",
    "infant_name": "infantName",
    "mother_id": "motherId",
    "dob": "dob",
    "facility": "facility",
    "district": "district",
    "prophylaxis": "prophylaxis",
    "status": "status",
    "final_outcome": "finalOutcome",
    **{attr: slot.value for slot, attr in SLOT_ATTRS.items()},
}


def _to_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    parsed = parse_date(str(value))
    if parsed is None:
        raise ValueError(f"Invalid date: {value!r}")
    return parsed


@dataclass(frozen=True)
class ScheduledTest:
    """
    One diagnostic test instance.
    `result` is set if and only if `done_date` is set.
    """
    due_date: date
    done_date: date | None = None
    result: LabResult | None = None

    def __post_init__(self):
        if (self.done_date is None) != (self.result is None):
            raise ValueError("A test result must be recorded together with its done date.")

    @property
    def is_done(self) -> bool:
        return self.done_date is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "dueDate": self.due_date.isoformat(),
            "doneDate": self.done_date.isoformat() if self.done_date else None,
            "result": str(self.result) if self.result else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScheduledTest":
        result = data.get("result")
        return cls(
            due_date=_to_date(data["dueDate"]),
            done_date=_to_date(data.get("doneDate")),
            result=LabResult(result) if result else None,
        )


@dataclass(frozen=True)
class InfantRecord:
    id: str
    infant_name: str
    mother_id: str
    dob: date
    facility: str
    district: str
    prophylaxis: Prophylaxis
    pcr1: ScheduledTest
    pcr2: ScheduledTest
    antibody_12mo: ScheduledTest
    rapid_test_18mo: ScheduledTest
    antibody_24mo: ScheduledTest
    status: InfantStatus = InfantStatus.ACTIVE
    final_outcome: FinalOutcome | None = None

    def test(self, slot: ScheduleSlot) -> ScheduledTest:
        return getattr(self, SLOT_ATTRS[ScheduleSlot(slot)])

    def tests(self) -> Iterator[tuple[ScheduleSlot, ScheduledTest]]:
        for slot, attr in SLOT_ATTRS.items():
            yield slot, getattr(self, attr)

    def with_changes(self, **changes: Any) -> "InfantRecord":
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {FIELD_KEYS[f.name]: serialize_value(getattr(self, f.name)) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InfantRecord":
        outcome = data.get("finalOutcome")
        tests = {attr: ScheduledTest.from_dict(data[slot.value]) for slot, attr in SLOT_ATTRS.items()}
        return cls(
            id=data["id"],
            infant_name=data.get("infantName", ""),
            mother_id=data.get("motherId", ""),
            dob=_to_date(data["dob"]),
            facility=data["facility"],
            district=data["district"],
            prophylaxis=Prophylaxis(data.get("prophylaxis") or Prophylaxis.NVP),
            status=InfantStatus(data.get("status") or InfantStatus.ACTIVE),
            final_outcome=FinalOutcome(outcome) if outcome else None,
            **tests,
        )


def serialize_value(value: Any) -> Any:
    if isinstance(value, ScheduledTest):
        return value.to_dict()
    if isinstance(value, models.Choices):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    return value


def snapshot(value: Any) -> str:
    """JSON snapshot used to diff field values and to store them in the audit log."""
    return json.dumps(serialize_value(value), sort_keys=True)

# emtct_core/infants/reminders.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from emtct_core.infants.classifier import FollowUpState, classify
from emtct_core.infants.records import InfantRecord, ScheduleSlot

REMINDER_STATES = {FollowUpState.OVERDUE, FollowUpState.DUE_SOON}


@dataclass(frozen=True)
class Reminder:
    infant: InfantRecord
    slot: ScheduleSlot
    status: FollowUpState
    due_date: date

    @property
    def test_name(self) -> str:
        return self.slot.label


def build_reminders(
    infants: Iterable[InfantRecord],
    now,
    *,
    window_days: float | None = None,
) -> list[Reminder]:
    """
    Every pending test that is overdue or due soon, earliest due date first.
    Ties keep input order (infant order, then schedule order).
    """
    reminders: list[Reminder] = []
    for infant in infants:
        for slot, test in infant.tests():
            state = classify(test, now, window_days=window_days)
            if state in REMINDER_STATES:
                reminders.append(Reminder(infant=infant, slot=slot, status=state, due_date=test.due_date))

    return sorted(reminders, key=lambda r: r.due_date)

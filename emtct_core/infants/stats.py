# emtct_core/infants/stats.py
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterable

from emtct_core.infants.classifier import FollowUpState, classify
from emtct_core.infants.records import InfantRecord, InfantStatus, LabResult


@dataclass(frozen=True)
class DashboardStats:
    total_infants: int
    due_soon: int
    overdue: int
    positivity_rate: float

    def to_dict(self) -> dict:
        return asdict(self)


def compute_stats(
    infants: Iterable[InfantRecord],
    now,
    *,
    window_days: float | None = None,
) -> DashboardStats:
    """
    Test-level counts across all five slots of every infant.
    positivity_rate = 100 * positive / done, and 0.0 when no test is done.
    """
    total = 0
    due_soon = 0
    overdue = 0
    done = 0
    positives = 0

    for infant in infants:
        total += 1
        for _, test in infant.tests():
            state = classify(test, now, window_days=window_days)
            if state == FollowUpState.DONE:
                done += 1
                if test.result == LabResult.POSITIVE:
                    positives += 1
            elif state == FollowUpState.OVERDUE:
                overdue += 1
            elif state == FollowUpState.DUE_SOON:
                due_soon += 1

    return DashboardStats(
        total_infants=total,
        due_soon=due_soon,
        overdue=overdue,
        positivity_rate=(positives / done) * 100 if done else 0.0,
    )


def status_breakdown(infants: Iterable[InfantRecord]) -> list[dict]:
    counts = {status: 0 for status in InfantStatus}
    for infant in infants:
        counts[infant.status] += 1
    return [{"status": status.value, "count": count} for status, count in counts.items()]


def facility_caseload(infants: Iterable[InfantRecord]) -> list[dict]:
    counts: dict[str, int] = {}
    for infant in infants:
        counts[infant.facility] = counts.get(infant.facility, 0) + 1
    return [{"facility": name, "count": count} for name, count in counts.items()]

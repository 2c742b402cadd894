# emtct_core/infants/classifier.py
from __future__ import annotations

from datetime import date, datetime, time, timezone as dt_timezone

from django.conf import settings
from django.db import models

from emtct_core.infants.records import ScheduledTest

SECONDS_PER_DAY = 24 * 60 * 60
DEFAULT_DUE_SOON_DAYS = 14


class FollowUpState(models.TextChoices):
    DONE = "done", "Done"
    OVERDUE = "overdue", "Overdue"
    DUE_SOON = "dueSoon", "Due soon"
    NOT_YET_DUE = "notYetDue", "Not yet due"


def due_soon_window() -> float:
    """Single shared threshold for reminders and dashboard counts."""
    return float(getattr(settings, "EMTCT_DUE_SOON_DAYS", DEFAULT_DUE_SOON_DAYS))


def as_instant(value) -> datetime:
    """
    Normalise "now" / due dates to an aware instant.
    Dates mean midnight UTC; naive datetimes are taken as UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
            return value.replace(tzinfo=dt_timezone.utc)
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=dt_timezone.utc)
    raise TypeError(f"Expected date or datetime, got {type(value).__name__}.")


def days_until_due(test: ScheduledTest, now) -> float:
    """Fractional days from `now` to the due date; negative once the due date has passed."""
    return (as_instant(test.due_date) - as_instant(now)).total_seconds() / SECONDS_PER_DAY


def classify(test: ScheduledTest, now, *, window_days: float | None = None) -> FollowUpState:
    if test.is_done:
        return FollowUpState.DONE

    window = due_soon_window() if window_days is None else float(window_days)
    diff_days = days_until_due(test, now)

    # strict: a test due exactly now is still "due soon"
    if diff_days < 0:
        return FollowUpState.OVERDUE
    if diff_days <= window:
        return FollowUpState.DUE_SOON
    return FollowUpState.NOT_YET_DUE

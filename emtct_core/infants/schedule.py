# emtct_core/infants/schedule.py
from __future__ import annotations

from datetime import date, datetime, timedelta

from django.utils.dateparse import parse_date

from emtct_core.infants.errors import InvalidRegistration
from emtct_core.infants.records import ScheduledTest, ScheduleSlot

# Days after birth at which each test falls due. Fixed protocol, not configurable.
SCHEDULE_OFFSETS = {
    ScheduleSlot.PCR1: 42,
    ScheduleSlot.PCR2: 270,
    ScheduleSlot.ANTIBODY_12MO: 365,
    ScheduleSlot.RAPID_TEST_18MO: 540,
    ScheduleSlot.ANTIBODY_24MO: 730,
}


def parse_dob(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not str(value).strip():
        raise InvalidRegistration("dob", "Date of birth is required.")
    try:
        parsed = parse_date(str(value).strip())
    except ValueError:
        parsed = None
    if parsed is None:
        raise InvalidRegistration("dob", "Date of birth is invalid. Use YYYY-MM-DD.")
    return parsed


def build_schedule(dob) -> dict[ScheduleSlot, ScheduledTest]:
    """
    Five pending tests due at dob + 42/270/365/540/730 days.
    Raises InvalidRegistration("dob") for a missing or unparsable date.
    """
    birth = parse_dob(dob)
    return {
        slot: ScheduledTest(due_date=birth + timedelta(days=offset))
        for slot, offset in SCHEDULE_OFFSETS.items()
    }


def due_dates(dob) -> list[date]:
    return [test.due_date for test in build_schedule(dob).values()]

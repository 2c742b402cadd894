# emtct_core/infants/selectors.py
from __future__ import annotations

from datetime import datetime, time, timezone as dt_timezone
from typing import Iterable

from django.utils.dateparse import parse_date, parse_datetime
from rest_framework.exceptions import ValidationError

from emtct_core.infants.records import InfantRecord, InfantStatus

ALL_STATUSES = "All"


def filter_infants(
    infants: Iterable[InfantRecord],
    *,
    q: str | None = None,
    status: str | None = None,
) -> list[InfantRecord]:
    """
    Register search: `q` is a case-insensitive substring of the id or the infant name;
    `status` is an exact infant status ("All" or empty means any).
    """
    needle = (q or "").strip().lower()
    wanted = None
    if status and status != ALL_STATUSES:
        try:
            wanted = InfantStatus(status)
        except ValueError:
            raise ValidationError({"status": f"Unknown status: {status}"})

    rows = []
    for infant in infants:
        if needle and needle not in infant.id.lower() and needle not in infant.infant_name.lower():
            continue
        if wanted is not None and infant.status != wanted:
            continue
        rows.append(infant)
    return rows


def parse_as_of(raw: str | None):
    """
    Optional "as of" instant for dashboard/reminder queries.
    Accepts YYYY-MM-DD (midnight UTC) or an ISO datetime; None means now.
    """
    if not raw:
        return None
    try:
        value = parse_datetime(raw)
        day = None if value is not None else parse_date(raw)
    except ValueError:
        value = day = None
    if value is not None:
        return value
    if day is not None:
        return datetime.combine(day, time.min, tzinfo=dt_timezone.utc)
    raise ValidationError({"as_of": "Use YYYY-MM-DD or an ISO 8601 datetime."})

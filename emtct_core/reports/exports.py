# emtct_core/reports/exports.py
from __future__ import annotations

import csv
import secrets
from datetime import date
from io import StringIO
from typing import Iterable

from django.template.loader import render_to_string

from emtct_core.iam.directory import FocalPoint
from emtct_core.infants.records import InfantRecord, ScheduleSlot

MISSING = "N/A"

CSV_HEADERS = ["ID", "Facility", "District", "DOB", "Status", "PCR1", "PCR2", "Ab12mo", "Ab18mo", "Ab24mo", "FinalOutcome"]


def _result(infant: InfantRecord, slot: ScheduleSlot, missing: str) -> str:
    result = infant.test(slot).result
    return result.value if result else missing


def export_rows(infants: Iterable[InfantRecord], *, missing: str = MISSING) -> list[list[str]]:
    rows = []
    for infant in infants:
        rows.append(
            [
                infant.id,
                infant.facility,
                infant.district,
                infant.dob.isoformat(),
                infant.status.value,
                *(_result(infant, slot, missing) for slot in ScheduleSlot),
                infant.final_outcome.value if infant.final_outcome else missing,
            ]
        )
    return rows


def render_csv(infants: Iterable[InfantRecord]) -> str:
    output = StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    writer.writerows(export_rows(infants))
    return output.getvalue()


def report_filename(today: date) -> str:
    return f"EMTCT_Expanded_Report_{today.isoformat()}.csv"


def report_scope_label(user: FocalPoint, default: str = "National") -> str:
    return user.facility or user.district or default


def render_printable(user: FocalPoint, infants: list[InfantRecord], *, generated_at) -> str:
    """Printable HTML register: one row per infant, results or "-"."""
    rows = [
        {
            "id": infant.id,
            "mother_id": infant.mother_id,
            "dob": infant.dob.isoformat(),
            "results": [_result(infant, slot, "-") for slot in ScheduleSlot],
            "final_outcome": infant.final_outcome.value if infant.final_outcome else "-",
        }
        for infant in infants
    ]
    return render_to_string(
        "reports/infant_report.html",
        {
            "user": user,
            "scope_label": report_scope_label(user),
            "report_id": secrets.token_hex(3).upper(),
            "generated_at": generated_at,
            "rows": rows,
            "slot_headers": ["PCR1", "PCR2", "Ab12", "Ab18", "Ab24"],
        },
    )

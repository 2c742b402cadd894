# emtct_core/infants/seed.py
from __future__ import annotations

import random
from datetime import date, timedelta

from emtct_core.facilities.registry import MOCK_FACILITIES
from emtct_core.infants.records import SLOT_ATTRS, InfantRecord, InfantStatus, Prophylaxis
from emtct_core.infants.schedule import build_schedule

DOB_SPREAD_DAYS = 900


def demo_infants(count: int = 20, *, today: date | None = None, rng: random.Random | None = None) -> list[InfantRecord]:
    """Demo register: INF-1001.. spread over the mock facilities, DOBs within the last ~30 months."""
    today = today or date.today()
    rng = rng or random.Random()

    infants = []
    for i in range(1, count + 1):
        facility = rng.choice(MOCK_FACILITIES)
        dob = today - timedelta(days=rng.randrange(DOB_SPREAD_DAYS))
        schedule = build_schedule(dob)
        infants.append(
            InfantRecord(
                id=f"INF-{1000 + i}",
                infant_name=f"Infant {i}",
                mother_id=f"MOM-{2000 + i}",
                dob=dob,
                facility=facility.name,
                district=facility.district,
                prophylaxis=Prophylaxis.NVP,
                status=InfantStatus.ACTIVE,
                **{SLOT_ATTRS[slot]: test for slot, test in schedule.items()},
            )
        )
    return infants

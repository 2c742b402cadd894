# emtct_core/facilities/registry.py
from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class Facility:
    name: str
    code: str
    district: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class District:
    name: str
    region: str

    def to_dict(self) -> dict:
        return asdict(self)


MOCK_FACILITIES: tuple[Facility, ...] = (
    Facility(name="Kibuli Health Centre", code="KH-001", district="Kampala"),
    Facility(name="Mulago Hospital", code="MH-002", district="Kampala"),
    Facility(name="Entebbe General", code="EG-003", district="Wakiso"),
    Facility(name="Kira Health Clinic", code="KC-004", district="Wakiso"),
)

MOCK_DISTRICTS: tuple[District, ...] = (
    District(name="Kampala", region="Central"),
    District(name="Wakiso", region="Central"),
)


def list_facilities(*, district: str | None = None) -> list[Facility]:
    if district:
        return [f for f in MOCK_FACILITIES if f.district == district]
    return list(MOCK_FACILITIES)

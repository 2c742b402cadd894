# emtct_core/conftest.py
from datetime import date, datetime, timezone

import pytest
from rest_framework.test import APIClient

from emtct_core.iam.directory import FocalPoint, UserRole, find_user
from emtct_core.infants.repository import InfantRepository
from emtct_core.infants.store import MemoryStore
from emtct_core.infants.updates import InfantDraft
from emtct_core.infants.wiring import use_repository

FIXED_NOW = datetime(2024, 2, 11, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def facility_user():
    return find_user("kibuli.focal@emtct.gov")


@pytest.fixture
def district_user():
    return find_user("kampala.lead@emtct.gov")


@pytest.fixture
def admin_user():
    return find_user("admin@emtct.gov")


@pytest.fixture
def other_facility_user():
    """Facility focal point outside Kampala (not in the static directory)."""
    return FocalPoint(
        email="entebbe.focal@emtct.gov",
        name="Grace Nakato",
        role=UserRole.FACILITY,
        facility="Entebbe General",
        district="Wakiso",
    )


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def repository(store, now):
    """Fresh MemoryStore-backed repository, installed as the process-wide one for the test."""
    repo = InfantRepository(store, clock=lambda: now)
    with use_repository(repo):
        yield repo


@pytest.fixture
def register(repository):
    """register(user, **overrides) -> InfantRecord, failing the test on refusal."""

    def _register(user, **overrides):
        fields = {"infant_name": "Baby Nambi", "mother_id": "MOM-2001", "dob": date(2024, 1, 1)}
        fields.update(overrides)
        return repository.register_infant(user, InfantDraft(**fields)).unwrap()

    return _register


@pytest.fixture
def api_client_for():
    def _client(user):
        c = APIClient()
        c.force_authenticate(user=user)
        return c

    return _client

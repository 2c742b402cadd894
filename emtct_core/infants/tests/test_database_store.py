# emtct_core/infants/tests/test_database_store.py
from datetime import datetime, timezone

import pytest
from django.core.management import call_command
from django.db import DatabaseError

from emtct_core.audit.models import AuditLogEntry
from emtct_core.audit.services import AuditEntry
from emtct_core.infants import wiring
from emtct_core.infants.errors import StoreUnavailable
from emtct_core.infants.models import KeyValueEntry
from emtct_core.infants.records import InfantStatus
from emtct_core.infants.repository import InfantRepository
from emtct_core.infants.store import DatabaseStore
from emtct_core.infants.updates import ChangeStatus, InfantDraft

pytestmark = pytest.mark.django_db


def test_empty_store_loads_nothing():
    store = DatabaseStore("emtct_infants")
    assert store.load_infants() is None
    assert store.load_audit() == []


def test_register_and_update_persist_document_and_audit_rows(facility_user):
    store = DatabaseStore("emtct_infants")
    repo = InfantRepository(store)
    infant = repo.register_infant(facility_user, InfantDraft("Baby", "MOM-1", "2024-01-01")).unwrap()
    repo.update_infant(facility_user, infant.id, ChangeStatus(InfantStatus.LOST_TO_FOLLOW_UP)).unwrap()

    entry = KeyValueEntry.objects.get(key="emtct_infants")
    assert [doc["id"] for doc in entry.value] == [infant.id]
    assert entry.value[0]["status"] == "Lost to Follow Up"

    row = AuditLogEntry.objects.get()
    assert (row.infant_id, row.field, row.actor_email) == (infant.id, "status", facility_user.email)
    assert (row.old_value, row.new_value) == ('"Active"', '"Lost to Follow Up"')

    reloaded = InfantRepository(DatabaseStore("emtct_infants"))
    assert reloaded.list_for_user(facility_user)[0].status == InfantStatus.LOST_TO_FOLLOW_UP
    assert [e.field for e in reloaded.audit_for_user(facility_user)] == ["status"]


def test_database_errors_surface_as_store_unavailable(monkeypatch):
    def boom(*args, **kwargs):
        raise DatabaseError("connection lost")

    monkeypatch.setattr(KeyValueEntry.objects, "update_or_create", boom)
    with pytest.raises(StoreUnavailable):
        DatabaseStore("emtct_infants").save_infants([])


def test_audit_rows_round_trip_through_store():
    when = datetime(2024, 2, 11, 9, 30, tzinfo=timezone.utc)
    entry = AuditEntry(when, "a@emtct.gov", "INF-1001", "status", '"Active"', '"Deceased"')

    store = DatabaseStore("emtct_infants")
    store.append_audit([entry])

    assert store.load_audit() == [entry]


def test_seed_command_fills_empty_register_once():
    call_command("seed_infants", "--count", "5")
    assert len(KeyValueEntry.objects.get(key="emtct_infants").value) == 5

    call_command("seed_infants", "--count", "8")
    assert len(KeyValueEntry.objects.get(key="emtct_infants").value) == 5

    call_command("seed_infants", "--count", "8", "--reset")
    docs = KeyValueEntry.objects.get(key="emtct_infants").value
    assert [d["id"] for d in docs] == [f"INF-{1000 + i}" for i in range(1, 9)]


def test_seed_reset_clears_audit_rows_of_the_replaced_register(facility_user):
    repo = InfantRepository(DatabaseStore("emtct_infants"))
    infant = repo.register_infant(facility_user, InfantDraft("Baby", "MOM-1", "2024-01-01")).unwrap()
    repo.update_infant(facility_user, infant.id, ChangeStatus(InfantStatus.DECEASED)).unwrap()
    assert AuditLogEntry.objects.count() == 1

    call_command("seed_infants", "--count", "3", "--reset")

    assert AuditLogEntry.objects.count() == 0
    assert len(KeyValueEntry.objects.get(key="emtct_infants").value) == 3


def test_wiring_builds_database_backed_repository(settings, admin_user):
    settings.EMTCT_SEED_DEMO_DATA = True
    wiring.reset_repository()
    try:
        repo = wiring.get_repository()
        assert wiring.get_repository() is repo
        assert len(repo.list_for_user(admin_user)) == 20
        assert KeyValueEntry.objects.filter(key=settings.EMTCT_STORE_KEY).exists()
    finally:
        wiring.reset_repository()

# emtct_core/infants/tests/test_repository.py
import json
from datetime import date

import pytest

from emtct_core.iam.directory import FocalPoint, UserRole
from emtct_core.infants.errors import InfantNotFound, InvalidRegistration, OutOfScope, PersistenceFailed, StoreUnavailable
from emtct_core.infants.records import FinalOutcome, InfantRecord, InfantStatus, LabResult, ScheduleSlot
from emtct_core.infants.repository import InfantRepository
from emtct_core.infants.schedule import build_schedule
from emtct_core.infants.store import MemoryStore
from emtct_core.infants.updates import ChangeStatus, InfantDraft, RecordFinalOutcome, RecordTestResult


class FailingStore(MemoryStore):
    def save_infants(self, docs):
        raise StoreUnavailable("disk full")


class FlakyStore(MemoryStore):
    """Fails register or audit writes while the matching flag is set."""

    def __init__(self):
        super().__init__()
        self.infants_down = False
        self.audit_down = False

    def save_infants(self, docs):
        if self.infants_down:
            raise StoreUnavailable("register offline")
        super().save_infants(docs)

    def append_audit(self, entries):
        if self.audit_down:
            raise StoreUnavailable("audit offline")
        super().append_audit(entries)


class CountingStore(MemoryStore):
    def __init__(self):
        super().__init__()
        self.saves = 0

    def save_infants(self, docs):
        self.saves += 1
        super().save_infants(docs)


# ----------------------------------------------------------------------
# scope
# ----------------------------------------------------------------------

def test_list_is_scoped_by_role(repository, register, facility_user, district_user, admin_user, other_facility_user):
    kibuli = register(facility_user)
    entebbe = register(other_facility_user)

    assert repository.list_for_user(facility_user) == [kibuli]
    assert repository.list_for_user(other_facility_user) == [entebbe]
    assert repository.list_for_user(district_user) == [kibuli]
    assert repository.list_for_user(admin_user) == [kibuli, entebbe]


def test_unknown_role_sees_nothing(repository, register, facility_user):
    register(facility_user)
    stranger = FocalPoint(email="x@emtct.gov", name="X", role="Visitor", facility="Kibuli Health Centre")
    assert repository.list_for_user(stranger) == []


def test_get_for_user_reports_not_found_and_out_of_scope(repository, register, facility_user, other_facility_user):
    infant = register(facility_user)

    assert repository.get_for_user(facility_user, infant.id).value == infant
    assert isinstance(repository.get_for_user(other_facility_user, infant.id).error, OutOfScope)
    assert isinstance(repository.get_for_user(facility_user, "INF-0000").error, InfantNotFound)


# ----------------------------------------------------------------------
# registration
# ----------------------------------------------------------------------

def test_register_takes_scope_from_user_and_builds_schedule(repository, register, facility_user):
    infant = register(facility_user, prophylaxis="AZT/NVP")

    assert infant.id.startswith("INF-")
    assert infant.facility == "Kibuli Health Centre"
    assert infant.district == "Kampala"
    assert infant.status == InfantStatus.ACTIVE
    assert infant.final_outcome is None
    assert infant.prophylaxis == "AZT/NVP"
    assert dict(infant.tests()) == build_schedule(date(2024, 1, 1))
    assert repository.store.load_infants() == [infant.to_dict()]


def test_register_falls_back_to_default_scope(register, admin_user, district_user):
    national = register(admin_user)
    assert (national.facility, national.district) == ("Central Hub", "National")

    district = register(district_user)
    assert (district.facility, district.district) == ("Central Hub", "Kampala")


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"infant_name": "  "}, "infant_name"),
        ({"mother_id": ""}, "mother_id"),
        ({"dob": ""}, "dob"),
        ({"dob": "yesterday"}, "dob"),
    ],
)
def test_register_rejects_missing_fields(repository, facility_user, overrides, field):
    fields = {"infant_name": "Baby", "mother_id": "MOM-1", "dob": "2024-01-01", **overrides}
    result = repository.register_infant(facility_user, InfantDraft(**fields))

    assert not result.ok
    assert isinstance(result.error, InvalidRegistration)
    assert result.error.field == field
    assert repository.all_infants() == []


def test_facility_user_without_facility_cannot_register(repository):
    orphan = FocalPoint(email="orphan@emtct.gov", name="Orphan", role=UserRole.FACILITY, district="Kampala")
    result = repository.register_infant(orphan, InfantDraft("Baby", "MOM-1", "2024-01-01"))

    assert isinstance(result.error, OutOfScope)
    assert repository.all_infants() == []


def test_registered_ids_are_unique(register, facility_user):
    ids = {register(facility_user).id for _ in range(50)}
    assert len(ids) == 50


def test_ids_continue_past_the_range_once_it_is_full(monkeypatch, register, facility_user):
    monkeypatch.setattr("emtct_core.infants.repository.ID_RANGE", (1000, 1001))

    ids = [register(facility_user).id for _ in range(4)]

    assert sorted(ids[:2]) == ["INF-1000", "INF-1001"]
    assert ids[2:] == ["INF-1002", "INF-1003"]


# ----------------------------------------------------------------------
# updates
# ----------------------------------------------------------------------

def test_record_test_result_sets_done_date_and_result_together(repository, register, facility_user):
    infant = register(facility_user)
    result = repository.update_infant(
        facility_user,
        infant.id,
        RecordTestResult(slot=ScheduleSlot.PCR1, done_date=date(2024, 2, 10), result=LabResult.NEGATIVE),
    )

    pcr1 = result.unwrap().test(ScheduleSlot.PCR1)
    assert pcr1.done_date == date(2024, 2, 10)
    assert pcr1.result == LabResult.NEGATIVE
    assert pcr1.due_date == infant.pcr1.due_date


def test_update_outside_scope_is_refused_and_changes_nothing(repository, register, facility_user, other_facility_user):
    infant = register(facility_user)
    before = infant.to_dict()

    result = repository.update_infant(other_facility_user, infant.id, ChangeStatus(InfantStatus.DECEASED))

    assert isinstance(result.error, OutOfScope)
    assert repository.get_for_user(facility_user, infant.id).value.to_dict() == before
    assert repository.audit_for_user(facility_user) == []


def test_district_user_cannot_update_outside_district(repository, register, district_user, other_facility_user):
    wakiso = register(other_facility_user)

    result = repository.update_infant(district_user, wakiso.id, ChangeStatus(InfantStatus.DECEASED))

    assert isinstance(result.error, OutOfScope)
    assert repository.all_infants() == [wakiso]
    assert repository.audit_for_user(other_facility_user) == []


def test_update_unknown_infant(repository, facility_user):
    result = repository.update_infant(facility_user, "INF-404", ChangeStatus(InfantStatus.ACTIVE))
    assert isinstance(result.error, InfantNotFound)


def test_final_outcome_drives_status(repository, register, district_user, facility_user):
    infant = register(facility_user)

    negative = repository.update_infant(district_user, infant.id, RecordFinalOutcome(FinalOutcome.NEGATIVE)).unwrap()
    assert (negative.final_outcome, negative.status) == (FinalOutcome.NEGATIVE, InfantStatus.DISCHARGED)

    positive = repository.update_infant(district_user, infant.id, RecordFinalOutcome(FinalOutcome.POSITIVE)).unwrap()
    assert (positive.final_outcome, positive.status) == (FinalOutcome.POSITIVE, InfantStatus.ACTIVE)


def test_each_changed_field_is_audited(repository, register, facility_user):
    infant = register(facility_user)
    repository.update_infant(facility_user, infant.id, RecordFinalOutcome(FinalOutcome.NEGATIVE)).unwrap()

    entries = repository.audit_for_user(facility_user, infant_id=infant.id)
    assert [(e.field, json.loads(e.old_value), json.loads(e.new_value)) for e in entries] == [
        ("finalOutcome", None, "Negative"),
        ("status", "Active", "Discharged"),
    ]
    assert {e.user for e in entries} == {facility_user.email}
    assert repository.store.load_audit() == entries


def test_noop_update_does_not_touch_store(facility_user):
    store = CountingStore()
    repo = InfantRepository(store)
    infant = repo.register_infant(facility_user, InfantDraft("Baby", "MOM-1", "2024-01-01")).unwrap()
    saves = store.saves

    result = repo.update_infant(facility_user, infant.id, ChangeStatus(InfantStatus.ACTIVE))

    assert result.ok
    assert store.saves == saves
    assert repo.audit_for_user(facility_user) == []


def test_audit_is_scoped_like_records(repository, register, facility_user, other_facility_user, admin_user):
    mine = register(facility_user)
    theirs = register(other_facility_user)
    repository.update_infant(facility_user, mine.id, ChangeStatus(InfantStatus.LOST_TO_FOLLOW_UP)).unwrap()
    repository.update_infant(other_facility_user, theirs.id, ChangeStatus(InfantStatus.DECEASED)).unwrap()

    assert [e.infant_id for e in repository.audit_for_user(facility_user)] == [mine.id]
    assert [e.infant_id for e in repository.audit_for_user(admin_user)] == [mine.id, theirs.id]


# ----------------------------------------------------------------------
# persistence
# ----------------------------------------------------------------------

def test_store_failure_is_reported_and_memory_keeps_the_change(facility_user):
    repo = InfantRepository(FailingStore())
    result = repo.register_infant(facility_user, InfantDraft("Baby", "MOM-1", "2024-01-01"))

    assert isinstance(result.error, PersistenceFailed)
    assert result.value is not None
    assert repo.list_for_user(facility_user) == [result.value]


def test_state_reloads_from_store(store, facility_user):
    repo = InfantRepository(store)
    infant = repo.register_infant(facility_user, InfantDraft("Baby", "MOM-1", "2024-01-01")).unwrap()
    repo.update_infant(facility_user, infant.id, ChangeStatus(InfantStatus.DECEASED)).unwrap()

    reloaded = InfantRepository(store)

    assert reloaded.list_for_user(facility_user)[0].status == InfantStatus.DECEASED
    assert len(reloaded.audit_for_user(facility_user)) == 1


def test_audit_from_a_failed_register_write_reaches_the_store_on_the_next_write(facility_user):
    store = FlakyStore()
    repo = InfantRepository(store)
    infant = repo.register_infant(facility_user, InfantDraft("Baby", "MOM-1", "2024-01-01")).unwrap()

    store.infants_down = True
    failed = repo.update_infant(facility_user, infant.id, ChangeStatus(InfantStatus.DECEASED))
    assert isinstance(failed.error, PersistenceFailed)
    assert failed.value.status == InfantStatus.DECEASED

    store.infants_down = False
    repo.update_infant(facility_user, infant.id, ChangeStatus(InfantStatus.LOST_TO_FOLLOW_UP)).unwrap()

    reloaded = InfantRepository(store)
    assert reloaded.list_for_user(facility_user)[0].status == InfantStatus.LOST_TO_FOLLOW_UP
    assert [(json.loads(e.old_value), json.loads(e.new_value)) for e in reloaded.audit_for_user(facility_user)] == [
        ("Active", "Deceased"),
        ("Deceased", "Lost to Follow Up"),
    ]


def test_failed_audit_append_is_retried_in_order(facility_user):
    store = FlakyStore()
    repo = InfantRepository(store)
    infant = repo.register_infant(facility_user, InfantDraft("Baby", "MOM-1", "2024-01-01")).unwrap()

    store.audit_down = True
    failed = repo.update_infant(facility_user, infant.id, ChangeStatus(InfantStatus.DECEASED))
    assert isinstance(failed.error, PersistenceFailed)
    assert store.load_audit() == []

    store.audit_down = False
    repo.update_infant(facility_user, infant.id, ChangeStatus(InfantStatus.ACTIVE)).unwrap()

    assert store.load_audit() == repo.audit_for_user(facility_user)
    assert [e.new_value for e in store.load_audit()] == ['"Deceased"', '"Active"']


def test_audit_timestamps_come_from_the_repository_clock(repository, register, facility_user, now):
    infant = register(facility_user)
    repository.update_infant(facility_user, infant.id, ChangeStatus(InfantStatus.DECEASED)).unwrap()

    assert [e.timestamp for e in repository.audit_for_user(facility_user)] == [now]


def test_replace_all_clears_the_audit_history(repository, register, facility_user, admin_user):
    infant = register(facility_user)
    repository.update_infant(facility_user, infant.id, ChangeStatus(InfantStatus.DECEASED)).unwrap()
    fresh = infant.with_changes(infant_name="Reseeded")

    repository.replace_all([fresh]).unwrap()

    assert repository.all_infants() == [fresh]
    assert repository.audit_for_user(admin_user) == []
    assert repository.store.load_audit() == []
    assert InfantRepository(repository.store).audit_for_user(admin_user) == []


def test_record_document_is_lossless(register, facility_user):
    infant = register(facility_user)
    assert InfantRecord.from_dict(infant.to_dict()) == infant
    assert infant.to_dict()["pcr1"] == {"dueDate": "2024-02-12", "doneDate": None, "result": None}


# ----------------------------------------------------------------------
# end to end
# ----------------------------------------------------------------------

def test_recorded_negative_pcr1_clears_reminders(repository, register, facility_user, now):
    infant = register(facility_user, dob="2024-01-01")
    assert infant.pcr1.due_date == date(2024, 2, 12)

    repository.update_infant(
        facility_user,
        infant.id,
        RecordTestResult(slot=ScheduleSlot.PCR1, done_date=date(2024, 2, 10), result=LabResult.NEGATIVE),
    ).unwrap()

    stats = repository.stats_for_user(facility_user, now)
    assert stats.total_infants == 1
    assert stats.overdue == 0
    assert stats.due_soon == 0
    assert stats.positivity_rate == 0.0
    assert repository.reminders_for_user(facility_user) == []

# emtct_core/audit/tests/test_audit_api.py
import json

import pytest

from emtct_core.infants.records import FinalOutcome, InfantStatus
from emtct_core.infants.updates import ChangeStatus, RecordFinalOutcome

pytestmark = pytest.mark.django_db


def test_audit_entries_are_scoped_and_filterable(
    repository, register, api_client_for, facility_user, other_facility_user, admin_user
):
    mine = register(facility_user)
    theirs = register(other_facility_user)
    repository.update_infant(facility_user, mine.id, RecordFinalOutcome(FinalOutcome.NEGATIVE)).unwrap()
    repository.update_infant(other_facility_user, theirs.id, ChangeStatus(InfantStatus.DECEASED)).unwrap()

    rows = api_client_for(facility_user).get("/api/v1/audit/entries/").json()
    assert [(r["infant_id"], r["field"]) for r in rows] == [(mine.id, "finalOutcome"), (mine.id, "status")]
    assert rows[0]["user"] == facility_user.email
    assert json.loads(rows[1]["new_value"]) == "Discharged"

    admin = api_client_for(admin_user)
    assert len(admin.get("/api/v1/audit/entries/").json()) == 3
    assert [r["field"] for r in admin.get("/api/v1/audit/entries/", {"infant_id": theirs.id}).json()] == ["status"]

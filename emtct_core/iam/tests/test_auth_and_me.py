# emtct_core/iam/tests/test_auth_and_me.py
import pytest
from rest_framework.test import APIClient

from emtct_core.iam.directory import find_user
from emtct_core.iam.tokens import issue_tokens

pytestmark = pytest.mark.django_db


def test_me_requires_auth():
    res = APIClient().get("/api/v1/me/")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "not_authenticated"


def test_directory_lookup_is_case_insensitive():
    assert find_user("  Kibuli.Focal@EMTCT.gov ").name == "Mary Jane"
    assert find_user("nobody@emtct.gov") is None


def test_login_sets_cookies_and_returns_tokens(settings):
    res = APIClient().post("/api/v1/auth/login/", {"email": "kibuli.focal@emtct.gov"}, format="json")
    assert res.status_code == 200

    body = res.json()
    assert body["user"]["role"] == "Facility EMTCT Focal Point"
    assert body["access"] and body["refresh"]
    assert settings.SIMPLE_JWT["AUTH_COOKIE"] in res.cookies
    assert settings.SIMPLE_JWT["AUTH_COOKIE_REFRESH"] in res.cookies


def test_login_with_unknown_email_is_401():
    res = APIClient().post("/api/v1/auth/login/", {"email": "ghost@emtct.gov"}, format="json")
    assert res.status_code == 401


def test_bearer_token_resolves_directory_user():
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_tokens(find_user('kampala.lead@emtct.gov'))['access']}")

    res = client.get("/api/v1/me/")
    assert res.status_code == 200
    assert res.json()["user"]["email"] == "kampala.lead@emtct.gov"
    assert res.json()["scope"] == {"level": "district", "facility": None, "district": "Kampala"}


def test_cookie_login_then_me_then_refresh_then_logout():
    client = APIClient()
    client.post("/api/v1/auth/login/", {"email": "admin@emtct.gov"}, format="json")

    me = client.get("/api/v1/me/")
    assert me.status_code == 200
    assert me.json()["scope"]["level"] == "national"

    refreshed = client.post("/api/v1/auth/refresh/")
    assert refreshed.status_code == 200
    assert refreshed.json()["access"]

    assert client.post("/api/v1/auth/logout/").status_code == 200


def test_refresh_without_token_is_401():
    assert APIClient().post("/api/v1/auth/refresh/").status_code == 401


def test_user_directory_is_admin_only(api_client_for, admin_user, district_user):
    res = api_client_for(admin_user).get("/api/v1/users/")
    assert res.status_code == 200
    assert len(res.json()["users"]) == 3
    assert {f["code"] for f in res.json()["facilities"]} == {"KH-001", "MH-002", "EG-003", "KC-004"}

    assert api_client_for(district_user).get("/api/v1/users/").status_code == 403


def test_user_directory_filters_facilities_by_district(api_client_for, admin_user):
    res = api_client_for(admin_user).get("/api/v1/users/", {"district": "Wakiso"})
    assert res.status_code == 200
    assert [f["name"] for f in res.json()["facilities"]] == ["Entebbe General", "Kira Health Clinic"]
    assert len(res.json()["districts"]) == 2

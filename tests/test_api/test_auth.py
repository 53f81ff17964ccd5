"""Integration tests for role headers and scoped access across the API."""

from __future__ import annotations

from fastapi.testclient import TestClient

from src.config import get_settings


def _as(role: str, district: str | None = None, school_id: int | None = None) -> dict[str, str]:
    headers = {"X-User-Role": role}
    if district is not None:
        headers["X-User-District"] = district
    if school_id is not None:
        headers["X-User-School-Id"] = str(school_id)
    return headers


GULU_ADMIN = _as("district_admin", district="Gulu")
GULU_HEAD = _as("school_admin", school_id=2)
GULU_COORDINATOR = _as("ict_coordinator", school_id=2)
OBSERVER = _as("observer")
ANALYST = _as("data_analyst")


# ---------------------------------------------------------------------------
# Identity headers
# ---------------------------------------------------------------------------


class TestIdentityHeaders:
    def test_no_header_acts_as_super_admin_when_auth_disabled(self, test_client: TestClient):
        data = test_client.get("/api/auth/permissions").json()
        assert data["role"] == "super_admin"
        assert data["display_name"] == "Super Administrator"
        assert data["permissions"]["can_delete_schools"] is True

    def test_no_header_rejected_when_auth_enabled(self, test_client: TestClient, monkeypatch):
        monkeypatch.setenv("AUTH_ENABLED", "true")
        get_settings.cache_clear()
        assert test_client.get("/api/schools").status_code == 401
        assert test_client.get("/api/schools", headers=OBSERVER).status_code == 200

    def test_unknown_role(self, test_client: TestClient):
        response = test_client.get("/api/schools", headers=_as("janitor"))
        assert response.status_code == 401

    def test_district_admin_needs_district(self, test_client: TestClient):
        assert test_client.get("/api/schools", headers=_as("district_admin")).status_code == 401

    def test_school_roles_need_school(self, test_client: TestClient):
        assert test_client.get("/api/schools", headers=_as("school_admin")).status_code == 401
        assert test_client.get("/api/schools", headers=_as("ict_coordinator")).status_code == 401

    def test_permissions_of_district_admin(self, test_client: TestClient):
        data = test_client.get("/api/auth/permissions", headers=GULU_ADMIN).json()
        assert data["display_name"] == "District Administrator"
        assert data["permissions"]["restricted_to_district"] == "Gulu"
        assert data["permissions"]["can_delete_schools"] is False


# ---------------------------------------------------------------------------
# Schools
# ---------------------------------------------------------------------------


class TestScopedSchools:
    def test_district_admin_lists_own_district(self, test_client: TestClient):
        body = test_client.get("/api/schools", headers=GULU_ADMIN).json()
        assert body["total"] == 1
        assert [s["district"] for s in body["data"]] == ["Gulu"]

    def test_district_admin_other_district_filter_is_empty(self, test_client: TestClient):
        body = test_client.get("/api/schools", params={"district": "Kampala"}, headers=GULU_ADMIN).json()
        assert body["total"] == 0
        assert body["data"] == []

    def test_school_admin_lists_only_own_school(self, test_client: TestClient):
        body = test_client.get("/api/schools", headers=GULU_HEAD).json()
        assert [s["id"] for s in body["data"]] == [2]

    def test_observer_lists_everything(self, test_client: TestClient):
        assert test_client.get("/api/schools", headers=OBSERVER).json()["total"] == 3

    def test_detail_outside_scope_is_forbidden(self, test_client: TestClient):
        assert test_client.get("/api/schools/1", headers=GULU_ADMIN).status_code == 403
        assert test_client.get("/api/schools/2", headers=GULU_ADMIN).status_code == 200
        assert test_client.get("/api/schools/1/maturity", headers=GULU_HEAD).status_code == 403
        assert test_client.get("/api/schools/2/maturity", headers=GULU_HEAD).status_code == 200

    def test_unknown_school_is_still_404(self, test_client: TestClient):
        assert test_client.get("/api/schools/99999", headers=GULU_HEAD).status_code == 404

    def test_create_school_in_scope(self, test_client: TestClient):
        inside = {"name": "Gulu Hill School", "district": "Gulu"}
        outside = {"name": "Kampala Hill School", "district": "Kampala"}
        assert test_client.post("/api/schools", json=inside, headers=GULU_ADMIN).status_code == 201
        assert test_client.post("/api/schools", json=outside, headers=GULU_ADMIN).status_code == 403

    def test_read_only_roles_cannot_create(self, test_client: TestClient):
        payload = {"name": "Gulu Hill School", "district": "Gulu"}
        assert test_client.post("/api/schools", json=payload, headers=OBSERVER).status_code == 403
        assert test_client.post("/api/schools", json=payload, headers=GULU_HEAD).status_code == 403

    def test_district_admin_cannot_move_school_out_of_district(self, test_client: TestClient):
        payload = {"name": "Gulu Rural Primary School", "district": "Kampala"}
        assert test_client.put("/api/schools/2", json=payload, headers=GULU_ADMIN).status_code == 403

    def test_only_super_admin_deletes_schools(self, test_client: TestClient):
        assert test_client.delete("/api/schools/2", headers=GULU_ADMIN).status_code == 403
        assert test_client.delete("/api/schools/2", headers=_as("ministry_admin")).status_code == 403
        assert test_client.delete("/api/schools/2", headers=_as("super_admin")).status_code == 204


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


def _report_payload(school_id: int) -> dict:
    return {
        "school_id": school_id,
        "date": "2024-09-01",
        "period": "SEP 2024",
        "infrastructure": {"computers": 8},
    }


class TestScopedReports:
    def test_school_admin_lists_own_reports(self, test_client: TestClient):
        reports = test_client.get("/api/reports", headers=GULU_HEAD).json()
        assert [r["id"] for r in reports] == [3]

    def test_school_admin_asking_for_other_school_gets_nothing(self, test_client: TestClient):
        assert test_client.get("/api/reports", params={"school_id": 1}, headers=GULU_HEAD).json() == []

    def test_district_admin_lists_district_reports(self, test_client: TestClient):
        reports = test_client.get("/api/reports", headers=GULU_ADMIN).json()
        assert [r["id"] for r in reports] == [3]

    def test_report_outside_scope_is_forbidden(self, test_client: TestClient):
        assert test_client.get("/api/reports/1", headers=GULU_HEAD).status_code == 403
        assert test_client.get("/api/reports/1/observation", headers=GULU_ADMIN).status_code == 403
        assert test_client.get("/api/reports/3", headers=GULU_HEAD).status_code == 200

    def test_coordinator_submits_for_own_school_only(self, test_client: TestClient):
        own = test_client.post("/api/reports", json=_report_payload(2), headers=GULU_COORDINATOR)
        other = test_client.post("/api/reports", json=_report_payload(1), headers=GULU_COORDINATOR)
        assert own.status_code == 201
        assert other.status_code == 403

    def test_observer_cannot_submit(self, test_client: TestClient):
        assert test_client.post("/api/reports", json=_report_payload(2), headers=OBSERVER).status_code == 403

    def test_school_admin_cannot_delete_reports(self, test_client: TestClient):
        assert test_client.delete("/api/reports/3", headers=GULU_HEAD).status_code == 403
        assert test_client.get("/api/reports/3").status_code == 200

    def test_coordinator_cannot_reassign_report_to_other_school(self, test_client: TestClient):
        response = test_client.put("/api/reports/3", json=_report_payload(1), headers=GULU_COORDINATOR)
        assert response.status_code == 403


# ---------------------------------------------------------------------------
# Aggregate views
# ---------------------------------------------------------------------------


class TestScopedAggregates:
    def test_dashboard_requires_analytics(self, test_client: TestClient):
        assert test_client.get("/api/dashboard/summary", headers=OBSERVER).status_code == 403
        assert test_client.get("/api/dashboard/alerts", headers=GULU_COORDINATOR).status_code == 403
        assert test_client.get("/api/dashboard/summary", headers=ANALYST).json()["total_schools"] == 3

    def test_dashboard_is_scoped_to_district(self, test_client: TestClient):
        data = test_client.get("/api/dashboard/summary", headers=GULU_ADMIN).json()
        assert data["total_schools"] == 1
        assert data["district_distribution"] == {"Gulu": 1}

    def test_map_is_scoped_to_school(self, test_client: TestClient):
        markers = test_client.get("/api/map/markers", headers=GULU_HEAD).json()
        assert [m["school_id"] for m in markers] == [2]

    def test_compare_skips_schools_outside_scope(self, test_client: TestClient):
        entries = test_client.get("/api/compare", params={"ids": "1,2"}, headers=GULU_HEAD).json()["schools"]
        assert [e["school"]["id"] for e in entries] == [2]

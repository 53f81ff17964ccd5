"""Integration tests for the observation reports API."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


def _report_payload(school_id: int = 3, **overrides) -> dict:
    payload = {
        "school_id": school_id,
        "date": "2024-09-01",
        "period": "SEP 2024",
        "infrastructure": {
            "computers": 40,
            "tablets": 10,
            "projectors": 2,
            "internet_connection": "Medium",
            "power_backup": True,
            "functional_devices": 45,
        },
        "usage": {"teachers_using_ict": 6, "total_teachers": 12, "student_digital_literacy_rate": 55},
        "capacity": {"ict_trained_teachers": 6, "support_staff": 1},
    }
    payload.update(overrides)
    return payload


class TestReportsList:
    def test_all_reports(self, test_client: TestClient):
        reports = test_client.get("/api/reports").json()
        assert [r["id"] for r in reports] == [1, 2, 3]

    def test_filter_by_school(self, test_client: TestClient):
        reports = test_client.get("/api/reports", params={"school_id": 2}).json()
        assert [r["id"] for r in reports] == [3]

    def test_filter_by_period(self, test_client: TestClient):
        reports = test_client.get("/api/reports", params={"period": "JAN 2024"}).json()
        assert [r["id"] for r in reports] == [1]


class TestReportCrud:
    def test_get_report(self, test_client: TestClient):
        data = test_client.get("/api/reports/2").json()
        assert data["school_id"] == 1
        assert data["date"] == "2024-06-15"
        assert data["infrastructure"]["internet_connection"] == "Fast"

    def test_get_missing_report(self, test_client: TestClient):
        assert test_client.get("/api/reports/999").status_code == 404

    def test_create_report_changes_maturity(self, test_client: TestClient):
        before = test_client.get("/api/schools/3").json()

        response = test_client.post("/api/reports", json=_report_payload())
        assert response.status_code == 201
        assert response.json()["period"] == "SEP 2024"

        after = test_client.get("/api/schools/3").json()
        assert after["report_count"] == 1
        assert after["policy_maturity"]["ict_infrastructure"]["sub_scores"]["equipment"]["score"] == 100
        assert after["policy_maturity"]["overall_score"] > before["policy_maturity"]["overall_score"]
        assert after["readiness"]["score"] > 0

    def test_create_report_for_unknown_school(self, test_client: TestClient):
        response = test_client.post("/api/reports", json=_report_payload(school_id=999))
        assert response.status_code == 400

    def test_create_report_invalid_connection(self, test_client: TestClient):
        payload = _report_payload(infrastructure={"internet_connection": "Warp"})
        assert test_client.post("/api/reports", json=payload).status_code == 422

    @pytest.mark.parametrize(
        "overrides",
        [
            {"infrastructure": {"computers": -500}},
            {"infrastructure": {"functional_devices": -1}},
            {"infrastructure": {"internet_speed_mbps": -2.5}},
            {"usage": {"teachers_using_ict": 5, "total_teachers": -1}},
            {"usage": {"student_digital_literacy_rate": 101}},
            {"usage": {"student_digital_literacy_rate": -5}},
            {"usage": {"weekly_computer_lab_hours": -1}},
            {"capacity": {"support_staff": -2}},
        ],
    )
    def test_create_report_rejects_out_of_range_figures(self, test_client: TestClient, overrides):
        response = test_client.post("/api/reports", json=_report_payload(school_id=2, **overrides))
        assert response.status_code == 422
        # nothing stored, readiness unchanged
        assert test_client.get("/api/schools/2/readiness").json() == {"level": "Low", "score": 7.0}

    def test_create_report_accepts_bounds(self, test_client: TestClient):
        payload = _report_payload(
            usage={"teachers_using_ict": 0, "total_teachers": 0, "student_digital_literacy_rate": 100},
            capacity={"ict_trained_teachers": 0, "support_staff": 0},
        )
        assert test_client.post("/api/reports", json=payload).status_code == 201

    def test_update_report_rejects_negative_counts(self, test_client: TestClient):
        payload = _report_payload(school_id=2, infrastructure={"computers": -1})
        assert test_client.put("/api/reports/3", json=payload).status_code == 422

    def test_create_report_requires_period(self, test_client: TestClient):
        assert test_client.post("/api/reports", json=_report_payload(period="")).status_code == 422

    def test_update_report(self, test_client: TestClient):
        payload = _report_payload(school_id=2, period="JUN 2024", date="2024-06-20")
        response = test_client.put("/api/reports/3", json=payload)
        assert response.status_code == 200
        assert response.json()["infrastructure"]["computers"] == 40

    def test_update_missing_report(self, test_client: TestClient):
        assert test_client.put("/api/reports/999", json=_report_payload()).status_code == 404

    def test_update_missing_report_with_unknown_school(self, test_client: TestClient):
        response = test_client.put("/api/reports/999", json=_report_payload(school_id=999))
        assert response.status_code == 404
        assert response.json()["detail"] == "Report not found"

    def test_update_report_to_unknown_school(self, test_client: TestClient):
        response = test_client.put("/api/reports/3", json=_report_payload(school_id=999))
        assert response.status_code == 400

    def test_delete_latest_report_lowers_maturity(self, test_client: TestClient):
        before = test_client.get("/api/schools/1").json()["policy_maturity"]["overall_score"]
        assert test_client.delete("/api/reports/2").status_code == 204
        after = test_client.get("/api/schools/1").json()["policy_maturity"]["overall_score"]
        assert before == 88
        assert after == 81

    def test_delete_missing_report(self, test_client: TestClient):
        assert test_client.delete("/api/reports/999").status_code == 404


class TestObservationReport:
    def test_observation_content(self, test_client: TestClient):
        response = test_client.get("/api/reports/3/observation")
        assert response.status_code == 200
        data = response.json()

        assert data["school_name"] == "Gulu Rural Primary School"
        assert data["report"]["id"] == 3
        assert data["summary"]["teacher_usage_percent"] == 20
        assert data["summary"]["has_internet"] is False
        assert data["summary"]["readiness_score"] == 7
        assert data["readiness"] == {"level": "Low", "score": 7.0}
        assert [a["category"] for a in data["action_items"]] == [
            "Infrastructure",
            "Training",
            "Connectivity",
            "Curriculum",
            "Staffing",
        ]

    def test_observation_for_strong_report(self, test_client: TestClient):
        data = test_client.get("/api/reports/2/observation").json()
        assert data["readiness"]["level"] == "High"
        assert data["action_items"] == []

    def test_observation_missing_report(self, test_client: TestClient):
        assert test_client.get("/api/reports/999/observation").status_code == 404

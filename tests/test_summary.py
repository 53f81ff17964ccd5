"""Tests for dashboard roll-ups (src.services.summary)."""

from __future__ import annotations

import datetime

import pytest

from src.schemas.report import ICTReport, ReportCapacity, ReportInfrastructure, ReportUsage
from src.schemas.school import School
from src.services.summary import (
    calculate_summary_stats,
    dashboard_alerts,
    infrastructure_comparison,
    performance_metrics,
    readiness_distribution,
)


@pytest.fixture()
def schools() -> list[School]:
    return [
        School(id=1, name="Kampala Model", district="Kampala", environment="Urban"),
        School(id=2, name="Gulu Rural", district="Gulu", environment="Rural"),
        School(id=3, name="Kampala Hill", district="Kampala", environment="Urban"),
    ]


@pytest.fixture()
def reports() -> list[ICTReport]:
    return [
        ICTReport(
            id=1,
            school_id=1,
            date=datetime.date(2024, 1, 15),
            period="JAN 2024",
            infrastructure=ReportInfrastructure(computers=20, internet_connection="Slow", functional_devices=15),
        ),
        ICTReport(
            id=2,
            school_id=1,
            date=datetime.date(2024, 6, 15),
            period="JUN 2024",
            infrastructure=ReportInfrastructure(
                computers=60,
                tablets=30,
                projectors=5,
                printers=2,
                internet_connection="Fast",
                power_backup=True,
                functional_devices=80,
            ),
            usage=ReportUsage(
                teachers_using_ict=30,
                total_teachers=40,
                weekly_computer_lab_hours=50,
                student_digital_literacy_rate=80,
            ),
            capacity=ReportCapacity(ict_trained_teachers=30, support_staff=2),
        ),
        ICTReport(
            id=3,
            school_id=2,
            date=datetime.date(2024, 6, 20),
            period="JUN 2024",
            infrastructure=ReportInfrastructure(
                computers=5,
                tablets=0,
                internet_connection="None",
                power_backup=False,
                functional_devices=4,
            ),
            usage=ReportUsage(
                teachers_using_ict=2,
                total_teachers=10,
                weekly_computer_lab_hours=2,
                student_digital_literacy_rate=20,
            ),
            capacity=ReportCapacity(ict_trained_teachers=1, support_staff=0),
        ),
    ]


class TestSummaryStats:
    def test_counts_and_averages(self, schools, reports):
        stats = calculate_summary_stats(schools, reports)

        assert stats.total_schools == 3
        assert stats.schools_with_internet_percent == pytest.approx(100 / 3)
        assert stats.average_computers == pytest.approx(65 / 3)
        assert stats.district_distribution == {"Kampala": 2, "Gulu": 1}
        assert stats.environment_distribution.urban == 2
        assert stats.environment_distribution.rural == 1

    def test_top_schools_by_readiness(self, schools, reports):
        stats = calculate_summary_stats(schools, reports, top_n=2)
        assert [s.school_id for s in stats.top_schools] == [1, 2]
        assert stats.top_schools[0].score == 61

    def test_empty_collection(self):
        stats = calculate_summary_stats([], [])
        assert stats.total_schools == 0
        assert stats.schools_with_internet_percent == 0
        assert stats.average_computers == 0
        assert stats.top_schools == []


class TestReadinessDistribution:
    def test_buckets(self, schools, reports):
        buckets = {b.name: b for b in readiness_distribution(schools, reports)}
        assert buckets["High"].value == 1
        assert buckets["Medium"].value == 0
        assert buckets["Low"].value == 2
        assert buckets["Low"].percentage == 66.7

    def test_empty(self):
        assert all(b.value == 0 and b.percentage == 0 for b in readiness_distribution([], []))


class TestPerformanceMetrics:
    def test_none_without_reports(self):
        assert performance_metrics([]) is None

    def test_latest_period_averages(self, reports):
        metrics = performance_metrics(reports)

        assert metrics.period == "JUN 2024"
        assert metrics.total_observations == 2
        assert metrics.infrastructure.avg_computers == 33
        assert metrics.infrastructure.avg_functional_devices == 42
        assert metrics.infrastructure.internet_access_percent == 50
        assert metrics.infrastructure.power_backup_percent == 50
        assert metrics.usage.avg_teacher_usage == 48
        assert metrics.usage.avg_student_literacy == 50
        assert metrics.usage.avg_weekly_hours == 26
        assert metrics.capacity.avg_trained_teachers == 43
        assert metrics.capacity.avg_support_staff == 1.0


class TestDashboardAlerts:
    def test_latest_period_alerts(self, reports):
        alerts = dashboard_alerts(reports)
        assert [a.title for a in alerts] == [
            "Internet Connectivity",
            "Low Teacher ICT Usage",
            "Limited Devices",
        ]
        assert alerts[0].message == "1 schools have no internet connection"
        assert alerts[1].type == "error"

    def test_no_alerts_without_reports(self):
        assert dashboard_alerts([]) == []


class TestInfrastructureComparison:
    def test_urban_versus_rural(self, schools, reports):
        rows = {r.name: r for r in infrastructure_comparison(schools, reports)}
        # Kampala Hill has no reports, so the urban average covers one school
        assert rows["Computers"].urban == 60
        assert rows["Computers"].rural == 5
        assert rows["Tablets"].urban == 30
        assert rows["Tablets"].rural == 0
        assert rows["Printers"].urban == 2

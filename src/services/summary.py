"""Roll-up statistics across a collection of schools and their reports.

Everything here uses the report-only readiness path
(:func:`src.services.readiness.calculate_ict_readiness_level`), matching the
dashboard and map views.
"""

from __future__ import annotations

from collections.abc import Sequence

from src.schemas.dashboard import (
    CapacityMetrics,
    DashboardAlert,
    EnvironmentDistribution,
    InfrastructureComparisonRow,
    InfrastructureMetrics,
    PerformanceMetrics,
    ReadinessBucket,
    SummaryStats,
    TopSchool,
    UsageMetrics,
)
from src.schemas.report import ICTReport
from src.schemas.school import School
from src.services.numbers import round_half_up, safe_ratio
from src.services.readiness import calculate_ict_readiness_level
from src.services.reports import get_latest_report, group_reports_by_school, latest_period, report_has_internet

DEFAULT_TOP_SCHOOLS = 5

LOW_USAGE_RATIO = 0.3
LOW_DEVICE_COUNT = 10

DEVICE_CATEGORIES: dict[str, str] = {
    "Computers": "computers",
    "Tablets": "tablets",
    "Projectors": "projectors",
    "Printers": "printers",
}


def _infra(report: ICTReport, name: str) -> float:
    if report.infrastructure is None:
        return 0
    return getattr(report.infrastructure, name) or 0


def _usage(report: ICTReport, name: str) -> float | None:
    return getattr(report.usage, name) if report.usage else None


def _capacity(report: ICTReport, name: str) -> float | None:
    return getattr(report.capacity, name) if report.capacity else None


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def calculate_summary_stats(
    schools: Sequence[School],
    reports: Sequence[ICTReport],
    top_n: int = DEFAULT_TOP_SCHOOLS,
) -> SummaryStats:
    """Aggregate headline statistics across *schools*."""
    by_school = group_reports_by_school(reports)

    schools_with_internet = 0
    total_computers = 0.0
    readiness_scores: list[TopSchool] = []
    district_distribution: dict[str, int] = {}
    environment = EnvironmentDistribution()

    for school in schools:
        school_reports = by_school.get(school.id, [])
        latest = get_latest_report(school.id, school_reports)

        if latest is not None:
            if report_has_internet(latest):
                schools_with_internet += 1
            total_computers += _infra(latest, "computers")

        readiness = calculate_ict_readiness_level(school_reports)
        readiness_scores.append(TopSchool(school_id=school.id, name=school.name, score=readiness.score))

        district_distribution[school.district] = district_distribution.get(school.district, 0) + 1

        if school.environment == "Urban":
            environment.urban += 1
        else:
            environment.rural += 1

    total_schools = len(schools)
    top_schools = sorted(readiness_scores, key=lambda s: s.score, reverse=True)[:top_n]

    return SummaryStats(
        total_schools=total_schools,
        schools_with_internet_percent=safe_ratio(schools_with_internet, total_schools) * 100,
        average_computers=safe_ratio(total_computers, total_schools),
        top_schools=top_schools,
        district_distribution=district_distribution,
        environment_distribution=environment,
    )


def readiness_distribution(schools: Sequence[School], reports: Sequence[ICTReport]) -> list[ReadinessBucket]:
    """Count schools per readiness level, highest level first."""
    by_school = group_reports_by_school(reports)
    counts = {"High": 0, "Medium": 0, "Low": 0}
    for school in schools:
        level = calculate_ict_readiness_level(by_school.get(school.id, [])).level
        counts[level] += 1

    return [
        ReadinessBucket(
            name=level,
            value=count,
            percentage=round(safe_ratio(count, len(schools)) * 100, 1),
        )
        for level, count in counts.items()
    ]


def _latest_period_reports(reports: Sequence[ICTReport]) -> tuple[str | None, list[ICTReport]]:
    period = latest_period(reports)
    if period is None:
        return None, []
    return period, [r for r in reports if r.period == period]


def performance_metrics(reports: Sequence[ICTReport]) -> PerformanceMetrics | None:
    """Average infrastructure, usage and capacity figures for the latest period.

    Returns ``None`` when there are no reports.
    """
    period, current = _latest_period_reports(reports)
    if period is None:
        return None

    count = len(current)
    teacher_usage = [
        safe_ratio(_usage(r, "teachers_using_ict"), _usage(r, "total_teachers")) * 100 for r in current
    ]
    trained = [
        safe_ratio(_capacity(r, "ict_trained_teachers"), _usage(r, "total_teachers")) * 100 for r in current
    ]

    return PerformanceMetrics(
        infrastructure=InfrastructureMetrics(
            avg_computers=round_half_up(_mean([_infra(r, "computers") for r in current])),
            avg_functional_devices=round_half_up(_mean([_infra(r, "functional_devices") for r in current])),
            internet_access_percent=round_half_up(sum(report_has_internet(r) for r in current) / count * 100),
            power_backup_percent=round_half_up(sum(bool(_infra(r, "power_backup")) for r in current) / count * 100),
        ),
        usage=UsageMetrics(
            avg_teacher_usage=round_half_up(_mean(teacher_usage)),
            avg_student_literacy=round_half_up(
                _mean([_usage(r, "student_digital_literacy_rate") or 0 for r in current])
            ),
            avg_weekly_hours=round_half_up(_mean([_usage(r, "weekly_computer_lab_hours") or 0 for r in current])),
        ),
        capacity=CapacityMetrics(
            avg_trained_teachers=round_half_up(_mean(trained)),
            avg_support_staff=round_half_up(_mean([_capacity(r, "support_staff") or 0 for r in current]) * 10) / 10,
        ),
        total_observations=count,
        period=period,
    )


def dashboard_alerts(reports: Sequence[ICTReport]) -> list[DashboardAlert]:
    """Return warnings raised by the latest period's observations."""
    _period, current = _latest_period_reports(reports)
    alerts: list[DashboardAlert] = []

    no_internet = sum(1 for r in current if not report_has_internet(r))
    if no_internet:
        alerts.append(
            DashboardAlert(
                type="warning",
                title="Internet Connectivity",
                message=f"{no_internet} schools have no internet connection",
                action="Review connectivity infrastructure",
            )
        )

    low_usage = sum(
        1
        for r in current
        if safe_ratio(_usage(r, "teachers_using_ict"), _usage(r, "total_teachers")) < LOW_USAGE_RATIO
    )
    if low_usage:
        alerts.append(
            DashboardAlert(
                type="error",
                title="Low Teacher ICT Usage",
                message=f"{low_usage} schools have less than 30% teacher ICT usage",
                action="Implement teacher training programs",
            )
        )

    low_devices = sum(1 for r in current if _infra(r, "functional_devices") < LOW_DEVICE_COUNT)
    if low_devices:
        alerts.append(
            DashboardAlert(
                type="warning",
                title="Limited Devices",
                message=f"{low_devices} schools have fewer than 10 functional devices",
                action="Consider device procurement or repair",
            )
        )

    return alerts


def infrastructure_comparison(
    schools: Sequence[School],
    reports: Sequence[ICTReport],
) -> list[InfrastructureComparisonRow]:
    """Average device counts per category for urban versus rural schools."""
    by_school = group_reports_by_school(reports)
    latest_by_environment: dict[str, list[ICTReport]] = {"Urban": [], "Rural": []}
    for school in schools:
        latest = get_latest_report(school.id, by_school.get(school.id, []))
        if latest is not None and school.environment in latest_by_environment:
            latest_by_environment[school.environment].append(latest)

    rows = []
    for label, attr in DEVICE_CATEGORIES.items():
        averages = {
            env: round_half_up(_mean([_infra(r, attr) for r in env_reports]))
            for env, env_reports in latest_by_environment.items()
        }
        rows.append(InfrastructureComparisonRow(name=label, urban=averages["Urban"], rural=averages["Rural"]))
    return rows

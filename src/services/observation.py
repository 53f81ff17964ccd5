"""Headline figures and follow-up actions for a single observation report."""

from __future__ import annotations

from src.schemas.report import ActionItem, ICTReport, ObservationSummary
from src.services.numbers import round_half_up, safe_ratio
from src.services.readiness import score_report
from src.services.reports import report_has_internet

MIN_FUNCTIONAL_DEVICES = 10
MIN_TEACHER_USAGE_RATIO = 0.5
MIN_LITERACY_RATE = 50


def summarize_observation(report: ICTReport) -> ObservationSummary:
    """Return percentages and flags shown at the top of an observation report."""
    infra = report.infrastructure
    usage = report.usage
    capacity = report.capacity

    total_teachers = usage.total_teachers if usage else None
    teachers_using_ict = usage.teachers_using_ict if usage else None
    trained = capacity.ict_trained_teachers if capacity else None
    functional = (infra.functional_devices if infra else None) or 0
    devices = ((infra.computers or 0) + (infra.tablets or 0)) if infra else 0

    return ObservationSummary(
        teacher_usage_percent=round_half_up(safe_ratio(teachers_using_ict, total_teachers) * 100),
        trained_teachers_percent=round_half_up(safe_ratio(trained, total_teachers) * 100),
        device_utilization=round_half_up(safe_ratio(functional, devices) * 100),
        has_internet=report_has_internet(report),
        has_power_backup=bool(infra.power_backup) if infra else False,
        functional_devices=functional,
        student_literacy=(usage.student_digital_literacy_rate if usage else None) or 0,
        weekly_lab_hours=(usage.weekly_computer_lab_hours if usage else None) or 0,
        readiness_score=score_report(report),
    )


def observation_action_items(report: ICTReport) -> list[ActionItem]:
    """Return the immediate action items an observation calls for, most urgent first."""
    infra = report.infrastructure
    usage = report.usage
    capacity = report.capacity

    functional = (infra.functional_devices if infra else None) or 0
    usage_ratio = safe_ratio(
        usage.teachers_using_ict if usage else None,
        usage.total_teachers if usage else None,
    )
    literacy = (usage.student_digital_literacy_rate if usage else None) or 0
    support_staff = (capacity.support_staff if capacity else None) or 0

    items: list[ActionItem] = []
    if functional < MIN_FUNCTIONAL_DEVICES:
        items.append(
            ActionItem(
                priority="High Priority",
                category="Infrastructure",
                action="Repair or replace non-functional devices",
                timeline="30 days",
            )
        )
    if usage_ratio < MIN_TEACHER_USAGE_RATIO:
        items.append(
            ActionItem(
                priority="High Priority",
                category="Training",
                action="Conduct teacher ICT training workshop",
                timeline="60 days",
            )
        )
    if not report_has_internet(report):
        items.append(
            ActionItem(
                priority="Medium Priority",
                category="Connectivity",
                action="Establish internet connection",
                timeline="90 days",
            )
        )
    if literacy < MIN_LITERACY_RATE:
        items.append(
            ActionItem(
                priority="Medium Priority",
                category="Curriculum",
                action="Implement digital literacy program",
                timeline="120 days",
            )
        )
    if support_staff == 0:
        items.append(
            ActionItem(
                priority="Low Priority",
                category="Staffing",
                action="Assign ICT support staff",
                timeline="180 days",
            )
        )
    return items

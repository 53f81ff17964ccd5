"""Report-only ICT readiness scoring.

This is the quick heuristic behind map markers, dashboard badges and the
per-observation trend line.  It looks only at raw observation reports (no
school profile fields) and uses its own point table, so its numbers are not
comparable with the policy-maturity scores in :mod:`src.services.maturity`.

Point table (maximum 100)::

    computers                 min(15, round(computers / 100 * 15))
    internet connection       Fast 10, Medium 7, Slow 3
    power backup              5
    teachers using ICT        min(10, round(using / total * 10))
    computer lab hours        min(5, round(weekly_hours / 10))
    student digital literacy  min(10, round(rate / 10))
    ICT-trained teachers      min(15, round(trained / total * 15))
    support staff             min(5, staff * 2.5)
"""

from __future__ import annotations

from collections.abc import Sequence

from src.schemas.maturity import ICTReadinessLevel, ReadinessResult
from src.schemas.report import ICTReport
from src.services.numbers import round_half_up, safe_ratio

INTERNET_POINTS: dict[str, int] = {
    "Fast": 10,
    "Medium": 7,
    "Slow": 3,
}

POWER_BACKUP_POINTS = 5
IDEAL_COMPUTER_COUNT = 100

LOW_BELOW = 30
MEDIUM_BELOW = 60


def _readiness_level(score: float) -> ICTReadinessLevel:
    if score < LOW_BELOW:
        return "Low"
    if score < MEDIUM_BELOW:
        return "Medium"
    return "High"


def score_report(report: ICTReport) -> float:
    """Return the readiness points earned by a single observation report."""
    infra = report.infrastructure
    usage = report.usage
    capacity = report.capacity

    computers = (infra.computers if infra else None) or 0
    connection = infra.internet_connection if infra else None
    power_backup = bool(infra.power_backup) if infra else False

    total_teachers = usage.total_teachers if usage else None
    teachers_using_ict = usage.teachers_using_ict if usage else None
    lab_hours = (usage.weekly_computer_lab_hours if usage else None) or 0
    literacy_rate = (usage.student_digital_literacy_rate if usage else None) or 0

    trained = capacity.ict_trained_teachers if capacity else None
    support_staff = (capacity.support_staff if capacity else None) or 0

    score: float = 0

    # Infrastructure (0-30)
    score += min(15, round_half_up(computers / IDEAL_COMPUTER_COUNT * 15))
    score += INTERNET_POINTS.get(connection or "None", 0)
    if power_backup:
        score += POWER_BACKUP_POINTS

    # Usage (0-25)
    score += min(10, round_half_up(safe_ratio(teachers_using_ict, total_teachers) * 10))
    score += min(5, round_half_up(lab_hours / 10))
    score += min(10, round_half_up(literacy_rate / 10))

    # Capacity (0-20)
    score += min(15, round_half_up(safe_ratio(trained, total_teachers) * 15))
    score += min(5, support_staff * 2.5)

    return float(score)


def calculate_ict_readiness_level(reports: Sequence[ICTReport]) -> ReadinessResult:
    """Score a school's readiness from its most recent report.

    *reports* is expected to hold one school's reports; only the one with the
    latest ``date`` is scored.  An empty list scores ``Low`` with 0 points.
    """
    if not reports:
        return ReadinessResult(level="Low", score=0)

    latest = max(reports, key=lambda r: r.date)
    score = score_report(latest)
    return ReadinessResult(level=_readiness_level(score), score=score)


class ReportOnlyReadinessScorer:
    """Quick readiness heuristic computed from observation reports alone."""

    def score(self, reports: Sequence[ICTReport]) -> ReadinessResult:
        return calculate_ict_readiness_level(reports)

    def score_each(self, reports: Sequence[ICTReport]) -> list[ReadinessResult]:
        """Score every report on its own, e.g. for a per-period trend line."""
        return [calculate_ict_readiness_level([report]) for report in reports]

"""Maturity over time and against peer cohorts.

The trend scores the school's current profile against each report in turn;
profile history is not kept, so only the report-driven indicators move
between points.
"""

from __future__ import annotations

from collections.abc import Sequence

from src.schemas.maturity import (
    BenchmarkComparison,
    BenchmarkDelta,
    MaturityTrendPoint,
    SchoolPolicyMaturity,
)
from src.schemas.report import ICTReport
from src.schemas.school import School
from src.services.maturity import calculate_school_policy_maturity, determine_progress_stage

OVERALL_CODE = "overall"
OVERALL_NAME = "Overall Policy Maturity"


def maturity_trend(school: School, reports: Sequence[ICTReport]) -> list[MaturityTrendPoint]:
    """Maturity as it stood at each of the school's reports, oldest first."""
    ordered = sorted((r for r in reports if r.school_id == school.id), key=lambda r: r.date)
    points: list[MaturityTrendPoint] = []
    for report in ordered:
        maturity = calculate_school_policy_maturity(school, [report])
        points.append(
            MaturityTrendPoint(
                report_id=report.id,
                date=report.date,
                period=report.period,
                overall_score=maturity.overall_score,
                overall_stage=maturity.overall_stage,
                theme_scores={theme.code: theme.score for theme in maturity.core_themes()},
            )
        )
    return points


def _average(values: Sequence[int]) -> float:
    return sum(values) / len(values) if values else 0.0


def _delta(code: str, name: str, score: int, national: Sequence[int], district: Sequence[int]) -> BenchmarkDelta:
    national_average = _average(national)
    district_average = _average(district)
    return BenchmarkDelta(
        code=code,
        name=name,
        score=score,
        stage=determine_progress_stage(score),
        national_average=national_average,
        district_average=district_average,
        vs_national=score - national_average,
        vs_district=score - district_average,
    )


def compare_to_benchmarks(
    school: School,
    maturity: SchoolPolicyMaturity,
    national: Sequence[SchoolPolicyMaturity],
    district: Sequence[SchoolPolicyMaturity],
) -> BenchmarkComparison:
    """Set *maturity* against the mean of each cohort, overall and per theme.

    Cohorts are expected to include the school itself.
    """
    overall = _delta(
        OVERALL_CODE,
        OVERALL_NAME,
        maturity.overall_score,
        [m.overall_score for m in national],
        [m.overall_score for m in district],
    )

    themes: list[BenchmarkDelta] = []
    for index, theme in enumerate(maturity.core_themes()):
        themes.append(
            _delta(
                theme.code,
                theme.name,
                theme.score,
                [m.core_themes()[index].score for m in national],
                [m.core_themes()[index].score for m in district],
            )
        )

    return BenchmarkComparison(
        school_id=school.id,
        district=school.district,
        national_schools=len(national),
        district_schools=len(district),
        overall=overall,
        themes=themes,
    )

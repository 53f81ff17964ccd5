"""Bridges persisted rows and the pure scoring functions.

Routers load ORM rows from the repository, convert them here and receive
response models with freshly derived maturity and readiness.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from src.schemas.maturity import ReadinessResult, SchoolPolicyMaturity
from src.schemas.report import ICTReport, ReadinessTrendPoint
from src.schemas.school import CompareEntry, School, SchoolDetailResponse, SchoolResponse
from src.services.maturity import FullProfileMaturityScorer
from src.services.readiness import ReportOnlyReadinessScorer

logger = logging.getLogger(__name__)

_maturity_scorer = FullProfileMaturityScorer()
_readiness_scorer = ReportOnlyReadinessScorer()


def school_from_orm(row: Any) -> School:
    """Construct a :class:`School` from an ORM ``School`` instance."""
    return School.model_validate(row)


def report_from_orm(row: Any) -> ICTReport:
    """Construct an :class:`ICTReport` from an ORM ``ICTReport`` instance."""
    return ICTReport.model_validate(row)


def reports_from_orm(rows: Sequence[Any]) -> list[ICTReport]:
    return [report_from_orm(row) for row in rows]


def assess_maturity(school: School, reports: Sequence[ICTReport]) -> SchoolPolicyMaturity:
    maturity = _maturity_scorer.score(school, reports)
    logger.debug(
        "Maturity for school %s: %s (%s), completeness %s%%",
        school.id,
        maturity.overall_score,
        maturity.overall_stage,
        maturity.data_completeness,
    )
    return maturity


def assess_readiness(reports: Sequence[ICTReport]) -> ReadinessResult:
    return _readiness_scorer.score(reports)


def readiness_trend(reports: Sequence[ICTReport]) -> list[ReadinessTrendPoint]:
    """Readiness of each report on its own, oldest first."""
    ordered = sorted(reports, key=lambda r: r.date)
    return [
        ReadinessTrendPoint(report_id=report.id, date=report.date, period=report.period, readiness=result)
        for report, result in zip(ordered, _readiness_scorer.score_each(ordered))
    ]


def build_school_detail(school: School, reports: Sequence[ICTReport]) -> SchoolDetailResponse:
    """Combine a school with its derived maturity and readiness."""
    return SchoolDetailResponse(
        **school.model_dump(),
        policy_maturity=assess_maturity(school, reports),
        readiness=assess_readiness(reports),
        report_count=len(reports),
    )


def build_compare_entry(school: School, reports: Sequence[ICTReport]) -> CompareEntry:
    return CompareEntry(
        school=SchoolResponse(**school.model_dump()),
        policy_maturity=assess_maturity(school, reports),
        readiness=assess_readiness(reports),
    )

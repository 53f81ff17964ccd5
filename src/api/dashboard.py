from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from src.api.auth import CurrentUser, require_permission, scoped_filters
from src.config import get_settings
from src.db.base import SchoolRepository
from src.db.factory import get_school_repository
from src.schemas.auth import Principal
from src.schemas.dashboard import (
    DashboardAlert,
    InfrastructureComparisonRow,
    PerformanceMetrics,
    ReadinessBucket,
    SummaryStats,
)
from src.schemas.report import ICTReport
from src.schemas.school import School
from src.services.assessment import reports_from_orm, school_from_orm
from src.services.summary import (
    calculate_summary_stats,
    dashboard_alerts,
    infrastructure_comparison,
    performance_metrics,
    readiness_distribution,
)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


async def _load_all(repo: SchoolRepository, principal: Principal) -> tuple[list[School], list[ICTReport]]:
    """Every school and report the caller may analyse."""
    require_permission(principal, "can_view_analytics")
    school_filters, report_filters = scoped_filters(principal)
    schools = [school_from_orm(row) for row in await repo.find_schools_by_filters(school_filters)]
    reports = reports_from_orm(await repo.find_reports(report_filters))
    return schools, reports


@router.get("/summary", response_model=SummaryStats)
async def get_summary(
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> SummaryStats:
    """Headline statistics across the schools in the caller's scope."""
    schools, reports = await _load_all(repo, principal)
    return calculate_summary_stats(schools, reports, top_n=get_settings().TOP_SCHOOLS_LIMIT)


@router.get("/readiness-distribution", response_model=list[ReadinessBucket])
async def get_readiness_distribution(
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> list[ReadinessBucket]:
    schools, reports = await _load_all(repo, principal)
    return readiness_distribution(schools, reports)


@router.get("/performance", response_model=PerformanceMetrics | None)
async def get_performance(
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> PerformanceMetrics | None:
    """Averages over the most recent observation period, or ``null`` without reports."""
    _schools, reports = await _load_all(repo, principal)
    return performance_metrics(reports)


@router.get("/alerts", response_model=list[DashboardAlert])
async def get_alerts(
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> list[DashboardAlert]:
    _schools, reports = await _load_all(repo, principal)
    return dashboard_alerts(reports)


@router.get("/infrastructure-comparison", response_model=list[InfrastructureComparisonRow])
async def get_infrastructure_comparison(
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> list[InfrastructureComparisonRow]:
    """Average device counts of urban versus rural schools."""
    schools, reports = await _load_all(repo, principal)
    return infrastructure_comparison(schools, reports)

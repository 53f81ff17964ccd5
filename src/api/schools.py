from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from src.api.auth import CurrentUser, require_access, require_permission
from src.db.base import ReportFilters, SchoolFilters, SchoolRepository
from src.db.factory import get_school_repository
from src.schemas.auth import Principal
from src.schemas.filters import SchoolFilterParams
from src.schemas.maturity import (
    BenchmarkComparison,
    MaturityTrendPoint,
    PolicyRecommendation,
    ReadinessResult,
    SchoolPolicyMaturity,
)
from src.schemas.report import ICTReport, ReadinessTrendPoint
from src.schemas.school import (
    PaginatedSchoolsResponse,
    School,
    SchoolCreate,
    SchoolDetailResponse,
    SchoolResponse,
    SchoolUpdate,
)
from src.services.assessment import (
    assess_maturity,
    assess_readiness,
    build_school_detail,
    readiness_trend,
    reports_from_orm,
    school_from_orm,
)
from src.services.benchmarks import compare_to_benchmarks, maturity_trend
from src.services.permissions import get_role_permissions, in_scope
from src.services.recommendations import generate_policy_recommendations
from src.services.reports import group_reports_by_school

logger = logging.getLogger(__name__)

router = APIRouter(tags=["schools"])


def _to_school_filters(params: SchoolFilterParams, principal: Principal) -> SchoolFilters | None:
    """Convert API filter params to the repository's filter dataclass.

    The caller's district or school scope is applied on top; ``None`` means
    the requested district lies outside that scope.
    """
    permissions = get_role_permissions(principal)
    district = params.district
    if permissions.restricted_to_district is not None:
        if district is not None and district != permissions.restricted_to_district:
            return None
        district = permissions.restricted_to_district

    return SchoolFilters(
        search=params.search,
        district=district,
        school_id=permissions.restricted_to_school,
        limit=params.page_size,
        offset=(params.page - 1) * params.page_size,
    )


async def _load_school(repo: SchoolRepository, school_id: int, principal: Principal) -> School:
    row = await repo.get_school_by_id(school_id)
    if row is None:
        raise HTTPException(status_code=404, detail="School not found")
    require_access(principal, "school", row.id, row.district)
    return school_from_orm(row)


async def _load_reports(repo: SchoolRepository, school_id: int) -> list[ICTReport]:
    return reports_from_orm(await repo.find_reports(ReportFilters(school_id=school_id)))


def _require_district_in_scope(principal: Principal, district: str) -> None:
    if not in_scope(get_role_permissions(principal), district=district):
        raise HTTPException(status_code=403, detail="District is outside your scope")


@router.get("/api/schools", response_model=PaginatedSchoolsResponse)
async def list_schools(
    filters: Annotated[SchoolFilterParams, Query()],
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> PaginatedSchoolsResponse:
    """List and search schools visible to the caller, one page at a time."""
    permissions = get_role_permissions(principal)
    if not (permissions.can_view_all_schools or permissions.restricted_to_school is not None):
        raise HTTPException(status_code=403, detail="Permission 'can_view_all_schools' required")

    school_filters = _to_school_filters(filters, principal)
    if school_filters is None:
        return PaginatedSchoolsResponse.build([], total=0, page=filters.page, page_size=filters.page_size)

    rows = await repo.find_schools_by_filters(school_filters)
    total = await repo.count_schools(
        SchoolFilters(search=school_filters.search, district=school_filters.district, school_id=school_filters.school_id)
    )
    data = [SchoolResponse.model_validate(row) for row in rows]
    return PaginatedSchoolsResponse.build(data, total=total, page=filters.page, page_size=filters.page_size)


@router.post("/api/schools", response_model=SchoolDetailResponse, status_code=201)
async def create_school(
    payload: SchoolCreate,
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> SchoolDetailResponse:
    """Register a new school.  A school with no reports starts at low maturity."""
    require_permission(principal, "can_edit_all_schools")
    _require_district_in_scope(principal, payload.district)
    row = await repo.create_school(payload.model_dump())
    return build_school_detail(school_from_orm(row), [])


@router.get("/api/schools/{school_id}", response_model=SchoolDetailResponse)
async def get_school(
    school_id: int,
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> SchoolDetailResponse:
    """Get a school with its current policy maturity and readiness."""
    school = await _load_school(repo, school_id, principal)
    reports = await _load_reports(repo, school_id)
    return build_school_detail(school, reports)


@router.put("/api/schools/{school_id}", response_model=SchoolDetailResponse)
async def update_school(
    school_id: int,
    payload: SchoolUpdate,
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> SchoolDetailResponse:
    """Replace a school's profile and return the re-derived assessment."""
    await _load_school(repo, school_id, principal)
    require_permission(principal, "can_edit_all_schools")
    _require_district_in_scope(principal, payload.district)

    row = await repo.update_school(school_id, payload.model_dump())
    if row is None:
        raise HTTPException(status_code=404, detail="School not found")
    reports = await _load_reports(repo, school_id)
    return build_school_detail(school_from_orm(row), reports)


@router.delete("/api/schools/{school_id}", status_code=204)
async def delete_school(
    school_id: int,
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> Response:
    """Delete a school together with all of its observation reports."""
    await _load_school(repo, school_id, principal)
    require_permission(principal, "can_delete_schools")
    if not await repo.delete_school(school_id):
        raise HTTPException(status_code=404, detail="School not found")
    return Response(status_code=204)


@router.get("/api/schools/{school_id}/maturity", response_model=SchoolPolicyMaturity)
async def get_school_maturity(
    school_id: int,
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> SchoolPolicyMaturity:
    """Policy-maturity assessment derived from the profile and latest report."""
    school = await _load_school(repo, school_id, principal)
    return assess_maturity(school, await _load_reports(repo, school_id))


@router.get("/api/schools/{school_id}/maturity/trend", response_model=list[MaturityTrendPoint])
async def get_school_maturity_trend(
    school_id: int,
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> list[MaturityTrendPoint]:
    """Overall and per-theme maturity at each observation, oldest first."""
    school = await _load_school(repo, school_id, principal)
    return maturity_trend(school, await _load_reports(repo, school_id))


@router.get("/api/schools/{school_id}/maturity/benchmarks", response_model=BenchmarkComparison)
async def get_school_benchmarks(
    school_id: int,
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> BenchmarkComparison:
    """Maturity set against the national and district averages."""
    school = await _load_school(repo, school_id, principal)

    by_school = group_reports_by_school(reports_from_orm(await repo.find_reports(ReportFilters())))
    national: list[SchoolPolicyMaturity] = []
    district: list[SchoolPolicyMaturity] = []
    for row in await repo.find_schools_by_filters(SchoolFilters()):
        peer = school_from_orm(row)
        peer_maturity = assess_maturity(peer, by_school.get(peer.id, []))
        national.append(peer_maturity)
        if peer.district == school.district:
            district.append(peer_maturity)

    maturity = assess_maturity(school, by_school.get(school.id, []))
    return compare_to_benchmarks(school, maturity, national, district)


@router.get("/api/schools/{school_id}/recommendations", response_model=list[PolicyRecommendation])
async def get_school_recommendations(
    school_id: int,
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> list[PolicyRecommendation]:
    """Prioritised policy recommendations for the school's weakest themes."""
    school = await _load_school(repo, school_id, principal)
    maturity = assess_maturity(school, await _load_reports(repo, school_id))
    return generate_policy_recommendations(maturity)


@router.get("/api/schools/{school_id}/reports", response_model=list[ICTReport])
async def get_school_reports(
    school_id: int,
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> list[ICTReport]:
    """All observation reports for a school, oldest first."""
    school = await _load_school(repo, school_id, principal)
    require_access(principal, "report", school.id, school.district)
    return await _load_reports(repo, school_id)


@router.get("/api/schools/{school_id}/readiness", response_model=ReadinessResult)
async def get_school_readiness(
    school_id: int,
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> ReadinessResult:
    """Report-only readiness of the school's most recent observation."""
    await _load_school(repo, school_id, principal)
    return assess_readiness(await _load_reports(repo, school_id))


@router.get("/api/schools/{school_id}/readiness/trend", response_model=list[ReadinessTrendPoint])
async def get_school_readiness_trend(
    school_id: int,
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> list[ReadinessTrendPoint]:
    """Report-only readiness of every observation, oldest first."""
    await _load_school(repo, school_id, principal)
    return readiness_trend(await _load_reports(repo, school_id))

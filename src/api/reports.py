from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from src.api.auth import CurrentUser, require_access, require_permission
from src.db.base import ReportFilters, SchoolRepository
from src.db.factory import get_school_repository
from src.db.models import School as SchoolRow
from src.schemas.auth import Principal
from src.schemas.filters import ReportFilterParams
from src.schemas.report import ICTReport, ICTReportCreate, ICTReportUpdate, ObservationReportResponse
from src.services.assessment import assess_readiness, report_from_orm
from src.services.observation import observation_action_items, summarize_observation
from src.services.permissions import get_role_permissions

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reports"])


async def _require_school(repo: SchoolRepository, school_id: int) -> SchoolRow:
    school = await repo.get_school_by_id(school_id)
    if school is None:
        logger.warning("Rejected report for unknown school %s", school_id)
        raise HTTPException(status_code=400, detail=f"School {school_id} does not exist")
    return school


async def _load_report(repo: SchoolRepository, report_id: int, principal: Principal) -> tuple[ICTReport, SchoolRow]:
    row = await repo.get_report_by_id(report_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Report not found")
    school = await repo.get_school_by_id(row.school_id)
    if school is None:
        raise HTTPException(status_code=404, detail="School not found")
    require_access(principal, "report", school.id, school.district)
    return report_from_orm(row), school


@router.get("/api/reports", response_model=list[ICTReport])
async def list_reports(
    filters: Annotated[ReportFilterParams, Query()],
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> list[ICTReport]:
    """List observation reports visible to the caller, oldest first."""
    permissions = get_role_permissions(principal)
    if not (permissions.can_view_all_reports or permissions.restricted_to_school is not None):
        raise HTTPException(status_code=403, detail="Permission 'can_view_all_reports' required")

    school_id = filters.school_id
    if permissions.restricted_to_school is not None:
        if school_id is not None and school_id != permissions.restricted_to_school:
            return []
        school_id = permissions.restricted_to_school

    rows = await repo.find_reports(
        ReportFilters(school_id=school_id, period=filters.period, district=permissions.restricted_to_district)
    )
    return [report_from_orm(row) for row in rows]


@router.post("/api/reports", response_model=ICTReport, status_code=201)
async def create_report(
    payload: ICTReportCreate,
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> ICTReport:
    """Submit a new observation report for an existing school."""
    require_permission(principal, "can_edit_all_reports")
    school = await _require_school(repo, payload.school_id)
    require_access(principal, "report", school.id, school.district)
    row = await repo.create_report(payload.model_dump())
    return report_from_orm(row)


@router.get("/api/reports/{report_id}", response_model=ICTReport)
async def get_report(
    report_id: int,
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> ICTReport:
    report, _school = await _load_report(repo, report_id, principal)
    return report


@router.put("/api/reports/{report_id}", response_model=ICTReport)
async def update_report(
    report_id: int,
    payload: ICTReportUpdate,
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> ICTReport:
    """Replace an observation report.  An unknown report is 404 before the payload is checked."""
    await _load_report(repo, report_id, principal)
    require_permission(principal, "can_edit_all_reports")
    school = await _require_school(repo, payload.school_id)
    require_access(principal, "report", school.id, school.district)

    row = await repo.update_report(report_id, payload.model_dump())
    if row is None:
        raise HTTPException(status_code=404, detail="Report not found")
    return report_from_orm(row)


@router.delete("/api/reports/{report_id}", status_code=204)
async def delete_report(
    report_id: int,
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> Response:
    await _load_report(repo, report_id, principal)
    require_permission(principal, "can_delete_reports")
    if not await repo.delete_report(report_id):
        raise HTTPException(status_code=404, detail="Report not found")
    return Response(status_code=204)


@router.get("/api/reports/{report_id}/observation", response_model=ObservationReportResponse)
async def get_observation_report(
    report_id: int,
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> ObservationReportResponse:
    """Summary figures and follow-up actions for a single observation."""
    report, school = await _load_report(repo, report_id, principal)
    return ObservationReportResponse(
        report=report,
        school_name=school.name,
        summary=summarize_observation(report),
        readiness=assess_readiness([report]),
        action_items=observation_action_items(report),
    )

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from src.api.auth import CurrentUser
from src.db.base import ReportFilters, SchoolRepository
from src.db.factory import get_school_repository
from src.schemas.school import CompareEntry, CompareResponse
from src.services.assessment import build_compare_entry, reports_from_orm, school_from_orm
from src.services.permissions import can_access_resource

router = APIRouter(tags=["compare"])


def _parse_ids(ids: str) -> list[int]:
    try:
        school_ids = [int(id_str.strip()) for id_str in ids.split(",") if id_str.strip()]
    except ValueError:
        raise HTTPException(status_code=400, detail="ids must be a comma-separated list of integers") from None
    if not school_ids:
        raise HTTPException(status_code=400, detail="At least one school id is required")
    return school_ids


@router.get("/api/compare", response_model=CompareResponse)
async def compare_schools(
    ids: Annotated[str, Query(description="Comma-separated school IDs to compare")],
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> CompareResponse:
    """Compare the policy maturity of multiple schools side by side.

    Unknown ids and schools outside the caller's scope are skipped.
    """
    entries: list[CompareEntry] = []
    for school_id in _parse_ids(ids):
        row = await repo.get_school_by_id(school_id)
        if row is None or not can_access_resource(principal, "school", school_id=row.id, district=row.district):
            continue
        reports = reports_from_orm(await repo.find_reports(ReportFilters(school_id=school_id)))
        entries.append(build_compare_entry(school_from_orm(row), reports))

    return CompareResponse(schools=entries)

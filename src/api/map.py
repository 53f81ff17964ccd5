from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from src.api.auth import CurrentUser, scoped_filters
from src.db.base import SchoolRepository
from src.db.factory import get_school_repository
from src.schemas.dashboard import MapMarker
from src.schemas.maturity import READINESS_COLORS, UNKNOWN_COLOR
from src.services.assessment import assess_readiness, reports_from_orm
from src.services.reports import group_reports_by_school

router = APIRouter(tags=["map"])


@router.get("/api/map/markers", response_model=list[MapMarker])
async def list_map_markers(
    principal: CurrentUser,
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> list[MapMarker]:
    """One marker per geolocated school in scope, coloured by report-only readiness."""
    school_filters, report_filters = scoped_filters(principal)
    schools = await repo.find_schools_by_filters(school_filters)
    by_school = group_reports_by_school(reports_from_orm(await repo.find_reports(report_filters)))

    markers: list[MapMarker] = []
    for school in schools:
        if school.lat is None or school.lng is None:
            continue
        readiness = assess_readiness(by_school.get(school.id, []))
        markers.append(
            MapMarker(
                school_id=school.id,
                name=school.name,
                district=school.district,
                lat=school.lat,
                lng=school.lng,
                readiness_level=readiness.level,
                readiness_score=readiness.score,
                color=READINESS_COLORS.get(readiness.level, UNKNOWN_COLOR),
            )
        )
    return markers

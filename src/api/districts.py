from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from src.db.base import SchoolRepository
from src.db.factory import get_school_repository

router = APIRouter(tags=["districts"])


@router.get("/api/districts", response_model=list[str])
async def list_districts(
    repo: Annotated[SchoolRepository, Depends(get_school_repository)],
) -> list[str]:
    """List all districts that have at least one registered school."""
    districts = await repo.list_districts()
    return districts

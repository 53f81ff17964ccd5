from __future__ import annotations

from pydantic import BaseModel, Field


class SchoolFilterParams(BaseModel):
    """Query parameters for listing schools."""

    search: str | None = None  # matches name or district, case-insensitive
    district: str | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1, le=500)


class ReportFilterParams(BaseModel):
    """Query parameters for listing observation reports."""

    school_id: int | None = None
    period: str | None = None

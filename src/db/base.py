from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from src.db.models import ICTReport, School


@dataclass
class SchoolFilters:
    """Filter criteria for listing schools."""

    search: str | None = None  # case-insensitive substring of name or district
    district: str | None = None
    school_id: int | None = None
    limit: int | None = None  # max results to return
    offset: int | None = None  # number of results to skip


@dataclass
class ReportFilters:
    """Filter criteria for listing observation reports."""

    school_id: int | None = None
    period: str | None = None
    district: str | None = None  # district of the owning school


class SchoolRepository(ABC):
    """Abstract interface for all school and report data access.

    Policy-maturity assessments are never stored; callers derive them from
    the rows returned here.
    """

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @abstractmethod
    async def init_db(self) -> None:
        """Create the schema if it does not already exist."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release pooled connections."""
        ...

    # ------------------------------------------------------------------
    # Schools
    # ------------------------------------------------------------------

    @abstractmethod
    async def find_schools_by_filters(self, filters: SchoolFilters) -> list[School]:
        """Return schools matching the supplied filter criteria, ordered by name."""
        ...

    @abstractmethod
    async def count_schools(self, filters: SchoolFilters) -> int:
        """Return how many schools match *filters*, ignoring limit and offset."""
        ...

    @abstractmethod
    async def get_school_by_id(self, school_id: int) -> School | None:
        """Return a single school by primary key, or ``None`` if not found."""
        ...

    @abstractmethod
    async def create_school(self, values: dict[str, Any]) -> School:
        """Insert a new school built from *values* and return it with its id."""
        ...

    @abstractmethod
    async def update_school(self, school_id: int, values: dict[str, Any]) -> School | None:
        """Overwrite a school's fields with *values*; ``None`` if it does not exist."""
        ...

    @abstractmethod
    async def delete_school(self, school_id: int) -> bool:
        """Delete a school and all of its reports.  Returns ``False`` if it did not exist."""
        ...

    @abstractmethod
    async def list_districts(self) -> list[str]:
        """Return a sorted list of distinct district names."""
        ...

    # ------------------------------------------------------------------
    # Observation reports
    # ------------------------------------------------------------------

    @abstractmethod
    async def find_reports(self, filters: ReportFilters) -> list[ICTReport]:
        """Return reports matching *filters*, oldest first."""
        ...

    @abstractmethod
    async def get_report_by_id(self, report_id: int) -> ICTReport | None:
        """Return a single report by primary key, or ``None`` if not found."""
        ...

    @abstractmethod
    async def create_report(self, values: dict[str, Any]) -> ICTReport:
        """Insert a new report built from *values* and return it with its id."""
        ...

    @abstractmethod
    async def update_report(self, report_id: int, values: dict[str, Any]) -> ICTReport | None:
        """Overwrite a report's fields with *values*; ``None`` if it does not exist."""
        ...

    @abstractmethod
    async def delete_report(self, report_id: int) -> bool:
        """Delete a report.  Returns ``False`` if it did not exist."""
        ...

"""Tests for filtering and CRUD in the SQLite repository."""

from __future__ import annotations

import datetime

import pytest

from src.db.base import ReportFilters, SchoolFilters
from src.db.sqlite_repo import SQLiteSchoolRepository

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _school_names(schools) -> set[str]:
    """Extract a set of school names from a list of School ORM objects."""
    return {s.name for s in schools}


# ---------------------------------------------------------------------------
# School filters
# ---------------------------------------------------------------------------


class TestSchoolFilters:
    @pytest.mark.asyncio
    async def test_no_filters_returns_all_ordered_by_name(self, test_repo: SQLiteSchoolRepository):
        schools = await test_repo.find_schools_by_filters(SchoolFilters())
        names = [s.name for s in schools]
        assert names == sorted(names)
        assert len(schools) == 3

    @pytest.mark.asyncio
    async def test_filter_by_district(self, test_repo: SQLiteSchoolRepository):
        schools = await test_repo.find_schools_by_filters(SchoolFilters(district="Gulu"))
        assert _school_names(schools) == {"Gulu Rural Primary School"}

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive_on_name(self, test_repo: SQLiteSchoolRepository):
        schools = await test_repo.find_schools_by_filters(SchoolFilters(search="model"))
        assert _school_names(schools) == {"Kampala Model Primary School"}

    @pytest.mark.asyncio
    async def test_search_matches_district(self, test_repo: SQLiteSchoolRepository):
        schools = await test_repo.find_schools_by_filters(SchoolFilters(search="wakiso"))
        assert _school_names(schools) == {"Wakiso Hill School"}

    @pytest.mark.asyncio
    async def test_limit_and_offset(self, test_repo: SQLiteSchoolRepository):
        page = await test_repo.find_schools_by_filters(SchoolFilters(limit=2, offset=2))
        assert [s.name for s in page] == ["Wakiso Hill School"]

    @pytest.mark.asyncio
    async def test_count_ignores_paging(self, test_repo: SQLiteSchoolRepository):
        assert await test_repo.count_schools(SchoolFilters(limit=1)) == 3
        assert await test_repo.count_schools(SchoolFilters(search="primary")) == 2

    @pytest.mark.asyncio
    async def test_filter_by_school_id(self, test_repo: SQLiteSchoolRepository):
        schools = await test_repo.find_schools_by_filters(SchoolFilters(school_id=2))
        assert _school_names(schools) == {"Gulu Rural Primary School"}
        assert await test_repo.count_schools(SchoolFilters(school_id=2, district="Kampala")) == 0

    @pytest.mark.asyncio
    async def test_list_districts_sorted(self, test_repo: SQLiteSchoolRepository):
        assert await test_repo.list_districts() == ["Gulu", "Kampala", "Wakiso"]


# ---------------------------------------------------------------------------
# School CRUD
# ---------------------------------------------------------------------------


class TestSchoolCrud:
    @pytest.mark.asyncio
    async def test_sections_round_trip_as_json(self, test_repo: SQLiteSchoolRepository):
        school = await test_repo.get_school_by_id(1)
        assert school.governance["has_ict_policy"] is True
        assert school.infrastructure["power_backup"] == ["Solar"]
        assert school.security is None

    @pytest.mark.asyncio
    async def test_get_missing_school(self, test_repo: SQLiteSchoolRepository):
        assert await test_repo.get_school_by_id(999) is None

    @pytest.mark.asyncio
    async def test_create_school(self, test_repo: SQLiteSchoolRepository):
        created = await test_repo.create_school(
            {"name": "Mukono Girls School", "district": "Mukono", "environment": "Rural", "governance": None}
        )
        assert created.id is not None
        fetched = await test_repo.get_school_by_id(created.id)
        assert fetched.name == "Mukono Girls School"
        assert fetched.type == "Public"

    @pytest.mark.asyncio
    async def test_update_school(self, test_repo: SQLiteSchoolRepository):
        updated = await test_repo.update_school(3, {"governance": {"has_ict_policy": True}})
        assert updated.governance == {"has_ict_policy": True}
        fetched = await test_repo.get_school_by_id(3)
        assert fetched.governance == {"has_ict_policy": True}

    @pytest.mark.asyncio
    async def test_update_missing_school(self, test_repo: SQLiteSchoolRepository):
        assert await test_repo.update_school(999, {"name": "Nowhere"}) is None

    @pytest.mark.asyncio
    async def test_delete_school_removes_reports(self, test_repo: SQLiteSchoolRepository):
        assert await test_repo.delete_school(1) is True
        assert await test_repo.get_school_by_id(1) is None
        assert await test_repo.find_reports(ReportFilters(school_id=1)) == []
        # other schools' reports survive
        assert len(await test_repo.find_reports(ReportFilters(school_id=2))) == 1

    @pytest.mark.asyncio
    async def test_delete_missing_school(self, test_repo: SQLiteSchoolRepository):
        assert await test_repo.delete_school(999) is False


# ---------------------------------------------------------------------------
# Report CRUD
# ---------------------------------------------------------------------------


class TestReportCrud:
    @pytest.mark.asyncio
    async def test_reports_oldest_first(self, test_repo: SQLiteSchoolRepository):
        reports = await test_repo.find_reports(ReportFilters(school_id=1))
        assert [r.date for r in reports] == [datetime.date(2024, 1, 15), datetime.date(2024, 6, 15)]

    @pytest.mark.asyncio
    async def test_filter_by_period(self, test_repo: SQLiteSchoolRepository):
        reports = await test_repo.find_reports(ReportFilters(period="JUN 2024"))
        assert {r.id for r in reports} == {2, 3}

    @pytest.mark.asyncio
    async def test_filter_by_district_of_school(self, test_repo: SQLiteSchoolRepository):
        reports = await test_repo.find_reports(ReportFilters(district="Kampala"))
        assert [r.id for r in reports] == [1, 2]
        assert await test_repo.find_reports(ReportFilters(district="Wakiso")) == []

    @pytest.mark.asyncio
    async def test_create_report(self, test_repo: SQLiteSchoolRepository):
        created = await test_repo.create_report(
            {
                "school_id": 3,
                "date": datetime.date(2024, 9, 1),
                "period": "SEP 2024",
                "infrastructure": {"computers": 12},
                "usage": None,
                "software": None,
                "capacity": None,
            }
        )
        fetched = await test_repo.get_report_by_id(created.id)
        assert fetched.school_id == 3
        assert fetched.infrastructure == {"computers": 12}

    @pytest.mark.asyncio
    async def test_update_report(self, test_repo: SQLiteSchoolRepository):
        updated = await test_repo.update_report(3, {"period": "JUL 2024"})
        assert updated.period == "JUL 2024"

    @pytest.mark.asyncio
    async def test_update_missing_report(self, test_repo: SQLiteSchoolRepository):
        assert await test_repo.update_report(999, {"period": "X"}) is None

    @pytest.mark.asyncio
    async def test_delete_report(self, test_repo: SQLiteSchoolRepository):
        assert await test_repo.delete_report(3) is True
        assert await test_repo.get_report_by_id(3) is None
        assert await test_repo.delete_report(3) is False


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_close_then_reuse(self, test_repo: SQLiteSchoolRepository):
        await test_repo.close()
        # the pool reconnects on demand
        assert await test_repo.get_school_by_id(1) is not None
        await test_repo.close()

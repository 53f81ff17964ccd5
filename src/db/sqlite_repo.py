from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import delete, event, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.sql import Select

from src.db.base import ReportFilters, SchoolFilters, SchoolRepository
from src.db.models import Base, ICTReport, School

logger = logging.getLogger(__name__)


def _enable_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    """Turn on foreign-key enforcement for every raw SQLite connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _apply_school_filters(stmt: Select, filters: SchoolFilters) -> Select:
    if filters.district is not None:
        stmt = stmt.where(School.district == filters.district)
    if filters.school_id is not None:
        stmt = stmt.where(School.id == filters.school_id)

    if filters.search:
        pattern = f"%{filters.search}%"
        stmt = stmt.where(or_(School.name.ilike(pattern), School.district.ilike(pattern)))

    return stmt


class SQLiteSchoolRepository(SchoolRepository):
    """SQLite-backed implementation of :class:`SchoolRepository`.

    Uses *aiosqlite* via SQLAlchemy's async engine.
    """

    def __init__(self, sqlite_path: str = "./data/observatory.db") -> None:
        url = f"sqlite+aiosqlite:///{sqlite_path}"
        self._engine = create_async_engine(url, echo=False)
        event.listen(self._engine.sync_engine, "connect", _enable_foreign_keys)
        self._session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self._engine, expire_on_commit=False
        )

    async def init_db(self) -> None:
        """Create all tables if they do not already exist."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        await self._engine.dispose()

    # ------------------------------------------------------------------
    # Schools
    # ------------------------------------------------------------------

    async def find_schools_by_filters(self, filters: SchoolFilters) -> list[School]:
        stmt = _apply_school_filters(select(School), filters).order_by(School.name, School.id)

        if filters.offset is not None:
            stmt = stmt.offset(filters.offset)
        if filters.limit is not None:
            stmt = stmt.limit(filters.limit)

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def count_schools(self, filters: SchoolFilters) -> int:
        stmt = _apply_school_filters(select(func.count()).select_from(School), filters)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return int(result.scalar_one())

    async def get_school_by_id(self, school_id: int) -> School | None:
        async with self._session_factory() as session:
            return await session.get(School, school_id)

    async def create_school(self, values: dict[str, Any]) -> School:
        school = School(**values)
        async with self._session_factory() as session:
            session.add(school)
            await session.commit()
            await session.refresh(school)
        logger.info("Created school %s (%s)", school.id, school.name)
        return school

    async def update_school(self, school_id: int, values: dict[str, Any]) -> School | None:
        async with self._session_factory() as session:
            school = await session.get(School, school_id)
            if school is None:
                return None
            for key, value in values.items():
                setattr(school, key, value)
            await session.commit()
            await session.refresh(school)
        logger.info("Updated school %s", school_id)
        return school

    async def delete_school(self, school_id: int) -> bool:
        async with self._session_factory() as session:
            await session.execute(delete(ICTReport).where(ICTReport.school_id == school_id))
            result = await session.execute(delete(School).where(School.id == school_id))
            await session.commit()
        deleted = result.rowcount > 0
        if deleted:
            logger.info("Deleted school %s and its reports", school_id)
        return deleted

    async def list_districts(self) -> list[str]:
        stmt = select(School.district).distinct().order_by(School.district)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Observation reports
    # ------------------------------------------------------------------

    async def find_reports(self, filters: ReportFilters) -> list[ICTReport]:
        stmt = select(ICTReport)
        if filters.school_id is not None:
            stmt = stmt.where(ICTReport.school_id == filters.school_id)
        if filters.period is not None:
            stmt = stmt.where(ICTReport.period == filters.period)
        if filters.district is not None:
            stmt = stmt.join(School, School.id == ICTReport.school_id).where(School.district == filters.district)
        stmt = stmt.order_by(ICTReport.date, ICTReport.id)

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def get_report_by_id(self, report_id: int) -> ICTReport | None:
        async with self._session_factory() as session:
            return await session.get(ICTReport, report_id)

    async def create_report(self, values: dict[str, Any]) -> ICTReport:
        report = ICTReport(**values)
        async with self._session_factory() as session:
            session.add(report)
            await session.commit()
            await session.refresh(report)
        logger.info("Created report %s for school %s (%s)", report.id, report.school_id, report.period)
        return report

    async def update_report(self, report_id: int, values: dict[str, Any]) -> ICTReport | None:
        async with self._session_factory() as session:
            report = await session.get(ICTReport, report_id)
            if report is None:
                return None
            for key, value in values.items():
                setattr(report, key, value)
            await session.commit()
            await session.refresh(report)
        logger.info("Updated report %s", report_id)
        return report

    async def delete_report(self, report_id: int) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(delete(ICTReport).where(ICTReport.id == report_id))
            await session.commit()
        deleted = result.rowcount > 0
        if deleted:
            logger.info("Deleted report %s", report_id)
        return deleted

from __future__ import annotations

import datetime
from typing import Any

from sqlalchemy import JSON, Date, Float, ForeignKey, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Async-compatible declarative base for all ORM models."""


class School(Base):
    __tablename__ = "schools"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    district: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    sub_county: Mapped[str | None] = mapped_column(String(100), nullable=True)

    lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    lng: Mapped[float | None] = mapped_column(Float, nullable=True)

    type: Mapped[str] = mapped_column(String(20), nullable=False, default="Public")  # Public / Private
    environment: Mapped[str] = mapped_column(String(20), nullable=False, default="Rural")  # Urban / Rural

    emis_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    upi_code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    ownership_type: Mapped[str | None] = mapped_column(String(30), nullable=True)
    school_category: Mapped[str | None] = mapped_column(String(30), nullable=True)
    signature_program: Mapped[str | None] = mapped_column(String(255), nullable=True)
    year_established: Mapped[int | None] = mapped_column(Integer, nullable=True)

    enrollment: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    contact_info: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    infrastructure: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    internet: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    software: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    human_capacity: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    pedagogical_usage: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    governance: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    student_engagement: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    community_engagement: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    security: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    accessibility: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    facilities: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    performance: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    reports: Mapped[list[ICTReport]] = relationship("ICTReport", back_populates="school", lazy="select")

    def __repr__(self) -> str:
        return f"<School(id={self.id}, name={self.name!r}, district={self.district!r})>"


class ICTReport(Base):
    __tablename__ = "ict_reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    school_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True
    )
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False, index=True)
    period: Mapped[str] = mapped_column(String(30), nullable=False)  # e.g. "JAN 2025"

    infrastructure: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    usage: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    software: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    capacity: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    school: Mapped[School] = relationship("School", back_populates="reports")

    def __repr__(self) -> str:
        return f"<ICTReport(id={self.id}, school_id={self.school_id}, period={self.period!r})>"

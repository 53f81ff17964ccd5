"""Shared pytest fixtures for the ICT observatory test suite."""

from __future__ import annotations

import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from src.db.base import SchoolRepository
from src.db.factory import get_school_repository
from src.db.models import Base, ICTReport, School
from src.db.sqlite_repo import SQLiteSchoolRepository
from src.main import app

# ---------------------------------------------------------------------------
# Test data helpers
# ---------------------------------------------------------------------------


def _create_test_schools() -> list[School]:
    """Return a well-equipped urban school, a sparse rural school and an empty profile."""
    return [
        School(
            id=1,
            name="Kampala Model Primary School",
            district="Kampala",
            sub_county="Central Division",
            lat=0.3136,
            lng=32.5811,
            type="Public",
            environment="Urban",
            emis_number="KLA-100",
            infrastructure={
                "student_computers": 60,
                "has_computer_lab": True,
                "has_electricity": True,
                "power_backup": ["Solar"],
            },
            internet={"connection_type": "Fiber", "has_usage_policy": True},
            software={"has_lms": True, "has_digital_library": True, "has_local_content": True},
            human_capacity={
                "ict_trained_teachers": 30,
                "total_teachers": 40,
                "teacher_competency_level": "Advanced",
                "has_capacity_building": True,
            },
            pedagogical_usage={
                "uses_blended_learning": True,
                "uses_ict_assessments": True,
                "digital_tool_usage_frequency": "Daily",
            },
            governance={
                "has_ict_policy": True,
                "aligned_with_national_strategy": True,
                "has_ict_committee": True,
                "has_ict_budget": True,
                "has_monitoring_system": True,
            },
            community_engagement={"has_industry_partners": True, "has_parent_portal": True},
            accessibility={"is_inclusive": True, "serves_pwds": True, "serves_girls": True},
            performance={"innovations": "Solar-powered e-learning hub"},
        ),
        School(
            id=2,
            name="Gulu Rural Primary School",
            district="Gulu",
            sub_county="Awach",
            lat=2.9538,
            lng=32.4086,
            type="Public",
            environment="Rural",
            emis_number="GUL-200",
            infrastructure={"student_computers": 5, "has_electricity": False},
            human_capacity={"ict_trained_teachers": 1, "total_teachers": 10, "teacher_competency_level": "Basic"},
        ),
        School(
            id=3,
            name="Wakiso Hill School",
            district="Wakiso",
            type="Private",
            environment="Urban",
        ),
    ]


def _create_test_reports() -> list[ICTReport]:
    """Two reports for the urban school and one for the rural school."""
    return [
        ICTReport(
            id=1,
            school_id=1,
            date=datetime.date(2024, 1, 15),
            period="JAN 2024",
            infrastructure={
                "computers": 20,
                "tablets": 0,
                "projectors": 1,
                "printers": 1,
                "internet_connection": "Slow",
                "power_backup": False,
                "functional_devices": 15,
            },
            usage={
                "teachers_using_ict": 10,
                "total_teachers": 40,
                "weekly_computer_lab_hours": 10,
                "student_digital_literacy_rate": 40,
            },
            capacity={"ict_trained_teachers": 10, "support_staff": 1},
        ),
        ICTReport(
            id=2,
            school_id=1,
            date=datetime.date(2024, 6, 15),
            period="JUN 2024",
            infrastructure={
                "computers": 60,
                "tablets": 30,
                "projectors": 5,
                "printers": 2,
                "internet_connection": "Fast",
                "power_backup": True,
                "functional_devices": 80,
            },
            usage={
                "teachers_using_ict": 30,
                "total_teachers": 40,
                "weekly_computer_lab_hours": 50,
                "student_digital_literacy_rate": 80,
            },
            software={"educational_software": ["Scratch"], "office_applications": True},
            capacity={"ict_trained_teachers": 30, "support_staff": 2},
        ),
        ICTReport(
            id=3,
            school_id=2,
            date=datetime.date(2024, 6, 20),
            period="JUN 2024",
            infrastructure={
                "computers": 5,
                "tablets": 0,
                "projectors": 0,
                "printers": 0,
                "internet_connection": "None",
                "power_backup": False,
                "functional_devices": 4,
            },
            usage={
                "teachers_using_ict": 2,
                "total_teachers": 10,
                "weekly_computer_lab_hours": 2,
                "student_digital_literacy_rate": 20,
            },
            capacity={"ict_trained_teachers": 1, "support_staff": 0},
        ),
    ]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def db_path(tmp_path) -> str:
    """Create a temporary SQLite database seeded with test data and return its path."""
    path = str(tmp_path / "test_observatory.db")
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)

    with Session(sync_engine) as session:
        session.add_all(_create_test_schools())
        session.flush()
        session.add_all(_create_test_reports())
        session.commit()

    sync_engine.dispose()
    return path


@pytest.fixture()
def test_repo(db_path) -> SQLiteSchoolRepository:
    """Return an async :class:`SQLiteSchoolRepository` backed by the test database."""
    return SQLiteSchoolRepository(db_path)


@pytest.fixture()
def test_client(db_path, tmp_path, monkeypatch) -> TestClient:
    """Return a FastAPI ``TestClient`` wired to the test database."""
    from src.config import get_settings

    # Keep the lifespan's own database out of the working tree
    monkeypatch.setenv("SQLITE_PATH", str(tmp_path / "lifespan.db"))
    get_settings.cache_clear()
    get_school_repository.cache_clear()

    repo = SQLiteSchoolRepository(db_path)

    def _override() -> SchoolRepository:
        return repo

    app.dependency_overrides[get_school_repository] = _override

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
    get_school_repository.cache_clear()
    get_settings.cache_clear()

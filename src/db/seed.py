"""Seed the observatory database with demo schools and observation reports.

The demo set covers a strong urban school, two mid-range schools and a rural
school with a sparse profile, each with one or more dated ICT observation
reports, so that every dashboard view has something to show.

Usage::

    python -m src.db.seed
    python -m src.db.seed --db ./data/observatory.db --reset

Schools are matched on ``emis_number``: re-running the script updates existing
rows in place and replaces their reports instead of duplicating them.
"""

from __future__ import annotations

import argparse
import copy
import logging
from datetime import date
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from src.db.base import SchoolFilters, SchoolRepository
from src.db.models import Base, ICTReport, School

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DEFAULT_DB_PATH = PROJECT_ROOT / "data" / "observatory.db"

# ---------------------------------------------------------------------------
# Demo data
# ---------------------------------------------------------------------------

_DEMO_SCHOOLS: list[dict[str, Any]] = [
    {
        "name": "Kampala Parents Primary School",
        "district": "Kampala",
        "sub_county": "Central Division",
        "lat": 0.3136,
        "lng": 32.5811,
        "type": "Private",
        "environment": "Urban",
        "emis_number": "KLA-001",
        "ownership_type": "Community",
        "school_category": "Mixed",
        "signature_program": "Coding club and robotics",
        "year_established": 1995,
        "enrollment": {"total_students": 1200, "male_students": 590, "female_students": 610},
        "contact_info": {"principal_name": "Grace Namuli", "email": "head@kpps.ac.ug", "phone": "+256700000001"},
        "infrastructure": {
            "student_computers": 60,
            "teacher_computers": 15,
            "projectors": 8,
            "smart_boards": 2,
            "tablets": 30,
            "laptops": 10,
            "has_computer_lab": True,
            "lab_condition": "Excellent",
            "power_backup": ["Solar", "Generator"],
            "has_ict_room": True,
            "has_electricity": True,
            "has_secure_room": True,
            "has_furniture": True,
        },
        "internet": {
            "connection_type": "Fiber",
            "bandwidth_mbps": 50,
            "wifi_coverage": ["Lab", "Staffroom", "Classrooms"],
            "stability": "High",
            "has_usage_policy": True,
            "provider": "MTN",
            "is_stable": True,
        },
        "software": {
            "has_lms": True,
            "lms_name": "Moodle",
            "has_licensed_software": True,
            "has_productivity_suite": True,
            "productivity_suite": ["LibreOffice"],
            "has_digital_library": True,
            "has_local_content": True,
            "content_source": "NCDC",
        },
        "human_capacity": {
            "ict_trained_teachers": 32,
            "total_teachers": 40,
            "support_staff": 3,
            "monthly_trainings": 4,
            "teacher_competency_level": "Advanced",
            "has_capacity_building": True,
        },
        "pedagogical_usage": {
            "ict_integrated_lessons": 40,
            "uses_ict_assessments": True,
            "has_student_projects": True,
            "uses_blended_learning": True,
            "digital_tool_usage_frequency": "Daily",
            "has_digital_content": True,
            "has_peer_support": True,
        },
        "governance": {
            "has_ict_policy": True,
            "aligned_with_national_strategy": True,
            "has_ict_committee": True,
            "has_ict_budget": True,
            "has_monitoring_system": True,
            "has_active_smc": True,
            "has_active_pta": True,
        },
        "student_engagement": {
            "digital_literacy_level": "Advanced",
            "has_ict_club": True,
            "uses_online_platforms": True,
            "student_feedback_rating": 5,
        },
        "community_engagement": {
            "has_parent_portal": True,
            "has_community_outreach": True,
            "has_industry_partners": True,
            "partner_organizations": ["UCC", "Airtel Uganda"],
        },
        "security": {"is_fenced": True, "has_security_guard": True, "has_recent_incidents": False},
        "accessibility": {
            "is_accessible_all_year": True,
            "is_inclusive": True,
            "serves_girls": True,
            "serves_pwds": True,
        },
        "facilities": {"permanent_classrooms": 24, "water_access": "Tap", "school_accessibility": "All-Weather"},
        "performance": {"ple_pass_rate_year1": 92.0, "innovations": "Student-built weather station"},
        "reports": [
            {
                "date": date(2024, 1, 15),
                "period": "JAN 2024",
                "infrastructure": {
                    "computers": 55,
                    "tablets": 30,
                    "projectors": 7,
                    "printers": 3,
                    "internet_connection": "Fast",
                    "internet_speed_mbps": 45,
                    "power_source": ["NationalGrid", "Solar"],
                    "power_backup": True,
                    "functional_devices": 80,
                },
                "usage": {
                    "teachers_using_ict": 30,
                    "total_teachers": 40,
                    "weekly_computer_lab_hours": 30,
                    "student_digital_literacy_rate": 75,
                },
                "software": {
                    "operating_systems": ["Windows", "Ubuntu"],
                    "educational_software": ["Scratch", "GeoGebra"],
                    "office_applications": True,
                },
                "capacity": {"ict_trained_teachers": 30, "support_staff": 3},
            },
            {
                "date": date(2024, 6, 15),
                "period": "JUN 2024",
                "infrastructure": {
                    "computers": 60,
                    "tablets": 30,
                    "projectors": 8,
                    "printers": 3,
                    "internet_connection": "Fast",
                    "internet_speed_mbps": 50,
                    "power_source": ["NationalGrid", "Solar"],
                    "power_backup": True,
                    "functional_devices": 88,
                },
                "usage": {
                    "teachers_using_ict": 35,
                    "total_teachers": 40,
                    "weekly_computer_lab_hours": 35,
                    "student_digital_literacy_rate": 82,
                },
                "software": {
                    "operating_systems": ["Windows", "Ubuntu"],
                    "educational_software": ["Scratch", "GeoGebra", "Kolibri"],
                    "office_applications": True,
                },
                "capacity": {"ict_trained_teachers": 32, "support_staff": 3},
            },
        ],
    },
    {
        "name": "Wakiso Hill Primary School",
        "district": "Wakiso",
        "sub_county": "Nansana",
        "lat": 0.3634,
        "lng": 32.5303,
        "type": "Public",
        "environment": "Urban",
        "emis_number": "WAK-014",
        "ownership_type": "Government",
        "school_category": "Mixed",
        "year_established": 1978,
        "enrollment": {"total_students": 850, "male_students": 410, "female_students": 440},
        "infrastructure": {
            "student_computers": 20,
            "teacher_computers": 4,
            "projectors": 2,
            "has_computer_lab": True,
            "lab_condition": "Good",
            "power_backup": ["UPS"],
            "has_electricity": True,
        },
        "internet": {"connection_type": "Mobile Broadband", "bandwidth_mbps": 8, "stability": "Medium"},
        "software": {"has_lms": False, "has_productivity_suite": True, "has_digital_library": False},
        "human_capacity": {
            "ict_trained_teachers": 10,
            "total_teachers": 25,
            "support_staff": 1,
            "monthly_trainings": 1,
            "teacher_competency_level": "Intermediate",
        },
        "pedagogical_usage": {
            "uses_ict_assessments": False,
            "uses_blended_learning": True,
            "digital_tool_usage_frequency": "Weekly",
            "has_digital_content": True,
        },
        "governance": {"has_ict_policy": True, "has_ict_committee": False, "has_ict_budget": False},
        "student_engagement": {"digital_literacy_level": "Intermediate", "has_ict_club": True},
        "community_engagement": {"has_community_outreach": True, "has_parent_portal": False},
        "accessibility": {"is_inclusive": True, "serves_girls": True},
        "reports": [
            {
                "date": date(2024, 6, 10),
                "period": "JUN 2024",
                "infrastructure": {
                    "computers": 20,
                    "tablets": 0,
                    "projectors": 2,
                    "printers": 1,
                    "internet_connection": "Medium",
                    "internet_speed_mbps": 8,
                    "power_source": ["NationalGrid"],
                    "power_backup": False,
                    "functional_devices": 18,
                },
                "usage": {
                    "teachers_using_ict": 10,
                    "total_teachers": 25,
                    "weekly_computer_lab_hours": 12,
                    "student_digital_literacy_rate": 45,
                },
                "software": {"operating_systems": ["Windows"], "office_applications": True},
                "capacity": {"ict_trained_teachers": 10, "support_staff": 1},
            },
        ],
    },
    {
        "name": "Mukono Community School",
        "district": "Mukono",
        "sub_county": "Goma",
        "lat": 0.3533,
        "lng": 32.7553,
        "type": "Public",
        "environment": "Rural",
        "emis_number": "MUK-203",
        "ownership_type": "Government-aided",
        "school_category": "Girls",
        "infrastructure": {"student_computers": 5, "has_computer_lab": False, "has_electricity": True},
        "human_capacity": {"ict_trained_teachers": 2, "total_teachers": 18, "teacher_competency_level": "Basic"},
        "governance": {"has_ict_policy": False},
        "reports": [
            {
                "date": date(2024, 6, 20),
                "period": "JUN 2024",
                "infrastructure": {
                    "computers": 5,
                    "tablets": 2,
                    "projectors": 0,
                    "printers": 0,
                    "internet_connection": "Slow",
                    "power_source": ["NationalGrid"],
                    "power_backup": False,
                    "functional_devices": 5,
                },
                "usage": {
                    "teachers_using_ict": 3,
                    "total_teachers": 18,
                    "weekly_computer_lab_hours": 2,
                    "student_digital_literacy_rate": 20,
                },
                "capacity": {"ict_trained_teachers": 2, "support_staff": 0},
            },
        ],
    },
    {
        "name": "Gulu Awach Primary School",
        "district": "Gulu",
        "sub_county": "Awach",
        "lat": 2.9538,
        "lng": 32.4086,
        "type": "Public",
        "environment": "Rural",
        "emis_number": "GUL-077",
        "ownership_type": "Government",
        "school_category": "Mixed",
        "accessibility": {"is_accessible_all_year": False, "serves_refugees": True},
        "reports": [],
    },
]


def demo_dataset() -> list[tuple[dict[str, Any], list[dict[str, Any]]]]:
    """Return ``(school_values, report_values)`` pairs for every demo school.

    Each call returns fresh copies so callers may mutate them freely.
    """
    dataset = []
    for entry in copy.deepcopy(_DEMO_SCHOOLS):
        reports = entry.pop("reports")
        dataset.append((entry, reports))
    return dataset


async def seed_repository(repo: SchoolRepository) -> int:
    """Load the demo data through *repo* when it holds no schools yet.

    Returns the number of schools created (0 if the database was not empty).
    """
    if await repo.count_schools(SchoolFilters()) > 0:
        logger.info("Database already has schools; skipping demo seed")
        return 0

    created = 0
    for school_values, report_values in demo_dataset():
        school = await repo.create_school(school_values)
        for values in report_values:
            await repo.create_report({**values, "school_id": school.id})
        created += 1

    logger.info("Seeded %d demo schools", created)
    return created


# ---------------------------------------------------------------------------
# Database operations
# ---------------------------------------------------------------------------


def _ensure_database(db_path: Path) -> Session:
    """Create the SQLite database and tables, then return a Session."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    Base.metadata.create_all(engine)
    return Session(engine)


def _reset(session: Session) -> None:
    """Delete every report and school."""
    session.query(ICTReport).delete()
    session.query(School).delete()
    session.commit()


def _upsert_demo_data(session: Session) -> tuple[int, int, int]:
    """Insert new demo schools and update existing ones (matched by EMIS number).

    Existing schools have their reports replaced by the demo reports.
    Returns ``(inserted, updated, reports)`` counts.
    """
    inserted = 0
    updated = 0
    report_count = 0

    for school_values, report_values in demo_dataset():
        existing = session.query(School).filter_by(emis_number=school_values["emis_number"]).first()
        if existing is None:
            school = School(**school_values)
            session.add(school)
            inserted += 1
        else:
            school = existing
            for key, value in school_values.items():
                setattr(school, key, value)
            session.query(ICTReport).filter_by(school_id=school.id).delete()
            updated += 1

        session.flush()
        for values in report_values:
            session.add(ICTReport(school_id=school.id, **values))
            report_count += 1

    session.commit()
    return inserted, updated, report_count


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="python -m src.db.seed",
        description="Seed the ICT observatory database with demo schools and reports.",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=DEFAULT_DB_PATH,
        help=f"Path to the SQLite database file (default: {DEFAULT_DB_PATH}).",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        default=False,
        help="Delete all existing schools and reports before seeding.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Entry point for the seed script."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = parse_args(argv)
    db_path: Path = args.db

    logger.info("Seeding database at %s", db_path)
    session = _ensure_database(db_path)
    try:
        if args.reset:
            logger.info("Removing existing schools and reports")
            _reset(session)

        inserted, updated, report_count = _upsert_demo_data(session)
        total = session.query(School).count()
        logger.info(
            "Inserted %d schools, updated %d, wrote %d reports (%d schools in database)",
            inserted,
            updated,
            report_count,
            total,
        )
    finally:
        session.close()


if __name__ == "__main__":
    main()

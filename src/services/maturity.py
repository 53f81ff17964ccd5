"""Policy-maturity scoring for a single school.

Derives a multi-dimensional maturity assessment from a school's profile and
its most recent observation report.  Eight core policy themes are scored from
small sub-indicator ladders and averaged into an overall score; six
cross-cutting indicators are reported alongside but never feed the overall
figure.

Every function here is pure and total.  Missing sections, missing fields and
a missing report all fall through to the lowest rung of each ladder, so an
incomplete record scores as low maturity rather than raising.
"""

from __future__ import annotations

import datetime
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from src.schemas.maturity import (
    CrossCuttingScore,
    CrossCuttingThemes,
    ICTReadinessLevel,
    PolicyThemeScore,
    ProgressStage,
    SchoolPolicyMaturity,
    SubScore,
)
from src.schemas.report import ICTReport
from src.schemas.school import School
from src.services.numbers import round_half_up, safe_ratio
from src.services.reports import get_latest_report

# ---------------------------------------------------------------------------
# Stage / level classifiers
# ---------------------------------------------------------------------------

ADVANCED_FROM = 87.5
ESTABLISHED_FROM = 62.5
EMERGING_FROM = 37.5

HIGH_READINESS_FROM = 70
MEDIUM_READINESS_FROM = 40


def determine_progress_stage(score: float) -> ProgressStage:
    """Map a 0-100 score to a progress stage (inclusive lower bounds)."""
    if score >= ADVANCED_FROM:
        return "Advanced"
    if score >= ESTABLISHED_FROM:
        return "Established"
    if score >= EMERGING_FROM:
        return "Emerging"
    return "Latent"


def determine_ict_readiness_level(score: float) -> ICTReadinessLevel:
    """Map a 0-100 overall maturity score to a readiness level."""
    if score >= HIGH_READINESS_FROM:
        return "High"
    if score >= MEDIUM_READINESS_FROM:
        return "Medium"
    return "Low"


# ---------------------------------------------------------------------------
# Field access
# ---------------------------------------------------------------------------

Predicate = Callable[[School, ICTReport | None], bool]


def _field(record: Any, section: str, name: str) -> Any:
    """Return ``record.<section>.<name>``, or ``None`` if any link is unset."""
    if record is None:
        return None
    part = getattr(record, section, None)
    if part is None:
        return None
    return getattr(part, name, None)


def _number(record: Any, section: str, name: str) -> float:
    return _field(record, section, name) or 0


def _school_flag(section: str, name: str) -> Predicate:
    return lambda school, _report: bool(_field(school, section, name))


def _report_flag(section: str, name: str) -> Predicate:
    return lambda _school, report: bool(_field(report, section, name))


def _school_equals(section: str, name: str, expected: Any) -> Predicate:
    return lambda school, _report: _field(school, section, name) == expected


def _all_of(*predicates: Predicate) -> Predicate:
    return lambda school, report: all(p(school, report) for p in predicates)


def _any_of(*predicates: Predicate) -> Predicate:
    return lambda school, report: any(p(school, report) for p in predicates)


def _total_devices(report: ICTReport | None) -> float:
    return (
        _number(report, "infrastructure", "computers")
        + _number(report, "infrastructure", "tablets")
        + _number(report, "infrastructure", "projectors")
    )


def _training_rate(school: School, report: ICTReport | None) -> float:
    """Percentage of teachers with ICT training, preferring report figures over the profile."""
    total = _field(report, "usage", "total_teachers") or _field(school, "human_capacity", "total_teachers")
    trained = (
        _field(report, "capacity", "ict_trained_teachers")
        or _field(school, "human_capacity", "ict_trained_teachers")
        or 0
    )
    return safe_ratio(trained, total) * 100


# ---------------------------------------------------------------------------
# Score ladders and themes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ScoreLadder:
    """One sub-indicator: ordered ``(predicate, score)`` rungs, first match wins."""

    key: str
    name: str
    rungs: tuple[tuple[Predicate, int], ...]
    default: int = 25

    def evaluate(self, school: School, report: ICTReport | None) -> int:
        for predicate, score in self.rungs:
            if predicate(school, report):
                return score
        return self.default

    def sub_score(self, school: School, report: ICTReport | None) -> SubScore:
        score = self.evaluate(school, report)
        return SubScore(name=self.name, score=score, stage=determine_progress_stage(score))


@dataclass(frozen=True)
class ThemeDefinition:
    """A core policy theme scored as the mean of its sub-indicators."""

    code: str
    name: str
    ladders: tuple[ScoreLadder, ...]

    def score(self, school: School, report: ICTReport | None = None) -> PolicyThemeScore:
        sub_scores = {ladder.key: ladder.sub_score(school, report) for ladder in self.ladders}
        mean = sum(s.score for s in sub_scores.values()) / len(sub_scores)
        return PolicyThemeScore(
            code=self.code,
            name=self.name,
            score=round_half_up(mean),
            stage=determine_progress_stage(mean),
            sub_scores=sub_scores,
        )


VISION_PLANNING = ThemeDefinition(
    code="vision_planning",
    name="Vision and Planning",
    ladders=(
        ScoreLadder(
            "vision",
            "Vision/Goals",
            (
                (_school_flag("governance", "has_ict_policy"), 75),
                (_school_flag("governance", "aligned_with_national_strategy"), 50),
            ),
        ),
        ScoreLadder(
            "linkages",
            "Sectoral Linkages",
            (
                (_school_flag("governance", "aligned_with_national_strategy"), 75),
                (_school_flag("governance", "has_ict_committee"), 50),
            ),
        ),
        ScoreLadder(
            "funding",
            "Funding",
            (
                (_school_flag("governance", "has_ict_budget"), 75),
                (lambda _s, r: _number(r, "infrastructure", "functional_devices") > 10, 50),
            ),
        ),
        ScoreLadder(
            "institutions",
            "Institutions",
            (
                (_school_flag("governance", "has_ict_committee"), 75),
                (lambda _s, r: _number(r, "capacity", "support_staff") > 0, 50),
            ),
        ),
        ScoreLadder(
            "partnerships",
            "Public-Private Partnerships",
            (
                (_school_flag("community_engagement", "has_industry_partners"), 75),
                (_school_flag("community_engagement", "partner_organizations"), 50),
            ),
        ),
    ),
)

ICT_INFRASTRUCTURE = ThemeDefinition(
    code="ict_infrastructure",
    name="ICT Infrastructure",
    ladders=(
        ScoreLadder(
            "electricity",
            "Electricity",
            (
                (
                    _all_of(
                        _school_flag("infrastructure", "has_electricity"),
                        _school_flag("infrastructure", "power_backup"),
                    ),
                    100,
                ),
                (_school_flag("infrastructure", "has_electricity"), 75),
            ),
        ),
        ScoreLadder(
            "equipment",
            "Equipment/Networking",
            (
                (lambda _s, r: _total_devices(r) >= 50, 100),
                (lambda _s, r: _total_devices(r) >= 25, 75),
                (lambda _s, r: _total_devices(r) >= 10, 50),
            ),
        ),
        ScoreLadder(
            "support",
            "Support/Maintenance",
            (
                (lambda _s, r: _number(r, "capacity", "support_staff") >= 2, 100),
                (lambda _s, r: _number(r, "capacity", "support_staff") >= 1, 75),
            ),
        ),
    ),
)

TEACHERS = ThemeDefinition(
    code="teachers",
    name="Teachers",
    ladders=(
        ScoreLadder(
            "training",
            "Training",
            (
                (lambda s, r: _training_rate(s, r) >= 80, 100),
                (lambda s, r: _training_rate(s, r) >= 60, 75),
                (lambda s, r: _training_rate(s, r) >= 30, 50),
            ),
        ),
        ScoreLadder(
            "competency",
            "Competency Standards",
            (
                (_school_equals("human_capacity", "teacher_competency_level", "Advanced"), 100),
                (_school_equals("human_capacity", "teacher_competency_level", "Intermediate"), 75),
                (_school_equals("human_capacity", "teacher_competency_level", "Basic"), 50),
            ),
        ),
        ScoreLadder(
            "networks",
            "Networks/Resource Centers",
            (
                (_school_flag("human_capacity", "has_capacity_building"), 75),
                (_school_flag("human_capacity", "monthly_trainings"), 50),
            ),
        ),
        ScoreLadder(
            "leadership",
            "Leadership Training",
            ((_school_flag("governance", "has_ict_committee"), 75),),
            default=50,
        ),
    ),
)

SKILLS_COMPETENCIES = ThemeDefinition(
    code="skills_competencies",
    name="Skills and Competencies",
    ladders=(
        ScoreLadder(
            "digital_literacy",
            "Digital Literacy",
            (
                (lambda _s, r: _number(r, "usage", "student_digital_literacy_rate") >= 80, 100),
                (lambda _s, r: _number(r, "usage", "student_digital_literacy_rate") >= 60, 75),
                (lambda _s, r: _number(r, "usage", "student_digital_literacy_rate") >= 30, 50),
            ),
        ),
        ScoreLadder(
            "life_long",
            "Lifelong Learning",
            (
                (_school_flag("pedagogical_usage", "uses_blended_learning"), 75),
                (_school_flag("pedagogical_usage", "has_digital_content"), 50),
            ),
        ),
    ),
)

LEARNING_RESOURCES = ThemeDefinition(
    code="learning_resources",
    name="Learning Resources",
    ladders=(
        ScoreLadder(
            "digital_content",
            "Digital Content",
            (
                (
                    _all_of(
                        _school_flag("software", "has_digital_library"),
                        _school_flag("software", "has_local_content"),
                    ),
                    100,
                ),
                (_report_flag("software", "educational_software"), 75),
                (
                    _any_of(
                        _school_flag("software", "has_digital_library"),
                        _school_flag("software", "has_local_content"),
                    ),
                    50,
                ),
            ),
        ),
    ),
)

EMIS = ThemeDefinition(
    code="emis",
    name="EMIS",
    ladders=(
        ScoreLadder(
            "management",
            "ICT in Management",
            (
                (
                    _all_of(
                        _school_flag("software", "has_lms"),
                        _school_flag("governance", "has_monitoring_system"),
                    ),
                    100,
                ),
                (
                    _any_of(
                        _school_flag("software", "has_lms"),
                        _school_flag("governance", "has_monitoring_system"),
                    ),
                    75,
                ),
                (_school_flag("pedagogical_usage", "uses_ict_assessments"), 50),
            ),
        ),
    ),
)

MONITORING_EVALUATION = ThemeDefinition(
    code="monitoring_evaluation",
    name="Monitoring & Evaluation",
    ladders=(
        ScoreLadder(
            "impact",
            "Impact Measurement",
            ((_school_flag("governance", "has_monitoring_system"), 75),),
        ),
        ScoreLadder(
            "assessments",
            "ICT in Assessments",
            ((_school_flag("pedagogical_usage", "uses_ict_assessments"), 75),),
        ),
        ScoreLadder(
            "rd",
            "R&D/Innovation",
            ((_school_flag("performance", "innovations"), 75),),
        ),
    ),
)

_EQUITY_FLAGS = (
    _school_flag("accessibility", "is_inclusive"),
    _school_flag("accessibility", "serves_pwds"),
    _school_flag("accessibility", "serves_girls"),
)

EQUITY_INCLUSION_SAFETY = ThemeDefinition(
    code="equity_inclusion_safety",
    name="Equity, Inclusion, Safety",
    ladders=(
        ScoreLadder(
            "equity",
            "Pro-Equity",
            (
                (_all_of(*_EQUITY_FLAGS), 100),
                (_any_of(*_EQUITY_FLAGS), 75),
            ),
            default=50,
        ),
        ScoreLadder(
            "safety",
            "Digital Safety",
            ((_school_flag("internet", "has_usage_policy"), 75),),
        ),
    ),
)

CORE_THEMES: tuple[ThemeDefinition, ...] = (
    VISION_PLANNING,
    ICT_INFRASTRUCTURE,
    TEACHERS,
    SKILLS_COMPETENCIES,
    LEARNING_RESOURCES,
    EMIS,
    MONITORING_EVALUATION,
    EQUITY_INCLUSION_SAFETY,
)

# ---------------------------------------------------------------------------
# Cross-cutting indicators
# ---------------------------------------------------------------------------

CROSS_CUTTING: tuple[ScoreLadder, ...] = (
    ScoreLadder(
        "distance_education",
        "Distance Education",
        (
            (_school_flag("pedagogical_usage", "uses_blended_learning"), 75),
            (_school_flag("software", "has_lms"), 50),
        ),
    ),
    ScoreLadder(
        "mobiles",
        "Mobile Learning",
        (
            (_school_equals("pedagogical_usage", "digital_tool_usage_frequency", "Daily"), 75),
            (_school_equals("pedagogical_usage", "digital_tool_usage_frequency", "Weekly"), 50),
        ),
    ),
    # Fixed at Emerging for every primary school.
    ScoreLadder("early_childhood", "Early Childhood Development", (), default=50),
    ScoreLadder(
        "open_educational_resources",
        "Open Educational Resources",
        (
            (_school_flag("software", "has_local_content"), 75),
            (_school_flag("software", "has_digital_library"), 50),
        ),
    ),
    ScoreLadder(
        "community_involvement",
        "Community Involvement",
        (
            (_school_flag("community_engagement", "has_parent_portal"), 75),
            (_school_flag("community_engagement", "has_community_outreach"), 50),
        ),
    ),
    ScoreLadder(
        "data_privacy",
        "Data Privacy",
        ((_school_flag("internet", "has_usage_policy"), 75),),
    ),
)


def calculate_cross_cutting_themes(school: School, latest_report: ICTReport | None = None) -> CrossCuttingThemes:
    """Score the six supplementary indicators."""
    scores = {}
    for ladder in CROSS_CUTTING:
        score = ladder.evaluate(school, latest_report)
        scores[ladder.key] = CrossCuttingScore(score=score, stage=determine_progress_stage(score))
    return CrossCuttingThemes(**scores)


# ---------------------------------------------------------------------------
# Data completeness
# ---------------------------------------------------------------------------

SCHOOL_SECTION_WEIGHTS: tuple[tuple[str, int], ...] = (
    ("infrastructure", 2),
    ("internet", 2),
    ("software", 1),
    ("human_capacity", 2),
    ("pedagogical_usage", 1),
    ("governance", 2),
    ("student_engagement", 1),
    ("community_engagement", 1),
)

REPORT_SECTION_WEIGHTS: tuple[tuple[str, int], ...] = (
    ("infrastructure", 2),
    ("usage", 2),
    ("software", 1),
    ("capacity", 2),
)


def _is_filled(value: Any) -> bool:
    if value is None or value == "":
        return False
    if isinstance(value, list) and not value:
        return False
    return True


def calculate_data_completeness(school: School, latest_report: ICTReport | None = None) -> int:
    """Return the weighted percentage (0-100) of populated section fields.

    Absent sections contribute nothing to either side of the ratio; a record
    with no sections at all scores 0.
    """
    total_fields = 0
    completed_fields = 0

    def _walk(record: Any, weights: tuple[tuple[str, int], ...]) -> None:
        nonlocal total_fields, completed_fields
        for section_name, weight in weights:
            section = getattr(record, section_name, None)
            if section is None:
                continue
            for field_name in type(section).model_fields:
                total_fields += weight
                if _is_filled(getattr(section, field_name)):
                    completed_fields += weight

    _walk(school, SCHOOL_SECTION_WEIGHTS)
    if latest_report is not None:
        _walk(latest_report, REPORT_SECTION_WEIGHTS)

    if total_fields == 0:
        return 0
    return round_half_up(completed_fields / total_fields * 100)


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def calculate_school_policy_maturity(school: School, reports: Sequence[ICTReport]) -> SchoolPolicyMaturity:
    """Compute a fresh maturity assessment from the school and its reports.

    Only the school's most recent report is considered.  Neither argument is
    modified.
    """
    latest_report = get_latest_report(school.id, reports)

    themes = {definition.code: definition.score(school, latest_report) for definition in CORE_THEMES}
    overall_score = round_half_up(sum(theme.score for theme in themes.values()) / len(themes))

    return SchoolPolicyMaturity(
        overall_score=overall_score,
        overall_stage=determine_progress_stage(overall_score),
        ict_readiness_level=determine_ict_readiness_level(overall_score),
        cross_cutting_themes=calculate_cross_cutting_themes(school, latest_report),
        last_calculated=datetime.datetime.now(datetime.timezone.utc),
        data_completeness=calculate_data_completeness(school, latest_report),
        **themes,
    )


class FullProfileMaturityScorer:
    """Full policy-maturity audit driven by the school profile and its latest report."""

    def score(self, school: School, reports: Sequence[ICTReport]) -> SchoolPolicyMaturity:
        return calculate_school_policy_maturity(school, reports)

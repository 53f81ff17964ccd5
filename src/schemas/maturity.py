"""Pydantic schemas for policy-maturity and readiness results."""

from __future__ import annotations

import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

ProgressStage = Literal["Latent", "Emerging", "Established", "Advanced"]
ICTReadinessLevel = Literal["Low", "Medium", "High"]
RecommendationPriority = Literal["high", "medium", "low"]

STAGE_COLORS: dict[str, str] = {
    "Advanced": "#10B981",
    "Established": "#3B82F6",
    "Emerging": "#F59E0B",
    "Latent": "#EF4444",
}

READINESS_COLORS: dict[str, str] = {
    "High": "#10B981",
    "Medium": "#F59E0B",
    "Low": "#EF4444",
}

UNKNOWN_COLOR = "#6B7280"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)


class SubScore(_Frozen):
    """Score for one sub-indicator of a policy theme."""

    name: str
    score: int
    stage: ProgressStage


class PolicyThemeScore(_Frozen):
    """Score for one of the eight core policy themes."""

    code: str
    name: str
    score: int
    stage: ProgressStage
    sub_scores: dict[str, SubScore]


class CrossCuttingScore(_Frozen):
    score: int
    stage: ProgressStage


class CrossCuttingThemes(_Frozen):
    """Supplementary indicators reported alongside, but not inside, the overall score."""

    distance_education: CrossCuttingScore
    mobiles: CrossCuttingScore
    early_childhood: CrossCuttingScore
    open_educational_resources: CrossCuttingScore
    community_involvement: CrossCuttingScore
    data_privacy: CrossCuttingScore


class SchoolPolicyMaturity(_Frozen):
    """Derived maturity assessment for one school.

    Always computed from the school's current profile and report set; never
    persisted.
    """

    overall_score: int
    overall_stage: ProgressStage
    ict_readiness_level: ICTReadinessLevel
    vision_planning: PolicyThemeScore
    ict_infrastructure: PolicyThemeScore
    teachers: PolicyThemeScore
    skills_competencies: PolicyThemeScore
    learning_resources: PolicyThemeScore
    emis: PolicyThemeScore
    monitoring_evaluation: PolicyThemeScore
    equity_inclusion_safety: PolicyThemeScore
    cross_cutting_themes: CrossCuttingThemes
    last_calculated: datetime.datetime
    data_completeness: int

    def core_themes(self) -> list[PolicyThemeScore]:
        """Return the eight core themes in framework order."""
        return [
            self.vision_planning,
            self.ict_infrastructure,
            self.teachers,
            self.skills_competencies,
            self.learning_resources,
            self.emis,
            self.monitoring_evaluation,
            self.equity_inclusion_safety,
        ]


class ReadinessResult(_Frozen):
    """Report-only readiness label used for map markers and quick badges."""

    level: ICTReadinessLevel
    score: float


class PolicyRecommendation(_Frozen):
    """An improvement recommendation derived from a maturity assessment."""

    theme_code: str
    priority: RecommendationPriority
    title: str
    description: str
    action_items: list[str]
    timeline: str
    resources: list[str]
    expected_impact: str


class MaturityTrendPoint(_Frozen):
    """Overall and per-theme maturity as of one observation report."""

    report_id: int
    date: datetime.date
    period: str
    overall_score: int
    overall_stage: ProgressStage
    theme_scores: dict[str, int]


class BenchmarkDelta(_Frozen):
    """A score set against national and district averages.

    An empty cohort averages to 0, so the delta equals the score.
    """

    code: str
    name: str
    score: int
    stage: ProgressStage
    national_average: float
    district_average: float
    vs_national: float
    vs_district: float


class BenchmarkComparison(_Frozen):
    school_id: int
    district: str
    national_schools: int
    district_schools: int
    overall: BenchmarkDelta
    themes: list[BenchmarkDelta]

"""Pydantic schemas for the dashboard and map endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from src.schemas.maturity import ICTReadinessLevel


class TopSchool(BaseModel):
    school_id: int
    name: str
    score: float


class EnvironmentDistribution(BaseModel):
    urban: int = 0
    rural: int = 0


class SummaryStats(BaseModel):
    """Roll-up statistics across a collection of schools."""

    total_schools: int
    schools_with_internet_percent: float
    average_computers: float
    top_schools: list[TopSchool]
    district_distribution: dict[str, int]
    environment_distribution: EnvironmentDistribution


class ReadinessBucket(BaseModel):
    name: ICTReadinessLevel
    value: int
    percentage: float


class InfrastructureMetrics(BaseModel):
    avg_computers: int
    avg_functional_devices: int
    internet_access_percent: int
    power_backup_percent: int


class UsageMetrics(BaseModel):
    avg_teacher_usage: int
    avg_student_literacy: int
    avg_weekly_hours: int


class CapacityMetrics(BaseModel):
    avg_trained_teachers: int
    avg_support_staff: float


class PerformanceMetrics(BaseModel):
    """Averages over the observations of the most recent period."""

    infrastructure: InfrastructureMetrics
    usage: UsageMetrics
    capacity: CapacityMetrics
    total_observations: int
    period: str


class DashboardAlert(BaseModel):
    type: Literal["warning", "error"]
    title: str
    message: str
    action: str


class InfrastructureComparisonRow(BaseModel):
    """Average device count per category for urban and rural schools."""

    name: str
    urban: int
    rural: int


class MapMarker(BaseModel):
    school_id: int
    name: str
    district: str
    lat: float
    lng: float
    readiness_level: ICTReadinessLevel
    readiness_score: float
    color: str

from __future__ import annotations

import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from src.schemas.maturity import ReadinessResult
from src.schemas.school import Count, Measure, Percentage, Section

InternetConnection = Literal["None", "Slow", "Medium", "Fast"]


class ReportInfrastructure(Section):
    computers: Count | None = None
    tablets: Count | None = None
    projectors: Count | None = None
    printers: Count | None = None
    internet_connection: InternetConnection | None = None
    internet_speed_mbps: Measure | None = None
    power_source: list[Literal["NationalGrid", "Solar", "Generator"]] | None = None
    power_backup: bool | None = None
    functional_devices: Count | None = None


class ReportUsage(Section):
    teachers_using_ict: Count | None = None
    total_teachers: Count | None = None
    weekly_computer_lab_hours: Measure | None = None
    student_digital_literacy_rate: Percentage | None = None


class ReportSoftware(Section):
    operating_systems: list[str] | None = None
    educational_software: list[str] | None = None
    office_applications: bool | None = None


class ReportCapacity(Section):
    ict_trained_teachers: Count | None = None
    support_staff: Count | None = None


class ICTReportBase(BaseModel):
    """A dated observation snapshot for one school."""

    model_config = ConfigDict(from_attributes=True)

    school_id: int
    date: datetime.date
    period: str = Field(min_length=1)  # e.g. "JAN 2025"

    infrastructure: ReportInfrastructure | None = None
    usage: ReportUsage | None = None
    software: ReportSoftware | None = None
    capacity: ReportCapacity | None = None


class ICTReportCreate(ICTReportBase):
    """Payload for submitting a new observation report."""


class ICTReportUpdate(ICTReportBase):
    """Payload for replacing an existing observation report."""


class ICTReport(ICTReportBase):
    """A persisted observation report."""

    id: int


class ObservationSummary(BaseModel):
    """Headline figures for a single observation."""

    teacher_usage_percent: int
    trained_teachers_percent: int
    device_utilization: int
    has_internet: bool
    has_power_backup: bool
    functional_devices: int
    student_literacy: float
    weekly_lab_hours: float
    readiness_score: float


class ActionItem(BaseModel):
    """An immediate follow-up raised by an observation."""

    priority: Literal["High Priority", "Medium Priority", "Low Priority"]
    category: str
    action: str
    timeline: str


class ObservationReportResponse(BaseModel):
    """Content of a periodic observation report for one school and period."""

    report: ICTReport
    school_name: str
    summary: ObservationSummary
    readiness: ReadinessResult
    action_items: list[ActionItem]


class ReadinessTrendPoint(BaseModel):
    """Report-only readiness of one observation, for plotting a school's trend."""

    report_id: int
    date: datetime.date
    period: str
    readiness: ReadinessResult

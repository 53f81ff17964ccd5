from __future__ import annotations

import math
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from src.schemas.maturity import ReadinessResult, SchoolPolicyMaturity

# Headcounts, device counts and other tallies
Count = Annotated[int, Field(ge=0)]
# Distances, bandwidth, hours and ratios
Measure = Annotated[float, Field(ge=0)]
# Rates expressed as 0-100
Percentage = Annotated[float, Field(ge=0, le=100)]

SchoolType = Literal["Public", "Private"]
SchoolEnvironment = Literal["Urban", "Rural"]
CompetencyLevel = Literal["Basic", "Intermediate", "Advanced"]
UsageFrequency = Literal["Daily", "Weekly", "Rarely", "Never"]


class Section(BaseModel):
    """Base for a fixed-shape capability section.

    Every field is optional: a section may be partially filled in by the
    observation form.  An absent section is represented by ``None`` on the
    owning school.
    """

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Capability sections
# ---------------------------------------------------------------------------


class Enrollment(Section):
    total_students: Count | None = None
    male_students: Count | None = None
    female_students: Count | None = None


class ContactInfo(Section):
    principal_name: str | None = None
    email: str | None = None
    phone: str | None = None


class InfrastructureSection(Section):
    student_computers: Count | None = None
    teacher_computers: Count | None = None
    projectors: Count | None = None
    smart_boards: Count | None = None
    tablets: Count | None = None
    laptops: Count | None = None
    has_computer_lab: bool | None = None
    lab_condition: Literal["Excellent", "Good", "Fair", "Poor"] | None = None
    power_backup: list[Literal["Solar", "Generator", "UPS"]] | None = None
    has_ict_room: bool | None = None
    has_electricity: bool | None = None
    has_secure_room: bool | None = None
    has_furniture: bool | None = None


class InternetSection(Section):
    connection_type: Literal["None", "Fiber", "Mobile Broadband", "Satellite"] | None = None
    bandwidth_mbps: Measure | None = None
    wifi_coverage: list[str] | None = None
    stability: Literal["High", "Medium", "Low"] | None = None
    has_usage_policy: bool | None = None
    provider: str | None = None
    is_stable: bool | None = None


class SoftwareSection(Section):
    has_lms: bool | None = None
    lms_name: str | None = None
    has_licensed_software: bool | None = None
    licensed_software: list[str] | None = None
    has_productivity_suite: bool | None = None
    productivity_suite: list[str] | None = None
    has_digital_library: bool | None = None
    has_local_content: bool | None = None
    content_source: str | None = None


class HumanCapacitySection(Section):
    ict_trained_teachers: Count | None = None
    total_teachers: Count | None = None
    male_teachers: Count | None = None
    female_teachers: Count | None = None
    p5_to_p7_teachers: Count | None = None
    support_staff: Count | None = None
    monthly_trainings: Count | None = None
    teacher_competency_level: CompetencyLevel | None = None
    has_capacity_building: bool | None = None


class PedagogicalUsageSection(Section):
    ict_integrated_lessons: Count | None = None
    uses_ict_assessments: bool | None = None
    has_student_projects: bool | None = None
    uses_blended_learning: bool | None = None
    has_assistive_tech: bool | None = None
    digital_tool_usage_frequency: UsageFrequency | None = None
    has_digital_content: bool | None = None
    has_peer_support: bool | None = None


class GovernanceSection(Section):
    has_ict_policy: bool | None = None
    aligned_with_national_strategy: bool | None = None
    has_ict_committee: bool | None = None
    has_ict_budget: bool | None = None
    has_monitoring_system: bool | None = None
    has_active_smc: bool | None = None
    has_active_pta: bool | None = None
    has_local_leader_engagement: bool | None = None


class StudentEngagementSection(Section):
    digital_literacy_level: CompetencyLevel | None = None
    has_ict_club: bool | None = None
    uses_online_platforms: bool | None = None
    student_feedback_rating: int | None = Field(default=None, ge=1, le=5)
    students_using_digital_content: Count | None = None


class CommunityEngagementSection(Section):
    has_parent_portal: bool | None = None
    has_community_outreach: bool | None = None
    has_industry_partners: bool | None = None
    partner_organizations: list[str] | None = None
    ngo_support: list[str] | None = None
    community_contributions: list[str] | None = None


class SecuritySection(Section):
    is_fenced: bool | None = None
    has_security_guard: bool | None = None
    has_recent_incidents: bool | None = None
    incident_details: str | None = None
    has_toilets: bool | None = None
    has_water_source: bool | None = None


class AccessibilitySection(Section):
    distance_from_hq: Measure | None = None
    is_accessible_all_year: bool | None = None
    is_inclusive: bool | None = None
    serves_girls: bool | None = None
    serves_pwds: bool | None = None
    serves_refugees: bool | None = None
    is_only_school_in_area: bool | None = None


class FacilitiesSection(Section):
    permanent_classrooms: Count | None = None
    semi_permanent_classrooms: Count | None = None
    temporary_classrooms: Count | None = None
    pupil_classroom_ratio: Measure | None = None
    boys_toilets: Count | None = None
    girls_toilets: Count | None = None
    staff_toilets: Count | None = None
    water_access: Literal["Borehole", "Tap", "Rainwater", "None"] | None = None
    security_infrastructure: list[str] | None = None
    school_accessibility: Literal["All-Weather", "Seasonal", "Remote"] | None = None
    nearby_health_facility: str | None = None
    health_facility_distance: Measure | None = None


class PerformanceSection(Section):
    ple_pass_rate_year1: Percentage | None = None
    ple_pass_rate_year2: Percentage | None = None
    ple_pass_rate_year3: Percentage | None = None
    literacy_trends: str | None = None
    numeracy_trends: str | None = None
    innovations: str | None = None
    unique_achievements: str | None = None


# ---------------------------------------------------------------------------
# School profile
# ---------------------------------------------------------------------------


class SchoolBase(BaseModel):
    """Fields shared by create/update payloads and responses."""

    model_config = ConfigDict(from_attributes=True)

    name: str = Field(min_length=1)
    district: str
    sub_county: str | None = None
    lat: float | None = Field(default=None, ge=-90, le=90)
    lng: float | None = Field(default=None, ge=-180, le=180)
    type: SchoolType = "Public"
    environment: SchoolEnvironment = "Rural"

    emis_number: str | None = None
    upi_code: str | None = None
    ownership_type: Literal["Government", "Government-aided", "Community"] | None = None
    school_category: Literal["Mixed", "Girls", "Boys", "Special Needs"] | None = None
    signature_program: str | None = None
    year_established: Count | None = None

    enrollment: Enrollment | None = None
    contact_info: ContactInfo | None = None

    infrastructure: InfrastructureSection | None = None
    internet: InternetSection | None = None
    software: SoftwareSection | None = None
    human_capacity: HumanCapacitySection | None = None
    pedagogical_usage: PedagogicalUsageSection | None = None
    governance: GovernanceSection | None = None
    student_engagement: StudentEngagementSection | None = None
    community_engagement: CommunityEngagementSection | None = None
    security: SecuritySection | None = None
    accessibility: AccessibilitySection | None = None
    facilities: FacilitiesSection | None = None
    performance: PerformanceSection | None = None


class SchoolCreate(SchoolBase):
    """Payload for registering a new school."""


class SchoolUpdate(SchoolBase):
    """Payload for replacing an existing school's profile."""


class School(SchoolBase):
    """A registered school profile as used by the scoring engine."""

    id: int


class SchoolResponse(School):
    """Summary representation of a school for list views."""


class SchoolDetailResponse(SchoolResponse):
    """Full school detail with derived maturity and readiness."""

    policy_maturity: SchoolPolicyMaturity
    readiness: ReadinessResult
    report_count: int = 0


class PaginatedSchoolsResponse(BaseModel):
    """One page of schools together with paging metadata."""

    data: list[SchoolResponse]
    total: int
    page: int
    page_size: int
    total_pages: int

    @classmethod
    def build(cls, data: list[SchoolResponse], total: int, page: int, page_size: int) -> PaginatedSchoolsResponse:
        return cls(
            data=data,
            total=total,
            page=page,
            page_size=page_size,
            total_pages=math.ceil(total / page_size) if page_size else 0,
        )


class CompareEntry(BaseModel):
    """One school's column in a side-by-side comparison."""

    school: SchoolResponse
    policy_maturity: SchoolPolicyMaturity
    readiness: ReadinessResult


class CompareResponse(BaseModel):
    """Response for side-by-side school comparison."""

    schools: list[CompareEntry]

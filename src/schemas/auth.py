"""Pydantic schemas for caller identity and role permissions."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

UserRole = Literal[
    "super_admin",
    "ministry_admin",
    "district_admin",
    "school_admin",
    "ict_coordinator",
    "data_analyst",
    "observer",
]

ResourceType = Literal["school", "report"]


class Principal(BaseModel):
    """The caller of a request, as asserted by the upstream gateway headers."""

    model_config = ConfigDict(frozen=True)

    role: UserRole
    district: str | None = None
    school_id: int | None = None


class RolePermissions(BaseModel):
    """What a role may do, plus the district or school it is confined to."""

    model_config = ConfigDict(frozen=True)

    can_view_all_schools: bool = False
    can_edit_all_schools: bool = False
    can_delete_schools: bool = False
    can_view_all_reports: bool = False
    can_edit_all_reports: bool = False
    can_delete_reports: bool = False
    can_manage_users: bool = False
    can_view_analytics: bool = False
    can_export_data: bool = False
    restricted_to_district: str | None = None
    restricted_to_school: int | None = None


class PermissionsResponse(BaseModel):
    role: UserRole
    display_name: str
    description: str
    permissions: RolePermissions

"""Role-based permission table and resource scoping.

Each role is granted a fixed set of capabilities.  District administrators
are confined to their district; school administrators and ICT coordinators
to their own school.
"""

from __future__ import annotations

from src.schemas.auth import Principal, ResourceType, RolePermissions, UserRole

_ROLE_GRANTS: dict[UserRole, frozenset[str]] = {
    "super_admin": frozenset(
        {
            "can_view_all_schools",
            "can_edit_all_schools",
            "can_delete_schools",
            "can_view_all_reports",
            "can_edit_all_reports",
            "can_delete_reports",
            "can_manage_users",
            "can_view_analytics",
            "can_export_data",
        }
    ),
    "ministry_admin": frozenset(
        {
            "can_view_all_schools",
            "can_edit_all_schools",
            "can_view_all_reports",
            "can_edit_all_reports",
            "can_manage_users",
            "can_view_analytics",
            "can_export_data",
        }
    ),
    "district_admin": frozenset(
        {
            "can_view_all_schools",
            "can_edit_all_schools",
            "can_view_all_reports",
            "can_edit_all_reports",
            "can_manage_users",
            "can_view_analytics",
            "can_export_data",
        }
    ),
    "school_admin": frozenset({"can_edit_all_reports", "can_view_analytics", "can_export_data"}),
    "ict_coordinator": frozenset({"can_edit_all_reports"}),
    "data_analyst": frozenset(
        {"can_view_all_schools", "can_view_all_reports", "can_view_analytics", "can_export_data"}
    ),
    "observer": frozenset({"can_view_all_schools", "can_view_all_reports"}),
}

DISTRICT_SCOPED_ROLES: frozenset[UserRole] = frozenset({"district_admin"})
SCHOOL_SCOPED_ROLES: frozenset[UserRole] = frozenset({"school_admin", "ict_coordinator"})

ROLE_DISPLAY_NAMES: dict[UserRole, str] = {
    "super_admin": "Super Administrator",
    "ministry_admin": "Ministry Administrator",
    "district_admin": "District Administrator",
    "school_admin": "School Administrator",
    "ict_coordinator": "ICT Coordinator",
    "data_analyst": "Data Analyst",
    "observer": "Observer",
}

ROLE_DESCRIPTIONS: dict[UserRole, str] = {
    "super_admin": "Full system access with all permissions including user management and system configuration.",
    "ministry_admin": (
        "Ministry of Education officials with broad access to manage schools and reports across all districts."
    ),
    "district_admin": "District Education Officers with access to manage schools and reports within their district.",
    "school_admin": "Head teachers/Principals with access to manage their school's data and reports.",
    "ict_coordinator": "School ICT coordinators responsible for updating ICT observations and reports.",
    "data_analyst": "Read-only access for data analysis and reporting across the system.",
    "observer": "Limited read-only access for external stakeholders and partners.",
}


def get_role_permissions(principal: Principal) -> RolePermissions:
    """Resolve the capabilities and scope of *principal*."""
    grants = _ROLE_GRANTS.get(principal.role, frozenset())
    return RolePermissions(
        **{flag: True for flag in grants},
        restricted_to_district=principal.district if principal.role in DISTRICT_SCOPED_ROLES else None,
        restricted_to_school=principal.school_id if principal.role in SCHOOL_SCOPED_ROLES else None,
    )


def in_scope(permissions: RolePermissions, *, school_id: int | None = None, district: str | None = None) -> bool:
    """Whether a school (by id and district) falls inside the caller's scope."""
    if permissions.restricted_to_district is not None and district is not None:
        if permissions.restricted_to_district != district:
            return False
    if permissions.restricted_to_school is not None and school_id is not None:
        if permissions.restricted_to_school != school_id:
            return False
    return True


def can_access_resource(
    principal: Principal,
    resource_type: ResourceType,
    *,
    school_id: int | None = None,
    district: str | None = None,
) -> bool:
    """Whether *principal* may read a school, or a report belonging to it."""
    if principal.role == "super_admin":
        return True

    permissions = get_role_permissions(principal)
    if not in_scope(permissions, school_id=school_id, district=district):
        return False

    if resource_type == "school":
        return permissions.can_view_all_schools or permissions.restricted_to_school is not None
    return permissions.can_view_all_reports or permissions.restricted_to_school is not None

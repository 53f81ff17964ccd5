from __future__ import annotations

import logging
from typing import Annotated, get_args

from fastapi import APIRouter, Depends, Header, HTTPException

from src.config import get_settings
from src.db.base import ReportFilters, SchoolFilters
from src.schemas.auth import PermissionsResponse, Principal, ResourceType, RolePermissions, UserRole
from src.services.permissions import (
    DISTRICT_SCOPED_ROLES,
    ROLE_DESCRIPTIONS,
    ROLE_DISPLAY_NAMES,
    SCHOOL_SCOPED_ROLES,
    can_access_resource,
    get_role_permissions,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

_ROLES = frozenset(get_args(UserRole))


async def get_current_user(
    x_user_role: Annotated[str | None, Header()] = None,
    x_user_district: Annotated[str | None, Header()] = None,
    x_user_school_id: Annotated[int | None, Header()] = None,
) -> Principal:
    """Build the caller's identity from the headers set by the gateway."""
    if x_user_role is None:
        if get_settings().AUTH_ENABLED:
            raise HTTPException(status_code=401, detail="Missing X-User-Role header")
        return Principal(role="super_admin")

    if x_user_role not in _ROLES:
        logger.warning("Rejected unknown role %r", x_user_role)
        raise HTTPException(status_code=401, detail=f"Unknown role: {x_user_role}")
    if x_user_role in DISTRICT_SCOPED_ROLES and not x_user_district:
        raise HTTPException(status_code=401, detail=f"{x_user_role} requires an X-User-District header")
    if x_user_role in SCHOOL_SCOPED_ROLES and x_user_school_id is None:
        raise HTTPException(status_code=401, detail=f"{x_user_role} requires an X-User-School-Id header")

    return Principal(role=x_user_role, district=x_user_district, school_id=x_user_school_id)


CurrentUser = Annotated[Principal, Depends(get_current_user)]


def require_permission(principal: Principal, permission: str) -> RolePermissions:
    """Return the caller's permissions, or raise 403 unless *permission* is granted."""
    permissions = get_role_permissions(principal)
    if not getattr(permissions, permission):
        raise HTTPException(status_code=403, detail=f"Permission '{permission}' required")
    return permissions


def require_access(principal: Principal, resource_type: ResourceType, school_id: int, district: str) -> None:
    """Raise 403 unless the caller may read a resource of the given school."""
    if not can_access_resource(principal, resource_type, school_id=school_id, district=district):
        raise HTTPException(status_code=403, detail=f"Access to this {resource_type} is restricted")


def scoped_filters(principal: Principal) -> tuple[SchoolFilters, ReportFilters]:
    """Repository filters selecting every school and report within the caller's scope."""
    permissions = get_role_permissions(principal)
    return (
        SchoolFilters(district=permissions.restricted_to_district, school_id=permissions.restricted_to_school),
        ReportFilters(district=permissions.restricted_to_district, school_id=permissions.restricted_to_school),
    )


@router.get("/api/auth/permissions", response_model=PermissionsResponse)
async def get_my_permissions(principal: CurrentUser) -> PermissionsResponse:
    """The caller's role and what it allows."""
    return PermissionsResponse(
        role=principal.role,
        display_name=ROLE_DISPLAY_NAMES[principal.role],
        description=ROLE_DESCRIPTIONS[principal.role],
        permissions=get_role_permissions(principal),
    )

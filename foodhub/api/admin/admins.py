"""Admin Account Router - back-office accounts.

Permission Matrix:
    - own profile: any admin
    - list / get: admins with ``manage_users``
    - create, permissions, activate/deactivate: super admin only
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.api.deps import get_current_admin, get_current_super_admin, require_permission
from foodhub.database import get_db
from foodhub.models.admin import Admin
from foodhub.schemas.admin import (
    AdminCreate,
    AdminPermissionsUpdate,
    AdminProfileUpdate,
    AdminResponse,
    AdminStatusUpdate,
)
from foodhub.services.admin_service import admin_service
from foodhub.utils.pagination import Page

router: APIRouter = APIRouter()


@router.get("/profile", response_model=AdminResponse)
async def get_profile(
    current_admin: Annotated[Admin, Depends(get_current_admin)],
) -> AdminResponse:
    return admin_service.get_profile(current_admin)


@router.put("/profile", response_model=AdminResponse)
async def update_profile(
    data: AdminProfileUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_admin)],
) -> AdminResponse:
    result: AdminResponse = await admin_service.update_profile(db, current_admin, data)
    await db.commit()
    return result


@router.get("", response_model=Page)
async def list_admins(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(require_permission("manage_users"))],
    role: str | None = None,
    is_active: bool | None = None,
    search: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 10,
) -> Page:
    items, total = await admin_service.list_admins(db, role, is_active, search, page, per_page)
    return Page(items=items, total=total, page=page, per_page=per_page)


@router.post("", response_model=AdminResponse, status_code=201)
async def create_admin(
    data: AdminCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_super_admin)],
) -> AdminResponse:
    """Create a back-office account. Super admin only."""
    result: AdminResponse = await admin_service.create_admin(db, data, current_admin.id)
    await db.commit()
    return result


@router.get("/{admin_id}", response_model=AdminResponse)
async def get_admin(
    admin_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(require_permission("manage_users"))],
) -> AdminResponse:
    return await admin_service.get_admin(db, admin_id)


@router.put("/{admin_id}/permissions", response_model=AdminResponse)
async def update_permissions(
    admin_id: UUID,
    data: AdminPermissionsUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_super_admin)],
) -> AdminResponse:
    result: AdminResponse = await admin_service.update_permissions(db, admin_id, data)
    await db.commit()
    return result


@router.patch("/{admin_id}/status", response_model=AdminResponse)
async def update_status(
    admin_id: UUID,
    data: AdminStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_super_admin)],
) -> AdminResponse:
    """Activate or deactivate an admin (never yourself)."""
    result: AdminResponse = await admin_service.update_status(db, admin_id, data, current_admin.id)
    await db.commit()
    return result

"""Admin Service - back-office account management."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.models.admin import Admin
from foodhub.repositories.admin_repository import admin_repository
from foodhub.schemas.admin import (
    AdminCreate,
    AdminPermissionsUpdate,
    AdminProfileUpdate,
    AdminResponse,
    AdminStatusUpdate,
)
from foodhub.utils.exceptions import BadRequestError, DuplicateError, NotFoundError
from foodhub.utils.password import hash_password

logger = logging.getLogger(__name__)


class AdminService:
    """Admin account service (profile, creation, activation)."""

    def _to_response(self, admin: Admin) -> AdminResponse:
        return AdminResponse(
            id=str(admin.id),
            name=admin.name,
            email=admin.email,
            admin_id=admin.admin_id,
            role=admin.role,
            type=admin.token_type,
            department=admin.department,
            permissions=list(admin.permissions or []),
            phone=admin.phone,
            is_active=admin.is_active,
            is_verified=admin.is_verified,
            last_login=admin.last_login,
            login_count=admin.login_count or 0,
            created_at=admin.created_at,
        )

    async def _get_or_404(self, db: AsyncSession, admin_id: UUID) -> Admin:
        admin: Admin | None = await admin_repository.get_by_id(db, admin_id)
        if admin is None:
            raise NotFoundError("Admin not found")
        return admin

    async def list_admins(
        self,
        db: AsyncSession,
        role: str | None = None,
        is_active: bool | None = None,
        search: str | None = None,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[list[AdminResponse], int]:
        admins, total = await admin_repository.get_list(db, role, is_active, search, page, per_page)
        return [self._to_response(a) for a in admins], total

    async def get_admin(self, db: AsyncSession, admin_id: UUID) -> AdminResponse:
        return self._to_response(await self._get_or_404(db, admin_id))

    def get_profile(self, admin: Admin) -> AdminResponse:
        return self._to_response(admin)

    async def create_admin(self, db: AsyncSession, data: AdminCreate, created_by: UUID) -> AdminResponse:
        """Create a back-office account (super admin only).

        Raises:
            DuplicateError: E-mail or admin_id already taken
        """
        if await admin_repository.get_by_email(db, data.email) is not None:
            raise DuplicateError("Admin with this email already exists")
        if await admin_repository.exists(db, {"admin_id": data.admin_id.strip().upper()}):
            raise DuplicateError("Admin with this admin ID already exists")

        admin: Admin = await admin_repository.create(
            db,
            {
                "name": data.name,
                "email": data.email,
                "password_hash": hash_password(data.password),
                "admin_id": data.admin_id,
                "role": data.role,
                "department": data.department,
                "permissions": data.permissions,
                "phone": data.phone,
                "created_by": created_by,
            },
        )
        logger.info("Admin %s created by %s", admin.email, created_by)
        return self._to_response(admin)

    async def update_profile(self, db: AsyncSession, admin: Admin, data: AdminProfileUpdate) -> AdminResponse:
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(admin, field, value)
        await db.flush()
        await db.refresh(admin)
        return self._to_response(admin)

    async def update_permissions(
        self,
        db: AsyncSession,
        admin_id: UUID,
        data: AdminPermissionsUpdate,
    ) -> AdminResponse:
        admin: Admin = await self._get_or_404(db, admin_id)
        admin.permissions = list(data.permissions)
        await db.flush()
        await db.refresh(admin)
        return self._to_response(admin)

    async def update_status(
        self,
        db: AsyncSession,
        admin_id: UUID,
        data: AdminStatusUpdate,
        acting_admin_id: UUID,
    ) -> AdminResponse:
        """Activate or deactivate an admin.

        Raises:
            BadRequestError: Trying to deactivate one's own account
        """
        if admin_id == acting_admin_id and not data.is_active:
            raise BadRequestError("You cannot deactivate your own account")

        admin: Admin = await self._get_or_404(db, admin_id)
        admin.is_active = data.is_active
        await db.flush()
        await db.refresh(admin)
        logger.info("Admin %s %s", admin.email, "activated" if data.is_active else "deactivated")
        return self._to_response(admin)


# Singleton instance
admin_service: AdminService = AdminService()

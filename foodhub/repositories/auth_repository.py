"""Auth Repository - refresh token CRUD.

Tokens are keyed by principal (account id + account type) since every
account kind lives in its own table.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.models.token import RefreshToken


class AuthRepository:
    """Repository handling refresh token lifecycle queries."""

    async def create_refresh_token(
        self,
        db: AsyncSession,
        principal_id: UUID,
        principal_type: str,
        token: str,
        expires_at: datetime,
    ) -> RefreshToken:
        """Persist a newly issued refresh token.

        Args:
            db: Async database session
            principal_id: Owning account UUID
            principal_type: Account kind (JWT ``type`` claim)
            token: JWT refresh token string
            expires_at: Token expiration timestamp

        Returns:
            RefreshToken: Created record
        """
        db_token: RefreshToken = RefreshToken(
            principal_id=principal_id,
            principal_type=principal_type,
            token=token,
            expires_at=expires_at,
        )
        db.add(db_token)
        await db.flush()
        await db.refresh(db_token)
        return db_token

    async def get_refresh_token(
        self,
        db: AsyncSession,
        token: str,
    ) -> RefreshToken | None:
        query: Select = select(RefreshToken).where(RefreshToken.token == token)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def delete_refresh_token(
        self,
        db: AsyncSession,
        token: str,
    ) -> bool:
        """Delete a specific refresh token.

        Returns:
            bool: Whether a token was deleted
        """
        db_token: RefreshToken | None = await self.get_refresh_token(db, token)
        if db_token is None:
            return False

        await db.delete(db_token)
        await db.flush()
        return True

    async def delete_principal_tokens(
        self,
        db: AsyncSession,
        principal_id: UUID,
        principal_type: str,
    ) -> None:
        """Delete every refresh token of one account (logout everywhere)."""
        stmt = delete(RefreshToken).where(
            RefreshToken.principal_id == principal_id,
            RefreshToken.principal_type == principal_type,
        )
        await db.execute(stmt)
        await db.flush()


auth_repository: AuthRepository = AuthRepository()

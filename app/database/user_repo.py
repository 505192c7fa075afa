"""Repository layer for user profile database operations."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.models import User


class UserRepository:
    """Repository for user profile database operations."""

    @staticmethod
    async def get_user(db: AsyncSession, user_id: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_user_for_update(db: AsyncSession, user_id: str) -> Optional[User]:
        """
        Fetch a user and lock the row until the surrounding transaction ends.

        Serializes concurrent plan changes of the same user.

        Args:
            db: Database session
            user_id: Auth uid of the user

        Returns:
            Locked User or None
        """
        result = await db.execute(
            select(User).where(User.id == user_id).with_for_update().execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def list_users(db: AsyncSession) -> list[User]:
        result = await db.execute(select(User).order_by(User.created_at.desc()))
        return list(result.scalars().all())

    @staticmethod
    async def add_user(db: AsyncSession, user: User) -> User:
        """Stage a new profile. The caller commits."""
        db.add(user)
        await db.flush()
        return user

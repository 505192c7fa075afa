"""Repository layer for plan history database operations.

This module contains ONLY database access logic - no business rules.
Nothing here commits: plan changes are written inside the caller's
transaction so the history and the profile pointer move together.

Key Concepts:
- UserPlan: One record of a user's plan history
- current: The single record per user that is in force
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.subscription import UserPlan
from app.models.subscription_enums import UserPlanStatus


class SubscriptionRepository:
    """Repository for plan history database operations."""

    @staticmethod
    async def get_current_record(db: AsyncSession, user_id: str) -> Optional[UserPlan]:
        """
        Fetch the user's current plan history record.

        Args:
            db: Database session
            user_id: Auth uid of the user

        Returns:
            The record with status current, or None
        """
        result = await db.execute(
            select(UserPlan)
            .where(UserPlan.user_id == user_id, UserPlan.status == UserPlanStatus.CURRENT)
            .order_by(UserPlan.subscription_date.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def supersede_current(
        db: AsyncSession, user_id: str, new_status: UserPlanStatus
    ) -> int:
        """
        Move every current record of a user to the given status.

        Must run before the replacement record is inserted; the partial
        unique index allows only one current record per user.

        Args:
            db: Database session
            user_id: Auth uid of the user
            new_status: expired or cancelled

        Returns:
            Number of records changed
        """
        result = await db.execute(
            update(UserPlan)
            .where(UserPlan.user_id == user_id, UserPlan.status == UserPlanStatus.CURRENT)
            .values(status=new_status)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    @staticmethod
    async def add_record(
        db: AsyncSession,
        user_id: str,
        plan_id: uuid.UUID,
        plan_name: str,
        subscription_date: datetime,
        end_date: Optional[datetime],
        remarks: Optional[str],
        order_id: Optional[uuid.UUID],
    ) -> UserPlan:
        """Insert a new current record and flush it."""
        record = UserPlan(
            user_id=user_id,
            plan_id=plan_id,
            plan_name=plan_name,
            subscription_date=subscription_date,
            end_date=end_date,
            status=UserPlanStatus.CURRENT,
            remarks=remarks,
            order_id=order_id,
        )
        db.add(record)
        await db.flush()
        return record

    @staticmethod
    async def get_history(db: AsyncSession, user_id: str) -> list[UserPlan]:
        """Fetch a user's plan history, newest first."""
        result = await db.execute(
            select(UserPlan)
            .where(UserPlan.user_id == user_id)
            .order_by(UserPlan.subscription_date.desc(), UserPlan.id)
        )
        return list(result.scalars().all())

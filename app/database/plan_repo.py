"""Repository layer for plan database operations."""

import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.plan import Plan
from app.utils.exceptions import DatabaseException

logger = logging.getLogger(__name__)


class PlanRepository:
    """Repository for plan database operations."""

    @staticmethod
    async def list_plans(db: AsyncSession, published_only: bool = False) -> list[Plan]:
        """Fetch plans. Ordering by price is applied by the service, prices live in JSON."""
        try:
            logger.info(f"Request for list_plans: published_only={published_only}")
            stmt = select(Plan)
            if published_only:
                stmt = stmt.where(Plan.published.is_(True))
            result = await db.execute(stmt.order_by(Plan.name))
            plans = list(result.scalars().all())
            logger.info(f"Response for list_plans: {len(plans)} plans found")
            return plans
        except SQLAlchemyError:
            logger.error("A system failure occurred @list_plans", exc_info=True)
            raise DatabaseException("Failed to load plans")

    @staticmethod
    async def get_plan(db: AsyncSession, plan_id: uuid.UUID) -> Optional[Plan]:
        result = await db.execute(select(Plan).where(Plan.id == plan_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_plan_by_name(db: AsyncSession, name: str) -> Optional[Plan]:
        """
        Fetch a plan by its display name.

        Used to resolve the default plan assigned to new profiles.

        Args:
            db: Database session
            name: Exact plan name

        Returns:
            The oldest plan with that name, or None
        """
        result = await db.execute(
            select(Plan).where(Plan.name == name).order_by(Plan.created_date).limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def create_plan(db: AsyncSession, plan: Plan) -> Plan:
        """Insert a plan and commit the transaction."""
        db.add(plan)
        await db.commit()
        await db.refresh(plan)
        return plan

    @staticmethod
    async def update_plan(db: AsyncSession, plan: Plan) -> Plan:
        """Persist changes made to a loaded plan and commit the transaction."""
        await db.commit()
        await db.refresh(plan)
        return plan

    @staticmethod
    async def delete_plan(db: AsyncSession, plan: Plan) -> None:
        await db.delete(plan)
        await db.commit()

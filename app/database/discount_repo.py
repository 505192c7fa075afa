"""Repository layer for discount database operations."""

import logging
import uuid
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.plan import Discount
from app.utils.exceptions import DatabaseException

logger = logging.getLogger(__name__)


class DiscountRepository:
    """Repository for discount database operations."""

    @staticmethod
    async def list_discounts(db: AsyncSession) -> list[Discount]:
        result = await db.execute(select(Discount).order_by(Discount.name))
        return list(result.scalars().all())

    @staticmethod
    async def get_discount(db: AsyncSession, discount_id: uuid.UUID) -> Optional[Discount]:
        result = await db.execute(select(Discount).where(Discount.id == discount_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_code(
        db: AsyncSession, code: str, exclude_id: Optional[uuid.UUID] = None
    ) -> Optional[Discount]:
        """
        Fetch a discount whose code equals the given code, ignoring case.

        Args:
            db: Database session
            code: Coupon code as typed by the user
            exclude_id: Discount to ignore (used when checking uniqueness on update)

        Returns:
            Matching Discount or None
        """
        try:
            logger.info(f"Request for get_by_code: {code}")
            stmt = select(Discount).where(func.lower(Discount.code) == code.strip().lower())
            if exclude_id is not None:
                stmt = stmt.where(Discount.id != exclude_id)
            result = await db.execute(stmt.order_by(Discount.created_date).limit(1))
            discount = result.scalar_one_or_none()
            logger.info(f"Response for get_by_code: {'found' if discount else 'None'}")
            return discount
        except SQLAlchemyError:
            logger.error("A system failure occurred @get_by_code", exc_info=True)
            raise DatabaseException("Failed to look up discount code")

    @staticmethod
    async def create_discount(db: AsyncSession, discount: Discount) -> Discount:
        db.add(discount)
        await db.commit()
        await db.refresh(discount)
        return discount

    @staticmethod
    async def update_discount(db: AsyncSession, discount: Discount) -> Discount:
        await db.commit()
        await db.refresh(discount)
        return discount

    @staticmethod
    async def delete_discount(db: AsyncSession, discount: Discount) -> None:
        await db.delete(discount)
        await db.commit()

"""Repository layer for order database operations."""

import logging
import uuid
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.order import Order
from app.models.subscription_enums import OrderStatus
from app.utils.exceptions import DatabaseException

logger = logging.getLogger(__name__)


class OrderRepository:
    """Repository for order database operations."""

    @staticmethod
    async def create_order(db: AsyncSession, order: Order) -> Order:
        """Insert a new order and commit the transaction."""
        try:
            logger.info(f"Request for create_order: user_id={order.user_id}, plan_id={order.plan_id}")
            db.add(order)
            await db.commit()
            await db.refresh(order)
            logger.info(f"Response for create_order: order created with ID {order.id}")
            return order
        except SQLAlchemyError:
            await db.rollback()
            logger.error("A system failure occurred @create_order", exc_info=True)
            raise DatabaseException("Failed to create order")

    @staticmethod
    async def get_order(db: AsyncSession, order_id: uuid.UUID) -> Optional[Order]:
        result = await db.execute(select(Order).where(Order.id == order_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_order_for_update(db: AsyncSession, order_id: uuid.UUID) -> Optional[Order]:
        """Fetch an order and lock it until the surrounding transaction ends."""
        result = await db.execute(
            select(Order)
            .where(Order.id == order_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def list_user_orders(db: AsyncSession, user_id: str) -> list[Order]:
        result = await db.execute(
            select(Order).where(Order.user_id == user_id).order_by(Order.created_at.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def list_orders(db: AsyncSession, status: Optional[OrderStatus] = None) -> list[Order]:
        try:
            logger.info(f"Request for list_orders: status={status}")
            stmt = select(Order)
            if status is not None:
                stmt = stmt.where(Order.status == status)
            result = await db.execute(stmt.order_by(Order.created_at.desc()))
            orders = list(result.scalars().all())
            logger.info(f"Response for list_orders: {len(orders)} orders found")
            return orders
        except SQLAlchemyError:
            logger.error("A system failure occurred @list_orders", exc_info=True)
            raise DatabaseException("Failed to load orders")

    @staticmethod
    async def status_totals(db: AsyncSession) -> dict[OrderStatus, tuple[int, float]]:
        """
        Aggregate order counts and final amounts per status.

        Returns:
            Mapping of status to (count, sum of final_amount)
        """
        result = await db.execute(
            select(Order.status, func.count(Order.id), func.coalesce(func.sum(Order.final_amount), 0.0))
            .group_by(Order.status)
        )
        return {OrderStatus(row[0]): (int(row[1]), float(row[2])) for row in result.all()}

"""Service layer for orders.

Orders are created pending at checkout and moved to a terminal status by
an admin. Completing an order activates the purchased plan in the same
transaction as the status change, so an order is never completed without
its plan record, nor a plan record written for an order left pending.
"""

import logging
import uuid
from typing import Any, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.order_repo import OrderRepository
from app.models.order import Order
from app.models.subscription_enums import OrderStatus
from app.schemas.orders import OrderCreate, OrderResponse, OrderStats
from app.schemas.subscriptions import SubscriptionChangeOptions
from app.services.email_service import EmailService
from app.services.subscription_service import SubscriptionService
from app.utils.exceptions import AppException, ConflictException, DatabaseException, NotFoundException

logger = logging.getLogger(__name__)


def order_email_props(order: Union[Order, OrderResponse], **extra: Any) -> dict[str, Any]:
    """Placeholder values shared by the order emails."""
    props = {
        "orderId": str(order.id),
        "userName": order.user_name or order.user_email or "there",
        "planName": order.plan_name,
        "duration": order.pricing_option_label,
        "orderDate": order.created_at.strftime("%B %d, %Y") if order.created_at else "",
        "paymentMethod": order.payment_method,
        "orderStatus": order.status.value.capitalize(),
        "originalPrice": f"{order.original_price:.2f}",
        "discountAmount": f"{order.discount_amount:.2f}",
        "finalAmount": f"{order.final_amount:.2f}",
    }
    props.update(extra)
    return props


class OrderService:
    """Service for order business logic."""

    @staticmethod
    async def create_order(db: AsyncSession, data: OrderCreate) -> OrderResponse:
        """Persist a pending order. Amounts must already be computed by the caller."""
        order = Order(**data.model_dump(), status=OrderStatus.PENDING)
        order = await OrderRepository.create_order(db, order)
        return OrderResponse.model_validate(order)

    @staticmethod
    async def get_order(db: AsyncSession, order_id: uuid.UUID, user_id: str) -> OrderResponse:
        """Owner view of an order; other users' orders are reported as missing."""
        order = await OrderRepository.get_order(db, order_id)
        if order is None or order.user_id != user_id:
            raise NotFoundException(f"Order {order_id} not found")
        return OrderResponse.model_validate(order)

    @staticmethod
    async def get_order_admin(db: AsyncSession, order_id: uuid.UUID) -> OrderResponse:
        order = await OrderRepository.get_order(db, order_id)
        if order is None:
            raise NotFoundException(f"Order {order_id} not found")
        return OrderResponse.model_validate(order)

    @staticmethod
    async def list_user_orders(db: AsyncSession, user_id: str) -> list[OrderResponse]:
        return [OrderResponse.model_validate(o) for o in await OrderRepository.list_user_orders(db, user_id)]

    @staticmethod
    async def list_all_orders(db: AsyncSession, status: Optional[OrderStatus] = None) -> list[OrderResponse]:
        return [OrderResponse.model_validate(o) for o in await OrderRepository.list_orders(db, status)]

    @staticmethod
    async def order_stats(db: AsyncSession) -> OrderStats:
        totals = await OrderRepository.status_totals(db)

        def count(status: OrderStatus) -> int:
            return totals.get(status, (0, 0.0))[0]

        return OrderStats(
            total_revenue=round(totals.get(OrderStatus.COMPLETED, (0, 0.0))[1], 2),
            total_orders=sum(item[0] for item in totals.values()),
            pending=count(OrderStatus.PENDING),
            completed=count(OrderStatus.COMPLETED),
            failed=count(OrderStatus.FAILED),
            refunded=count(OrderStatus.REFUNDED),
        )

    @staticmethod
    async def process_order(
        db: AsyncSession, order_id: uuid.UUID, new_status: OrderStatus
    ) -> OrderResponse:
        """
        Move an order to a new status.

        Only pending orders can change status. Setting the status an order
        already has is a no-op, so retried admin actions never write a
        second plan record. Completing an order runs the plan change with
        the order's plan and pricing option before the status is committed;
        if that fails nothing is written.

        Args:
            db: Database session
            order_id: Order to process
            new_status: completed, failed or refunded

        Returns:
            The order as stored after processing

        Raises:
            NotFoundException: Order, or the user or plan of a completing order, is missing
            ConflictException: The order is already in a different terminal status
        """
        try:
            order = await OrderRepository.get_order_for_update(db, order_id)
            if order is None:
                raise NotFoundException(f"Order {order_id} not found")

            if order.status == new_status:
                logger.info(f"Order {order_id} already {new_status.value}; nothing to do")
                unchanged = OrderResponse.model_validate(order)
                await db.rollback()
                return unchanged

            if order.status.is_terminal or new_status == OrderStatus.PENDING:
                raise ConflictException(
                    f"Order {order_id} cannot move from {order.status.value} to {new_status.value}",
                    details={"currentStatus": order.status.value},
                )

            record = None
            if new_status == OrderStatus.COMPLETED:
                record = await SubscriptionService.change_subscription(
                    db,
                    order.user_id,
                    order.plan_id,
                    SubscriptionChangeOptions(
                        pricing_option_label=order.pricing_option_label,
                        order_id=order.id,
                        remarks=f"Activated by order {order.id} ({order.pricing_option_label}).",
                    ),
                    commit=False,
                )

            order.status = new_status
            await db.commit()
            await db.refresh(order)
        except AppException:
            await db.rollback()
            raise
        except SQLAlchemyError:
            await db.rollback()
            logger.error("A system failure occurred @process_order", exc_info=True)
            raise DatabaseException(f"Failed to process order {order_id}")

        logger.info(f"Order {order_id} moved to {new_status.value}")

        if record is not None:
            expiry = record.end_date.strftime("%B %d, %Y") if record.end_date else "Lifetime"
            await EmailService.send_email(
                db, "order-activated", order.user_email, order_email_props(order, expiryDate=expiry)
            )
        return OrderResponse.model_validate(order)

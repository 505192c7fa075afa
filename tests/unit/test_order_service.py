import uuid
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from app.database.subscription_repo import SubscriptionRepository
from app.models import Order, User, UserPlan
from app.models.subscription_enums import OrderStatus
from app.schemas.orders import OrderCreate
from app.services.email_service import EmailService
from app.services.order_service import OrderService
from app.utils.exceptions import ConflictException, DatabaseException, NotFoundException


@pytest.fixture
def sent_emails(monkeypatch):
    mock = AsyncMock(return_value=True)
    monkeypatch.setattr(EmailService, "send_email", mock)
    return mock


async def plan_records_for_order(db, order_id) -> int:
    result = await db.execute(select(func.count(UserPlan.id)).where(UserPlan.order_id == order_id))
    return int(result.scalar() or 0)


async def place_order(db, user, plan, **overrides):
    values = {
        "user_id": user.id,
        "user_name": user.name,
        "user_email": user.email,
        "plan_id": plan.id,
        "plan_name": plan.name,
        "pricing_option_label": "1 Month",
        "original_price": 1200,
        "discount_amount": 200,
        "discount_code": "SAVE200",
        "final_amount": 1000,
        "payment_method": "Bank Transfer",
    }
    values.update(overrides)
    return await OrderService.create_order(db, OrderCreate(**values))


class TestProcessOrder:
    async def test_completing_activates_the_plan(self, test_db, student, scholar_plan, sent_emails):
        order = await place_order(test_db, student, scholar_plan)
        assert order.status == OrderStatus.PENDING

        processed = await OrderService.process_order(test_db, order.id, OrderStatus.COMPLETED)

        assert processed.status == OrderStatus.COMPLETED
        user = (await test_db.execute(select(User).where(User.id == student.id))).scalar_one()
        assert user.plan_id == scholar_plan.id
        assert user.plan_expiry_date is not None
        assert await plan_records_for_order(test_db, order.id) == 1
        assert sent_emails.await_args.args[1] == "order-activated"

    async def test_reapplying_the_same_status_is_a_no_op(self, test_db, student, scholar_plan, sent_emails):
        order = await place_order(test_db, student, scholar_plan)
        await OrderService.process_order(test_db, order.id, OrderStatus.COMPLETED)
        again = await OrderService.process_order(test_db, order.id, OrderStatus.COMPLETED)

        assert again.status == OrderStatus.COMPLETED
        assert await plan_records_for_order(test_db, order.id) == 1
        assert sent_emails.await_count == 1

    async def test_terminal_orders_cannot_move(self, test_db, student, scholar_plan, sent_emails):
        order = await place_order(test_db, student, scholar_plan)
        await OrderService.process_order(test_db, order.id, OrderStatus.FAILED)

        with pytest.raises(ConflictException) as exc:
            await OrderService.process_order(test_db, order.id, OrderStatus.COMPLETED)
        assert exc.value.details == {"currentStatus": "failed"}
        assert await plan_records_for_order(test_db, order.id) == 0
        sent_emails.assert_not_awaited()

    async def test_missing_plan_leaves_the_order_pending(self, test_db, student, scholar_plan, sent_emails):
        # The failed completion rolls back and expires loaded instances
        student_id, plan_id = student.id, scholar_plan.id
        order = await place_order(test_db, student, scholar_plan, plan_id=uuid.uuid4())

        with pytest.raises(NotFoundException):
            await OrderService.process_order(test_db, order.id, OrderStatus.COMPLETED)

        stored = (await test_db.execute(select(Order).where(Order.id == order.id))).scalar_one()
        assert stored.status == OrderStatus.PENDING
        user = (await test_db.execute(select(User).where(User.id == student_id))).scalar_one()
        assert user.plan_id != plan_id

    async def test_store_failure_leaves_the_order_pending(
        self, test_db, student, scholar_plan, sent_emails, monkeypatch
    ):
        student_id, plan_id = student.id, scholar_plan.id
        order = await place_order(test_db, student, scholar_plan)
        order_id = order.id
        monkeypatch.setattr(
            SubscriptionRepository, "add_record", AsyncMock(side_effect=SQLAlchemyError("store unavailable"))
        )

        with pytest.raises(DatabaseException):
            await OrderService.process_order(test_db, order_id, OrderStatus.COMPLETED)

        stored = (await test_db.execute(select(Order).where(Order.id == order_id))).scalar_one()
        assert stored.status == OrderStatus.PENDING
        assert await plan_records_for_order(test_db, order_id) == 0
        user = (await test_db.execute(select(User).where(User.id == student_id))).scalar_one()
        assert user.plan_id != plan_id
        sent_emails.assert_not_awaited()

    async def test_unknown_order(self, test_db):
        with pytest.raises(NotFoundException):
            await OrderService.process_order(test_db, uuid.uuid4(), OrderStatus.COMPLETED)

    async def test_owner_view_hides_other_users_orders(self, test_db, student, admin, scholar_plan):
        order = await place_order(test_db, student, scholar_plan)
        assert (await OrderService.get_order(test_db, order.id, student.id)).id == order.id
        with pytest.raises(NotFoundException):
            await OrderService.get_order(test_db, order.id, admin.id)


async def test_order_stats(test_db, student, scholar_plan, sent_emails):
    completed = await place_order(test_db, student, scholar_plan)
    refunded = await place_order(test_db, student, scholar_plan, discount_amount=0, final_amount=1200)
    await place_order(test_db, student, scholar_plan)
    await OrderService.process_order(test_db, completed.id, OrderStatus.COMPLETED)
    await OrderService.process_order(test_db, refunded.id, OrderStatus.REFUNDED)

    stats = await OrderService.order_stats(test_db)
    assert stats.total_orders == 3
    assert stats.pending == 1
    assert stats.completed == 1
    assert stats.refunded == 1
    assert stats.total_revenue == 1000

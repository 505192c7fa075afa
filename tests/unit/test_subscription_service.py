from datetime import datetime
from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from app.database.subscription_repo import SubscriptionRepository
from app.models import User, UserPlan
from app.models.subscription_enums import UserPlanStatus
from app.schemas.subscriptions import SubscriptionChangeOptions
from app.services.subscription_service import SubscriptionService
from app.utils.exceptions import DatabaseException, NotFoundException, ValidationException

NOW = datetime(2024, 1, 31, 10, 0)


async def history(db, user_id: str) -> list[UserPlan]:
    result = await db.execute(select(UserPlan).where(UserPlan.user_id == user_id))
    return list(result.scalars().all())


class TestChangeSubscription:
    async def test_new_profile_starts_on_the_default_plan(self, test_db, student, free_plan):
        records = await history(test_db, student.id)
        assert len(records) == 1
        assert records[0].status == UserPlanStatus.CURRENT
        assert records[0].plan_id == free_plan.id
        assert records[0].end_date is None
        assert student.plan_id == free_plan.id

    async def test_change_supersedes_the_current_record(self, test_db, student, scholar_plan):
        record = await SubscriptionService.change_subscription(
            test_db,
            student.id,
            scholar_plan.id,
            SubscriptionChangeOptions(pricing_option_label="1 Month"),
            now=NOW,
        )

        records = await history(test_db, student.id)
        current = [r for r in records if r.status == UserPlanStatus.CURRENT]
        assert len(records) == 2
        assert [r.id for r in current] == [record.id]
        assert {r.status for r in records if r.id != record.id} == {UserPlanStatus.EXPIRED}

        # Month arithmetic clamps to the end of February
        assert record.end_date == datetime(2024, 2, 29, 10, 0)
        user = (await test_db.execute(select(User).where(User.id == student.id))).scalar_one()
        assert user.plan_id == scholar_plan.id
        assert user.plan_expiry_date == record.end_date
        assert record.remarks == "Plan changed to Scholar (1 Month)."

    async def test_superseded_status_can_be_cancelled(self, test_db, student, scholar_plan):
        await SubscriptionService.change_subscription(
            test_db,
            student.id,
            scholar_plan.id,
            SubscriptionChangeOptions(superseded_status=UserPlanStatus.CANCELLED),
        )
        statuses = sorted(r.status.value for r in await history(test_db, student.id))
        assert statuses == ["cancelled", "current"]

    def test_superseded_status_must_end_the_record(self):
        with pytest.raises(PydanticValidationError):
            SubscriptionChangeOptions(superseded_status=UserPlanStatus.CURRENT)
        with pytest.raises(PydanticValidationError):
            SubscriptionChangeOptions(superseded_status="current")

    async def test_explicit_null_end_date_makes_the_record_lifetime(self, test_db, student, scholar_plan):
        record = await SubscriptionService.change_subscription(
            test_db,
            student.id,
            scholar_plan.id,
            SubscriptionChangeOptions(pricing_option_label="6 Months", end_date=None),
        )
        assert record.end_date is None

    async def test_explicit_end_date_wins_over_the_option(self, test_db, student, scholar_plan):
        record = await SubscriptionService.change_subscription(
            test_db,
            student.id,
            scholar_plan.id,
            SubscriptionChangeOptions(pricing_option_label="1 Month", end_date=datetime(2030, 1, 1)),
        )
        assert record.end_date == datetime(2030, 1, 1)

    async def test_unknown_pricing_option(self, test_db, student, scholar_plan):
        with pytest.raises(ValidationException):
            await SubscriptionService.change_subscription(
                test_db, student.id, scholar_plan.id, SubscriptionChangeOptions(pricing_option_label="2 Weeks")
            )

    async def test_unknown_user(self, test_db, scholar_plan):
        with pytest.raises(NotFoundException):
            await SubscriptionService.change_subscription(test_db, "nobody", scholar_plan.id)

    async def test_store_failure_rolls_back_the_change(self, test_db, student, free_plan, scholar_plan, monkeypatch):
        # The rollback expires loaded instances
        student_id, free_plan_id = student.id, free_plan.id
        monkeypatch.setattr(
            SubscriptionRepository, "add_record", AsyncMock(side_effect=SQLAlchemyError("store unavailable"))
        )

        with pytest.raises(DatabaseException):
            await SubscriptionService.change_subscription(test_db, student_id, scholar_plan.id)

        records = await history(test_db, student_id)
        assert [(r.status, r.plan_id) for r in records] == [(UserPlanStatus.CURRENT, free_plan_id)]
        user = (await test_db.execute(select(User).where(User.id == student_id))).scalar_one()
        assert user.plan_id == free_plan_id

    async def test_repeated_changes_keep_one_current_record(self, test_db, student, free_plan, scholar_plan):
        for plan in (scholar_plan, free_plan, scholar_plan):
            await SubscriptionService.change_subscription(test_db, student.id, plan.id)
        records = await history(test_db, student.id)
        assert len(records) == 4
        assert sum(r.status == UserPlanStatus.CURRENT for r in records) == 1


class TestCurrentSubscription:
    async def test_expiry_state(self, test_db, student, scholar_plan):
        await SubscriptionService.change_subscription(
            test_db,
            student.id,
            scholar_plan.id,
            SubscriptionChangeOptions(pricing_option_label="1 Month"),
            now=NOW,
        )
        during = await SubscriptionService.get_current_subscription(test_db, student.id, now=datetime(2024, 2, 10))
        after = await SubscriptionService.get_current_subscription(test_db, student.id, now=datetime(2024, 3, 1))
        assert during.plan.name == "Scholar"
        assert not during.is_expired
        assert after.is_expired

    async def test_history_is_newest_first(self, test_db, student, scholar_plan):
        await SubscriptionService.change_subscription(test_db, student.id, scholar_plan.id, now=datetime(2099, 1, 1))
        records = await SubscriptionService.fetch_user_plan_history(test_db, student.id)
        assert records[0].plan_name == "Scholar"
        assert records[0].status == UserPlanStatus.CURRENT

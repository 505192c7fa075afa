import uuid
from datetime import datetime

import pytest

from app.models import Category, Paper
from app.models.subscription_enums import QuotaPeriod
from app.schemas.plans import PlanFeature
from app.schemas.subscriptions import SubscriptionChangeOptions
from app.services.subscription_service import SubscriptionService
from app.services.usage_service import UsageService, period_window, usage_percentage


class TestPeriodWindow:
    def test_lifetime_starts_at_subscription_day_and_never_resets(self):
        start, reset = period_window(QuotaPeriod.LIFETIME, datetime(2024, 1, 15, 9, 30), datetime(2025, 1, 1))
        assert start == datetime(2024, 1, 15)
        assert reset is None

    def test_daily(self):
        start, reset = period_window(QuotaPeriod.DAILY, datetime(2024, 1, 1, 9, 30), datetime(2024, 1, 15, 18, 0))
        assert start == datetime(2024, 1, 15)
        assert reset == datetime(2024, 1, 16)

    def test_weekly_counts_whole_weeks_from_the_anchor(self):
        start, reset = period_window(QuotaPeriod.WEEKLY, datetime(2024, 1, 1, 8, 0), datetime(2024, 1, 17, 12, 0))
        assert start == datetime(2024, 1, 15)
        assert reset == datetime(2024, 1, 22)

    def test_monthly_resets_on_the_subscription_day(self):
        start, reset = period_window(QuotaPeriod.MONTHLY, datetime(2024, 1, 15, 9, 30), datetime(2024, 3, 20))
        assert start == datetime(2024, 3, 15)
        assert reset == datetime(2024, 4, 15)

    def test_monthly_anchor_on_a_month_end(self):
        start, reset = period_window(QuotaPeriod.MONTHLY, datetime(2024, 1, 31), datetime(2024, 3, 1, 12, 0))
        assert start == datetime(2024, 2, 29)
        assert reset == datetime(2024, 3, 31)

    def test_yearly_before_first_anniversary(self):
        start, reset = period_window(QuotaPeriod.YEARLY, datetime(2023, 6, 10, 14, 0), datetime(2024, 6, 9, 23, 0))
        assert start == datetime(2023, 6, 10)
        assert reset == datetime(2024, 6, 10)


@pytest.mark.parametrize(
    "used,limit,expected",
    [
        (3, -1, 100.0),
        (0, 0, 0.0),
        (5, 0, 0.0),
        (1, 4, 25.0),
        (9, 4, 100.0),
    ],
)
def test_usage_percentage(used, limit, expected):
    assert usage_percentage(used, limit) == expected


def test_build_usage_flags():
    feature = PlanFeature(text="5 downloads", is_quota=True, key="downloads", limit=5, period=QuotaPeriod.MONTHLY)
    usage = UsageService.build_usage(feature, 4, datetime(2024, 1, 1), datetime(2024, 2, 1))
    assert usage.percentage == 80.0
    assert usage.warning
    assert not usage.limit_reached

    usage = UsageService.build_usage(feature, 5, datetime(2024, 1, 1), datetime(2024, 2, 1))
    assert usage.limit_reached


def test_unlimited_usage_is_never_reached():
    feature = PlanFeature(text="Unlimited", is_quota=True, key="bookmarks", limit=-1, period=QuotaPeriod.LIFETIME)
    usage = UsageService.build_usage(feature, 1000, datetime(2024, 1, 1), None)
    assert usage.unlimited
    assert not usage.limit_reached
    assert not usage.warning
    assert usage.percentage == 100.0


class TestQuotaEnforcement:
    """Write paths check the plan quota before recording usage."""

    async def test_bookmark_limit(self, test_db, student):
        user_id = student.id
        category = Category(name="Matric", slug="matric")
        test_db.add(category)
        await test_db.flush()
        papers = [
            Paper(title=f"Paper {i}", slug=f"paper-{i}", description="", category_id=category.id, published=True)
            for i in range(3)
        ]
        test_db.add_all(papers)
        await test_db.commit()
        # A refused bookmark rolls back and expires loaded instances
        paper_ids = [p.id for p in papers]

        first = await UsageService.toggle_bookmark(test_db, user_id, paper_ids[0])
        second = await UsageService.toggle_bookmark(test_db, user_id, paper_ids[1])
        third = await UsageService.toggle_bookmark(test_db, user_id, paper_ids[2])
        assert first.success and first.bookmarked
        assert second.success and second.bookmarked
        assert not third.success
        assert "bookmark limit of 2" in third.message

        # Removing a bookmark frees a slot
        removed = await UsageService.toggle_bookmark(test_db, user_id, paper_ids[0])
        assert removed.success and removed.bookmarked is False
        again = await UsageService.toggle_bookmark(test_db, user_id, paper_ids[2])
        assert again.success and again.bookmarked

    async def test_daily_download_limit(self, test_db, student, paper):
        now = datetime.utcnow()
        first = await UsageService.record_download(test_db, student.id, paper.id, now=now)
        second = await UsageService.record_download(test_db, student.id, paper.id, now=now)
        assert first.success
        assert not second.success
        assert second.message == "You have reached your daily download limit of 1."

    async def test_usage_report(self, test_db, student, paper):
        await UsageService.record_download(test_db, student.id, paper.id)
        await UsageService.toggle_bookmark(test_db, student.id, paper.id)

        usage = {item.key: item for item in await UsageService.get_usage(test_db, student.id)}
        assert usage["downloads"].used == 1
        assert usage["downloads"].limit_reached
        assert usage["bookmarks"].used == 1
        assert usage["bookmarks"].reset_date is None

    async def test_plan_without_priority_support(self, test_db, student):
        result = await UsageService.record_priority_support(test_db, student.id, uuid.uuid4())
        assert not result.success
        assert "does not include priority support" in result.message

    async def test_scholar_usage_after_plan_change(self, test_db, student, scholar_plan):
        await SubscriptionService.change_subscription(
            test_db, student.id, scholar_plan.id, SubscriptionChangeOptions(pricing_option_label="1 Month")
        )
        usage = {item.key: item for item in await UsageService.get_usage(test_db, student.id)}
        assert usage["bookmarks"].unlimited
        assert usage["priority_support"].limit == 1

"""Service layer for quota usage accounting.

Usage is never stored as counters. It is derived by counting usage rows
(bookmarks, downloads, priority support requests) inside the current
period of each quota feature. Periods are anchored at the start of the
day the current subscription began, so a monthly quota bought on the
15th resets on the 15th.

Write paths (bookmark, download, priority support) check the same
computation under the user's row lock before recording anything.
"""

import logging
import uuid
from datetime import datetime, time, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.catalog_repo import PaperRepository
from app.database.plan_repo import PlanRepository
from app.database.subscription_repo import SubscriptionRepository
from app.database.usage_repo import UsageRepository
from app.database.user_repo import UserRepository
from app.models.models import User
from app.models.plan import Plan
from app.models.subscription_enums import QuotaPeriod
from app.models.usage import Bookmark, Download, SupportRequest
from app.schemas.catalog import PaperResponse
from app.schemas.plans import UNLIMITED, PlanFeature
from app.schemas.subscriptions import QuotaUsage, UsageActionResult
from app.services.plan_service import PlanService
from app.utils.exceptions import NotFoundException

logger = logging.getLogger(__name__)

BOOKMARKS = "bookmarks"
DOWNLOADS = "downloads"
PRIORITY_SUPPORT = "priority_support"

WARNING_THRESHOLD = 80.0

_PERIOD_STEP = {
    QuotaPeriod.WEEKLY: relativedelta(weeks=1),
    QuotaPeriod.MONTHLY: relativedelta(months=1),
    QuotaPeriod.YEARLY: relativedelta(years=1),
}


def start_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.min)


def _whole_periods(anchor: datetime, now: datetime, period: QuotaPeriod) -> int:
    if now <= anchor:
        return 0
    if period == QuotaPeriod.WEEKLY:
        return (now - anchor).days // 7
    delta = relativedelta(now, anchor)
    if period == QuotaPeriod.MONTHLY:
        return delta.years * 12 + delta.months
    return delta.years


def period_window(
    period: QuotaPeriod, subscription_start: datetime, now: datetime
) -> tuple[datetime, Optional[datetime]]:
    """
    Current counting window of a quota period.

    Args:
        period: Quota period of the feature
        subscription_start: When the current subscription began
        now: Reference time

    Returns:
        (period_start, reset_date); reset_date is None for lifetime quotas
    """
    anchor = start_of_day(subscription_start)

    if period == QuotaPeriod.LIFETIME:
        return anchor, None

    if period == QuotaPeriod.DAILY:
        today = start_of_day(now)
        return max(today, anchor), today + timedelta(days=1)

    step = _PERIOD_STEP[period]
    k = _whole_periods(anchor, now, period)
    # Month and year arithmetic clamps short months; settle k against the real boundaries
    while anchor + step * (k + 1) <= now:
        k += 1
    while k > 0 and anchor + step * k > now:
        k -= 1
    return anchor + step * k, anchor + step * (k + 1)


def usage_percentage(used: int, limit: int) -> float:
    """Share of the quota used: 100 for unlimited, 0 for a zero limit, capped at 100."""
    if limit == UNLIMITED:
        return 100.0
    if limit > 0:
        return min(100.0, used / limit * 100)
    return 0.0


class UsageService:
    """Service for quota usage business logic."""

    @staticmethod
    async def subscription_start(db: AsyncSession, user: User, now: datetime) -> datetime:
        """Start of the current plan record, else the profile creation date, else now."""
        current = await SubscriptionRepository.get_current_record(db, user.id)
        if current is not None and current.subscription_date:
            return current.subscription_date
        return user.created_at or now

    @staticmethod
    async def count_usage(db: AsyncSession, user_id: str, key: Optional[str], period_start: datetime) -> int:
        if key == BOOKMARKS:
            return await UsageRepository.count_active_bookmarks(db, user_id)
        if key == DOWNLOADS:
            return await UsageRepository.count_downloads_since(db, user_id, period_start)
        if key == PRIORITY_SUPPORT:
            return await UsageRepository.count_support_requests_since(db, user_id, period_start)
        return 0

    @staticmethod
    def build_usage(
        feature: PlanFeature, used: int, period_start: datetime, reset_date: Optional[datetime]
    ) -> QuotaUsage:
        limit = feature.limit if feature.limit is not None else 0
        unlimited = limit == UNLIMITED
        percentage = usage_percentage(used, limit)
        return QuotaUsage(
            key=feature.key or "",
            text=feature.text,
            used=used,
            limit=limit,
            period=feature.period or QuotaPeriod.MONTHLY,
            period_start=period_start,
            reset_date=reset_date,
            unlimited=unlimited,
            percentage=round(percentage, 2),
            limit_reached=not unlimited and used >= limit,
            warning=not unlimited and percentage >= WARNING_THRESHOLD,
        )

    @staticmethod
    async def _user_plan(db: AsyncSession, user: User) -> Optional[Plan]:
        if user.plan_id is None:
            return None
        return await PlanRepository.get_plan(db, user.plan_id)

    @staticmethod
    async def get_usage(db: AsyncSession, user_id: str, now: Optional[datetime] = None) -> list[QuotaUsage]:
        """
        Usage of every quota feature of the user's current plan.

        Args:
            db: Database session
            user_id: Auth uid of the user
            now: Reference time, defaults to utcnow

        Returns:
            One QuotaUsage per quota feature, in plan order
        """
        now = now or datetime.utcnow()
        user = await UserRepository.get_user(db, user_id)
        if user is None:
            raise NotFoundException(f"User profile {user_id} not found")
        plan = await UsageService._user_plan(db, user)
        if plan is None:
            return []

        started = await UsageService.subscription_start(db, user, now)
        usage = []
        for feature in PlanService.quota_features(plan):
            period = feature.period or QuotaPeriod.MONTHLY
            period_start, reset_date = period_window(period, started, now)
            used = await UsageService.count_usage(db, user_id, feature.key, period_start)
            usage.append(UsageService.build_usage(feature, used, period_start, reset_date))
        return usage

    @staticmethod
    async def _first_exceeded(
        db: AsyncSession, user: User, features: list[PlanFeature], now: datetime
    ) -> Optional[PlanFeature]:
        started = await UsageService.subscription_start(db, user, now)
        for feature in features:
            limit = feature.limit if feature.limit is not None else 0
            if not feature.is_quota or limit == UNLIMITED:
                continue
            period_start, _ = period_window(feature.period or QuotaPeriod.MONTHLY, started, now)
            if await UsageService.count_usage(db, user.id, feature.key, period_start) >= limit:
                return feature
        return None

    @staticmethod
    async def _locked_user_and_plan(db: AsyncSession, user_id: str) -> tuple[User, Optional[Plan]]:
        user = await UserRepository.get_user_for_update(db, user_id)
        if user is None:
            raise NotFoundException(f"User profile {user_id} not found")
        return user, await UsageService._user_plan(db, user)

    @staticmethod
    async def toggle_bookmark(
        db: AsyncSession, user_id: str, paper_id: uuid.UUID, now: Optional[datetime] = None
    ) -> UsageActionResult:
        """
        Remove an active bookmark, or add/reactivate one if the plan's bookmark quota allows.

        Args:
            db: Database session
            user_id: Auth uid of the user
            paper_id: Paper to bookmark
            now: Reference time, defaults to utcnow

        Returns:
            UsageActionResult with the resulting bookmarked flag
        """
        now = now or datetime.utcnow()
        if await PaperRepository.get_paper(db, paper_id) is None:
            raise NotFoundException(f"Paper {paper_id} not found")

        user, plan = await UsageService._locked_user_and_plan(db, user_id)
        existing = await UsageRepository.get_bookmark(db, user_id, paper_id)

        if existing is not None and existing.active:
            existing.active = False
            existing.removed_at = now
            await db.commit()
            return UsageActionResult(success=True, bookmarked=False, message="Bookmark removed.")

        features = [f for f in PlanService.parse_features(plan) if f.key == BOOKMARKS] if plan else []
        if not features or not features[0].is_quota:
            await db.rollback()
            return UsageActionResult(success=False, bookmarked=False, message="Your plan doesn't include bookmarking.")

        exceeded = await UsageService._first_exceeded(db, user, features[:1], now)
        if exceeded is not None:
            await db.rollback()
            return UsageActionResult(
                success=False,
                bookmarked=False,
                message=f"You have reached your bookmark limit of {exceeded.limit}.",
            )

        if existing is not None:
            existing.active = True
            existing.removed_at = None
        else:
            await UsageRepository.add(db, Bookmark(user_id=user_id, paper_id=paper_id, active=True, created_at=now))
        await db.commit()
        return UsageActionResult(success=True, bookmarked=True, message="Paper bookmarked!")

    @staticmethod
    async def record_download(
        db: AsyncSession, user_id: str, paper_id: uuid.UUID, now: Optional[datetime] = None
    ) -> UsageActionResult:
        """Record a paper download if every download quota of the plan allows it."""
        now = now or datetime.utcnow()
        if await PaperRepository.get_paper(db, paper_id) is None:
            raise NotFoundException(f"Paper {paper_id} not found")

        user, plan = await UsageService._locked_user_and_plan(db, user_id)
        features = [f for f in PlanService.parse_features(plan) if f.key == DOWNLOADS] if plan else []
        if not features:
            await db.rollback()
            return UsageActionResult(success=False, message="Your current plan does not include paper downloads.")

        exceeded = await UsageService._first_exceeded(db, user, features, now)
        if exceeded is not None:
            await db.rollback()
            period = (exceeded.period or QuotaPeriod.MONTHLY).value
            return UsageActionResult(
                success=False,
                message=f"You have reached your {period} download limit of {exceeded.limit}.",
            )

        await UsageRepository.add(db, Download(user_id=user_id, paper_id=paper_id, created_at=now))
        await db.commit()
        return UsageActionResult(success=True, message="Download recorded.")

    @staticmethod
    async def record_priority_support(
        db: AsyncSession, user_id: str, submission_id: uuid.UUID, now: Optional[datetime] = None
    ) -> UsageActionResult:
        """
        Record a priority support request against the plan's quota.

        Does not commit: the request is written with the submission it
        belongs to. A refusal leaves the session untouched.
        """
        now = now or datetime.utcnow()
        user, plan = await UsageService._locked_user_and_plan(db, user_id)
        features = [f for f in PlanService.parse_features(plan) if f.key == PRIORITY_SUPPORT] if plan else []
        if not features:
            return UsageActionResult(success=False, message="Your current plan does not include priority support.")

        exceeded = await UsageService._first_exceeded(db, user, features, now)
        if exceeded is not None:
            period = (exceeded.period or QuotaPeriod.MONTHLY).value
            return UsageActionResult(
                success=False,
                message=f"You have reached your {period} priority support limit of {exceeded.limit}.",
            )

        await UsageRepository.add(
            db, SupportRequest(user_id=user_id, submission_id=submission_id, created_at=now)
        )
        return UsageActionResult(success=True, message="Support request recorded.")

    @staticmethod
    async def list_user_bookmarks(db: AsyncSession, user_id: str) -> list[PaperResponse]:
        papers = await UsageRepository.list_bookmarked_papers(db, user_id)
        return [PaperResponse.model_validate(paper) for paper in papers]

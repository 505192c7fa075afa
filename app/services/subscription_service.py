"""Service layer for subscription business logic.

This module contains ALL business rules for moving a user between plans.
It orchestrates repository calls and transforms data into API-ready formats.

Key Concepts:
- Plan history: Append-only UserPlan records per user
- Current record: The single record with status current; it is what the
  profile's plan_id / plan_expiry_date point at
- Lifetime: A record without an end date (free plan, months = 0 options)

Architecture:
- Repository: Fetches and writes raw rows, never commits
- Service: Applies the plan change rules inside one transaction
- Route: Orchestrates service calls and returns HTTP responses
"""

import logging
import uuid
from datetime import datetime
from typing import Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.plan_repo import PlanRepository
from app.database.subscription_repo import SubscriptionRepository
from app.database.user_repo import UserRepository
from app.models.subscription import UserPlan
from app.models.subscription_enums import UserPlanStatus
from app.schemas.subscriptions import SubscriptionChangeOptions, SubscriptionMe, UserPlanResponse
from app.services.plan_service import PlanService
from app.utils.exceptions import DatabaseException, NotFoundException, ValidationException

logger = logging.getLogger(__name__)


class SubscriptionService:
    """Service for subscription business logic."""

    @staticmethod
    def _resolve_end_date(
        options: SubscriptionChangeOptions, months: Optional[int], now: datetime
    ) -> Optional[datetime]:
        """
        Work out when the new plan record ends.

        Args:
            options: Change options; an explicit end_date (even null) wins
            months: Months of the chosen pricing option, None when no option
            now: Start of the new record

        Returns:
            End date, or None for lifetime
        """
        if options.has_end_date_override:
            return options.end_date
        if months:
            return now + relativedelta(months=months)
        return None

    @staticmethod
    def _default_remarks(plan_name: str, options: SubscriptionChangeOptions) -> str:
        remarks = f"Plan changed to {plan_name}"
        if options.pricing_option_label:
            remarks += f" ({options.pricing_option_label})"
        if options.discount is not None and options.discount.code:
            remarks += f". Discount {options.discount.code} applied"
        return remarks + "."

    @staticmethod
    async def change_subscription(
        db: AsyncSession,
        user_id: str,
        new_plan_id: uuid.UUID,
        options: Optional[SubscriptionChangeOptions] = None,
        commit: bool = True,
        now: Optional[datetime] = None,
    ) -> UserPlan:
        """
        Move a user onto a plan.

        Locks the user row, moves every current history record to the
        superseded status (expired unless told otherwise), inserts the new
        current record and repoints the profile. All writes share the
        caller's transaction; with commit=False the caller commits, which
        lets order completion bundle its status update with the change.

        Args:
            db: Database session
            user_id: Auth uid of the user
            new_plan_id: Plan to move to
            options: End date override, pricing option, remarks, discount, order
            commit: Commit when done
            now: Start of the new record, defaults to utcnow

        Returns:
            The new current UserPlan record

        Raises:
            NotFoundException: User or plan does not exist
            ValidationException: Pricing option label is not on the plan
            DatabaseException: The store rejected the change; nothing is written
        """
        options = options or SubscriptionChangeOptions()
        now = now or datetime.utcnow()

        try:
            user = await UserRepository.get_user_for_update(db, user_id)
            if user is None:
                raise NotFoundException(f"User profile {user_id} not found")
            plan = await PlanRepository.get_plan(db, new_plan_id)
            if plan is None:
                raise NotFoundException(f"Plan {new_plan_id} not found")

            months: Optional[int] = None
            if options.pricing_option_label:
                option = PlanService.find_pricing_option(plan, options.pricing_option_label)
                if option is None:
                    raise ValidationException(
                        f"Pricing option '{options.pricing_option_label}' is not available on plan {plan.name}"
                    )
                months = option.months

            end_date = SubscriptionService._resolve_end_date(options, months, now)

            superseded = await SubscriptionRepository.supersede_current(db, user_id, options.superseded_status)
            record = await SubscriptionRepository.add_record(
                db,
                user_id=user_id,
                plan_id=plan.id,
                plan_name=plan.name,
                subscription_date=now,
                end_date=end_date,
                remarks=options.remarks or SubscriptionService._default_remarks(plan.name, options),
                order_id=options.order_id,
            )
            user.plan_id = plan.id
            user.plan_expiry_date = end_date
            await db.flush()

            if commit:
                await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.error("A system failure occurred @change_subscription", exc_info=True)
            raise DatabaseException("Failed to change subscription")

        logger.info(
            f"Subscription changed: user_id={user_id}, plan_id={plan.id}, superseded={superseded}, end_date={end_date}"
        )
        return record

    @staticmethod
    async def fetch_user_plan_history(db: AsyncSession, user_id: str) -> list[UserPlanResponse]:
        """Plan history of a user, newest first."""
        records = await SubscriptionRepository.get_history(db, user_id)
        return [UserPlanResponse.model_validate(record) for record in records]

    @staticmethod
    async def get_current_subscription(
        db: AsyncSession, user_id: str, now: Optional[datetime] = None
    ) -> SubscriptionMe:
        """
        Get the user's plan, current history record and expiry state.

        Args:
            db: Database session
            user_id: Auth uid of the user
            now: Reference time, defaults to utcnow

        Returns:
            SubscriptionMe; is_expired is true once the end date has passed
        """
        now = now or datetime.utcnow()
        user = await UserRepository.get_user(db, user_id)
        if user is None:
            raise NotFoundException(f"User profile {user_id} not found")

        current = await SubscriptionRepository.get_current_record(db, user_id)
        plan = await PlanRepository.get_plan(db, user.plan_id) if user.plan_id else None
        expiry = current.end_date if current else user.plan_expiry_date

        return SubscriptionMe(
            user_id=user.id,
            plan=PlanService.to_response(plan) if plan else None,
            current=UserPlanResponse.model_validate(current) if current else None,
            plan_expiry_date=expiry,
            is_expired=bool(expiry and expiry < now),
        )

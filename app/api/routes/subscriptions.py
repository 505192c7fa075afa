"""Subscription, plan history and quota usage routes."""

from fastapi import APIRouter

from app.api.deps import DB, AdminSession, CurrentSession
from app.schemas.subscriptions import SubscriptionChangeOptions, SubscriptionChangeRequest, UserPlanResponse
from app.services.subscription_service import SubscriptionService
from app.services.usage_service import UsageService
from app.utils.envelopes import api_success

router = APIRouter(tags=["subscriptions"])


@router.get("/subscriptions/me", response_model=dict)
async def get_my_subscription(session: CurrentSession, db: DB):
    """Get current user's plan, current history record and expiry state."""
    return api_success(await SubscriptionService.get_current_subscription(db, session.uid))


@router.get("/subscriptions/history", response_model=dict)
async def get_my_plan_history(session: CurrentSession, db: DB):
    return api_success(await SubscriptionService.fetch_user_plan_history(db, session.uid))


@router.get("/subscriptions/usage", response_model=dict)
async def get_my_usage(session: CurrentSession, db: DB):
    """Usage of every quota feature of the current plan."""
    return api_success(await UsageService.get_usage(db, session.uid))


@router.get("/admin/users/{user_id}/subscriptions", response_model=dict)
async def admin_get_plan_history(user_id: str, session: AdminSession, db: DB):
    return api_success(await SubscriptionService.fetch_user_plan_history(db, user_id))


@router.post("/admin/users/{user_id}/subscription", response_model=dict)
async def admin_change_subscription(
    user_id: str,
    payload: SubscriptionChangeRequest,
    session: AdminSession,
    db: DB,
):
    """Move a user onto another plan. An explicit null end_date makes the new record lifetime."""
    options = SubscriptionChangeOptions(**payload.model_dump(exclude={"plan_id"}, exclude_unset=True))
    record = await SubscriptionService.change_subscription(db, user_id, payload.plan_id, options)
    return api_success(UserPlanResponse.model_validate(record))

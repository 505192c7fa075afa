"""Checkout routes."""

from typing import Optional

from fastapi import APIRouter, Query, status

from app.api.deps import DB, CurrentSession
from app.schemas.checkout import CheckoutConfirmRequest, CheckoutDiscountRequest
from app.services.checkout_service import CheckoutService
from app.utils.envelopes import api_success

router = APIRouter(tags=["checkout"])


@router.get("/checkout/{plan_id}", response_model=dict)
async def get_checkout(
    plan_id: str,
    session: CurrentSession,
    db: DB,
    option: Optional[str] = Query(None, description="Pricing option label"),
):
    """Plan, selected pricing option and enabled payment methods for the checkout screen."""
    return api_success(await CheckoutService.get_checkout(db, session.user, plan_id, option))


@router.post("/checkout/{plan_id}/discount", response_model=dict)
async def apply_discount(
    plan_id: str,
    payload: CheckoutDiscountRequest,
    session: CurrentSession,
    db: DB,
):
    return api_success(await CheckoutService.apply_discount(db, session.user, plan_id, payload))


@router.post("/checkout/{plan_id}/confirm", response_model=dict, status_code=status.HTTP_201_CREATED)
async def confirm_checkout(
    plan_id: str,
    payload: CheckoutConfirmRequest,
    session: CurrentSession,
    db: DB,
):
    """Place a pending order; amounts are recomputed server side."""
    return api_success(await CheckoutService.confirm(db, session.user, plan_id, payload))

"""Order routes for buyers and admins."""

import uuid
from typing import Optional

from fastapi import APIRouter, Query

from app.api.deps import DB, AdminSession, CurrentSession
from app.models.subscription_enums import OrderStatus
from app.schemas.orders import OrderStatusUpdate
from app.services.order_service import OrderService
from app.utils.envelopes import api_success

router = APIRouter(tags=["orders"])


@router.get("/orders", response_model=dict)
async def list_my_orders(session: CurrentSession, db: DB):
    return api_success(await OrderService.list_user_orders(db, session.uid))


@router.get("/orders/{order_id}", response_model=dict)
async def get_my_order(order_id: uuid.UUID, session: CurrentSession, db: DB):
    return api_success(await OrderService.get_order(db, order_id, session.uid))


@router.get("/admin/orders", response_model=dict)
async def admin_list_orders(
    session: AdminSession,
    db: DB,
    status: Optional[OrderStatus] = Query(None),
):
    """All orders, newest first, optionally filtered by status."""
    return api_success(await OrderService.list_all_orders(db, status))


@router.get("/admin/orders/stats", response_model=dict)
async def admin_order_stats(session: AdminSession, db: DB):
    return api_success(await OrderService.order_stats(db))


@router.get("/admin/orders/{order_id}", response_model=dict)
async def admin_get_order(order_id: uuid.UUID, session: AdminSession, db: DB):
    return api_success(await OrderService.get_order_admin(db, order_id))


@router.post("/admin/orders/{order_id}/process", response_model=dict)
async def process_order(order_id: uuid.UUID, payload: OrderStatusUpdate, session: AdminSession, db: DB):
    """Move a pending order to completed, failed or refunded. Completing it activates the plan."""
    return api_success(await OrderService.process_order(db, order_id, payload.status))

"""Admin discount routes."""

import uuid

from fastapi import APIRouter, status

from app.api.deps import DB, AdminSession
from app.schemas.discounts import DiscountCreate, DiscountUpdate
from app.services.discount_service import DiscountService
from app.utils.envelopes import api_success

router = APIRouter(prefix="/admin/discounts", tags=["discounts"])


@router.get("", response_model=dict)
async def list_discounts(session: AdminSession, db: DB):
    return api_success(await DiscountService.list_discounts(db))


@router.get("/{discount_id}", response_model=dict)
async def get_discount(discount_id: uuid.UUID, session: AdminSession, db: DB):
    return api_success(await DiscountService.get_discount(db, discount_id))


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_discount(payload: DiscountCreate, session: AdminSession, db: DB):
    return api_success(await DiscountService.create_discount(db, payload, actor_id=session.uid))


@router.patch("/{discount_id}", response_model=dict)
async def update_discount(discount_id: uuid.UUID, payload: DiscountUpdate, session: AdminSession, db: DB):
    return api_success(await DiscountService.update_discount(db, discount_id, payload, actor_id=session.uid))


@router.delete("/{discount_id}", response_model=dict)
async def delete_discount(discount_id: uuid.UUID, session: AdminSession, db: DB):
    await DiscountService.delete_discount(db, discount_id)
    return api_success({"deleted": True, "id": str(discount_id)})

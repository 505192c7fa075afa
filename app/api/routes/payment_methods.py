"""Payment method routes."""

import uuid

from fastapi import APIRouter, status

from app.api.deps import DB, AdminSession
from app.schemas.payment_methods import PaymentMethodCreate, PaymentMethodUpdate
from app.services.payment_method_service import PaymentMethodService
from app.utils.envelopes import api_success

router = APIRouter(tags=["payment-methods"])


@router.get("/payment-methods", response_model=dict)
async def list_enabled_payment_methods(db: DB):
    """Enabled payment methods with the account details buyers pay to."""
    return api_success(await PaymentMethodService.list_payment_methods(db, enabled_only=True))


@router.get("/admin/payment-methods", response_model=dict)
async def admin_list_payment_methods(session: AdminSession, db: DB):
    return api_success(await PaymentMethodService.list_payment_methods(db))


@router.post("/admin/payment-methods", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_payment_method(payload: PaymentMethodCreate, session: AdminSession, db: DB):
    return api_success(await PaymentMethodService.create_payment_method(db, payload, actor_id=session.uid))


@router.patch("/admin/payment-methods/{method_id}", response_model=dict)
async def update_payment_method(
    method_id: uuid.UUID, payload: PaymentMethodUpdate, session: AdminSession, db: DB
):
    return api_success(
        await PaymentMethodService.update_payment_method(db, method_id, payload, actor_id=session.uid)
    )


@router.delete("/admin/payment-methods/{method_id}", response_model=dict)
async def delete_payment_method(method_id: uuid.UUID, session: AdminSession, db: DB):
    await PaymentMethodService.delete_payment_method(db, method_id)
    return api_success({"deleted": True, "id": str(method_id)})

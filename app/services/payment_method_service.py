"""Service layer for payment methods."""

import json
import uuid
from typing import Optional

from pydantic import TypeAdapter
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.payment_method_repo import PaymentMethodRepository
from app.models.plan import PaymentMethod
from app.models.subscription_enums import PaymentMethodType
from app.schemas.payment_methods import (
    PaymentDetails,
    PaymentMethodCreate,
    PaymentMethodResponse,
    PaymentMethodUpdate,
)
from app.utils.exceptions import NotFoundException

_details_adapter = TypeAdapter(PaymentDetails)


class PaymentMethodService:
    """Service for payment method business logic."""

    @staticmethod
    def to_response(method: PaymentMethod) -> PaymentMethodResponse:
        raw = json.loads(method.details) if method.details else {}
        raw["type"] = method.type.value
        return PaymentMethodResponse(
            id=method.id,
            name=method.name,
            type=method.type.value,
            enabled=method.enabled,
            details=_details_adapter.validate_python(raw),
            created_date=method.created_date,
            updated_date=method.updated_date,
        )

    @staticmethod
    async def list_payment_methods(db: AsyncSession, enabled_only: bool = False) -> list[PaymentMethodResponse]:
        methods = await PaymentMethodRepository.list_methods(db, enabled_only)
        return [PaymentMethodService.to_response(method) for method in methods]

    @staticmethod
    async def get_method_model(db: AsyncSession, method_id: uuid.UUID) -> PaymentMethod:
        method = await PaymentMethodRepository.get_method(db, method_id)
        if method is None:
            raise NotFoundException(f"Payment method {method_id} not found")
        return method

    @staticmethod
    async def get_payment_method(db: AsyncSession, method_id: uuid.UUID) -> PaymentMethodResponse:
        return PaymentMethodService.to_response(await PaymentMethodService.get_method_model(db, method_id))

    @staticmethod
    async def create_payment_method(
        db: AsyncSession, data: PaymentMethodCreate, actor_id: Optional[str] = None
    ) -> PaymentMethodResponse:
        method = PaymentMethod(
            name=data.name,
            type=PaymentMethodType(data.details.type),
            enabled=data.enabled,
            details=data.details.model_dump_json(exclude={"type"}),
            created_by=actor_id,
        )
        method = await PaymentMethodRepository.create_method(db, method)
        return PaymentMethodService.to_response(method)

    @staticmethod
    async def update_payment_method(
        db: AsyncSession, method_id: uuid.UUID, data: PaymentMethodUpdate, actor_id: Optional[str] = None
    ) -> PaymentMethodResponse:
        method = await PaymentMethodService.get_method_model(db, method_id)
        if data.name is not None:
            method.name = data.name
        if data.enabled is not None:
            method.enabled = data.enabled
        if data.details is not None:
            method.type = PaymentMethodType(data.details.type)
            method.details = data.details.model_dump_json(exclude={"type"})
        method.updated_by = actor_id
        method = await PaymentMethodRepository.update_method(db, method)
        return PaymentMethodService.to_response(method)

    @staticmethod
    async def delete_payment_method(db: AsyncSession, method_id: uuid.UUID) -> None:
        method = await PaymentMethodService.get_method_model(db, method_id)
        await PaymentMethodRepository.delete_method(db, method)

"""Repository layer for payment method database operations."""

import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.plan import PaymentMethod


class PaymentMethodRepository:
    """Repository for payment method database operations."""

    @staticmethod
    async def list_methods(db: AsyncSession, enabled_only: bool = False) -> list[PaymentMethod]:
        stmt = select(PaymentMethod)
        if enabled_only:
            stmt = stmt.where(PaymentMethod.enabled.is_(True))
        result = await db.execute(stmt.order_by(PaymentMethod.name))
        return list(result.scalars().all())

    @staticmethod
    async def get_method(db: AsyncSession, method_id: uuid.UUID) -> Optional[PaymentMethod]:
        result = await db.execute(select(PaymentMethod).where(PaymentMethod.id == method_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def create_method(db: AsyncSession, method: PaymentMethod) -> PaymentMethod:
        db.add(method)
        await db.commit()
        await db.refresh(method)
        return method

    @staticmethod
    async def update_method(db: AsyncSession, method: PaymentMethod) -> PaymentMethod:
        await db.commit()
        await db.refresh(method)
        return method

    @staticmethod
    async def delete_method(db: AsyncSession, method: PaymentMethod) -> None:
        await db.delete(method)
        await db.commit()

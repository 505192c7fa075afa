"""Service layer for discounts (coupon codes).

Coupon checks never raise for an unusable code: the outcome is returned
as a DiscountValidationResult so checkout can show the message inline.
"""

import json
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.database.discount_repo import DiscountRepository
from app.models.plan import Discount
from app.models.subscription_enums import DiscountType
from app.schemas.discounts import (
    DiscountCreate,
    DiscountResponse,
    DiscountUpdate,
    DiscountValidationResult,
    PriceBreakdown,
)
from app.utils.exceptions import ConflictException, NotFoundException, ValidationException

MSG_EMPTY = "Coupon code cannot be empty."
MSG_UNKNOWN = "This coupon code is not valid."
MSG_INACTIVE = "This coupon is no longer active."
MSG_NOT_STARTED = "This coupon is not yet valid."
MSG_EXPIRED = "This coupon has expired."
MSG_WRONG_PLAN = "This coupon is not valid for the selected plan."
MSG_WRONG_DURATION = "This coupon is not valid for the selected billing duration."
MSG_APPLIED = "Coupon applied successfully!"


class DiscountService:
    """Service for discount business logic."""

    @staticmethod
    def to_response(discount: Discount) -> DiscountResponse:
        return DiscountResponse(
            id=discount.id,
            name=discount.name,
            code=discount.code,
            type=discount.type,
            value=discount.value,
            is_active=discount.is_active,
            applies_to_all_plans=discount.applies_to_all_plans,
            applicable_plan_ids=json.loads(discount.applicable_plan_ids or "[]"),
            applies_to_all_durations=discount.applies_to_all_durations,
            applicable_durations=json.loads(discount.applicable_durations or "[]"),
            start_date=discount.start_date,
            end_date=discount.end_date,
            created_date=discount.created_date,
            updated_date=discount.updated_date,
        )

    @staticmethod
    def check_rules(
        discount: DiscountResponse,
        plan_id: uuid.UUID,
        option_label: str,
        now: Optional[datetime] = None,
    ) -> Optional[str]:
        """
        Apply the state, date window and scope rules to a known discount.

        Args:
            discount: The discount matched by code
            plan_id: Plan being purchased
            option_label: Pricing option being purchased
            now: Reference time (naive UTC), defaults to utcnow

        Returns:
            The rejection message, or None when the discount applies
        """
        now = now or datetime.utcnow()
        if not discount.is_active:
            return MSG_INACTIVE
        if discount.start_date and now < discount.start_date:
            return MSG_NOT_STARTED
        if discount.end_date and now > discount.end_date:
            return MSG_EXPIRED
        if not discount.applies_to_all_plans and plan_id not in discount.applicable_plan_ids:
            return MSG_WRONG_PLAN
        if not discount.applies_to_all_durations and option_label not in discount.applicable_durations:
            return MSG_WRONG_DURATION
        return None

    @staticmethod
    async def validate_discount_code(
        db: AsyncSession,
        code: Optional[str],
        plan_id: uuid.UUID,
        option_label: str,
        now: Optional[datetime] = None,
    ) -> DiscountValidationResult:
        """
        Check a coupon code against a plan and pricing option.

        Checks run in a fixed order and the first failure wins: empty code,
        unknown code, inactive, not yet valid, expired, plan scope, duration
        scope. Codes are matched ignoring case. Validation does not consume
        the code.

        Args:
            db: Database session
            code: Code as typed by the user
            plan_id: Plan being purchased
            option_label: Pricing option label being purchased
            now: Reference time, defaults to utcnow

        Returns:
            DiscountValidationResult with the discount on success
        """
        if not code or not code.strip():
            return DiscountValidationResult(success=False, message=MSG_EMPTY)

        discount_model = await DiscountRepository.get_by_code(db, code)
        if discount_model is None:
            return DiscountValidationResult(success=False, message=MSG_UNKNOWN)

        discount = DiscountService.to_response(discount_model)
        rejection = DiscountService.check_rules(discount, plan_id, option_label, now)
        if rejection:
            return DiscountValidationResult(success=False, message=rejection)
        return DiscountValidationResult(success=True, message=MSG_APPLIED, discount=discount)

    @staticmethod
    def compute_discount(price: float, discount: Optional[DiscountResponse]) -> PriceBreakdown:
        """
        Price breakdown for a pricing option price and an optional discount.

        The discount amount is clamped to the price, so the final amount is
        never negative and discount + final always equals the price.
        """
        if discount is None:
            return PriceBreakdown(original_price=price, discount_amount=0.0, final_amount=price)
        if discount.type == DiscountType.PERCENTAGE:
            amount = price * discount.value / 100
        else:
            amount = discount.value
        amount = round(min(max(amount, 0.0), price), 2)
        return PriceBreakdown(
            original_price=price,
            discount_amount=amount,
            final_amount=round(max(0.0, price - amount), 2),
        )

    @staticmethod
    async def list_discounts(db: AsyncSession) -> list[DiscountResponse]:
        return [DiscountService.to_response(d) for d in await DiscountRepository.list_discounts(db)]

    @staticmethod
    async def get_discount_model(db: AsyncSession, discount_id: uuid.UUID) -> Discount:
        discount = await DiscountRepository.get_discount(db, discount_id)
        if discount is None:
            raise NotFoundException(f"Discount {discount_id} not found")
        return discount

    @staticmethod
    async def get_discount(db: AsyncSession, discount_id: uuid.UUID) -> DiscountResponse:
        return DiscountService.to_response(await DiscountService.get_discount_model(db, discount_id))

    @staticmethod
    async def _ensure_code_free(db: AsyncSession, code: Optional[str], exclude_id: Optional[uuid.UUID] = None) -> None:
        if code and await DiscountRepository.get_by_code(db, code, exclude_id=exclude_id):
            raise ConflictException(f"A discount with code '{code}' already exists")

    @staticmethod
    async def create_discount(
        db: AsyncSession, data: DiscountCreate, actor_id: Optional[str] = None
    ) -> DiscountResponse:
        await DiscountService._ensure_code_free(db, data.code)
        discount = Discount(
            name=data.name,
            code=data.code,
            type=data.type,
            value=data.value,
            is_active=data.is_active,
            applies_to_all_plans=data.applies_to_all_plans,
            applicable_plan_ids=json.dumps([str(pid) for pid in data.applicable_plan_ids]),
            applies_to_all_durations=data.applies_to_all_durations,
            applicable_durations=json.dumps(data.applicable_durations),
            start_date=data.start_date,
            end_date=data.end_date,
            created_by=actor_id,
        )
        discount = await DiscountRepository.create_discount(db, discount)
        return DiscountService.to_response(discount)

    @staticmethod
    async def update_discount(
        db: AsyncSession, discount_id: uuid.UUID, data: DiscountUpdate, actor_id: Optional[str] = None
    ) -> DiscountResponse:
        discount = await DiscountService.get_discount_model(db, discount_id)
        changes = data.model_dump(exclude_unset=True)

        if "code" in changes:
            code = (changes["code"] or "").strip() or None
            await DiscountService._ensure_code_free(db, code, exclude_id=discount.id)
            discount.code = code
        if "applicable_plan_ids" in changes:
            discount.applicable_plan_ids = json.dumps([str(pid) for pid in data.applicable_plan_ids or []])
        if "applicable_durations" in changes:
            discount.applicable_durations = json.dumps(data.applicable_durations or [])
        for field in ("name", "type", "value", "is_active", "applies_to_all_plans", "applies_to_all_durations"):
            if field in changes and changes[field] is not None:
                setattr(discount, field, changes[field])
        for field in ("start_date", "end_date"):
            if field in changes:
                setattr(discount, field, changes[field])

        if discount.type == DiscountType.PERCENTAGE and discount.value > 100:
            raise ValidationException("Percentage discounts cannot exceed 100")
        if discount.start_date and discount.end_date and discount.end_date < discount.start_date:
            raise ValidationException("end_date must not be before start_date")

        discount.updated_by = actor_id
        discount = await DiscountRepository.update_discount(db, discount)
        return DiscountService.to_response(discount)

    @staticmethod
    async def delete_discount(db: AsyncSession, discount_id: uuid.UUID) -> None:
        discount = await DiscountService.get_discount_model(db, discount_id)
        await DiscountRepository.delete_discount(db, discount)

"""Service layer for checkout.

Prices, discounts and totals are always recomputed here from the stored
plan and discount; nothing the client sends about money is trusted.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.database.plan_repo import PlanRepository
from app.models.models import User
from app.models.plan import Plan
from app.schemas.checkout import (
    CheckoutConfirmation,
    CheckoutConfirmRequest,
    CheckoutDiscountRequest,
    CheckoutSummary,
)
from app.schemas.discounts import DiscountCheckResponse
from app.schemas.orders import OrderCreate
from app.schemas.plans import PricingOption
from app.services.discount_service import DiscountService
from app.services.email_service import EmailService
from app.services.order_service import OrderService, order_email_props
from app.services.payment_method_service import PaymentMethodService
from app.services.plan_service import PlanService
from app.utils.exceptions import ConflictException, NotFoundException, ValidationException

logger = logging.getLogger(__name__)


class CheckoutService:
    """Service for checkout business logic."""

    @staticmethod
    async def _resolve(
        db: AsyncSession, user: User, plan_id: str, option_label: Optional[str]
    ) -> tuple[Plan, PricingOption]:
        """
        Resolve the plan and pricing option a checkout is for.

        Raises:
            ValidationException: No option selected
            NotFoundException: Malformed, unknown or unpublished plan, or unknown option
            ConflictException: The user is already on this plan
        """
        to_pricing = {"redirectTo": settings.PRICING_PATH}
        if not option_label:
            raise ValidationException("Please select a pricing option", details=to_pricing)

        try:
            parsed_id = uuid.UUID(str(plan_id))
        except ValueError:
            raise NotFoundException("The selected plan is not available", details=to_pricing)

        plan = await PlanRepository.get_plan(db, parsed_id)
        if plan is None or not plan.published:
            raise NotFoundException("The selected plan is not available", details=to_pricing)

        option = PlanService.find_pricing_option(plan, option_label)
        if option is None:
            raise NotFoundException("The selected pricing option is not available", details=to_pricing)

        if user.plan_id == plan.id:
            raise ConflictException(
                f"You are already subscribed to {plan.name}",
                details={"redirectTo": settings.SUBSCRIPTION_PATH},
            )
        return plan, option

    @staticmethod
    async def get_checkout(
        db: AsyncSession, user: User, plan_id: str, option_label: Optional[str]
    ) -> CheckoutSummary:
        plan, option = await CheckoutService._resolve(db, user, plan_id, option_label)
        return CheckoutSummary(
            plan=PlanService.to_response(plan),
            option=option,
            payment_methods=await PaymentMethodService.list_payment_methods(db, enabled_only=True),
            breakdown=DiscountService.compute_discount(option.price, None),
        )

    @staticmethod
    async def apply_discount(
        db: AsyncSession, user: User, plan_id: str, data: CheckoutDiscountRequest
    ) -> DiscountCheckResponse:
        """Check a coupon for the selected option and return the resulting breakdown."""
        plan, option = await CheckoutService._resolve(db, user, plan_id, data.option)
        result = await DiscountService.validate_discount_code(db, data.code, plan.id, option.label)
        return DiscountCheckResponse(
            success=result.success,
            message=result.message,
            discount=result.discount,
            breakdown=DiscountService.compute_discount(option.price, result.discount),
        )

    @staticmethod
    async def confirm(
        db: AsyncSession, user: User, plan_id: str, data: CheckoutConfirmRequest
    ) -> CheckoutConfirmation:
        """
        Place a pending order for the selected plan option.

        The coupon is validated again and the amounts recomputed before the
        order is written. An order-confirmation email follows on a best
        effort basis.

        Args:
            db: Database session
            user: Purchasing user's profile
            plan_id: Plan being purchased
            data: Option label, payment method and optional coupon code

        Returns:
            CheckoutConfirmation with the created order
        """
        plan, option = await CheckoutService._resolve(db, user, plan_id, data.option)

        method = await PaymentMethodService.get_method_model(db, data.payment_method_id)
        if not method.enabled:
            raise ValidationException("The selected payment method is not available")

        discount = None
        if data.code and data.code.strip():
            result = await DiscountService.validate_discount_code(db, data.code, plan.id, option.label)
            if not result.success:
                raise ValidationException(result.message, details={"field": "code"})
            discount = result.discount

        breakdown = DiscountService.compute_discount(option.price, discount)
        order = await OrderService.create_order(
            db,
            OrderCreate(
                user_id=user.id,
                user_name=user.name,
                user_email=user.email,
                plan_id=plan.id,
                plan_name=plan.name,
                pricing_option_label=option.label,
                original_price=breakdown.original_price,
                discount_id=discount.id if discount else None,
                discount_code=discount.code if discount else None,
                discount_amount=breakdown.discount_amount,
                final_amount=breakdown.final_amount,
                payment_method=method.name,
                payment_method_type=method.type.value,
            ),
        )
        logger.info(f"Checkout confirmed: order_id={order.id}, user_id={user.id}, final_amount={order.final_amount}")

        await EmailService.send_email(db, "order-confirmation", user.email, order_email_props(order))

        return CheckoutConfirmation(
            order=order,
            message="Your order has been placed. It will be activated once the payment is verified.",
        )

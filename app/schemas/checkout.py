"""Checkout schemas."""

import uuid
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.discounts import PriceBreakdown
from app.schemas.orders import OrderResponse
from app.schemas.payment_methods import PaymentMethodResponse
from app.schemas.plans import PlanResponse, PricingOption


class CheckoutSummary(BaseModel):
    """Everything the checkout screen needs for one plan option."""

    plan: PlanResponse
    option: PricingOption
    payment_methods: list[PaymentMethodResponse]
    breakdown: PriceBreakdown


class CheckoutDiscountRequest(BaseModel):
    option: str = Field(..., min_length=1)
    code: str = Field("", max_length=64)


class CheckoutConfirmRequest(BaseModel):
    option: str = Field(..., min_length=1)
    payment_method_id: uuid.UUID
    code: Optional[str] = Field(None, max_length=64)


class CheckoutConfirmation(BaseModel):
    order: OrderResponse
    message: str

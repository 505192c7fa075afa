"""Discount (coupon) schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.subscription_enums import DiscountType
from app.utils.dates import naive_utc


class DiscountBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    code: Optional[str] = Field(None, max_length=64, description="Matched case-insensitively")
    type: DiscountType
    value: float = Field(..., ge=0)
    is_active: bool = True
    applies_to_all_plans: bool = True
    applicable_plan_ids: list[uuid.UUID] = Field(default_factory=list)
    applies_to_all_durations: bool = True
    applicable_durations: list[str] = Field(default_factory=list, description="Pricing option labels")
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    _utc_dates = field_validator("start_date", "end_date")(naive_utc)

    @model_validator(mode="after")
    def _check_rule(self) -> "DiscountBase":
        if self.type == DiscountType.PERCENTAGE and self.value > 100:
            raise ValueError("Percentage discounts cannot exceed 100")
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        if self.code is not None:
            self.code = self.code.strip() or None
        return self


class DiscountCreate(DiscountBase):
    """Request to create a discount."""


class DiscountUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    code: Optional[str] = Field(None, max_length=64)
    type: Optional[DiscountType] = None
    value: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None
    applies_to_all_plans: Optional[bool] = None
    applicable_plan_ids: Optional[list[uuid.UUID]] = None
    applies_to_all_durations: Optional[bool] = None
    applicable_durations: Optional[list[str]] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    _utc_dates = field_validator("start_date", "end_date")(naive_utc)


class DiscountResponse(DiscountBase):
    id: uuid.UUID
    created_date: Optional[datetime] = None
    updated_date: Optional[datetime] = None


class DiscountValidationResult(BaseModel):
    """Outcome of a coupon check. Rejections are results, not errors."""

    success: bool
    message: str
    discount: Optional[DiscountResponse] = None


class PriceBreakdown(BaseModel):
    original_price: float = Field(..., ge=0)
    discount_amount: float = Field(0.0, ge=0)
    final_amount: float = Field(..., ge=0)


class DiscountCheckResponse(BaseModel):
    """Coupon check at checkout, with the breakdown it produces."""

    success: bool
    message: str
    discount: Optional[DiscountResponse] = None
    breakdown: PriceBreakdown

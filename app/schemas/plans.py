"""Plan catalog schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.subscription_enums import QuotaPeriod

UNLIMITED = -1


class PricingOption(BaseModel):
    """One purchasable (label, price, duration) variant of a plan."""

    label: str = Field(..., min_length=1, max_length=100)
    price: float = Field(..., ge=0)
    months: int = Field(0, ge=0, description="0 means the option never expires")
    badge: Optional[str] = Field(None, max_length=50)


class PlanFeature(BaseModel):
    """Feature line of a plan. Quota features carry a key, a limit and a period."""

    text: str = Field(..., min_length=1, max_length=255)
    is_quota: bool = False
    key: Optional[str] = Field(None, max_length=64)
    limit: Optional[int] = Field(None, ge=UNLIMITED, description="-1 means unlimited")
    period: Optional[QuotaPeriod] = None

    @model_validator(mode="after")
    def _quota_fields(self) -> "PlanFeature":
        if self.is_quota:
            if not self.key:
                raise ValueError("Quota features need a key")
            if self.limit is None:
                raise ValueError("Quota features need a limit")
            if self.period is None:
                self.period = QuotaPeriod.MONTHLY
        return self

class PlanBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field("", max_length=2000)
    pricing_options: list[PricingOption] = Field(..., min_length=1)
    features: list[PlanFeature] = Field(default_factory=list)
    published: bool = False
    popular: bool = False
    is_ad_supported: bool = False

    @field_validator("pricing_options")
    @classmethod
    def _unique_labels(cls, value: list[PricingOption]) -> list[PricingOption]:
        labels = [option.label for option in value]
        if len(labels) != len(set(labels)):
            raise ValueError("Pricing option labels must be unique within a plan")
        return value


class PlanCreate(PlanBase):
    """Request to create a plan."""


class PlanUpdate(BaseModel):
    """Partial plan update; omitted fields are left untouched."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    pricing_options: Optional[list[PricingOption]] = Field(None, min_length=1)
    features: Optional[list[PlanFeature]] = None
    published: Optional[bool] = None
    popular: Optional[bool] = None
    is_ad_supported: Optional[bool] = None

    @field_validator("pricing_options")
    @classmethod
    def _unique_labels(cls, value: Optional[list[PricingOption]]) -> Optional[list[PricingOption]]:
        if value is None:
            return value
        return PlanBase._unique_labels(value)


class PlanResponse(PlanBase):
    id: uuid.UUID
    created_date: Optional[datetime] = None
    updated_date: Optional[datetime] = None

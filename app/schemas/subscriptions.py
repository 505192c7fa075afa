"""Subscription, plan history and quota usage schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.models.subscription_enums import QuotaPeriod, UserPlanStatus
from app.utils.dates import naive_utc
from app.schemas.discounts import DiscountResponse
from app.schemas.plans import PlanResponse


class QuotaUsage(BaseModel):
    """Usage of one quota feature in its current period."""

    key: str
    text: str
    used: int = Field(..., ge=0)
    limit: int = Field(..., description="-1 means unlimited")
    period: QuotaPeriod
    period_start: datetime
    reset_date: Optional[datetime] = Field(None, description="null for lifetime quotas")
    unlimited: bool
    percentage: float = Field(..., ge=0, le=100)
    limit_reached: bool
    warning: bool


class UserPlanResponse(BaseModel):
    """Plan history record."""

    id: uuid.UUID
    user_id: str
    plan_id: uuid.UUID
    plan_name: str
    subscription_date: datetime
    end_date: Optional[datetime] = Field(None, description="null means lifetime")
    status: UserPlanStatus
    remarks: Optional[str] = None
    order_id: Optional[uuid.UUID] = None

    class Config:
        from_attributes = True


class SubscriptionChangeOptions(BaseModel):
    """Options of a plan change.

    end_date is only honoured when explicitly supplied; an explicit null
    makes the new record lifetime regardless of the pricing option.
    """

    end_date: Optional[datetime] = None
    pricing_option_label: Optional[str] = None
    remarks: Optional[str] = Field(None, max_length=1000)
    discount: Optional[DiscountResponse] = None
    order_id: Optional[uuid.UUID] = None
    superseded_status: UserPlanStatus = UserPlanStatus.EXPIRED

    _utc_end_date = field_validator("end_date")(naive_utc)

    @field_validator("superseded_status")
    @classmethod
    def _superseded_status_ends_the_record(cls, value: UserPlanStatus) -> UserPlanStatus:
        if value not in (UserPlanStatus.EXPIRED, UserPlanStatus.CANCELLED):
            raise ValueError("superseded_status must be expired or cancelled")
        return value

    @property
    def has_end_date_override(self) -> bool:
        return "end_date" in self.model_fields_set


class SubscriptionChangeRequest(SubscriptionChangeOptions):
    """Admin request to move a user onto another plan."""

    plan_id: uuid.UUID


class SubscriptionMe(BaseModel):
    """Current user's subscription information."""

    user_id: str
    plan: Optional[PlanResponse] = None
    current: Optional[UserPlanResponse] = None
    plan_expiry_date: Optional[datetime] = None
    is_expired: bool = False


class UsageActionResult(BaseModel):
    """Outcome of a quota-checked action (bookmark, download, priority support)."""

    success: bool
    message: str
    bookmarked: Optional[bool] = None

"""Order schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.subscription_enums import OrderStatus


class OrderCreate(BaseModel):
    """Fields captured at checkout. Amounts are computed server side."""

    user_id: str = Field(..., min_length=1)
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    plan_id: uuid.UUID
    plan_name: str = Field(..., min_length=1)
    pricing_option_label: str = Field(..., min_length=1)
    original_price: float = Field(..., ge=0)
    discount_id: Optional[uuid.UUID] = None
    discount_code: Optional[str] = None
    discount_amount: float = Field(0.0, ge=0)
    final_amount: float = Field(..., ge=0)
    payment_method: str = Field(..., min_length=1)
    payment_method_type: Optional[str] = None


class OrderResponse(BaseModel):
    id: uuid.UUID
    user_id: str
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    plan_id: uuid.UUID
    plan_name: str
    pricing_option_label: str
    original_price: float
    discount_id: Optional[uuid.UUID] = None
    discount_code: Optional[str] = None
    discount_amount: float
    final_amount: float
    payment_method: str
    payment_method_type: Optional[str] = None
    status: OrderStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderStats(BaseModel):
    total_revenue: float = 0.0
    total_orders: int = 0
    pending: int = 0
    completed: int = 0
    failed: int = 0
    refunded: int = 0

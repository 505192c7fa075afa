"""Order model - one row per checkout attempt.

Prices are captured at checkout time; status is the only field that
changes after creation and only through the admin order pipeline.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Float, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.models import CreatedAtMixin, UUIDMixin, str_enum
from app.models.subscription_enums import OrderStatus


class Order(UUIDMixin, CreatedAtMixin, Base):
    __tablename__ = "tbl_orders"
    __table_args__ = (
        Index("ix_orders_user", "user_id"),
        Index("ix_orders_status", "status"),
    )

    user_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("tbl_users.id", ondelete="CASCADE"), nullable=False
    )
    user_name: Mapped[Optional[str]] = mapped_column(Text)
    user_email: Mapped[Optional[str]] = mapped_column(String(320))

    # Plans can be deleted after purchase, so plan_id carries no foreign key
    plan_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    plan_name: Mapped[str] = mapped_column(String(255), nullable=False)
    pricing_option_label: Mapped[str] = mapped_column(String(255), nullable=False)

    original_price: Mapped[float] = mapped_column(Float, nullable=False)
    discount_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)
    discount_code: Mapped[Optional[str]] = mapped_column(String(64))
    discount_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    final_amount: Mapped[float] = mapped_column(Float, nullable=False)

    payment_method: Mapped[str] = mapped_column(String(255), nullable=False)
    payment_method_type: Mapped[Optional[str]] = mapped_column(String(32))

    status: Mapped[OrderStatus] = mapped_column(
        str_enum(OrderStatus, "order_status"), nullable=False, default=OrderStatus.PENDING
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, onupdate=datetime.utcnow)

"""UserPlan model - append-only plan history of a user.

Exactly one record per user carries status ``current``. The partial unique
index below enforces that in the store; the subscription service keeps
User.plan_id / plan_expiry_date in step with that record.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.models.models import UUIDMixin, str_enum
from app.models.subscription_enums import UserPlanStatus

if TYPE_CHECKING:
    from app.models.models import User


class UserPlan(UUIDMixin, Base):
    """Plan history record."""

    __tablename__ = "tbl_user_plan_history"
    __table_args__ = (
        Index("ix_user_plan_history_user", "user_id"),
        Index(
            "uq_user_plan_history_current",
            "user_id",
            unique=True,
            postgresql_where=text("status = 'current'"),
            sqlite_where=text("status = 'current'"),
        ),
    )

    user_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("tbl_users.id", ondelete="CASCADE"), nullable=False
    )
    plan_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    # Denormalized for history display after a plan is renamed or deleted
    plan_name: Mapped[str] = mapped_column(String(255), nullable=False)
    subscription_date: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    # NULL means lifetime
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    status: Mapped[UserPlanStatus] = mapped_column(
        str_enum(UserPlanStatus, "user_plan_status"), nullable=False
    )
    remarks: Mapped[Optional[str]] = mapped_column(Text)
    order_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)

    user: Mapped["User"] = relationship("User", back_populates="plan_history", lazy="raise")

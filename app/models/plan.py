"""Catalog models - plans, payment methods and discounts.

Read-mostly reference data edited from the admin back office. Nested
document fields (pricing options, features, payment details, discount
scopes) are stored as JSON strings and parsed in the service layer.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.models import AuditMixin, UUIDMixin, str_enum
from app.models.subscription_enums import DiscountType, PaymentMethodType


class Plan(UUIDMixin, AuditMixin, Base):
    """Purchasable plan with its pricing options and quota features."""

    __tablename__ = "tbl_plans"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # JSON list of {label, price, months, badge}
    pricing_options: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    # JSON list of {text, is_quota, key, limit, period}
    features: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    popular: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_ad_supported: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class PaymentMethod(UUIDMixin, AuditMixin, Base):
    """Enabled payment rail shown at checkout."""

    __tablename__ = "tbl_payment_methods"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[PaymentMethodType] = mapped_column(
        str_enum(PaymentMethodType, "payment_method_type"), nullable=False
    )
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    # JSON object, shape depends on type
    details: Mapped[str] = mapped_column(Text, nullable=False, default="{}")


class Discount(UUIDMixin, AuditMixin, Base):
    """Coupon rule. Codes match case-insensitively; no redemption ledger is kept."""

    __tablename__ = "tbl_discounts"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[Optional[str]] = mapped_column(String(64), index=True)
    type: Mapped[DiscountType] = mapped_column(str_enum(DiscountType, "discount_type"), nullable=False)
    value: Mapped[float] = mapped_column(Float, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    applies_to_all_plans: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    # JSON list of plan ids
    applicable_plan_ids: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    applies_to_all_durations: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    # JSON list of pricing option labels
    applicable_durations: Mapped[str] = mapped_column(Text, nullable=False, default="[]")

    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime)

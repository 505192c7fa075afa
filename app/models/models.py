from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base

if TYPE_CHECKING:
    from app.models.plan import Plan
    from app.models.subscription import UserPlan


def str_enum(enum_cls: type[enum.Enum], name: str) -> Enum:
    """Non-native enum column that stores member values rather than names."""
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        length=32,
        values_callable=lambda members: [m.value for m in members],
    )


class UUIDMixin:
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)


class AuditMixin:
    """Audit fields for admin-edited reference data: created_by, created_date, updated_by, updated_date"""
    created_by: Mapped[Optional[str]] = mapped_column(String(128))
    created_date: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_by: Mapped[Optional[str]] = mapped_column(String(128))
    updated_date: Mapped[Optional[datetime]] = mapped_column(DateTime, onupdate=datetime.utcnow)


class CreatedAtMixin:
    """For tables whose documents carry a createdAt timestamp"""
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)


class User(CreatedAtMixin, Base):
    """User profile keyed by the auth provider's uid.

    plan_id / plan_expiry_date are a denormalized pointer to the user's
    current plan history record and are only written by the subscription
    service.
    """
    __tablename__ = "tbl_users"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    email: Mapped[Optional[str]] = mapped_column(String(320), index=True)
    name: Mapped[Optional[str]] = mapped_column(Text)
    photo_url: Mapped[Optional[str]] = mapped_column(Text)
    email_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    role: Mapped[str] = mapped_column(String(32), default="user", nullable=False)

    plan_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("tbl_plans.id", ondelete="SET NULL")
    )
    plan_expiry_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, onupdate=datetime.utcnow)

    plan: Mapped[Optional["Plan"]] = relationship("Plan", lazy="raise")
    plan_history: Mapped[list["UserPlan"]] = relationship(
        "UserPlan", back_populates="user", lazy="raise", passive_deletes=True
    )


class SiteSetting(Base):
    """Key-value content document (global settings, about/contact copy, team)."""
    __tablename__ = "tbl_settings"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    # value is TEXT in database, storing a JSON object as string
    value: Mapped[str] = mapped_column(Text, nullable=False, default="{}")
    updated_date: Mapped[Optional[datetime]] = mapped_column(DateTime, onupdate=datetime.utcnow)


class Page(Base):
    __tablename__ = "tbl_pages"

    slug: Mapped[str] = mapped_column(String(128), primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    meta_title: Mapped[Optional[str]] = mapped_column(Text)
    meta_description: Mapped[Optional[str]] = mapped_column(Text)


class EmailTemplate(Base):
    __tablename__ = "tbl_email_templates"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    subject: Mapped[str] = mapped_column(Text, nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    is_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

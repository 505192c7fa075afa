"""Support ticket models - contact submissions and their reply log."""

import enum
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.models.models import CreatedAtMixin, UUIDMixin, str_enum


class SubmissionStatus(str, enum.Enum):
    """Ticket status. CLOSED blocks further replies."""

    OPEN = "open"
    REPLIED = "replied"
    IN_PROGRESS = "in-progress"
    CLOSED = "closed"


class ContactSubmission(UUIDMixin, CreatedAtMixin, Base):
    __tablename__ = "tbl_contact_submissions"
    __table_args__ = (
        Index("ix_contact_submissions_user", "user_id"),
        Index("ix_contact_submissions_created", "created_at"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    topic: Mapped[str] = mapped_column(String(128), nullable=False)
    subject: Mapped[str] = mapped_column(Text, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    # JSON object with the topic-specific fields
    details: Mapped[str] = mapped_column(Text, nullable=False, default="{}")

    user_id: Mapped[Optional[str]] = mapped_column(
        String(128), ForeignKey("tbl_users.id", ondelete="SET NULL")
    )
    priority: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    status: Mapped[SubmissionStatus] = mapped_column(
        str_enum(SubmissionStatus, "submission_status"), nullable=False, default=SubmissionStatus.OPEN
    )
    last_replied_at: Mapped[Optional[datetime]] = mapped_column(DateTime)

    replies: Mapped[list["SubmissionReply"]] = relationship(
        "SubmissionReply",
        order_by="SubmissionReply.created_at",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class SubmissionReply(UUIDMixin, CreatedAtMixin, Base):
    __tablename__ = "tbl_submission_replies"
    __table_args__ = (Index("ix_submission_replies_submission", "submission_id", "created_at"),)

    submission_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("tbl_contact_submissions.id", ondelete="CASCADE"), nullable=False
    )
    author_id: Mapped[str] = mapped_column(String(128), nullable=False)
    author_name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)

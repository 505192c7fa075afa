"""Usage records counted against plan quotas.

Counters are never stored; quota usage is derived by counting these rows.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.models import CreatedAtMixin, UUIDMixin


class Bookmark(UUIDMixin, CreatedAtMixin, Base):
    __tablename__ = "tbl_bookmarks"
    __table_args__ = (Index("ix_bookmarks_user_paper", "user_id", "paper_id"),)

    user_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("tbl_users.id", ondelete="CASCADE"), nullable=False
    )
    paper_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("tbl_papers.id", ondelete="CASCADE"), nullable=False
    )
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    removed_at: Mapped[Optional[datetime]] = mapped_column(DateTime)


class Download(UUIDMixin, CreatedAtMixin, Base):
    __tablename__ = "tbl_downloads"
    __table_args__ = (Index("ix_downloads_user_created", "user_id", "created_at"),)

    user_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("tbl_users.id", ondelete="CASCADE"), nullable=False
    )
    paper_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)


class SupportRequest(UUIDMixin, CreatedAtMixin, Base):
    """Priority-support usage record, one per prioritised contact submission."""

    __tablename__ = "tbl_support_requests"
    __table_args__ = (Index("ix_support_requests_user_created", "user_id", "created_at"),)

    user_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("tbl_users.id", ondelete="CASCADE"), nullable=False
    )
    submission_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("tbl_contact_submissions.id", ondelete="CASCADE"), nullable=False
    )

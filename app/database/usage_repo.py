"""Repository layer for usage records counted against plan quotas."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.catalog import Paper
from app.models.usage import Bookmark, Download, SupportRequest


class UsageRepository:
    """Repository for bookmark, download and support request records."""

    @staticmethod
    async def count_active_bookmarks(db: AsyncSession, user_id: str) -> int:
        result = await db.execute(
            select(func.count(Bookmark.id)).where(Bookmark.user_id == user_id, Bookmark.active.is_(True))
        )
        return int(result.scalar() or 0)

    @staticmethod
    async def count_downloads_since(db: AsyncSession, user_id: str, since: datetime) -> int:
        result = await db.execute(
            select(func.count(Download.id)).where(Download.user_id == user_id, Download.created_at >= since)
        )
        return int(result.scalar() or 0)

    @staticmethod
    async def count_support_requests_since(db: AsyncSession, user_id: str, since: datetime) -> int:
        result = await db.execute(
            select(func.count(SupportRequest.id)).where(
                SupportRequest.user_id == user_id, SupportRequest.created_at >= since
            )
        )
        return int(result.scalar() or 0)

    @staticmethod
    async def get_bookmark(db: AsyncSession, user_id: str, paper_id: uuid.UUID) -> Optional[Bookmark]:
        result = await db.execute(
            select(Bookmark)
            .where(Bookmark.user_id == user_id, Bookmark.paper_id == paper_id)
            .order_by(Bookmark.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def list_bookmarked_papers(db: AsyncSession, user_id: str) -> list[Paper]:
        result = await db.execute(
            select(Paper)
            .join(Bookmark, Bookmark.paper_id == Paper.id)
            .where(Bookmark.user_id == user_id, Bookmark.active.is_(True))
            .order_by(Bookmark.created_at.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def add(db: AsyncSession, record: Bookmark | Download | SupportRequest) -> None:
        """Stage a usage record. The caller commits."""
        db.add(record)
        await db.flush()

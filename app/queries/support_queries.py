"""Query layer for support operations - contains raw database queries."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.support import ContactSubmission, SubmissionReply


class SupportQueries:
    """Query layer for contact submission and reply tables."""

    @staticmethod
    async def create_submission(db: AsyncSession, submission: ContactSubmission) -> ContactSubmission:
        """Stage a new contact submission and flush it to obtain its id."""
        db.add(submission)
        await db.flush()
        return submission

    @staticmethod
    async def get_submission_by_id(db: AsyncSession, submission_id: UUID) -> Optional[ContactSubmission]:
        """Get a contact submission by ID, replies included."""
        stmt = select(ContactSubmission).where(ContactSubmission.id == submission_id)
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_submissions_by_user_id(
        db: AsyncSession, user_id: str, limit: int = 100
    ) -> list[ContactSubmission]:
        """Get all submissions of a specific user, newest first."""
        stmt = (
            select(ContactSubmission)
            .where(ContactSubmission.user_id == user_id)
            .order_by(ContactSubmission.created_at.desc())
            .limit(limit)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def get_all_submissions(db: AsyncSession, limit: int = 500) -> list[ContactSubmission]:
        """Get every submission, unread first then newest first."""
        stmt = (
            select(ContactSubmission)
            .order_by(ContactSubmission.is_read.asc(), ContactSubmission.created_at.desc())
            .limit(limit)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def create_reply(
        db: AsyncSession,
        submission: ContactSubmission,
        author_id: str,
        author_name: str,
        is_admin: bool,
        message: str,
    ) -> SubmissionReply:
        """Append a reply to a submission and flush it."""
        reply = SubmissionReply(
            submission_id=submission.id,
            author_id=author_id,
            author_name=author_name,
            is_admin=is_admin,
            message=message,
            created_at=datetime.utcnow(),
        )
        submission.replies.append(reply)
        await db.flush()
        return reply

"""Repository layer for support operations - abstracts data access."""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.support import ContactSubmission, SubmissionReply
from app.queries.support_queries import SupportQueries


class SupportRepository:
    """Repository layer for support data access operations."""

    def __init__(self, db: AsyncSession):
        """Initialize repository with database session."""
        self.db = db

    async def create(self, submission: ContactSubmission) -> ContactSubmission:
        """Stage a new contact submission."""
        return await SupportQueries.create_submission(db=self.db, submission=submission)

    async def get_by_id(self, submission_id: UUID) -> Optional[ContactSubmission]:
        """Get contact submission by ID."""
        return await SupportQueries.get_submission_by_id(db=self.db, submission_id=submission_id)

    async def get_by_user_id(self, user_id: str, limit: int = 100) -> list[ContactSubmission]:
        """Get all submissions of a user."""
        return await SupportQueries.get_submissions_by_user_id(db=self.db, user_id=user_id, limit=limit)

    async def get_all(self, limit: int = 500) -> list[ContactSubmission]:
        """Get every submission for the admin inbox."""
        return await SupportQueries.get_all_submissions(db=self.db, limit=limit)

    async def add_reply(
        self,
        submission: ContactSubmission,
        author_id: str,
        author_name: str,
        is_admin: bool,
        message: str,
    ) -> SubmissionReply:
        """Append a reply to a submission."""
        return await SupportQueries.create_reply(
            db=self.db,
            submission=submission,
            author_id=author_id,
            author_name=author_name,
            is_admin=is_admin,
            message=message,
        )

    async def commit(self) -> None:
        await self.db.commit()

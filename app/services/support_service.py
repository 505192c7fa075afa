"""Service layer for support operations - contains business logic."""

import json
import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.support import ContactSubmission, SubmissionStatus
from app.repositories.support_repository import SupportRepository
from app.schemas.support import (
    TOPIC_DETAIL_FIELDS,
    ContactBase,
    ReplyAck,
    ReplyCommand,
    ReplyResponse,
    SupportResponse,
)
from app.services.usage_service import UsageService
from app.utils.exceptions import ConflictException, ForbiddenException, NotFoundException

logger = logging.getLogger(__name__)


class SupportService:
    """Service layer for support business logic."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db
        self.repository = SupportRepository(db)

    @staticmethod
    def to_response(submission: ContactSubmission) -> SupportResponse:
        return SupportResponse(
            id=submission.id,
            name=submission.name,
            email=submission.email,
            topic=submission.topic,
            subject=submission.subject,
            message=submission.message,
            details=json.loads(submission.details or "{}"),
            user_id=submission.user_id,
            priority=submission.priority,
            is_read=submission.is_read,
            status=submission.status,
            created_at=submission.created_at,
            last_replied_at=submission.last_replied_at,
            replies=[ReplyResponse.model_validate(reply) for reply in submission.replies],
        )

    async def submit_contact_form(self, data: ContactBase, user_id: Optional[str] = None) -> SupportResponse:
        """
        Create a new support ticket.

        Tickets start open and unread. For a signed-in user whose plan
        includes priority support, a support request is recorded against
        the quota and the ticket is flagged priority; a refused quota check
        still files the ticket, just without priority.
        """
        details = {
            field: getattr(data, field)
            for field in TOPIC_DETAIL_FIELDS
            if getattr(data, field, None) is not None
        }
        submission = ContactSubmission(
            name=data.name.strip(),
            email=str(data.email),
            topic=data.topic,
            subject=data.subject.strip(),
            message=data.message.strip(),
            details=json.dumps(details),
            user_id=user_id,
            priority=False,
            is_read=False,
            status=SubmissionStatus.OPEN,
            created_at=datetime.utcnow(),
            replies=[],
        )
        submission = await self.repository.create(submission)

        if user_id:
            quota = await UsageService.record_priority_support(self.db, user_id, submission.id)
            if quota.success:
                submission.priority = True
            else:
                logger.info(f"Ticket {submission.id} filed without priority: {quota.message}")

        await self.repository.commit()
        logger.info(f"Support ticket created: id={submission.id}, topic={submission.topic}")
        return self.to_response(submission)

    async def _get_submission(self, submission_id: UUID) -> ContactSubmission:
        submission = await self.repository.get_by_id(submission_id)
        if submission is None:
            raise NotFoundException(f"Support ticket {submission_id} not found")
        return submission

    async def get_user_submission(self, submission_id: UUID, user_id: str) -> SupportResponse:
        """Owner view of a ticket."""
        submission = await self._get_submission(submission_id)
        if submission.user_id != user_id:
            raise ForbiddenException("You do not have access to this support ticket")
        return self.to_response(submission)

    async def get_admin_submission(self, submission_id: UUID) -> SupportResponse:
        """Admin view of a ticket; the first view marks it read."""
        submission = await self._get_submission(submission_id)
        if not submission.is_read:
            submission.is_read = True
            await self.repository.commit()
        return self.to_response(submission)

    async def get_user_submissions(self, user_id: str, limit: int = 100) -> list[SupportResponse]:
        """Get all tickets of a user."""
        return [self.to_response(s) for s in await self.repository.get_by_user_id(user_id, limit)]

    async def get_all_submissions(self) -> list[SupportResponse]:
        return [self.to_response(s) for s in await self.repository.get_all()]

    async def add_reply(
        self,
        submission_id: UUID,
        command: ReplyCommand,
        author_id: str,
        author_name: str,
        is_admin: bool,
    ) -> ReplyAck:
        """
        Append a reply and move the ticket accordingly.

        An admin reply marks the ticket replied and read; a reply from the
        ticket owner reopens it and marks it unread. Closed tickets take no
        replies. The acknowledgement carries the caller's client_ref, the
        stored reply and the resulting status.

        Raises:
            NotFoundException: Ticket does not exist
            ForbiddenException: A non-admin replying to someone else's ticket
            ConflictException: Ticket is closed
        """
        submission = await self._get_submission(submission_id)
        if not is_admin and submission.user_id != author_id:
            raise ForbiddenException("You do not have access to this support ticket")
        if submission.status == SubmissionStatus.CLOSED:
            raise ConflictException("This ticket is closed and no longer accepts replies")

        reply = await self.repository.add_reply(
            submission,
            author_id=author_id,
            author_name=author_name,
            is_admin=is_admin,
            message=command.message.strip(),
        )
        if is_admin:
            submission.status = SubmissionStatus.REPLIED
            submission.is_read = True
        else:
            submission.status = SubmissionStatus.OPEN
            submission.is_read = False
        submission.last_replied_at = reply.created_at
        await self.repository.commit()

        return ReplyAck(
            client_ref=command.client_ref,
            reply=ReplyResponse.model_validate(reply),
            status=submission.status,
        )

    async def set_status(self, submission_id: UUID, status: SubmissionStatus) -> SupportResponse:
        """Admin override of the ticket status; allowed from any status."""
        submission = await self._get_submission(submission_id)
        submission.status = status
        await self.repository.commit()
        return self.to_response(submission)

    async def mark_read(self, submission_id: UUID, is_read: bool) -> SupportResponse:
        submission = await self._get_submission(submission_id)
        submission.is_read = is_read
        await self.repository.commit()
        return self.to_response(submission)

"""Support contact schemas."""

import uuid
from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, EmailStr, Field, RootModel

from app.models.support import SubmissionStatus

GENERAL_TOPICS = (
    "General Inquiry",
    "Issue with my Account",
    "Issue with Generating Test",
    "Feedback & Suggestions",
    "Other",
)
PAPER_ISSUE_TOPICS = (
    "Issue with a Test/Result",
    "Issue with Downloading Paper",
    "Irrelevant Paper Category",
)


class ContactBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=255, description="Full name of the user")
    email: EmailStr
    subject: str = Field(..., min_length=5, max_length=255)
    message: str = Field(..., min_length=10, max_length=5000)


class GeneralContact(ContactBase):
    topic: Literal[GENERAL_TOPICS]  # type: ignore[valid-type]


class BugReportContact(ContactBase):
    topic: Literal["Report a Bug"]
    page_url: Optional[str] = Field(None, max_length=2048)


class PaperRequestContact(ContactBase):
    topic: Literal["Request a Paper"]
    paper_title: str = Field(..., min_length=2, max_length=255)
    year: Optional[int] = Field(None, ge=1900, le=2100)


class PaperIssueContact(ContactBase):
    topic: Literal[PAPER_ISSUE_TOPICS]  # type: ignore[valid-type]
    reference: str = Field(..., min_length=1, max_length=255, description="Paper or test reference")


ContactCreateRequest = Annotated[
    Union[GeneralContact, BugReportContact, PaperRequestContact, PaperIssueContact],
    Field(discriminator="topic"),
]


class ContactSubmissionRequest(RootModel[ContactCreateRequest]):
    """Request body of the contact form; the topic selects the variant."""


TOPIC_DETAIL_FIELDS = ("page_url", "paper_title", "year", "reference")


class ReplyCommand(BaseModel):
    """Reply to a ticket. client_ref is echoed back so the caller can reconcile."""

    message: str = Field(..., min_length=1, max_length=5000)
    client_ref: Optional[str] = Field(None, max_length=128)


class ReplyResponse(BaseModel):
    id: uuid.UUID
    submission_id: uuid.UUID
    author_id: str
    author_name: str
    is_admin: bool
    message: str
    created_at: datetime

    class Config:
        from_attributes = True


class ReplyAck(BaseModel):
    client_ref: Optional[str] = None
    reply: ReplyResponse
    status: SubmissionStatus


class SubmissionStatusUpdate(BaseModel):
    status: SubmissionStatus


class SubmissionReadUpdate(BaseModel):
    is_read: bool


class SupportResponse(BaseModel):
    """Support ticket with its replies in creation order."""

    id: uuid.UUID
    name: str
    email: str
    topic: str
    subject: str
    message: str
    details: dict = Field(default_factory=dict)
    user_id: Optional[str] = None
    priority: bool
    is_read: bool
    status: SubmissionStatus
    created_at: datetime
    last_replied_at: Optional[datetime] = None
    replies: list[ReplyResponse] = Field(default_factory=list)

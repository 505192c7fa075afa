import uuid

from fastapi import APIRouter, status

from app.api.deps import DB, AdminSession, CurrentSession, OptionalSession
from app.schemas.support import (
    ContactSubmissionRequest,
    ReplyCommand,
    SubmissionReadUpdate,
    SubmissionStatusUpdate,
)
from app.services.support_service import SupportService
from app.utils.envelopes import api_success

router = APIRouter(tags=["support"])


@router.post("/support/contact", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_support_contact(
    payload: ContactSubmissionRequest,
    session: OptionalSession,
    db: DB,
):
    """Create a new support ticket. Signed-in callers get it linked to their profile."""
    support_service = SupportService(db)
    ticket = await support_service.submit_contact_form(payload.root, user_id=session.uid if session else None)
    return api_success(ticket)


@router.get("/support/tickets", response_model=dict)
async def list_my_tickets(session: CurrentSession, db: DB):
    return api_success(await SupportService(db).get_user_submissions(session.uid))


@router.get("/support/tickets/{submission_id}", response_model=dict)
async def get_my_ticket(submission_id: uuid.UUID, session: CurrentSession, db: DB):
    return api_success(await SupportService(db).get_user_submission(submission_id, session.uid))


@router.post("/support/tickets/{submission_id}/replies", response_model=dict, status_code=status.HTTP_201_CREATED)
async def reply_to_my_ticket(
    submission_id: uuid.UUID,
    payload: ReplyCommand,
    session: CurrentSession,
    db: DB,
):
    ack = await SupportService(db).add_reply(
        submission_id,
        payload,
        author_id=session.uid,
        author_name=session.display_name,
        is_admin=False,
    )
    return api_success(ack)


@router.get("/admin/support", response_model=dict)
async def admin_list_tickets(session: AdminSession, db: DB):
    """All tickets, unread first then newest first."""
    return api_success(await SupportService(db).get_all_submissions())


@router.get("/admin/support/{submission_id}", response_model=dict)
async def admin_get_ticket(submission_id: uuid.UUID, session: AdminSession, db: DB):
    return api_success(await SupportService(db).get_admin_submission(submission_id))


@router.post("/admin/support/{submission_id}/replies", response_model=dict, status_code=status.HTTP_201_CREATED)
async def admin_reply_to_ticket(
    submission_id: uuid.UUID,
    payload: ReplyCommand,
    session: AdminSession,
    db: DB,
):
    ack = await SupportService(db).add_reply(
        submission_id,
        payload,
        author_id=session.uid,
        author_name=session.display_name,
        is_admin=True,
    )
    return api_success(ack)


@router.patch("/admin/support/{submission_id}/status", response_model=dict)
async def admin_set_ticket_status(
    submission_id: uuid.UUID,
    payload: SubmissionStatusUpdate,
    session: AdminSession,
    db: DB,
):
    return api_success(await SupportService(db).set_status(submission_id, payload.status))


@router.patch("/admin/support/{submission_id}/read", response_model=dict)
async def admin_mark_ticket_read(
    submission_id: uuid.UUID,
    payload: SubmissionReadUpdate,
    session: AdminSession,
    db: DB,
):
    return api_success(await SupportService(db).mark_read(submission_id, payload.is_read))

"""Bookmark and download routes, checked against the plan's quotas."""

import uuid

from fastapi import APIRouter

from app.api.deps import DB, CurrentSession
from app.services.usage_service import UsageService
from app.utils.envelopes import api_success

router = APIRouter(tags=["usage"])


@router.get("/bookmarks", response_model=dict)
async def list_my_bookmarks(session: CurrentSession, db: DB):
    return api_success(await UsageService.list_user_bookmarks(db, session.uid))


@router.post("/papers/{paper_id}/bookmark", response_model=dict)
async def toggle_bookmark(paper_id: uuid.UUID, session: CurrentSession, db: DB):
    """Bookmark a paper, or remove the bookmark if it is already set.

    A refused quota check is not an error: the result carries success=false
    and the message to show.
    """
    return api_success(await UsageService.toggle_bookmark(db, session.uid, paper_id))


@router.post("/papers/{paper_id}/download", response_model=dict)
async def record_download(paper_id: uuid.UUID, session: CurrentSession, db: DB):
    return api_success(await UsageService.record_download(db, session.uid, paper_id))

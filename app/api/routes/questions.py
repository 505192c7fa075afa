"""Question bank routes (admin only)."""

import uuid
from typing import Optional

from fastapi import APIRouter, Query, status

from app.api.deps import DB, AdminSession
from app.schemas.catalog import QuestionCreate, QuestionUpdate
from app.services.question_service import QuestionService
from app.utils.envelopes import api_success

router = APIRouter(prefix="/admin/questions", tags=["questions"])


@router.get("", response_model=dict)
async def list_questions(
    session: AdminSession,
    db: DB,
    question_category_id: Optional[uuid.UUID] = Query(None, description="Includes subcategories"),
):
    return api_success(await QuestionService.list_questions(db, question_category_id))


@router.get("/{question_id}", response_model=dict)
async def get_question(question_id: uuid.UUID, session: AdminSession, db: DB):
    return api_success(await QuestionService.get_question(db, question_id))


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_question(payload: QuestionCreate, session: AdminSession, db: DB):
    return api_success(await QuestionService.create_question(db, payload, actor_id=session.uid))


@router.patch("/{question_id}", response_model=dict)
async def update_question(question_id: uuid.UUID, payload: QuestionUpdate, session: AdminSession, db: DB):
    return api_success(await QuestionService.update_question(db, question_id, payload, actor_id=session.uid))


@router.delete("/{question_id}", response_model=dict)
async def delete_question(question_id: uuid.UUID, session: AdminSession, db: DB):
    """Delete a bank question and unlink it from every paper."""
    removed_links = await QuestionService.delete_question(db, question_id)
    return api_success({"deleted": True, "id": str(question_id), "removed_links": removed_links})

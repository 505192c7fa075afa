"""Paper routes: public browsing and admin management of papers and their questions."""

import uuid
from typing import Optional

from fastapi import APIRouter, Query, status

from app.api.deps import DB, AdminSession, OptionalSession
from app.schemas.catalog import (
    PaperCreate,
    PaperQuestionsAdd,
    PaperQuestionsRemove,
    PaperUpdate,
    QuestionOrderUpdate,
)
from app.services.paper_service import PaperService
from app.utils.envelopes import api_success
from app.utils.exceptions import NotFoundException

router = APIRouter(tags=["papers"])


@router.get("/papers", response_model=dict)
async def list_papers(
    db: DB,
    category_id: Optional[uuid.UUID] = Query(None, description="Includes subcategories"),
):
    """Published papers, featured first."""
    return api_success(await PaperService.list_papers(db, category_id, published_only=True))


@router.get("/papers/by-slug/{slug}", response_model=dict)
async def get_paper_by_slug(slug: str, db: DB, session: OptionalSession):
    include_unpublished = bool(session and session.is_admin)
    return api_success(await PaperService.get_paper_by_slug(db, slug, include_unpublished))


@router.get("/papers/{paper_id}", response_model=dict)
async def get_paper(paper_id: uuid.UUID, db: DB, session: OptionalSession):
    paper = await PaperService.get_paper(db, paper_id)
    if not paper.published and not (session and session.is_admin):
        raise NotFoundException(f"Paper {paper_id} not found")
    return api_success(paper)


@router.get("/admin/papers", response_model=dict)
async def admin_list_papers(
    session: AdminSession,
    db: DB,
    category_id: Optional[uuid.UUID] = Query(None),
    published_only: bool = Query(False),
):
    return api_success(await PaperService.list_papers(db, category_id, published_only))


@router.post("/admin/papers", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_paper(payload: PaperCreate, session: AdminSession, db: DB):
    return api_success(await PaperService.create_paper(db, payload, actor_id=session.uid))


@router.patch("/admin/papers/{paper_id}", response_model=dict)
async def update_paper(paper_id: uuid.UUID, payload: PaperUpdate, session: AdminSession, db: DB):
    return api_success(await PaperService.update_paper(db, paper_id, payload, actor_id=session.uid))


@router.delete("/admin/papers/{paper_id}", response_model=dict)
async def delete_paper(paper_id: uuid.UUID, session: AdminSession, db: DB):
    await PaperService.delete_paper(db, paper_id)
    return api_success({"deleted": True, "id": str(paper_id)})


@router.post("/admin/papers/{paper_id}/duplicate", response_model=dict, status_code=status.HTTP_201_CREATED)
async def duplicate_paper(paper_id: uuid.UUID, session: AdminSession, db: DB):
    return api_success(await PaperService.duplicate_paper(db, paper_id, actor_id=session.uid))


@router.get("/admin/papers/{paper_id}/questions", response_model=dict)
async def get_paper_questions(paper_id: uuid.UUID, session: AdminSession, db: DB):
    return api_success(await PaperService.fetch_questions_for_paper(db, paper_id))


@router.post("/admin/papers/{paper_id}/questions", response_model=dict)
async def add_paper_questions(paper_id: uuid.UUID, payload: PaperQuestionsAdd, session: AdminSession, db: DB):
    """Link bank questions and/or create new ones, appended after the last question."""
    return api_success(await PaperService.add_questions_batch(db, paper_id, payload, actor_id=session.uid))


@router.put("/admin/papers/{paper_id}/questions/order", response_model=dict)
async def reorder_paper_questions(
    paper_id: uuid.UUID, payload: QuestionOrderUpdate, session: AdminSession, db: DB
):
    return api_success(await PaperService.batch_update_question_order(db, paper_id, payload))


@router.post("/admin/papers/{paper_id}/questions/remove", response_model=dict)
async def remove_paper_questions(
    paper_id: uuid.UUID, payload: PaperQuestionsRemove, session: AdminSession, db: DB
):
    removed = await PaperService.remove_questions_from_paper(db, paper_id, payload.link_ids)
    return api_success({"removed": removed})


@router.post("/admin/papers/{paper_id}/questions/copy-from/{source_paper_id}", response_model=dict)
async def copy_paper_questions(
    paper_id: uuid.UUID, source_paper_id: uuid.UUID, session: AdminSession, db: DB
):
    """Append another paper's questions to this one."""
    return api_success(await PaperService.copy_paper_questions(db, source_paper_id, paper_id))


@router.patch("/admin/papers/{paper_id}/links/{link_id}", response_model=dict)
async def move_paper_question(
    paper_id: uuid.UUID,
    link_id: uuid.UUID,
    session: AdminSession,
    db: DB,
    order: int = Query(..., ge=0),
):
    return api_success(await PaperService.update_question_order(db, paper_id, link_id, order))


@router.post("/admin/papers/{paper_id}/questions/{question_id}", response_model=dict)
async def add_paper_question(paper_id: uuid.UUID, question_id: uuid.UUID, session: AdminSession, db: DB):
    return api_success(await PaperService.add_question_to_paper(db, paper_id, question_id))

"""Paper category and question category routes."""

import uuid

from fastapi import APIRouter, status

from app.api.deps import DB, AdminSession
from app.schemas.catalog import (
    CategoryCreate,
    CategoryUpdate,
    QuestionCategoryCreate,
    QuestionCategoryUpdate,
)
from app.services.category_service import CategoryService, QuestionCategoryService
from app.utils.envelopes import api_success

router = APIRouter(tags=["categories"])


@router.get("/categories", response_model=dict)
async def get_category_tree(db: DB):
    """Nested categories with full slug paths, featured roots first."""
    return api_success(await CategoryService.fetch_category_tree(db))


@router.get("/categories/flat", response_model=dict)
async def get_flat_categories(db: DB):
    return api_success(await CategoryService.get_flattened_categories(db))


@router.get("/categories/by-slug/{full_slug:path}", response_model=dict)
async def get_category_by_slug(full_slug: str, db: DB):
    return api_success(await CategoryService.get_category_by_slug(db, full_slug))


@router.get("/categories/{category_id}", response_model=dict)
async def get_category(category_id: uuid.UUID, db: DB):
    return api_success(await CategoryService.get_category(db, category_id))


@router.get("/categories/{category_id}/path", response_model=dict)
async def get_category_path(category_id: uuid.UUID, db: DB):
    """Breadcrumb from the root category down to this one."""
    return api_success(await CategoryService.get_category_path(db, category_id))


@router.post("/admin/categories", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_category(payload: CategoryCreate, session: AdminSession, db: DB):
    return api_success(await CategoryService.create_category(db, payload, actor_id=session.uid))


@router.patch("/admin/categories/{category_id}", response_model=dict)
async def update_category(category_id: uuid.UUID, payload: CategoryUpdate, session: AdminSession, db: DB):
    return api_success(await CategoryService.update_category(db, category_id, payload, actor_id=session.uid))


@router.delete("/admin/categories/{category_id}", response_model=dict)
async def delete_category(category_id: uuid.UUID, session: AdminSession, db: DB):
    await CategoryService.delete_category(db, category_id)
    return api_success({"deleted": True, "id": str(category_id)})


@router.get("/admin/question-categories", response_model=dict)
async def get_question_category_tree(session: AdminSession, db: DB):
    return api_success(await QuestionCategoryService.fetch_tree(db))


@router.get("/admin/question-categories/flat", response_model=dict)
async def get_flat_question_categories(session: AdminSession, db: DB):
    return api_success(await QuestionCategoryService.get_flattened(db))


@router.post("/admin/question-categories", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_question_category(payload: QuestionCategoryCreate, session: AdminSession, db: DB):
    return api_success(await QuestionCategoryService.create(db, payload, actor_id=session.uid))


@router.patch("/admin/question-categories/{category_id}", response_model=dict)
async def update_question_category(
    category_id: uuid.UUID, payload: QuestionCategoryUpdate, session: AdminSession, db: DB
):
    return api_success(await QuestionCategoryService.update(db, category_id, payload, actor_id=session.uid))


@router.delete("/admin/question-categories/{category_id}", response_model=dict)
async def delete_question_category(category_id: uuid.UUID, session: AdminSession, db: DB):
    await QuestionCategoryService.delete(db, category_id)
    return api_success({"deleted": True, "id": str(category_id)})

"""Plan catalog routes."""

import uuid

from fastapi import APIRouter, status

from app.api.deps import DB, AdminSession, OptionalSession
from app.schemas.plans import PlanCreate, PlanUpdate
from app.services.plan_service import PlanService
from app.utils.envelopes import api_success
from app.utils.exceptions import NotFoundException

router = APIRouter(tags=["plans"])


@router.get("/plans", response_model=dict)
async def list_published_plans(db: DB):
    """Published plans, cheapest first."""
    return api_success(await PlanService.list_plans(db, published_only=True))


@router.get("/plans/{plan_id}", response_model=dict)
async def get_plan(plan_id: uuid.UUID, db: DB, session: OptionalSession):
    plan = await PlanService.get_plan(db, plan_id)
    if not plan.published and not (session and session.is_admin):
        raise NotFoundException(f"Plan {plan_id} not found")
    return api_success(plan)


@router.get("/admin/plans", response_model=dict)
async def admin_list_plans(db: DB, session: AdminSession):
    return api_success(await PlanService.list_plans(db))


@router.post("/admin/plans", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_plan(payload: PlanCreate, db: DB, session: AdminSession):
    return api_success(await PlanService.create_plan(db, payload, actor_id=session.uid))


@router.patch("/admin/plans/{plan_id}", response_model=dict)
async def update_plan(plan_id: uuid.UUID, payload: PlanUpdate, db: DB, session: AdminSession):
    return api_success(await PlanService.update_plan(db, plan_id, payload, actor_id=session.uid))


@router.delete("/admin/plans/{plan_id}", response_model=dict)
async def delete_plan(plan_id: uuid.UUID, db: DB, session: AdminSession):
    await PlanService.delete_plan(db, plan_id)
    return api_success({"deleted": True, "id": str(plan_id)})


@router.post("/admin/plans/{plan_id}/duplicate", response_model=dict, status_code=status.HTTP_201_CREATED)
async def duplicate_plan(plan_id: uuid.UUID, db: DB, session: AdminSession):
    """Copy a plan as an unpublished draft."""
    return api_success(await PlanService.duplicate_plan(db, plan_id, actor_id=session.uid))

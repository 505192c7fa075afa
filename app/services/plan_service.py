"""Service layer for the plan catalog.

Plans keep their pricing options and features as JSON text; this module
is the only place that parses or serialises them.
"""

import json
import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.database.plan_repo import PlanRepository
from app.models.plan import Plan
from app.schemas.plans import PlanCreate, PlanFeature, PlanResponse, PlanUpdate, PricingOption
from app.utils.exceptions import NotFoundException


class PlanService:
    """Service for plan business logic."""

    @staticmethod
    def parse_pricing_options(plan: Plan) -> list[PricingOption]:
        raw = json.loads(plan.pricing_options) if plan.pricing_options else []
        return [PricingOption.model_validate(item) for item in raw]

    @staticmethod
    def parse_features(plan: Plan) -> list[PlanFeature]:
        raw = json.loads(plan.features) if plan.features else []
        return [PlanFeature.model_validate(item) for item in raw]

    @staticmethod
    def quota_features(plan: Plan) -> list[PlanFeature]:
        return [feature for feature in PlanService.parse_features(plan) if feature.is_quota]

    @staticmethod
    def find_pricing_option(plan: Plan, label: Optional[str]) -> Optional[PricingOption]:
        """Return the plan's pricing option with this label, if any."""
        if not label:
            return None
        for option in PlanService.parse_pricing_options(plan):
            if option.label == label:
                return option
        return None

    @staticmethod
    def to_response(plan: Plan) -> PlanResponse:
        return PlanResponse(
            id=plan.id,
            name=plan.name,
            description=plan.description or "",
            pricing_options=PlanService.parse_pricing_options(plan),
            features=PlanService.parse_features(plan),
            published=plan.published,
            popular=plan.popular,
            is_ad_supported=plan.is_ad_supported,
            created_date=plan.created_date,
            updated_date=plan.updated_date,
        )

    @staticmethod
    def _sort_price(plan: PlanResponse) -> float:
        # Price of the option with the fewest months; lifetime (0) counts as shortest
        options = sorted(plan.pricing_options, key=lambda option: option.months)
        return options[0].price if options else 0.0

    @staticmethod
    async def list_plans(db: AsyncSession, published_only: bool = False) -> list[PlanResponse]:
        """
        List plans sorted ascending by the price of their shortest option.

        Args:
            db: Database session
            published_only: Hide unpublished plans (public pricing page)

        Returns:
            Sorted plan responses
        """
        plans = [PlanService.to_response(plan) for plan in await PlanRepository.list_plans(db, published_only)]
        return sorted(plans, key=PlanService._sort_price)

    @staticmethod
    async def get_plan_model(db: AsyncSession, plan_id: uuid.UUID) -> Plan:
        plan = await PlanRepository.get_plan(db, plan_id)
        if plan is None:
            raise NotFoundException(f"Plan {plan_id} not found")
        return plan

    @staticmethod
    async def get_plan(db: AsyncSession, plan_id: uuid.UUID) -> PlanResponse:
        return PlanService.to_response(await PlanService.get_plan_model(db, plan_id))

    @staticmethod
    async def create_plan(db: AsyncSession, data: PlanCreate, actor_id: Optional[str] = None) -> PlanResponse:
        plan = Plan(
            name=data.name,
            description=data.description,
            pricing_options=json.dumps([option.model_dump(mode="json") for option in data.pricing_options]),
            features=json.dumps([feature.model_dump(mode="json") for feature in data.features]),
            published=data.published,
            popular=data.popular,
            is_ad_supported=data.is_ad_supported,
            created_by=actor_id,
        )
        plan = await PlanRepository.create_plan(db, plan)
        return PlanService.to_response(plan)

    @staticmethod
    async def update_plan(
        db: AsyncSession, plan_id: uuid.UUID, data: PlanUpdate, actor_id: Optional[str] = None
    ) -> PlanResponse:
        plan = await PlanService.get_plan_model(db, plan_id)
        changes = data.model_dump(exclude_unset=True)
        if "pricing_options" in changes and data.pricing_options is not None:
            plan.pricing_options = json.dumps([option.model_dump(mode="json") for option in data.pricing_options])
        if "features" in changes and data.features is not None:
            plan.features = json.dumps([feature.model_dump(mode="json") for feature in data.features])
        for field in ("name", "description", "published", "popular", "is_ad_supported"):
            if field in changes and changes[field] is not None:
                setattr(plan, field, changes[field])
        plan.updated_by = actor_id
        plan = await PlanRepository.update_plan(db, plan)
        return PlanService.to_response(plan)

    @staticmethod
    async def delete_plan(db: AsyncSession, plan_id: uuid.UUID) -> None:
        plan = await PlanService.get_plan_model(db, plan_id)
        await PlanRepository.delete_plan(db, plan)

    @staticmethod
    async def duplicate_plan(db: AsyncSession, plan_id: uuid.UUID, actor_id: Optional[str] = None) -> PlanResponse:
        """Copy a plan as an unpublished, non-popular "<name> (Copy)"."""
        source = await PlanService.get_plan_model(db, plan_id)
        copy = Plan(
            name=f"{source.name} (Copy)",
            description=source.description,
            pricing_options=source.pricing_options,
            features=source.features,
            published=False,
            popular=False,
            is_ad_supported=source.is_ad_supported,
            created_by=actor_id,
        )
        copy = await PlanRepository.create_plan(db, copy)
        return PlanService.to_response(copy)

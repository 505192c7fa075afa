"""Service layer for user profiles."""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.database.plan_repo import PlanRepository
from app.database.user_repo import UserRepository
from app.models.models import User
from app.schemas.subscriptions import SubscriptionChangeOptions
from app.schemas.users import ProfileUpdate, UserResponse
from app.services.subscription_service import SubscriptionService
from app.utils.exceptions import NotFoundException

logger = logging.getLogger(__name__)


class UserService:
    """Service for user profile business logic."""

    @staticmethod
    async def ensure_user_profile(
        db: AsyncSession,
        uid: str,
        email: Optional[str] = None,
        name: Optional[str] = None,
        photo_url: Optional[str] = None,
        email_verified: bool = False,
    ) -> User:
        """
        Return the profile for an authenticated identity, creating it on first sight.

        A new profile is put on the default plan (lifetime) through the
        normal plan change, so its history starts with a current record.
        An existing profile is returned untouched.

        Args:
            db: Database session
            uid: Auth provider uid
            email: Email claim
            name: Display name claim
            photo_url: Avatar claim
            email_verified: Email verified claim

        Returns:
            The User row
        """
        user = await UserRepository.get_user(db, uid)
        if user is not None:
            return user

        try:
            await UserRepository.add_user(
                db,
                User(id=uid, email=email, name=name, photo_url=photo_url, email_verified=email_verified),
            )
            default_plan = await PlanRepository.get_plan_by_name(db, settings.DEFAULT_PLAN_NAME)
            if default_plan is not None:
                await SubscriptionService.change_subscription(
                    db,
                    uid,
                    default_plan.id,
                    SubscriptionChangeOptions(remarks="Default plan assigned on sign up."),
                    commit=False,
                )
            else:
                logger.warning(f"Default plan '{settings.DEFAULT_PLAN_NAME}' not found; profile {uid} created without a plan")
            await db.commit()
        except IntegrityError:
            # Another request provisioned the same uid first
            await db.rollback()
            logger.info(f"Profile {uid} was created concurrently")

        user = await UserRepository.get_user(db, uid)
        if user is None:
            raise NotFoundException(f"User profile {uid} not found")
        logger.info(f"Profile ready: user_id={uid}, plan_id={user.plan_id}")
        return user

    @staticmethod
    async def get_user_model(db: AsyncSession, user_id: str) -> User:
        user = await UserRepository.get_user(db, user_id)
        if user is None:
            raise NotFoundException(f"User profile {user_id} not found")
        return user

    @staticmethod
    async def get_user(db: AsyncSession, user_id: str) -> UserResponse:
        return UserResponse.model_validate(await UserService.get_user_model(db, user_id))

    @staticmethod
    async def list_users(db: AsyncSession) -> list[UserResponse]:
        return [UserResponse.model_validate(user) for user in await UserRepository.list_users(db)]

    @staticmethod
    async def update_profile(db: AsyncSession, user_id: str, data: ProfileUpdate) -> UserResponse:
        user = await UserService.get_user_model(db, user_id)
        if data.name is not None:
            user.name = data.name
        if data.photo_url is not None:
            user.photo_url = data.photo_url
        await db.commit()
        await db.refresh(user)
        return UserResponse.model_validate(user)

    @staticmethod
    async def set_role(db: AsyncSession, user_id: str, role: str) -> UserResponse:
        user = await UserService.get_user_model(db, user_id)
        user.role = role
        await db.commit()
        await db.refresh(user)
        logger.info(f"Role updated: user_id={user_id}, role={role}")
        return UserResponse.model_validate(user)

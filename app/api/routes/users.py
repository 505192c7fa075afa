from datetime import datetime

from fastapi import APIRouter

from app.api.deps import DB, AdminSession, CurrentSession
from app.schemas.users import ProfileUpdate, RoleUpdate, UserResponse
from app.services.email_service import EmailService
from app.services.user_service import UserService
from app.utils.envelopes import api_success

router = APIRouter(tags=["users"])


@router.get("/users/me", response_model=dict)
async def get_current_user_endpoint(session: CurrentSession):
    return api_success(UserResponse.model_validate(session.user))


@router.patch("/users/me", response_model=dict)
async def update_current_user_endpoint(payload: ProfileUpdate, session: CurrentSession, db: DB):
    return api_success(await UserService.update_profile(db, session.uid, payload))


@router.post("/account/password-changed", response_model=dict)
async def password_changed(session: CurrentSession, db: DB):
    """Send the password-changed confirmation after the auth provider accepted a new password."""
    sent = await EmailService.send_email(
        db,
        "password-changed",
        session.user.email or session.email,
        {
            "userName": session.display_name,
            "changedAt": datetime.utcnow().strftime("%B %d, %Y %H:%M UTC"),
        },
    )
    return api_success({"sent": sent})


@router.get("/admin/users", response_model=dict)
async def admin_list_users(session: AdminSession, db: DB):
    return api_success(await UserService.list_users(db))


@router.get("/admin/users/{user_id}", response_model=dict)
async def admin_get_user(user_id: str, session: AdminSession, db: DB):
    return api_success(await UserService.get_user(db, user_id))


@router.patch("/admin/users/{user_id}/role", response_model=dict)
async def admin_set_role(user_id: str, payload: RoleUpdate, session: AdminSession, db: DB):
    return api_success(await UserService.set_role(db, user_id, payload.role))

"""FastAPI dependencies for authentication and database sessions."""

from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db import get_db
from app.core.security import decode_access_token
from app.models.models import User
from app.services.user_service import UserService
from app.utils.exceptions import ForbiddenException, UnauthorizedException

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class SessionContext:
    """Caller identity resolved from the bearer token, passed explicitly to handlers."""

    uid: str
    name: Optional[str]
    email: Optional[str]
    email_verified: bool
    user: User

    @property
    def is_admin(self) -> bool:
        return self.user.role == settings.ADMIN_ROLE

    @property
    def display_name(self) -> str:
        return self.user.name or self.name or self.email or "User"


async def get_session_context(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SessionContext:
    """Resolve the caller from the bearer token, provisioning the profile on first sight."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthorizedException("Not authenticated")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise UnauthorizedException("Could not validate credentials")

    uid: Optional[str] = payload.get("sub")
    if not uid:
        raise UnauthorizedException("Could not validate credentials")

    user = await UserService.ensure_user_profile(
        db,
        uid,
        email=payload.get("email"),
        name=payload.get("name"),
        photo_url=payload.get("picture"),
        email_verified=bool(payload.get("email_verified", False)),
    )
    return SessionContext(
        uid=uid,
        name=payload.get("name"),
        email=payload.get("email"),
        email_verified=bool(payload.get("email_verified", False)),
        user=user,
    )


async def get_optional_session_context(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Optional[SessionContext]:
    """Session for routes that also serve anonymous callers. An invalid token is still an error."""
    if credentials is None:
        return None
    return await get_session_context(credentials, db)


async def require_admin(
    session: Annotated[SessionContext, Depends(get_session_context)],
) -> SessionContext:
    if not session.is_admin:
        raise ForbiddenException("Admin access required")
    return session


# Convenience type aliases
DB = Annotated[AsyncSession, Depends(get_db)]
CurrentSession = Annotated[SessionContext, Depends(get_session_context)]
OptionalSession = Annotated[Optional[SessionContext], Depends(get_optional_session_context)]
AdminSession = Annotated[SessionContext, Depends(require_admin)]

from datetime import datetime, timezone
from typing import Annotated, Callable

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from signage_scheduler.core import security
from signage_scheduler.core.errors import ForbiddenError
from signage_scheduler.core.security import PlayerIdentity, UserIdentity
from signage_scheduler.services.resolver import ScheduleResolver

bearer_scheme = HTTPBearer(auto_error=False)

BearerCredentials = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(credentials: BearerCredentials) -> UserIdentity:
    if credentials is None:
        raise _unauthorized("No authentication token provided")
    identity = security.decode_access_token(credentials.credentials)
    if identity is None:
        raise _unauthorized("Invalid authentication token")
    return identity


async def get_current_player(credentials: BearerCredentials) -> PlayerIdentity:
    if credentials is None:
        raise _unauthorized("No player authentication token provided")
    identity = security.decode_player_token(credentials.credentials)
    if identity is None:
        raise _unauthorized("Invalid player authentication token")
    return identity


def require_roles(*roles: str) -> Callable[..., UserIdentity]:
    async def _dependency(user: Annotated[UserIdentity, Depends(get_current_user)]) -> UserIdentity:
        if user.role not in roles:
            raise ForbiddenError(f"Role {user.role} may not perform this action")
        return user

    return _dependency


def get_schedule_resolver(request: Request) -> ScheduleResolver:
    return request.app.state.schedule_resolver


def get_now() -> datetime:
    return datetime.now(timezone.utc)


CurrentUser = Annotated[UserIdentity, Depends(get_current_user)]
ScheduleEditor = Annotated[UserIdentity, Depends(require_roles("Admin", "SiteManager"))]
ScheduleAdmin = Annotated[UserIdentity, Depends(require_roles("Admin"))]
CurrentPlayer = Annotated[PlayerIdentity, Depends(get_current_player)]
Resolver = Annotated[ScheduleResolver, Depends(get_schedule_resolver)]
Now = Annotated[datetime, Depends(get_now)]

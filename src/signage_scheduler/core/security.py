from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from signage_scheduler.core.config import get_settings

USER_ROLES = ("Admin", "Editor", "Viewer", "SiteManager")


@dataclass(frozen=True)
class UserIdentity:
    user_id: int
    customer_id: int
    role: str


@dataclass(frozen=True)
class PlayerIdentity:
    player_id: int
    site_id: int
    customer_id: int
    player_name: str | None = None


def _encode(claims: Dict[str, Any], *, secret_key: str, expires_delta: timedelta) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {**claims, "iat": int(now.timestamp()), "exp": int((now + expires_delta).timestamp())}
    return jwt.encode(payload, secret_key, algorithm=settings.jwt_algorithm)


def _decode(token: str, *, secret_key: str) -> Optional[Dict[str, Any]]:
    settings = get_settings()
    try:
        return jwt.decode(token, secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def create_access_token(
    *, user_id: int, customer_id: int, role: str, expires_delta: timedelta | None = None
) -> str:
    settings = get_settings()
    expires_delta = expires_delta or timedelta(minutes=settings.jwt_access_token_expires_minutes)
    claims = {"sub": str(user_id), "userId": user_id, "customerId": customer_id, "role": role}
    return _encode(claims, secret_key=settings.jwt_secret_key, expires_delta=expires_delta)


def decode_access_token(token: str) -> Optional[UserIdentity]:
    payload = _decode(token, secret_key=get_settings().jwt_secret_key)
    if not payload:
        return None
    try:
        identity = UserIdentity(
            user_id=int(payload["userId"]),
            customer_id=int(payload["customerId"]),
            role=str(payload["role"]),
        )
    except (KeyError, TypeError, ValueError):
        return None
    return identity if identity.role in USER_ROLES else None


def create_player_token(
    *,
    player_id: int,
    site_id: int,
    customer_id: int,
    player_name: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Issue a player token.

    Device activation lives in the player provisioning service; this helper
    exists for seeding and tests.
    """
    settings = get_settings()
    expires_delta = expires_delta or timedelta(days=settings.player_jwt_expires_days)
    claims = {
        "playerId": player_id,
        "siteId": site_id,
        "customerId": customer_id,
        "playerName": player_name,
    }
    return _encode(claims, secret_key=settings.player_jwt_secret_key, expires_delta=expires_delta)


def decode_player_token(token: str) -> Optional[PlayerIdentity]:
    payload = _decode(token, secret_key=get_settings().player_jwt_secret_key)
    if not payload:
        return None
    try:
        return PlayerIdentity(
            player_id=int(payload["playerId"]),
            site_id=int(payload["siteId"]),
            customer_id=int(payload["customerId"]),
            player_name=payload.get("playerName"),
        )
    except (KeyError, TypeError, ValueError):
        return None

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from signage_scheduler.api.deps import CurrentPlayer, Now, Resolver
from signage_scheduler.core.config import Settings, get_settings
from signage_scheduler.core.errors import ErrorCode, ForbiddenError, NotFoundError
from signage_scheduler.db.session import get_db_session
from signage_scheduler.repositories import layout as layout_repo
from signage_scheduler.repositories import player as player_repo
from signage_scheduler.schemas.player_device import LayoutRead, PlayerScheduleRead
from signage_scheduler.schemas.schedule import ScheduleRead
from signage_scheduler.services.assignments import PlayerContext
from signage_scheduler.services.retry import call_store
from signage_scheduler.services.timezones import resolve_time_zone

router = APIRouter()


@router.get("/{player_id}/schedule", response_model=PlayerScheduleRead)
async def get_player_schedule(
    player_id: int,
    player: CurrentPlayer,
    resolver: Resolver,
    now: Now,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> PlayerScheduleRead:
    """Return the schedule and layout the player has to display right now."""
    if player.player_id != player_id:
        raise ForbiddenError("Token was not issued for this player", code=ErrorCode.PLAYER_MISMATCH)

    store_limits = {
        "timeout_seconds": settings.repository_timeout_seconds,
        "retry_after": max(1, round(settings.repository_retry_backoff_max_seconds)),
    }

    device = await call_store(
        player_repo.get_player(session, player_id, player.customer_id), what="Player", **store_limits
    )
    if not device:
        raise NotFoundError("Player not found", code=ErrorCode.PLAYER_NOT_FOUND)

    zone = resolve_time_zone(
        settings.schedule_time_zone_source,
        site_time_zone=device.site.time_zone,
        customer_time_zone=device.site.customer.time_zone,
        default=settings.default_time_zone,
    )
    context = PlayerContext(
        player_id=device.player_id,
        site_id=device.site_id,
        customer_id=player.customer_id,
        time_zone=zone,
    )
    resolved = await resolver.resolve(context, now)
    if resolved is None:
        raise NotFoundError(
            "No active schedule found for this player",
            code=ErrorCode.NO_ACTIVE_SCHEDULE,
            retry_after=settings.no_schedule_retry_after_seconds,
        )

    layout = await call_store(
        layout_repo.find_layout_with_layers(session, resolved.schedule.layout_id, player.customer_id),
        what="Layout",
        **store_limits,
    )
    if not layout:
        raise NotFoundError("Layout not found", code=ErrorCode.LAYOUT_NOT_FOUND)

    return PlayerScheduleRead(
        schedule=ScheduleRead.model_validate(resolved.schedule),
        layout=LayoutRead.model_validate(layout),
        matched_assignment_type=resolved.assignment_type,
        evaluated_at=now,
        time_zone=str(zone),
    )

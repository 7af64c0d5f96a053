import logging
import math
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from signage_scheduler.api.deps import CurrentUser, ScheduleAdmin, ScheduleEditor
from signage_scheduler.core.errors import ErrorCode, NotFoundError, ScheduleValidationError
from signage_scheduler.db.models.schedule import AssignmentType, Schedule
from signage_scheduler.db.session import get_db_session
from signage_scheduler.repositories import layout as layout_repo
from signage_scheduler.repositories import player as player_repo
from signage_scheduler.repositories import schedule as schedule_repo
from signage_scheduler.schemas.schedule import (
    Pagination,
    ScheduleAssignmentCreate,
    ScheduleAssignmentRead,
    ScheduleCreate,
    ScheduleDetailRead,
    SchedulePage,
    ScheduleRead,
    ScheduleUpdate,
    validate_schedule_window,
)

logger = logging.getLogger(__name__)

router = APIRouter()

Session = Annotated[AsyncSession, Depends(get_db_session)]


async def _get_schedule_or_404(session: AsyncSession, schedule_id: int, customer_id: int) -> Schedule:
    schedule = await schedule_repo.get_schedule(session, schedule_id, customer_id)
    if not schedule:
        raise NotFoundError("Schedule not found", code=ErrorCode.SCHEDULE_NOT_FOUND)
    return schedule


async def _ensure_layout(session: AsyncSession, layout_id: int, customer_id: int) -> None:
    if not await layout_repo.get_layout(session, layout_id, customer_id):
        raise NotFoundError("Layout not found", code=ErrorCode.LAYOUT_NOT_FOUND)


async def _ensure_target_owned(
    session: AsyncSession, payload: ScheduleAssignmentCreate, customer_id: int
) -> None:
    if payload.assignment_type is AssignmentType.CUSTOMER:
        if payload.target_customer_id != customer_id:
            raise ScheduleValidationError(
                "Can only assign to own customer", code=ErrorCode.INVALID_ASSIGNMENT
            )
    elif payload.assignment_type is AssignmentType.SITE:
        if not await player_repo.get_site(session, payload.target_id, customer_id):
            raise NotFoundError("Site not found", code=ErrorCode.SITE_NOT_FOUND)
    elif not await player_repo.get_player(session, payload.target_id, customer_id):
        raise NotFoundError("Player not found", code=ErrorCode.PLAYER_NOT_FOUND)


@router.get("", response_model=SchedulePage)
async def list_schedules(
    user: CurrentUser,
    session: Session,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    search: str | None = None,
    is_active: bool | None = None,
    layout_id: int | None = None,
) -> SchedulePage:
    filters = {"is_active": is_active, "layout_id": layout_id, "search": search}
    schedules = await schedule_repo.list_schedules(
        session, user.customer_id, limit=limit, offset=(page - 1) * limit, **filters
    )
    total = await schedule_repo.count_schedules(session, user.customer_id, **filters)
    return SchedulePage(
        data=[ScheduleRead.model_validate(schedule) for schedule in schedules],
        pagination=Pagination(page=page, limit=limit, total=total, total_pages=math.ceil(total / limit)),
    )


@router.get("/{schedule_id}", response_model=ScheduleDetailRead)
async def get_schedule(schedule_id: int, user: CurrentUser, session: Session) -> ScheduleDetailRead:
    schedule = await _get_schedule_or_404(session, schedule_id, user.customer_id)
    return ScheduleDetailRead.model_validate(schedule)


@router.post("", response_model=ScheduleRead, status_code=status.HTTP_201_CREATED)
async def create_schedule(payload: ScheduleCreate, user: ScheduleEditor, session: Session) -> ScheduleRead:
    await _ensure_layout(session, payload.layout_id, user.customer_id)
    schedule = await schedule_repo.create_schedule(session, user.customer_id, user.user_id, payload)
    await session.commit()
    logger.info("Created schedule %s for customer %s", schedule.schedule_id, user.customer_id)
    return ScheduleRead.model_validate(schedule)


@router.patch("/{schedule_id}", response_model=ScheduleRead)
async def update_schedule(
    schedule_id: int, payload: ScheduleUpdate, user: ScheduleEditor, session: Session
) -> ScheduleRead:
    schedule = await _get_schedule_or_404(session, schedule_id, user.customer_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("layout_id") not in (None, schedule.layout_id):
        await _ensure_layout(session, changes["layout_id"], user.customer_id)
    for required in ("name", "layout_id", "priority", "is_active"):
        if required in changes and changes[required] is None:
            raise ScheduleValidationError(f"{required} cannot be null")
    try:
        validate_schedule_window(
            start_date=changes.get("start_date", schedule.start_date),
            end_date=changes.get("end_date", schedule.end_date),
            start_time=changes.get("start_time", schedule.start_time),
            end_time=changes.get("end_time", schedule.end_time),
        )
    except ValueError as exc:
        raise ScheduleValidationError(str(exc)) from exc

    schedule = await schedule_repo.update_schedule(session, schedule, payload)
    await session.commit()
    logger.info("Updated schedule %s", schedule_id)
    return ScheduleRead.model_validate(schedule)


@router.delete("/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_schedule(schedule_id: int, user: ScheduleAdmin, session: Session) -> None:
    schedule = await _get_schedule_or_404(session, schedule_id, user.customer_id)
    await schedule_repo.delete_schedule(session, schedule)
    await session.commit()
    logger.info("Deleted schedule %s", schedule_id)


@router.post(
    "/{schedule_id}/assignments",
    response_model=ScheduleAssignmentRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_assignment(
    schedule_id: int,
    payload: ScheduleAssignmentCreate,
    user: ScheduleEditor,
    session: Session,
) -> ScheduleAssignmentRead:
    schedule = await _get_schedule_or_404(session, schedule_id, user.customer_id)
    await _ensure_target_owned(session, payload, user.customer_id)
    assignment = await schedule_repo.create_assignment(session, schedule.schedule_id, payload)
    await session.commit()
    logger.info(
        "Created %s assignment %s for schedule %s",
        payload.assignment_type.value,
        assignment.assignment_id,
        schedule_id,
    )
    return ScheduleAssignmentRead.model_validate(assignment)


@router.delete("/{schedule_id}/assignments/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_assignment(
    schedule_id: int, assignment_id: int, user: ScheduleEditor, session: Session
) -> None:
    await _get_schedule_or_404(session, schedule_id, user.customer_id)
    assignment = await schedule_repo.get_assignment(session, schedule_id, assignment_id)
    if not assignment:
        raise NotFoundError("Schedule assignment not found", code=ErrorCode.ASSIGNMENT_NOT_FOUND)
    await schedule_repo.delete_assignment(session, assignment)
    await session.commit()
    logger.info("Deleted assignment %s from schedule %s", assignment_id, schedule_id)

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload
from sqlalchemy.sql import Select

from signage_scheduler.db.models.schedule import Schedule, ScheduleAssignment
from signage_scheduler.schemas.schedule import (
    ScheduleAssignmentCreate,
    ScheduleCreate,
    ScheduleUpdate,
)
from signage_scheduler.services.resolver import CandidateRows
from signage_scheduler.services.time_window import format_weekdays


def _filtered(
    query: Select,
    *,
    is_active: bool | None,
    layout_id: int | None,
    search: str | None,
) -> Select:
    if is_active is not None:
        query = query.where(Schedule.is_active.is_(is_active))
    if layout_id is not None:
        query = query.where(Schedule.layout_id == layout_id)
    if search:
        query = query.where(Schedule.name.ilike(f"%{search}%"))
    return query


async def list_schedules(
    session: AsyncSession,
    customer_id: int,
    *,
    is_active: bool | None = None,
    layout_id: int | None = None,
    search: str | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> list[Schedule]:
    query = _filtered(
        select(Schedule).where(Schedule.customer_id == customer_id),
        is_active=is_active,
        layout_id=layout_id,
        search=search,
    ).order_by(Schedule.priority.desc(), Schedule.name.asc(), Schedule.schedule_id.asc())
    if limit is not None:
        query = query.offset(offset).limit(limit)
    result = await session.execute(query)
    return list(result.scalars().all())


async def count_schedules(
    session: AsyncSession,
    customer_id: int,
    *,
    is_active: bool | None = None,
    layout_id: int | None = None,
    search: str | None = None,
) -> int:
    query = _filtered(
        select(func.count(Schedule.schedule_id)).where(Schedule.customer_id == customer_id),
        is_active=is_active,
        layout_id=layout_id,
        search=search,
    )
    result = await session.execute(query)
    return result.scalar_one()


async def get_schedule(session: AsyncSession, schedule_id: int, customer_id: int) -> Schedule | None:
    result = await session.execute(
        select(Schedule)
        .where(Schedule.schedule_id == schedule_id)
        .where(Schedule.customer_id == customer_id)
        .options(selectinload(Schedule.assignments))
    )
    return result.scalars().first()


async def create_schedule(
    session: AsyncSession, customer_id: int, created_by: int, payload: ScheduleCreate
) -> Schedule:
    data = payload.model_dump(exclude={"days_of_week"})
    schedule = Schedule(
        customer_id=customer_id,
        created_by=created_by,
        days_of_week=format_weekdays(payload.days_of_week),
        **data,
    )
    session.add(schedule)
    await session.flush()
    await session.refresh(schedule)
    return schedule


async def update_schedule(session: AsyncSession, schedule: Schedule, payload: ScheduleUpdate) -> Schedule:
    data = payload.model_dump(exclude_unset=True)
    for field, value in data.items():
        if field == "days_of_week":
            value = format_weekdays(value)
        setattr(schedule, field, value)
    schedule.updated_at = func.now()
    await session.flush()
    await session.refresh(schedule)
    return schedule


async def delete_schedule(session: AsyncSession, schedule: Schedule) -> None:
    await session.delete(schedule)


async def list_active_schedules_with_assignments(
    session: AsyncSession, customer_id: int
) -> list[Schedule]:
    # Temporal filtering happens in the resolver, not in SQL.
    result = await session.execute(
        select(Schedule)
        .where(Schedule.customer_id == customer_id)
        .where(Schedule.is_active.is_(True))
        .options(selectinload(Schedule.assignments))
        .order_by(Schedule.schedule_id.asc())
    )
    return list(result.scalars().all())


async def get_assignment(
    session: AsyncSession, schedule_id: int, assignment_id: int
) -> ScheduleAssignment | None:
    result = await session.execute(
        select(ScheduleAssignment)
        .where(ScheduleAssignment.schedule_id == schedule_id)
        .where(ScheduleAssignment.assignment_id == assignment_id)
    )
    return result.scalars().first()


async def create_assignment(
    session: AsyncSession, schedule_id: int, payload: ScheduleAssignmentCreate
) -> ScheduleAssignment:
    assignment = ScheduleAssignment(
        schedule_id=schedule_id,
        assignment_type=payload.assignment_type.value,
        target_customer_id=payload.target_customer_id,
        target_site_id=payload.target_site_id,
        target_player_id=payload.target_player_id,
    )
    session.add(assignment)
    await session.flush()
    await session.refresh(assignment)
    return assignment


async def delete_assignment(session: AsyncSession, assignment: ScheduleAssignment) -> None:
    await session.delete(assignment)


class SqlAlchemyCandidateRepository:
    """Candidate source for the resolver; each call uses its own short-lived session."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_active_schedules_with_assignments(self, customer_id: int) -> CandidateRows:
        async with self._session_factory() as session:
            schedules = await list_active_schedules_with_assignments(session, customer_id)
            return [(schedule, list(schedule.assignments)) for schedule in schedules]

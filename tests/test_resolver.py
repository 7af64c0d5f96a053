from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

import pytest

from signage_scheduler.db.models import AssignmentType
from signage_scheduler.services.assignments import PlayerContext
from signage_scheduler.services.resolver import ScheduleResolver, localize

from .factories import make_assignment, make_schedule

CONTEXT = PlayerContext(player_id=42, site_id=7, customer_id=1)
MONDAY_10 = datetime(2025, 1, 6, 10, 0)
TUESDAY_10 = datetime(2025, 1, 7, 10, 0)


class FakeRepository:
    def __init__(self, rows) -> None:
        self.rows = rows
        self.requested: list[int] = []

    async def find_active_schedules_with_assignments(self, customer_id: int):
        self.requested.append(customer_id)
        return self.rows


def _resolver(*entries) -> ScheduleResolver:
    rows = [(schedule, assignments) for schedule, assignments in entries]
    return ScheduleResolver(FakeRepository(rows))


def _schedule_a():
    schedule = make_schedule(1, priority=10)
    return schedule, [make_assignment(1, AssignmentType.PLAYER, 42)]


def _schedule_b():
    schedule = make_schedule(2, priority=50, days_of_week="Mon")
    return schedule, [make_assignment(2, AssignmentType.CUSTOMER, 1)]


def _schedule_c():
    schedule = make_schedule(3, priority=100, start_date=date(2025, 1, 1), end_date=date(2025, 1, 31))
    return schedule, [make_assignment(3, AssignmentType.SITE, 7)]


@pytest.mark.anyio("asyncio")
async def test_day_filter_lets_lower_priority_player_schedule_win() -> None:
    resolved = await _resolver(_schedule_a(), _schedule_b()).resolve(CONTEXT, TUESDAY_10)
    assert resolved is not None
    assert resolved.schedule.schedule_id == 1
    assert resolved.assignment_type is AssignmentType.PLAYER


@pytest.mark.anyio("asyncio")
async def test_higher_priority_wins_when_both_active() -> None:
    resolved = await _resolver(_schedule_a(), _schedule_b()).resolve(CONTEXT, MONDAY_10)
    assert resolved is not None
    assert resolved.schedule.schedule_id == 2
    assert resolved.assignment_type is AssignmentType.CUSTOMER


@pytest.mark.anyio("asyncio")
async def test_customer_wide_schedule_resolves_on_its_day() -> None:
    resolved = await _resolver(_schedule_b()).resolve(CONTEXT, MONDAY_10)
    assert resolved is not None
    assert resolved.schedule.schedule_id == 2


@pytest.mark.anyio("asyncio")
async def test_elapsed_date_window_excludes_highest_priority() -> None:
    resolver = _resolver(_schedule_c(), _schedule_b())
    assert await resolver.resolve(CONTEXT, datetime(2025, 2, 1, 10, 0)) is None

    resolved = await resolver.resolve(CONTEXT, datetime(2025, 1, 31, 10, 0))
    assert resolved is not None
    assert resolved.schedule.schedule_id == 3


@pytest.mark.anyio("asyncio")
async def test_unassigned_schedule_never_matches() -> None:
    lonely = make_schedule(9, priority=100)
    other_player = make_schedule(10, priority=100)
    resolver = _resolver(
        (lonely, []),
        (other_player, [make_assignment(10, AssignmentType.PLAYER, 43)]),
    )
    assert await resolver.resolve(CONTEXT, MONDAY_10) is None


@pytest.mark.anyio("asyncio")
async def test_player_assignment_beats_customer_at_equal_priority() -> None:
    customer_wide = make_schedule(1, priority=50)
    player_specific = make_schedule(2, priority=50)
    resolver = _resolver(
        (customer_wide, [make_assignment(1, AssignmentType.CUSTOMER, 1)]),
        (player_specific, [make_assignment(2, AssignmentType.PLAYER, 42)]),
    )
    resolved = await resolver.resolve(CONTEXT, MONDAY_10)
    assert resolved is not None
    assert resolved.schedule.schedule_id == 2
    assert resolved.assignment_type is AssignmentType.PLAYER


@pytest.mark.anyio("asyncio")
async def test_site_assignment_beats_customer_at_equal_priority() -> None:
    resolver = _resolver(
        (make_schedule(1), [make_assignment(1, AssignmentType.CUSTOMER, 1)]),
        (make_schedule(2), [make_assignment(2, AssignmentType.SITE, 7)]),
    )
    resolved = await resolver.resolve(CONTEXT, MONDAY_10)
    assert resolved is not None
    assert resolved.assignment_type is AssignmentType.SITE


@pytest.mark.anyio("asyncio")
async def test_schedule_uses_its_most_specific_matching_assignment() -> None:
    schedule = make_schedule(1)
    assignments = [
        make_assignment(1, AssignmentType.CUSTOMER, 1, assignment_id=1),
        make_assignment(1, AssignmentType.PLAYER, 42, assignment_id=2),
    ]
    resolver = _resolver(
        (schedule, assignments),
        (make_schedule(2), [make_assignment(2, AssignmentType.SITE, 7)]),
    )
    resolved = await resolver.resolve(CONTEXT, MONDAY_10)
    assert resolved is not None
    assert resolved.schedule.schedule_id == 1
    assert resolved.assignment_type is AssignmentType.PLAYER


@pytest.mark.anyio("asyncio")
async def test_lowest_schedule_id_breaks_full_ties_repeatably() -> None:
    entries = [
        (make_schedule(schedule_id), [make_assignment(schedule_id, AssignmentType.SITE, 7)])
        for schedule_id in (17, 4, 11)
    ]
    for ordering in (entries, entries[::-1]):
        resolved = await _resolver(*ordering).resolve(CONTEXT, MONDAY_10)
        assert resolved is not None
        assert resolved.schedule.schedule_id == 4


@pytest.mark.anyio("asyncio")
async def test_inactive_and_foreign_schedules_are_skipped() -> None:
    inactive = make_schedule(1, priority=90, is_active=False)
    foreign = make_schedule(2, priority=90, customer_id=2)
    fallback = make_schedule(3, priority=1)
    repository = FakeRepository(
        [
            (inactive, [make_assignment(1, AssignmentType.PLAYER, 42)]),
            (foreign, [make_assignment(2, AssignmentType.PLAYER, 42)]),
            (fallback, [make_assignment(3, AssignmentType.CUSTOMER, 1)]),
        ]
    )
    resolved = await ScheduleResolver(repository).resolve(CONTEXT, MONDAY_10)
    assert resolved is not None
    assert resolved.schedule.schedule_id == 3
    assert repository.requested == [1]


@pytest.mark.anyio("asyncio")
async def test_malformed_assignment_does_not_match() -> None:
    schedule = make_schedule(1)
    broken = make_assignment(1, AssignmentType.SITE, 7)
    broken.target_player_id = 42
    assert await _resolver((schedule, [broken])).resolve(CONTEXT, MONDAY_10) is None


@pytest.mark.anyio("asyncio")
async def test_overnight_schedule_resolves_after_midnight() -> None:
    night = make_schedule(1, priority=80, start_time=time(22, 0), end_time=time(6, 0))
    day = make_schedule(2, priority=10)
    resolver = _resolver(
        (night, [make_assignment(1, AssignmentType.PLAYER, 42)]),
        (day, [make_assignment(2, AssignmentType.CUSTOMER, 1)]),
    )
    assert (await resolver.resolve(CONTEXT, datetime(2025, 1, 7, 2, 0))).schedule.schedule_id == 1
    assert (await resolver.resolve(CONTEXT, datetime(2025, 1, 6, 23, 0))).schedule.schedule_id == 1
    assert (await resolver.resolve(CONTEXT, datetime(2025, 1, 6, 12, 0))).schedule.schedule_id == 2


@pytest.mark.anyio("asyncio")
async def test_windows_are_evaluated_in_player_time_zone() -> None:
    breakfast = make_schedule(1, start_time=time(8, 0), end_time=time(9, 0))
    resolver = _resolver((breakfast, [make_assignment(1, AssignmentType.SITE, 7)]))
    zurich = PlayerContext(player_id=42, site_id=7, customer_id=1, time_zone=ZoneInfo("Europe/Zurich"))
    instant = datetime(2025, 1, 6, 7, 30, tzinfo=timezone.utc)

    assert await resolver.resolve(zurich, instant) is not None
    assert await resolver.resolve(CONTEXT, instant) is None


def test_localize_keeps_naive_instants() -> None:
    zurich = PlayerContext(player_id=42, site_id=7, customer_id=1, time_zone=ZoneInfo("Europe/Zurich"))
    assert localize(MONDAY_10, zurich) == MONDAY_10
    aware = datetime(2025, 1, 6, 23, 30, tzinfo=timezone.utc)
    assert localize(aware, zurich).day == 7


@pytest.mark.anyio("asyncio")
async def test_unreadable_day_filter_does_not_outrank_fallback() -> None:
    saturday_only = make_schedule(1, priority=90, days_of_week="Saturday;Sunday")
    fallback = make_schedule(2, priority=10)
    resolver = _resolver(
        (saturday_only, [make_assignment(1, AssignmentType.PLAYER, 42)]),
        (fallback, [make_assignment(2, AssignmentType.CUSTOMER, 1)]),
    )
    resolved = await resolver.resolve(CONTEXT, MONDAY_10)
    assert resolved is not None
    assert resolved.schedule.schedule_id == 2

"""Activity windows of schedules: date range, daily clock range and weekdays."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from signage_scheduler.db.models.schedule import Schedule

logger = logging.getLogger(__name__)

WEEKDAY_CODES: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_WEEKDAY_NAMES: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)
_WEEKDAY_INDEX: dict[str, int] = {
    **{code.lower(): index for index, code in enumerate(WEEKDAY_CODES)},
    **{name: index for index, name in enumerate(_WEEKDAY_NAMES)},
}


@dataclass(frozen=True)
class ScheduleWindow:
    start_date: date | None = None
    end_date: date | None = None
    start_time: time | None = None
    end_time: time | None = None
    # datetime.weekday() values; None means every day, empty means no day at all
    weekdays: frozenset[int] | None = None

    @property
    def has_clock_bounds(self) -> bool:
        return self.start_time is not None and self.end_time is not None

    @property
    def crosses_midnight(self) -> bool:
        return self.has_clock_bounds and self.start_time > self.end_time  # type: ignore[operator]


def parse_weekdays(value: str | Iterable[str] | None) -> frozenset[int] | None:
    """Turn ``"Mon,Wed"`` or ``["Mon", "Wed"]`` into weekday indices.

    Codes and full day names match case-insensitively. ``None`` means the
    value carries no day filter. Unknown codes are dropped with a warning; when
    none of the given codes is valid the result is an empty set, so the
    schedule is never active rather than active every day.
    """

    if value is None:
        return None
    raw_codes = value.split(",") if isinstance(value, str) else value
    codes = [raw.strip() for raw in raw_codes if raw and raw.strip()]
    if not codes:
        return None

    weekdays: set[int] = set()
    for code in codes:
        index = _WEEKDAY_INDEX.get(code.lower())
        if index is None:
            logger.warning("Ignoring unknown weekday code %r in %r", code, value)
            continue
        weekdays.add(index)
    if not weekdays:
        logger.warning("No valid weekday in %r; schedule will never be active", value)
    return frozenset(weekdays)


def format_weekdays(codes: Iterable[str] | None) -> str | None:
    """Serialise weekday codes in calendar order, as stored in ``DaysOfWeek``."""

    if not codes:
        return None
    unique = {code.strip() for code in codes if code and code.strip()}
    ordered = [code for code in WEEKDAY_CODES if code in unique]
    return ",".join(ordered) or None


def window_for(schedule: "Schedule") -> ScheduleWindow:
    return ScheduleWindow(
        start_date=schedule.start_date,
        end_date=schedule.end_date,
        start_time=schedule.start_time,
        end_time=schedule.end_time,
        weekdays=parse_weekdays(schedule.days_of_week),
    )


def is_active_at(window: ScheduleWindow, instant: datetime) -> bool:
    """Return whether *instant* falls inside *window*.

    The wall-clock fields of *instant* are used as-is; callers localise the
    instant into the zone the schedule is expressed in beforehand.
    """

    day = instant.date()
    if window.start_date is not None and day < window.start_date:
        return False
    if window.end_date is not None and day > window.end_date:
        return False

    if window.weekdays is not None and instant.weekday() not in window.weekdays:
        return False

    # A single clock bound is ambiguous and treated as unbounded.
    if not window.has_clock_bounds:
        return True

    clock = instant.time().replace(microsecond=0)
    start, end = window.start_time, window.end_time
    if window.crosses_midnight:
        return clock >= start or clock <= end  # type: ignore[operator]
    return start <= clock <= end  # type: ignore[operator]


__all__ = [
    "ScheduleWindow",
    "WEEKDAY_CODES",
    "format_weekdays",
    "is_active_at",
    "parse_weekdays",
    "window_for",
]

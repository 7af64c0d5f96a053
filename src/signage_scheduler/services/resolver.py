"""Selects the single schedule a player has to display at a given instant.

Resolution steps:

1. fetch every active schedule of the player's customer together with its
   assignments from a :class:`CandidateRepository`;
2. keep the schedules with at least one assignment that applies to the player,
   remembering the most specific matching level (player > site > customer);
3. keep the schedules whose activity window contains the instant, evaluated in
   the player's time zone;
4. order the survivors by priority (high first), matched specificity (high
   first) and schedule id (low first) and return the first one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Protocol, Sequence

from signage_scheduler.db.models.schedule import AssignmentType
from signage_scheduler.services.assignments import (
    SPECIFICITY,
    PlayerContext,
    assignment_from_row,
    most_specific_match,
)
from signage_scheduler.services.time_window import is_active_at, window_for

if TYPE_CHECKING:
    from signage_scheduler.db.models.schedule import Schedule, ScheduleAssignment

logger = logging.getLogger(__name__)

CandidateRows = Sequence[tuple["Schedule", Sequence["ScheduleAssignment"]]]


class CandidateRepository(Protocol):
    async def find_active_schedules_with_assignments(self, customer_id: int) -> CandidateRows:
        """Return active schedules of *customer_id* paired with their assignments."""
        ...


@dataclass(frozen=True)
class ResolvedSchedule:
    schedule: "Schedule"
    assignment_type: AssignmentType


@dataclass(frozen=True)
class _Candidate:
    schedule: "Schedule"
    assignment_type: AssignmentType

    @property
    def sort_key(self) -> tuple[int, int, int]:
        return (
            -self.schedule.priority,
            -SPECIFICITY[self.assignment_type],
            self.schedule.schedule_id,
        )


def localize(instant: datetime, context: PlayerContext) -> datetime:
    """Express *instant* in the player's zone; naive instants are taken as local."""

    if context.time_zone is None or instant.tzinfo is None:
        return instant
    return instant.astimezone(context.time_zone)


class ScheduleResolver:
    def __init__(self, repository: CandidateRepository) -> None:
        self._repository = repository

    async def resolve(self, context: PlayerContext, instant: datetime) -> ResolvedSchedule | None:
        rows = await self._repository.find_active_schedules_with_assignments(context.customer_id)
        local_instant = localize(instant, context)

        candidates: list[_Candidate] = []
        for schedule, assignment_rows in rows:
            if schedule.customer_id != context.customer_id:
                logger.warning(
                    "Schedule %s of customer %s returned for customer %s; ignoring",
                    schedule.schedule_id,
                    schedule.customer_id,
                    context.customer_id,
                )
                continue
            if not schedule.is_active:
                continue

            targets = [target for target in map(assignment_from_row, assignment_rows) if target]
            matched_type = most_specific_match(targets, context)
            if matched_type is None:
                continue
            if not is_active_at(window_for(schedule), local_instant):
                continue
            candidates.append(_Candidate(schedule=schedule, assignment_type=matched_type))

        if not candidates:
            logger.debug(
                "No active schedule for player %s at %s", context.player_id, local_instant.isoformat()
            )
            return None

        winner = min(candidates, key=lambda candidate: candidate.sort_key)
        logger.debug(
            "Player %s resolved to schedule %s via %s assignment (%d candidates)",
            context.player_id,
            winner.schedule.schedule_id,
            winner.assignment_type.value,
            len(candidates),
        )
        return ResolvedSchedule(schedule=winner.schedule, assignment_type=winner.assignment_type)


__all__ = ["CandidateRepository", "CandidateRows", "ResolvedSchedule", "ScheduleResolver", "localize"]

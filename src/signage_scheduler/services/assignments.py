"""Assignment targets in the customer / site / player hierarchy."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import tzinfo
from typing import TYPE_CHECKING, ClassVar, Iterable, Union

from signage_scheduler.db.models.schedule import AssignmentType

if TYPE_CHECKING:
    from signage_scheduler.db.models.schedule import ScheduleAssignment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayerContext:
    """Authenticated player identity a resolution is performed for."""

    player_id: int
    site_id: int
    customer_id: int
    # Zone the schedule windows are evaluated in; None keeps the instant's own clock.
    time_zone: tzinfo | None = None


@dataclass(frozen=True)
class CustomerTarget:
    customer_id: int
    assignment_type: ClassVar[AssignmentType] = AssignmentType.CUSTOMER


@dataclass(frozen=True)
class SiteTarget:
    site_id: int
    assignment_type: ClassVar[AssignmentType] = AssignmentType.SITE


@dataclass(frozen=True)
class PlayerTarget:
    player_id: int
    assignment_type: ClassVar[AssignmentType] = AssignmentType.PLAYER


AssignmentTarget = Union[CustomerTarget, SiteTarget, PlayerTarget]

# Higher is more specific.
SPECIFICITY: dict[AssignmentType, int] = {
    AssignmentType.CUSTOMER: 1,
    AssignmentType.SITE: 2,
    AssignmentType.PLAYER: 3,
}


def assignment_from_row(row: "ScheduleAssignment") -> AssignmentTarget | None:
    """Convert a stored assignment row into its target.

    Rows whose type and populated target columns disagree are a data-integrity
    anomaly: they are logged and yield ``None``.
    """

    targets = {
        AssignmentType.CUSTOMER.value: row.target_customer_id,
        AssignmentType.SITE.value: row.target_site_id,
        AssignmentType.PLAYER.value: row.target_player_id,
    }
    populated = {key for key, value in targets.items() if value is not None}
    if row.assignment_type not in targets or populated != {row.assignment_type}:
        logger.warning(
            "Skipping malformed assignment %s on schedule %s (type=%r, targets=%s)",
            row.assignment_id,
            row.schedule_id,
            row.assignment_type,
            sorted(populated),
        )
        return None

    target_id = targets[row.assignment_type]
    if row.assignment_type == AssignmentType.CUSTOMER.value:
        return CustomerTarget(customer_id=target_id)
    if row.assignment_type == AssignmentType.SITE.value:
        return SiteTarget(site_id=target_id)
    return PlayerTarget(player_id=target_id)


def matches(assignment: AssignmentTarget, context: PlayerContext) -> bool:
    if isinstance(assignment, PlayerTarget):
        return assignment.player_id == context.player_id
    if isinstance(assignment, SiteTarget):
        return assignment.site_id == context.site_id
    if isinstance(assignment, CustomerTarget):
        return assignment.customer_id == context.customer_id
    logger.warning("Unsupported assignment target %r", assignment)
    return False


def most_specific_match(
    assignments: Iterable[AssignmentTarget], context: PlayerContext
) -> AssignmentType | None:
    """Return the most specific assignment type that applies to *context*."""

    best: AssignmentType | None = None
    for assignment in assignments:
        if not matches(assignment, context):
            continue
        if best is None or SPECIFICITY[assignment.assignment_type] > SPECIFICITY[best]:
            best = assignment.assignment_type
    return best


__all__ = [
    "AssignmentTarget",
    "CustomerTarget",
    "PlayerContext",
    "PlayerTarget",
    "SPECIFICITY",
    "SiteTarget",
    "assignment_from_row",
    "matches",
    "most_specific_match",
]

from .layout import Layout, LayoutLayer
from .schedule import AssignmentType, Schedule, ScheduleAssignment
from .tenant import Customer, Player, Site

__all__ = [
    "AssignmentType",
    "Customer",
    "Layout",
    "LayoutLayer",
    "Player",
    "Schedule",
    "ScheduleAssignment",
    "Site",
]

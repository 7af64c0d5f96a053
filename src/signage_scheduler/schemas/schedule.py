from datetime import date, datetime, time
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from signage_scheduler.db.models.schedule import AssignmentType

DayCode = Literal["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

ASSIGNMENT_TARGET_FIELDS: dict[AssignmentType, str] = {
    AssignmentType.CUSTOMER: "target_customer_id",
    AssignmentType.SITE: "target_site_id",
    AssignmentType.PLAYER: "target_player_id",
}


def validate_schedule_window(
    *,
    start_date: date | None,
    end_date: date | None,
    start_time: time | None,
    end_time: time | None,
) -> None:
    """Raise ``ValueError`` for windows that cannot be evaluated unambiguously."""

    if start_date and end_date and end_date < start_date:
        raise ValueError("end_date must not be before start_date")
    if (start_time is None) != (end_time is None):
        raise ValueError("start_time and end_time must be provided together")


def _split_days(value: object) -> object:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class ScheduleBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    layout_id: int = Field(gt=0)
    priority: int = Field(default=50, ge=0, le=100)
    start_date: date | None = None
    end_date: date | None = None
    start_time: time | None = None
    end_time: time | None = None
    days_of_week: list[DayCode] | None = None

    @field_validator("days_of_week", mode="before")
    @classmethod
    def split_days(cls, value: object) -> object:
        return _split_days(value)


class ScheduleCreate(ScheduleBase):
    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Schedule name is required")
        return value.strip()

    @model_validator(mode="after")
    def validate_window(self) -> "ScheduleCreate":
        validate_schedule_window(
            start_date=self.start_date,
            end_date=self.end_date,
            start_time=self.start_time,
            end_time=self.end_time,
        )
        return self


class ScheduleRead(ScheduleBase):
    # Stored rows may carry codes written by older clients.
    days_of_week: list[str] | None = None
    schedule_id: int
    customer_id: int
    is_active: bool
    created_by: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ScheduleUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    layout_id: int | None = Field(default=None, gt=0)
    priority: int | None = Field(default=None, ge=0, le=100)
    start_date: date | None = None
    end_date: date | None = None
    start_time: time | None = None
    end_time: time | None = None
    days_of_week: list[DayCode] | None = None
    is_active: bool | None = None

    @field_validator("days_of_week", mode="before")
    @classmethod
    def split_days(cls, value: object) -> object:
        return _split_days(value)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("Schedule name cannot be empty")
        return value.strip() if value is not None else None


class ScheduleAssignmentCreate(BaseModel):
    assignment_type: AssignmentType
    target_customer_id: int | None = Field(default=None, gt=0)
    target_site_id: int | None = Field(default=None, gt=0)
    target_player_id: int | None = Field(default=None, gt=0)

    @model_validator(mode="after")
    def validate_single_target(self) -> "ScheduleAssignmentCreate":
        populated = {
            field_name
            for field_name in ASSIGNMENT_TARGET_FIELDS.values()
            if getattr(self, field_name) is not None
        }
        if populated != {ASSIGNMENT_TARGET_FIELDS[self.assignment_type]}:
            raise ValueError("Exactly one target must be specified based on assignment type")
        return self

    @property
    def target_id(self) -> int:
        return getattr(self, ASSIGNMENT_TARGET_FIELDS[self.assignment_type])


class ScheduleAssignmentRead(BaseModel):
    assignment_id: int
    schedule_id: int
    assignment_type: AssignmentType
    target_customer_id: int | None = None
    target_site_id: int | None = None
    target_player_id: int | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ScheduleDetailRead(ScheduleRead):
    assignments: list[ScheduleAssignmentRead] = Field(default_factory=list)


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class SchedulePage(BaseModel):
    data: list[ScheduleRead]
    pagination: Pagination

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from signage_scheduler.db.models.schedule import AssignmentType
from signage_scheduler.schemas.schedule import ScheduleRead


class LayoutLayerRead(BaseModel):
    layer_id: int
    layer_name: str
    layer_type: str
    z_index: int
    position_x: int
    position_y: int
    width: int
    height: int
    is_visible: bool
    content_config: str | None = None

    model_config = ConfigDict(from_attributes=True)


class LayoutRead(BaseModel):
    layout_id: int
    customer_id: int
    name: str
    description: str | None = None
    width: int
    height: int
    background_color: str | None = None
    layers: list[LayoutLayerRead] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class PlayerScheduleRead(BaseModel):
    """Answer to a player's poll: what to show right now."""

    schedule: ScheduleRead
    layout: LayoutRead
    matched_assignment_type: AssignmentType
    evaluated_at: datetime
    time_zone: str

from __future__ import annotations

from datetime import date, datetime, time
from enum import Enum
from typing import Optional

import sqlalchemy as sa
from sqlalchemy import Boolean, CheckConstraint, Date, DateTime, ForeignKey, Integer, String, Time
from sqlalchemy.orm import Mapped, mapped_column, relationship

from signage_scheduler.db.base import Base


class AssignmentType(str, Enum):  # type: ignore[call-arg]
    CUSTOMER = "Customer"
    SITE = "Site"
    PLAYER = "Player"


# Exactly one target column populated, matching the assignment type.
ASSIGNMENT_TARGET_CHECK = (
    """("AssignmentType" = 'Customer' AND "TargetCustomerId" IS NOT NULL"""
    """ AND "TargetSiteId" IS NULL AND "TargetPlayerId" IS NULL)"""
    """ OR ("AssignmentType" = 'Site' AND "TargetSiteId" IS NOT NULL"""
    """ AND "TargetCustomerId" IS NULL AND "TargetPlayerId" IS NULL)"""
    """ OR ("AssignmentType" = 'Player' AND "TargetPlayerId" IS NOT NULL"""
    """ AND "TargetCustomerId" IS NULL AND "TargetSiteId" IS NULL)"""
)


class Schedule(Base):
    __tablename__ = "Schedules"
    __table_args__ = (
        CheckConstraint('"Priority" >= 0 AND "Priority" <= 100', name="CK_Schedules_Priority"),
    )

    schedule_id: Mapped[int] = mapped_column("ScheduleId", Integer, primary_key=True)
    customer_id: Mapped[int] = mapped_column(
        "CustomerId", ForeignKey("Customers.CustomerId"), index=True, nullable=False
    )
    name: Mapped[str] = mapped_column("Name", String(255), nullable=False)
    layout_id: Mapped[int] = mapped_column("LayoutId", ForeignKey("Layouts.LayoutId"), nullable=False)
    priority: Mapped[int] = mapped_column("Priority", Integer, default=50, nullable=False)
    start_date: Mapped[Optional[date]] = mapped_column("StartDate", Date)
    end_date: Mapped[Optional[date]] = mapped_column("EndDate", Date)
    start_time: Mapped[Optional[time]] = mapped_column("StartTime", Time)
    end_time: Mapped[Optional[time]] = mapped_column("EndTime", Time)
    days_of_week: Mapped[Optional[str]] = mapped_column("DaysOfWeek", String(50))  # e.g. "Mon,Wed,Fri"
    is_active: Mapped[bool] = mapped_column("IsActive", Boolean, default=True, nullable=False)
    created_by: Mapped[int] = mapped_column("CreatedBy", Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        "CreatedAt", DateTime, server_default=sa.func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        "UpdatedAt", DateTime, server_default=sa.func.now(), onupdate=sa.func.now(), nullable=False
    )

    assignments: Mapped[list["ScheduleAssignment"]] = relationship(
        back_populates="schedule", cascade="all, delete-orphan", passive_deletes=True
    )


class ScheduleAssignment(Base):
    __tablename__ = "ScheduleAssignments"
    __table_args__ = (
        CheckConstraint(
            """"AssignmentType" IN ('Customer', 'Site', 'Player')""",
            name="CK_ScheduleAssignments_Type",
        ),
        CheckConstraint(ASSIGNMENT_TARGET_CHECK, name="CK_ScheduleAssignments_Target"),
    )

    assignment_id: Mapped[int] = mapped_column("AssignmentId", Integer, primary_key=True)
    schedule_id: Mapped[int] = mapped_column(
        "ScheduleId", ForeignKey("Schedules.ScheduleId", ondelete="CASCADE"), index=True, nullable=False
    )
    # Plain text; rows are validated when converted to assignment targets.
    assignment_type: Mapped[str] = mapped_column("AssignmentType", String(50), nullable=False)
    target_customer_id: Mapped[Optional[int]] = mapped_column(
        "TargetCustomerId", ForeignKey("Customers.CustomerId")
    )
    target_site_id: Mapped[Optional[int]] = mapped_column("TargetSiteId", ForeignKey("Sites.SiteId"))
    target_player_id: Mapped[Optional[int]] = mapped_column("TargetPlayerId", ForeignKey("Players.PlayerId"))
    created_at: Mapped[datetime] = mapped_column(
        "CreatedAt", DateTime, server_default=sa.func.now(), nullable=False
    )

    schedule: Mapped[Schedule] = relationship(back_populates="assignments")

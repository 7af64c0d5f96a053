"""Initial schema for the signage scheduling domain.

Revision ID: 20250106_0001
Revises:
Create Date: 2025-01-06 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20250106_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "Customers",
        sa.Column("CustomerId", sa.Integer(), primary_key=True),
        sa.Column("Name", sa.String(length=255), nullable=False),
        sa.Column("TimeZone", sa.String(length=50), nullable=True),
        sa.Column("IsActive", sa.Boolean(), nullable=False, server_default=sa.text("true")),
    )

    op.create_table(
        "Sites",
        sa.Column("SiteId", sa.Integer(), primary_key=True),
        sa.Column("CustomerId", sa.Integer(), sa.ForeignKey("Customers.CustomerId"), nullable=False),
        sa.Column("Name", sa.String(length=255), nullable=False),
        sa.Column("TimeZone", sa.String(length=50), nullable=False, server_default=sa.text("'UTC'")),
        sa.Column("IsActive", sa.Boolean(), nullable=False, server_default=sa.text("true")),
    )
    op.create_index("IX_Sites_CustomerId", "Sites", ["CustomerId"])

    op.create_table(
        "Players",
        sa.Column("PlayerId", sa.Integer(), primary_key=True),
        sa.Column("SiteId", sa.Integer(), sa.ForeignKey("Sites.SiteId"), nullable=False),
        sa.Column("Name", sa.String(length=255), nullable=False),
        sa.Column("IsActive", sa.Boolean(), nullable=False, server_default=sa.text("true")),
    )
    op.create_index("IX_Players_SiteId", "Players", ["SiteId"])

    op.create_table(
        "Layouts",
        sa.Column("LayoutId", sa.Integer(), primary_key=True),
        sa.Column("CustomerId", sa.Integer(), sa.ForeignKey("Customers.CustomerId"), nullable=False),
        sa.Column("Name", sa.String(length=255), nullable=False),
        sa.Column("Description", sa.Text(), nullable=True),
        sa.Column("Width", sa.Integer(), nullable=False, server_default=sa.text("1920")),
        sa.Column("Height", sa.Integer(), nullable=False, server_default=sa.text("1080")),
        sa.Column("BackgroundColor", sa.String(length=50), nullable=True, server_default=sa.text("'#000000'")),
        sa.Column("IsActive", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("CreatedAt", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("IX_Layouts_CustomerId", "Layouts", ["CustomerId"])

    op.create_table(
        "LayoutLayers",
        sa.Column("LayerId", sa.Integer(), primary_key=True),
        sa.Column(
            "LayoutId",
            sa.Integer(),
            sa.ForeignKey("Layouts.LayoutId", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("LayerName", sa.String(length=255), nullable=False),
        sa.Column("LayerType", sa.String(length=50), nullable=False),
        sa.Column("ZIndex", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("PositionX", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("PositionY", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("Width", sa.Integer(), nullable=False),
        sa.Column("Height", sa.Integer(), nullable=False),
        sa.Column("IsVisible", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("ContentConfig", sa.Text(), nullable=True),
    )
    op.create_index("IX_LayoutLayers_LayoutId", "LayoutLayers", ["LayoutId"])

    op.create_table(
        "Schedules",
        sa.Column("ScheduleId", sa.Integer(), primary_key=True),
        sa.Column("CustomerId", sa.Integer(), sa.ForeignKey("Customers.CustomerId"), nullable=False),
        sa.Column("Name", sa.String(length=255), nullable=False),
        sa.Column("LayoutId", sa.Integer(), sa.ForeignKey("Layouts.LayoutId"), nullable=False),
        sa.Column("Priority", sa.Integer(), nullable=False, server_default=sa.text("50")),
        sa.Column("StartDate", sa.Date(), nullable=True),
        sa.Column("EndDate", sa.Date(), nullable=True),
        sa.Column("StartTime", sa.Time(), nullable=True),
        sa.Column("EndTime", sa.Time(), nullable=True),
        sa.Column("DaysOfWeek", sa.String(length=50), nullable=True),
        sa.Column("IsActive", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("CreatedBy", sa.Integer(), nullable=False),
        sa.Column("CreatedAt", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("UpdatedAt", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('"Priority" >= 0 AND "Priority" <= 100', name="CK_Schedules_Priority"),
    )
    op.create_index("IX_Schedules_CustomerId", "Schedules", ["CustomerId"])
    op.create_index("IX_Schedules_IsActive", "Schedules", ["IsActive"])

    op.create_table(
        "ScheduleAssignments",
        sa.Column("AssignmentId", sa.Integer(), primary_key=True),
        sa.Column(
            "ScheduleId",
            sa.Integer(),
            sa.ForeignKey("Schedules.ScheduleId", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("AssignmentType", sa.String(length=50), nullable=False),
        sa.Column("TargetCustomerId", sa.Integer(), sa.ForeignKey("Customers.CustomerId"), nullable=True),
        sa.Column("TargetSiteId", sa.Integer(), sa.ForeignKey("Sites.SiteId"), nullable=True),
        sa.Column("TargetPlayerId", sa.Integer(), sa.ForeignKey("Players.PlayerId"), nullable=True),
        sa.Column("CreatedAt", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            """"AssignmentType" IN ('Customer', 'Site', 'Player')""",
            name="CK_ScheduleAssignments_Type",
        ),
        sa.CheckConstraint(
            """("AssignmentType" = 'Customer' AND "TargetCustomerId" IS NOT NULL"""
            """ AND "TargetSiteId" IS NULL AND "TargetPlayerId" IS NULL)"""
            """ OR ("AssignmentType" = 'Site' AND "TargetSiteId" IS NOT NULL"""
            """ AND "TargetCustomerId" IS NULL AND "TargetPlayerId" IS NULL)"""
            """ OR ("AssignmentType" = 'Player' AND "TargetPlayerId" IS NOT NULL"""
            """ AND "TargetCustomerId" IS NULL AND "TargetSiteId" IS NULL)""",
            name="CK_ScheduleAssignments_Target",
        ),
    )
    op.create_index("IX_ScheduleAssignments_ScheduleId", "ScheduleAssignments", ["ScheduleId"])


def downgrade() -> None:
    op.drop_index("IX_ScheduleAssignments_ScheduleId", table_name="ScheduleAssignments")
    op.drop_table("ScheduleAssignments")
    op.drop_index("IX_Schedules_IsActive", table_name="Schedules")
    op.drop_index("IX_Schedules_CustomerId", table_name="Schedules")
    op.drop_table("Schedules")
    op.drop_index("IX_LayoutLayers_LayoutId", table_name="LayoutLayers")
    op.drop_table("LayoutLayers")
    op.drop_index("IX_Layouts_CustomerId", table_name="Layouts")
    op.drop_table("Layouts")
    op.drop_index("IX_Players_SiteId", table_name="Players")
    op.drop_table("Players")
    op.drop_index("IX_Sites_CustomerId", table_name="Sites")
    op.drop_table("Sites")
    op.drop_table("Customers")

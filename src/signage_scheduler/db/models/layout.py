from __future__ import annotations

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from signage_scheduler.db.base import Base


class Layout(Base):
    __tablename__ = "Layouts"

    layout_id: Mapped[int] = mapped_column("LayoutId", Integer, primary_key=True)
    customer_id: Mapped[int] = mapped_column(
        "CustomerId", ForeignKey("Customers.CustomerId"), index=True, nullable=False
    )
    name: Mapped[str] = mapped_column("Name", String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column("Description", Text)
    width: Mapped[int] = mapped_column("Width", Integer, default=1920, nullable=False)
    height: Mapped[int] = mapped_column("Height", Integer, default=1080, nullable=False)
    background_color: Mapped[Optional[str]] = mapped_column("BackgroundColor", String(50), default="#000000")
    is_active: Mapped[bool] = mapped_column("IsActive", Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        "CreatedAt", DateTime, server_default=sa.func.now(), nullable=False
    )

    layers: Mapped[list["LayoutLayer"]] = relationship(
        back_populates="layout",
        cascade="all, delete-orphan",
        order_by="LayoutLayer.z_index",
    )


class LayoutLayer(Base):
    __tablename__ = "LayoutLayers"

    layer_id: Mapped[int] = mapped_column("LayerId", Integer, primary_key=True)
    layout_id: Mapped[int] = mapped_column(
        "LayoutId", ForeignKey("Layouts.LayoutId", ondelete="CASCADE"), index=True, nullable=False
    )
    layer_name: Mapped[str] = mapped_column("LayerName", String(255), nullable=False)
    layer_type: Mapped[str] = mapped_column("LayerType", String(50), nullable=False)
    z_index: Mapped[int] = mapped_column("ZIndex", Integer, default=0, nullable=False)
    position_x: Mapped[int] = mapped_column("PositionX", Integer, default=0, nullable=False)
    position_y: Mapped[int] = mapped_column("PositionY", Integer, default=0, nullable=False)
    width: Mapped[int] = mapped_column("Width", Integer, nullable=False)
    height: Mapped[int] = mapped_column("Height", Integer, nullable=False)
    is_visible: Mapped[bool] = mapped_column("IsVisible", Boolean, default=True, nullable=False)
    content_config: Mapped[Optional[str]] = mapped_column("ContentConfig", Text)

    layout: Mapped[Layout] = relationship(back_populates="layers")

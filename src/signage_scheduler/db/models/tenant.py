"""Tenant hierarchy tables. Owned by the account service; read-only here."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from signage_scheduler.db.base import Base


class Customer(Base):
    __tablename__ = "Customers"

    customer_id: Mapped[int] = mapped_column("CustomerId", Integer, primary_key=True)
    name: Mapped[str] = mapped_column("Name", String(255), nullable=False)
    time_zone: Mapped[Optional[str]] = mapped_column("TimeZone", String(50))
    is_active: Mapped[bool] = mapped_column("IsActive", Boolean, default=True, nullable=False)

    sites: Mapped[list["Site"]] = relationship(back_populates="customer")


class Site(Base):
    __tablename__ = "Sites"

    site_id: Mapped[int] = mapped_column("SiteId", Integer, primary_key=True)
    customer_id: Mapped[int] = mapped_column(
        "CustomerId", ForeignKey("Customers.CustomerId"), index=True, nullable=False
    )
    name: Mapped[str] = mapped_column("Name", String(255), nullable=False)
    time_zone: Mapped[str] = mapped_column("TimeZone", String(50), default="UTC", nullable=False)
    is_active: Mapped[bool] = mapped_column("IsActive", Boolean, default=True, nullable=False)

    customer: Mapped[Customer] = relationship(back_populates="sites")
    players: Mapped[list["Player"]] = relationship(back_populates="site")


class Player(Base):
    __tablename__ = "Players"

    player_id: Mapped[int] = mapped_column("PlayerId", Integer, primary_key=True)
    site_id: Mapped[int] = mapped_column("SiteId", ForeignKey("Sites.SiteId"), index=True, nullable=False)
    name: Mapped[str] = mapped_column("Name", String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column("IsActive", Boolean, default=True, nullable=False)

    site: Mapped[Site] = relationship(back_populates="players")

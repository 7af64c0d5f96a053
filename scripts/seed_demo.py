"""Seed a demo tenant for local development.

Run this after applying Alembic migrations:

    python -m alembic upgrade head
    python scripts/seed_demo.py

The script prints a player token that can be used against
``GET /api/v1/player-devices/{player_id}/schedule``.
"""

from __future__ import annotations

import asyncio
from datetime import time

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from signage_scheduler.core.config import get_settings
from signage_scheduler.core.security import create_access_token, create_player_token
from signage_scheduler.db.models import (
    AssignmentType,
    Customer,
    Layout,
    LayoutLayer,
    Player,
    Schedule,
    ScheduleAssignment,
    Site,
)

DEMO_ADMIN_USER_ID = 1


async def seed() -> None:
    settings = get_settings()
    engine = create_async_engine(settings.database_url, future=True)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    async with session_factory() as session:
        existing = await session.scalar(select(func.count(Customer.customer_id)))
        if existing:
            print("Demo data already present; nothing to do.")
            await engine.dispose()
            return

        customer = Customer(name="Demo Retail", time_zone="Europe/Zurich")
        site = Site(customer=customer, name="Flagship Store", time_zone="Europe/Zurich")
        lobby = Player(site=site, name="Lobby Screen")
        window = Player(site=site, name="Window Screen")
        session.add_all([customer, site, lobby, window])
        await session.flush()

        default_layout = _build_layout(customer.customer_id, "Brand Loop")
        lunch_layout = _build_layout(customer.customer_id, "Lunch Menu")
        night_layout = _build_layout(customer.customer_id, "Night Promotions")
        session.add_all([default_layout, lunch_layout, night_layout])
        await session.flush()

        baseline = Schedule(
            customer_id=customer.customer_id,
            name="All day brand loop",
            layout_id=default_layout.layout_id,
            priority=10,
            created_by=DEMO_ADMIN_USER_ID,
        )
        lunch = Schedule(
            customer_id=customer.customer_id,
            name="Weekday lunch",
            layout_id=lunch_layout.layout_id,
            priority=60,
            start_time=time(11, 30),
            end_time=time(14, 0),
            days_of_week="Mon,Tue,Wed,Thu,Fri",
            created_by=DEMO_ADMIN_USER_ID,
        )
        night = Schedule(
            customer_id=customer.customer_id,
            name="Late night window",
            layout_id=night_layout.layout_id,
            priority=60,
            start_time=time(22, 0),
            end_time=time(2, 0),
            created_by=DEMO_ADMIN_USER_ID,
        )
        session.add_all([baseline, lunch, night])
        await session.flush()

        session.add_all(
            [
                ScheduleAssignment(
                    schedule_id=baseline.schedule_id,
                    assignment_type=AssignmentType.CUSTOMER.value,
                    target_customer_id=customer.customer_id,
                ),
                ScheduleAssignment(
                    schedule_id=lunch.schedule_id,
                    assignment_type=AssignmentType.SITE.value,
                    target_site_id=site.site_id,
                ),
                ScheduleAssignment(
                    schedule_id=night.schedule_id,
                    assignment_type=AssignmentType.PLAYER.value,
                    target_player_id=window.player_id,
                ),
            ]
        )
        await session.commit()

        admin_token = create_access_token(
            user_id=DEMO_ADMIN_USER_ID, customer_id=customer.customer_id, role="Admin"
        )
        player_token = create_player_token(
            player_id=lobby.player_id,
            site_id=site.site_id,
            customer_id=customer.customer_id,
            player_name=lobby.name,
        )

    await engine.dispose()
    print("Seed data inserted.")
    print(f"Admin token:  {admin_token}")
    print(f"Player {lobby.player_id} token: {player_token}")


def _build_layout(customer_id: int, name: str) -> Layout:
    return Layout(
        customer_id=customer_id,
        name=name,
        layers=[
            LayoutLayer(layer_name="Background", layer_type="image", z_index=0, width=1920, height=1080),
            LayoutLayer(layer_name="Ticker", layer_type="text", z_index=1, position_y=980, width=1920, height=100),
        ],
    )


if __name__ == "__main__":
    asyncio.run(seed())

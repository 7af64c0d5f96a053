from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from signage_scheduler.db.models.tenant import Player, Site


async def get_player(session: AsyncSession, player_id: int, customer_id: int) -> Player | None:
    result = await session.execute(
        select(Player)
        .join(Player.site)
        .where(Player.player_id == player_id)
        .where(Site.customer_id == customer_id)
        .options(selectinload(Player.site).selectinload(Site.customer))
    )
    return result.scalars().first()


async def get_site(session: AsyncSession, site_id: int, customer_id: int) -> Site | None:
    result = await session.execute(
        select(Site).where(Site.site_id == site_id).where(Site.customer_id == customer_id)
    )
    return result.scalars().first()

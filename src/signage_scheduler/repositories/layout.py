from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from signage_scheduler.db.models.layout import Layout


async def get_layout(session: AsyncSession, layout_id: int, customer_id: int) -> Layout | None:
    result = await session.execute(
        select(Layout).where(Layout.layout_id == layout_id).where(Layout.customer_id == customer_id)
    )
    return result.scalars().first()


async def find_layout_with_layers(
    session: AsyncSession, layout_id: int, customer_id: int
) -> Layout | None:
    result = await session.execute(
        select(Layout)
        .where(Layout.layout_id == layout_id)
        .where(Layout.customer_id == customer_id)
        .options(selectinload(Layout.layers))
    )
    return result.scalars().first()

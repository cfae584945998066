from typing import Dict

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cloud_kitchen.models import Category, Dish, Order, SectionItem


async def get_counts(db: AsyncSession) -> Dict[str, int]:
    """Количество записей по ресурсам для главной страницы админки."""
    counts = {}
    for key, model in (
        ("dishes", Dish),
        ("categories", Category),
        ("section_items", SectionItem),
        ("orders", Order),
    ):
        counts[key] = await db.scalar(select(func.count(model.id))) or 0
    return counts

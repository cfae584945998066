from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cloud_kitchen.crud.base import apply_values, model_values
from cloud_kitchen.models import SectionItem, SectionTypeEnum
from cloud_kitchen.schemas.section_item import SectionItemCreate, SectionItemUpdate


async def get_section_items(
    db: AsyncSession,
    section_type: Optional[SectionTypeEnum] = None,
    active_only: bool = False,
) -> List[SectionItem]:
    """Элементы карусели, по приоритету (меньше - раньше)."""
    stmt = select(SectionItem).order_by(SectionItem.priority, SectionItem.id)
    if section_type is not None:
        stmt = stmt.where(SectionItem.section_type == section_type)
    if active_only:
        stmt = stmt.where(SectionItem.is_active.is_(True))
    result = await db.execute(stmt)
    return result.scalars().all()


async def get_section_item(db: AsyncSession, item_id: int) -> Optional[SectionItem]:
    return await db.get(SectionItem, item_id)


async def get_active_coupon(db: AsyncSession, coupon_code: str) -> Optional[SectionItem]:
    """Активный элемент с таким купоном и заданной скидкой. Регистр кода не важен."""
    stmt = (
        select(SectionItem)
        .where(func.lower(SectionItem.coupon_code) == coupon_code.strip().lower())
        .where(SectionItem.is_active.is_(True))
        .where(SectionItem.discount_type.isnot(None))
        .order_by(SectionItem.priority, SectionItem.id)
    )
    result = await db.execute(stmt)
    return result.scalars().first()


async def create_section_item(db: AsyncSession, item_in: SectionItemCreate) -> SectionItem:
    item = SectionItem(**model_values(item_in))
    db.add(item)
    await db.commit()
    return item


async def update_section_item(db: AsyncSession, item_id: int, item_in: SectionItemUpdate) -> Optional[SectionItem]:
    item = await db.get(SectionItem, item_id)
    if not item:
        return None
    apply_values(item, model_values(item_in, exclude_unset=True))
    await db.commit()
    return item


async def delete_section_item(db: AsyncSession, item_id: int) -> bool:
    item = await db.get(SectionItem, item_id)
    if not item:
        return False
    await db.delete(item)
    await db.commit()
    return True

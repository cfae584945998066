from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cloud_kitchen.crud.base import apply_values, model_values
from cloud_kitchen.models import Category
from cloud_kitchen.schemas.category import CategoryCreate, CategoryUpdate


async def get_categories(db: AsyncSession, active_only: bool = False) -> List[Category]:
    """Категории в порядке меню. active_only - только включённые (для витрины)."""
    stmt = select(Category).order_by(Category.order, Category.id)
    if active_only:
        stmt = stmt.where(Category.is_active.is_(True))
    result = await db.execute(stmt)
    return result.scalars().all()


async def get_category(db: AsyncSession, category_id: int) -> Optional[Category]:
    return await db.get(Category, category_id)


async def get_category_by_slug(db: AsyncSession, slug: str) -> Optional[Category]:
    result = await db.execute(select(Category).where(Category.slug == slug))
    return result.scalars().first()


async def _commit(db: AsyncSession, category: Category) -> Category:
    slug = category.slug
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ValueError(f"Category with slug '{slug}' already exists")
    return category


async def create_category(db: AsyncSession, category_in: CategoryCreate) -> Category:
    category = Category(**model_values(category_in))
    db.add(category)
    return await _commit(db, category)


async def update_category(db: AsyncSession, category_id: int, category_in: CategoryUpdate) -> Optional[Category]:
    category = await db.get(Category, category_id)
    if not category:
        return None
    apply_values(category, model_values(category_in, exclude_unset=True))
    return await _commit(db, category)


async def delete_category(db: AsyncSession, category_id: int) -> bool:
    """Удаляет категорию. Блюда категории не трогаем."""
    category = await db.get(Category, category_id)
    if not category:
        return False
    await db.delete(category)
    await db.commit()
    return True

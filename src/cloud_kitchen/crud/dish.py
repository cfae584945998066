from typing import Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cloud_kitchen.crud.base import apply_values, model_values
from cloud_kitchen.models import Dish
from cloud_kitchen.schemas.dish import DishCreate, DishUpdate

JSON_FIELDS = ("tags", "variants", "customizations")


async def get_dishes(
    db: AsyncSession,
    category_id: Optional[int] = None,
    available_only: bool = False,
) -> List[Dish]:
    stmt = select(Dish).order_by(Dish.name, Dish.id)
    if category_id is not None:
        stmt = stmt.where(Dish.category_id == category_id)
    if available_only:
        stmt = stmt.where(Dish.is_available.is_(True))
    result = await db.execute(stmt)
    return result.scalars().all()


async def get_dishes_by_ids(db: AsyncSession, dish_ids: Iterable[int]) -> Dict[int, Dish]:
    ids = set(dish_ids)
    if not ids:
        return {}
    result = await db.execute(select(Dish).where(Dish.id.in_(ids)))
    return {dish.id: dish for dish in result.scalars().all()}


async def get_dish(db: AsyncSession, dish_id: int) -> Optional[Dish]:
    return await db.get(Dish, dish_id)


async def get_dish_by_name(db: AsyncSession, name: str) -> Optional[Dish]:
    result = await db.execute(select(Dish).where(Dish.name == name))
    return result.scalars().first()


async def create_dish(db: AsyncSession, dish_in: DishCreate) -> Dish:
    dish = Dish(**model_values(dish_in, JSON_FIELDS))
    db.add(dish)
    await db.commit()
    return dish


async def update_dish(db: AsyncSession, dish_id: int, dish_in: DishUpdate) -> Optional[Dish]:
    dish = await db.get(Dish, dish_id)
    if not dish:
        return None
    apply_values(dish, model_values(dish_in, JSON_FIELDS, exclude_unset=True))
    await db.commit()
    return dish


async def delete_dish(db: AsyncSession, dish_id: int) -> bool:
    dish = await db.get(Dish, dish_id)
    if not dish:
        return False
    await db.delete(dish)
    await db.commit()
    return True

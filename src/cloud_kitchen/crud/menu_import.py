from typing import Dict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cloud_kitchen.crud.base import apply_values, model_values
from cloud_kitchen.crud.dish import JSON_FIELDS
from cloud_kitchen.models import Category, Dish
from cloud_kitchen.schemas.menu import MenuImportRequest, MenuImportResult


async def import_menu(db: AsyncSession, menu_in: MenuImportRequest) -> MenuImportResult:
    """
    Массовая загрузка меню одной транзакцией.
    Категории сопоставляются по slug, блюда по имени; существующие обновляются.
    Блюда с неизвестной категорией пропускаются.
    """
    result = MenuImportResult()

    existing = await db.execute(select(Category))
    categories: Dict[str, Category] = {c.slug: c for c in existing.scalars().all()}

    for category_in in menu_in.categories:
        category = categories.get(category_in.slug)
        if category is None:
            category = Category(**model_values(category_in))
            db.add(category)
            categories[category.slug] = category
        else:
            apply_values(category, model_values(category_in))
        result.categories += 1

    # нужны id новых категорий
    await db.flush()

    existing = await db.execute(select(Dish))
    dishes: Dict[str, Dish] = {d.name: d for d in existing.scalars().all()}

    for dish_in in menu_in.dishes:
        category = categories.get(dish_in.category_slug)
        if category is None:
            result.skipped.append(dish_in.name)
            continue
        values = model_values(dish_in, JSON_FIELDS)
        values.pop("category_slug")
        values["category_id"] = category.id

        dish = dishes.get(dish_in.name)
        if dish is None:
            dish = Dish(**values)
            db.add(dish)
            dishes[dish.name] = dish
        else:
            apply_values(dish, values)
        result.dishes += 1

    await db.commit()
    return result

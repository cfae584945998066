from collections import defaultdict
from typing import Dict, List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cloud_kitchen.crud.category import get_categories
from cloud_kitchen.crud.dish import get_dishes
from cloud_kitchen.crud.restaurant import get_restaurant_or_default
from cloud_kitchen.crud.section_item import get_section_items
from cloud_kitchen.db.session import get_async_session
from cloud_kitchen.schemas.category import CategoryRead
from cloud_kitchen.schemas.dish import DishRead, MenuDishRead
from cloud_kitchen.schemas.menu import MenuCategory, MenuRead
from cloud_kitchen.schemas.section_item import SectionItemRead
from cloud_kitchen.services.discount import calculate_dish_discount

router = APIRouter(prefix="/api/menu", tags=["menu"])


def _menu_dish(dish) -> MenuDishRead:
    discount = calculate_dish_discount(dish)
    return MenuDishRead(
        **DishRead.model_validate(dish).model_dump(),
        discounted_price=discount.discounted_price,
        has_discount=discount.has_discount,
    )


@router.get("/", response_model=MenuRead)
async def get_menu(db: AsyncSession = Depends(get_async_session)):
    """
    Всё, что нужно витрине одним запросом:
    - профиль ресторана
    - активные категории с доступными блюдами (цены уже со скидкой)
    - активные элементы каруселей, сгруппированные по section_type
    """
    restaurant = await get_restaurant_or_default(db)

    dishes_by_category: Dict[int, List[MenuDishRead]] = defaultdict(list)
    for dish in await get_dishes(db, available_only=True):
        dishes_by_category[dish.category_id].append(_menu_dish(dish))

    categories = [
        MenuCategory(
            **CategoryRead.model_validate(category).model_dump(),
            dishes=dishes_by_category.get(category.id, []),
        )
        for category in await get_categories(db, active_only=True)
    ]

    sections: Dict[str, List[SectionItemRead]] = defaultdict(list)
    for item in await get_section_items(db, active_only=True):
        section_item = SectionItemRead.model_validate(item)
        sections[section_item.section_type.value].append(section_item)

    return MenuRead(restaurant=restaurant, categories=categories, sections=dict(sections))


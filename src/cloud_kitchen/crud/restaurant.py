from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cloud_kitchen.crud.base import apply_values, model_values
from cloud_kitchen.models import Restaurant
from cloud_kitchen.schemas.restaurant import RestaurantRead, RestaurantUpdate

# отдаётся витрине, пока профиль не заполнен в админке
DEFAULT_RESTAURANT = RestaurantRead(
    name="SG Cloud Kitchen",
    logo_url="/logo.png",
    tagline="A delightful culinary experience.",
    address="Plot 213, Shraddha Shri Colony, New Malviya Nagar, Indore",
    phone="744-044-0128",
    email="sgclaidk2025@gmail.com",
    opening_hours="Mon-Sat: 11am - 3am",
    social_links={"facebook": "#", "instagram": "#", "twitter": "#"},
)


async def get_restaurant(db: AsyncSession) -> Optional[Restaurant]:
    result = await db.execute(select(Restaurant).order_by(Restaurant.id).limit(1))
    return result.scalars().first()


async def get_restaurant_or_default(db: AsyncSession) -> RestaurantRead:
    restaurant = await get_restaurant(db)
    if restaurant is None:
        return DEFAULT_RESTAURANT
    return RestaurantRead.model_validate(restaurant)


async def upsert_restaurant(db: AsyncSession, restaurant_in: RestaurantUpdate) -> Restaurant:
    """Профиль один: обновляем существующую строку или создаём первую."""
    values = model_values(restaurant_in, ("social_links",))
    restaurant = await get_restaurant(db)
    if restaurant is None:
        restaurant = Restaurant(**values)
        db.add(restaurant)
    else:
        apply_values(restaurant, values)
    await db.commit()
    return restaurant

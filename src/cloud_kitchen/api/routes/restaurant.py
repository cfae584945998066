from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cloud_kitchen.crud.restaurant import get_restaurant_or_default, upsert_restaurant
from cloud_kitchen.db.session import get_async_session
from cloud_kitchen.schemas.restaurant import RestaurantRead, RestaurantUpdate

router = APIRouter(prefix="/api/restaurant", tags=["restaurant"])


@router.get("/", response_model=RestaurantRead)
async def get_restaurant_endpoint(db: AsyncSession = Depends(get_async_session)):
    """
    Профиль ресторана. Пока он не сохранён, отдаются значения по умолчанию (id = null).
    """
    return await get_restaurant_or_default(db)


@router.put("/", response_model=RestaurantRead)
async def update_restaurant_endpoint(restaurant_in: RestaurantUpdate, db: AsyncSession = Depends(get_async_session)):
    return await upsert_restaurant(db, restaurant_in)

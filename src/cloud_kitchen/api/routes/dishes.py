from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from cloud_kitchen.crud.dish import create_dish, delete_dish, get_dish, get_dishes, update_dish
from cloud_kitchen.db.session import get_async_session
from cloud_kitchen.schemas.dish import DishCreate, DishRead, DishUpdate

router = APIRouter(prefix="/api/dishes", tags=["dishes"])


@router.get("/", response_model=List[DishRead])
async def list_dishes(
    category_id: Optional[int] = Query(None, description="Фильтр по категории"),
    available_only: bool = Query(False, description="Только доступные для заказа"),
    db: AsyncSession = Depends(get_async_session),
):
    return await get_dishes(db, category_id=category_id, available_only=available_only)


@router.post("/", response_model=DishRead, status_code=201)
async def create_dish_endpoint(dish_in: DishCreate, db: AsyncSession = Depends(get_async_session)):
    """
    Создаёт блюдо. Варианты и группы опций сохраняются как есть.
    """
    return await create_dish(db, dish_in)


@router.get("/{dish_id}", response_model=DishRead)
async def get_dish_endpoint(
    dish_id: int = Path(..., description="ID блюда"),
    db: AsyncSession = Depends(get_async_session),
):
    dish = await get_dish(db, dish_id)
    if not dish:
        raise HTTPException(status_code=404, detail="Dish not found")
    return dish


@router.put("/{dish_id}", response_model=DishRead)
async def update_dish_endpoint(dish_id: int, dish_in: DishUpdate, db: AsyncSession = Depends(get_async_session)):
    dish = await update_dish(db, dish_id, dish_in)
    if not dish:
        raise HTTPException(status_code=404, detail="Dish not found")
    return dish


@router.delete("/{dish_id}", status_code=204)
async def remove_dish(dish_id: int, db: AsyncSession = Depends(get_async_session)):
    deleted = await delete_dish(db, dish_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Dish not found")

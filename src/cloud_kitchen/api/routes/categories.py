from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from cloud_kitchen.crud.category import create_category, delete_category, get_categories, get_category
from cloud_kitchen.crud.category import update_category
from cloud_kitchen.db.session import get_async_session
from cloud_kitchen.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("/", response_model=List[CategoryRead])
async def list_categories(
    active_only: bool = Query(False, description="Только активные (витрина)"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Категории меню в порядке отображения.
    """
    return await get_categories(db, active_only=active_only)


@router.post("/", response_model=CategoryRead, status_code=201)
async def create_category_endpoint(category_in: CategoryCreate, db: AsyncSession = Depends(get_async_session)):
    try:
        return await create_category(db, category_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{category_id}", response_model=CategoryRead)
async def get_category_endpoint(
    category_id: int = Path(..., description="ID категории"),
    db: AsyncSession = Depends(get_async_session),
):
    category = await get_category(db, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.put("/{category_id}", response_model=CategoryRead)
async def update_category_endpoint(
    category_id: int,
    category_in: CategoryUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    """
    Обновление категории. Передаются только изменяемые поля.
    """
    try:
        category = await update_category(db, category_id, category_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.delete("/{category_id}", status_code=204)
async def remove_category(category_id: int, db: AsyncSession = Depends(get_async_session)):
    """
    Удаляет категорию. Блюда остаются со старым category_id.
    """
    deleted = await delete_category(db, category_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Category not found")

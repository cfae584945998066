from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cloud_kitchen.crud.dashboard import get_counts
from cloud_kitchen.crud.order import get_orders_summary_stats
from cloud_kitchen.db.session import get_async_session

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/")
async def get_dashboard(db: AsyncSession = Depends(get_async_session)):
    """
    Главная страница админки: количество блюд, категорий, элементов каруселей
    и заказов плюс сводка по заказам.
    """
    return {
        "counts": await get_counts(db),
        "orders": await get_orders_summary_stats(db),
    }

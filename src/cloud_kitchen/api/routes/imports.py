from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cloud_kitchen.crud.menu_import import import_menu
from cloud_kitchen.db.session import get_async_session
from cloud_kitchen.schemas.menu import MenuImportRequest, MenuImportResult

router = APIRouter(prefix="/api/import", tags=["import"])


@router.post("/menu", response_model=MenuImportResult)
async def import_menu_endpoint(menu_in: MenuImportRequest, db: AsyncSession = Depends(get_async_session)):
    """
    Массовая загрузка меню: категории по slug, блюда по имени.
    Блюда с неизвестной категорией возвращаются в skipped.
    """
    return await import_menu(db, menu_in)

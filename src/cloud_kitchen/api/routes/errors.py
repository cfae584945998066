from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from cloud_kitchen.config import settings
from cloud_kitchen.crud.error_log import clear_error_logs, create_error_log, delete_error_log, get_error_log
from cloud_kitchen.crud.error_log import get_error_logs
from cloud_kitchen.db.session import get_async_session
from cloud_kitchen.schemas.error_log import ErrorLogCreate, ErrorLogRead

router = APIRouter(prefix="/api/errors", tags=["errors"])


@router.get("/", response_model=List[ErrorLogRead])
async def list_error_logs(
    limit: Optional[int] = Query(None, ge=1, description="Сколько последних записей вернуть"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Последние ошибки, новые первыми.
    """
    return await get_error_logs(db, limit=limit or settings.ERROR_LOG_LIMIT)


@router.post("/", response_model=ErrorLogRead, status_code=201)
async def report_error(
    log_in: ErrorLogCreate,
    user_agent: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Приём ошибки из браузера (window.onerror / unhandledrejection).
    Если user_agent не передан в теле, берём его из заголовка.
    """
    if not log_in.user_agent and user_agent:
        log_in.user_agent = user_agent
    return await create_error_log(db, log_in)


@router.delete("/")
async def clear_errors(db: AsyncSession = Depends(get_async_session)):
    deleted = await clear_error_logs(db)
    return {"deleted": deleted}


@router.get("/{log_id}", response_model=ErrorLogRead)
async def get_error_log_endpoint(log_id: int, db: AsyncSession = Depends(get_async_session)):
    log = await get_error_log(db, log_id)
    if not log:
        raise HTTPException(status_code=404, detail="Error log not found")
    return log


@router.delete("/{log_id}", status_code=204)
async def remove_error_log(log_id: int, db: AsyncSession = Depends(get_async_session)):
    deleted = await delete_error_log(db, log_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Error log not found")

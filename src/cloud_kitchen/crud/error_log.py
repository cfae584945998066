from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from cloud_kitchen.crud.base import model_values
from cloud_kitchen.models import ErrorLog
from cloud_kitchen.schemas.error_log import ErrorLogCreate


async def get_error_logs(db: AsyncSession, limit: int = 100) -> List[ErrorLog]:
    stmt = select(ErrorLog).order_by(ErrorLog.created_at.desc(), ErrorLog.id.desc()).limit(limit)
    result = await db.execute(stmt)
    return result.scalars().all()


async def get_error_log(db: AsyncSession, log_id: int) -> Optional[ErrorLog]:
    return await db.get(ErrorLog, log_id)


async def create_error_log(db: AsyncSession, log_in: ErrorLogCreate) -> ErrorLog:
    log = ErrorLog(**model_values(log_in, ("additional_info",)))
    db.add(log)
    await db.commit()
    return log


async def delete_error_log(db: AsyncSession, log_id: int) -> bool:
    log = await db.get(ErrorLog, log_id)
    if not log:
        return False
    await db.delete(log)
    await db.commit()
    return True


async def clear_error_logs(db: AsyncSession) -> int:
    result = await db.execute(delete(ErrorLog))
    await db.commit()
    return result.rowcount or 0

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cloud_kitchen.models import AdminDevice


async def get_device_tokens(db: AsyncSession) -> List[str]:
    result = await db.execute(select(AdminDevice.token).order_by(AdminDevice.id))
    return list(result.scalars().all())


async def register_device(db: AsyncSession, token: str, user_id: Optional[str] = None) -> AdminDevice:
    """Повторная регистрация того же токена только обновляет user_id."""
    result = await db.execute(select(AdminDevice).where(AdminDevice.token == token))
    device = result.scalars().first()
    if device is None:
        device = AdminDevice(token=token, user_id=user_id)
        db.add(device)
    else:
        device.user_id = user_id
    await db.commit()
    return device


async def delete_device(db: AsyncSession, token: str) -> bool:
    result = await db.execute(select(AdminDevice).where(AdminDevice.token == token))
    device = result.scalars().first()
    if not device:
        return False
    await db.delete(device)
    await db.commit()
    return True

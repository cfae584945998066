import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from cloud_kitchen.crud.device import delete_device, get_device_tokens, register_device
from cloud_kitchen.db.session import get_async_session
from cloud_kitchen.schemas.notification import DeviceTokenCreate, DeviceTokenRead
from cloud_kitchen.schemas.notification import NotificationSendRequest, NotificationSendResult
from cloud_kitchen.services.notifications import FcmClient, get_fcm_client, new_order_message

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.post("/tokens", response_model=DeviceTokenRead, status_code=201)
async def register_token(token_in: DeviceTokenCreate, db: AsyncSession = Depends(get_async_session)):
    """
    Регистрирует push-токен устройства администратора.
    """
    return await register_device(db, token_in.token, token_in.user_id)


@router.delete("/tokens/{token}", status_code=204)
async def unregister_token(token: str, db: AsyncSession = Depends(get_async_session)):
    deleted = await delete_device(db, token)
    if not deleted:
        raise HTTPException(status_code=404, detail="Token not found")


@router.post("/send", response_model=NotificationSendResult)
async def send_new_order_notification(
    send_in: NotificationSendRequest,
    db: AsyncSession = Depends(get_async_session),
    fcm: FcmClient = Depends(get_fcm_client),
):
    """
    Уведомление "New Order Received!" на указанный токен
    или на все зарегистрированные устройства.
    """
    tokens = [send_in.fcm_token] if send_in.fcm_token else await get_device_tokens(db)
    if not tokens:
        return NotificationSendResult(success=False, message="No admin tokens found")

    details = send_in.order_details
    result = await fcm.send_multicast(tokens, new_order_message(details.order_number, details.total, details.id))
    return NotificationSendResult(
        success=True,
        success_count=result.success_count,
        failure_count=result.failure_count,
    )

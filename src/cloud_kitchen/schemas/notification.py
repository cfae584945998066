from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, constr


class DeviceTokenCreate(BaseModel):
    token: constr(strip_whitespace=True, min_length=1)
    user_id: Optional[str] = None


class DeviceTokenRead(BaseModel):
    id: int
    token: str
    user_id: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class OrderDetails(BaseModel):
    id: Optional[int] = None
    order_number: str
    total: Decimal


class NotificationSendRequest(BaseModel):
    order_details: OrderDetails
    fcm_token: Optional[str] = None  # если не задан, шлём на все зарегистрированные устройства


class NotificationSendResult(BaseModel):
    success: bool
    success_count: int = 0
    failure_count: int = 0
    message: Optional[str] = None

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, condecimal


class PaymentInitiateRequest(BaseModel):
    amount: condecimal(gt=0)
    order_id: int
    user_id: str
    phone: Optional[str] = None


class PaymentInitiateResponse(BaseModel):
    url: str
    transaction_id: str
    amount: Optional[Decimal] = None

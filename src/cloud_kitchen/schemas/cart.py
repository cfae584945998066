from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, conint, constr

from cloud_kitchen.schemas.order import OrderRead, SelectedCustomization


def customizations_key(customizations) -> str:
    """Ключ набора опций: пары group_id:option_id, id опции уникален только внутри группы."""
    return ",".join(sorted(f"{c.group_id}:{c.option_id}" for c in customizations))


class SelectedOptionIn(BaseModel):
    group_id: str
    option_id: str


class CartLineIn(BaseModel):
    dish_id: int
    variant_id: Optional[str] = None
    quantity: conint(ge=1) = 1
    customizations: List[SelectedOptionIn] = []
    notes: Optional[str] = None


class CartLine(BaseModel):
    dish_id: int
    dish_name: str
    category_id: Optional[int] = None
    is_veg: bool = True
    quantity: int
    variant_id: Optional[str] = None
    variant_name: Optional[str] = None
    selected_customizations: List[SelectedCustomization] = []
    price: Decimal  # за единицу, со скидкой на блюдо и опциями
    original_price: Decimal  # за единицу, без скидки
    dish_discount_type: Optional[str] = None
    dish_discount_value: Optional[Decimal] = None
    notes: Optional[str] = None

    @property
    def customizations_key(self) -> str:
        return customizations_key(self.selected_customizations)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class CartTotals(BaseModel):
    subtotal: Decimal
    discount: Decimal = Decimal("0")
    discount_type: Optional[str] = None
    discount_value: Optional[Decimal] = None
    coupon_code: Optional[str] = None
    tax: Decimal = Decimal("0")
    total: Decimal


class CartQuoteRequest(BaseModel):
    items: List[CartLineIn]
    coupon_code: Optional[str] = None


class CartQuote(CartTotals):
    items: List[CartLine] = []
    item_count: int = 0


class CheckoutRequest(CartQuoteRequest):
    customer_name: constr(strip_whitespace=True, min_length=1)
    customer_phone: constr(strip_whitespace=True)
    customer_address: Optional[str] = None
    payment_mode: Literal["whatsapp", "online"] = "whatsapp"


class CheckoutResponse(BaseModel):
    order: OrderRead
    whatsapp_url: Optional[str] = None
    payment_url: Optional[str] = None
    transaction_id: Optional[str] = None

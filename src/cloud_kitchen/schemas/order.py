from pydantic import BaseModel, conint
from typing import Any, Dict, List, Literal, Optional
from datetime import datetime
from decimal import Decimal

from cloud_kitchen.models.order import OrderStatusEnum, OrderTypeEnum, PaymentMethodEnum


class SelectedCustomization(BaseModel):
    group_id: str
    group_name: str
    option_id: str
    option_name: str
    price: Decimal = Decimal("0")


class OrderItemBase(BaseModel):
    dish_id: int
    dish_name: str
    quantity: conint(ge=1) = 1
    price: Decimal
    original_price: Optional[Decimal] = None
    dish_discount_type: Optional[str] = None
    dish_discount_value: Optional[Decimal] = None
    is_veg: bool = True
    notes: Optional[str] = None
    variant_id: Optional[str] = None
    variant_name: Optional[str] = None
    selected_customizations: List[SelectedCustomization] = []


class OrderItemCreate(OrderItemBase):
    pass


class OrderItemRead(OrderItemBase):
    id: int

    class Config:
        from_attributes = True


class OrderCreate(BaseModel):
    """
    Заказ из админки. Если суммы не переданы, они считаются по позициям
    и настройкам ресторана.
    """

    order_number: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    items: List[OrderItemCreate]
    subtotal: Optional[Decimal] = None
    discount: Optional[Decimal] = None
    discount_type: Optional[Literal["percentage", "fixed"]] = None
    discount_value: Optional[Decimal] = None
    coupon_code: Optional[str] = None
    tax: Optional[Decimal] = None
    total: Optional[Decimal] = None
    status: OrderStatusEnum = OrderStatusEnum.pending
    order_type: OrderTypeEnum = OrderTypeEnum.dine_in
    table_number: Optional[str] = None
    notes: Optional[str] = None
    created_by: str = "admin"
    is_paid: bool = False
    is_viewed: bool = False
    payment_method: Optional[PaymentMethodEnum] = None


class OrderUpdate(BaseModel):
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    items: Optional[List[OrderItemCreate]] = None
    subtotal: Optional[Decimal] = None
    discount: Optional[Decimal] = None
    discount_type: Optional[Literal["percentage", "fixed"]] = None
    discount_value: Optional[Decimal] = None
    coupon_code: Optional[str] = None
    tax: Optional[Decimal] = None
    total: Optional[Decimal] = None
    status: Optional[OrderStatusEnum] = None  # любые переходы разрешены
    order_type: Optional[OrderTypeEnum] = None
    table_number: Optional[str] = None
    notes: Optional[str] = None
    is_paid: Optional[bool] = None
    is_viewed: Optional[bool] = None
    payment_method: Optional[PaymentMethodEnum] = None

    class Config:
        extra = "forbid"


class OrderRead(BaseModel):
    id: int
    order_number: str
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    items: List[OrderItemRead] = []
    subtotal: Decimal
    discount: Decimal = Decimal("0")
    discount_type: Optional[str] = None
    discount_value: Optional[Decimal] = None
    coupon_code: Optional[str] = None
    tax: Decimal
    total: Decimal
    status: OrderStatusEnum
    order_type: OrderTypeEnum
    table_number: Optional[str] = None
    notes: Optional[str] = None
    created_by: str
    is_paid: bool
    is_viewed: bool
    payment_method: Optional[PaymentMethodEnum] = None
    payment_details: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime
    count_items: int = 0

    @classmethod
    def from_orm_with_count(cls, order):
        result = cls.model_validate(order)
        result.count_items = sum(item.quantity for item in order.items)
        return result

    class Config:
        from_attributes = True

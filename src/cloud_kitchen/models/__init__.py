from .admin_device import AdminDevice
from .category import Category
from .dish import Dish, DiscountTypeEnum
from .error_log import ErrorLog
from .order import Order, OrderStatusEnum, OrderTypeEnum, PaymentMethodEnum
from .order_item import OrderItem
from .restaurant import Restaurant
from .section_item import SectionItem, SectionTypeEnum

__all__ = [
    "AdminDevice",
    "Category",
    "Dish",
    "DiscountTypeEnum",
    "ErrorLog",
    "Order",
    "OrderStatusEnum",
    "OrderTypeEnum",
    "PaymentMethodEnum",
    "OrderItem",
    "Restaurant",
    "SectionItem",
    "SectionTypeEnum",
]

import enum
from sqlalchemy import Column, Integer, String, Text, Numeric, Boolean, JSON, Enum as SAEnum
from sqlalchemy.orm import relationship
from ..db.base import Base, TimestampMixin


class OrderStatusEnum(str, enum.Enum):
    pending = "pending"
    preparing = "preparing"
    ready = "ready"
    delivered = "delivered"
    completed = "completed"
    cancelled = "cancelled"
    payment_pending = "payment_pending"
    payment_failed = "payment_failed"


class OrderTypeEnum(str, enum.Enum):
    dine_in = "dine-in"
    takeaway = "takeaway"
    delivery = "delivery"


class PaymentMethodEnum(str, enum.Enum):
    cash = "cash"
    card = "card"
    upi = "upi"
    online = "online"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Order(TimestampMixin, Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String(64), nullable=False, unique=True, index=True)  # ORD-YYYYMMDD-HHMMSS-XXX
    customer_name = Column(String(128), nullable=True)
    customer_phone = Column(String(32), nullable=True)
    customer_address = Column(Text, nullable=True)

    subtotal = Column(Numeric(10, 2), nullable=False, default=0)
    discount = Column(Numeric(10, 2), nullable=False, default=0)
    discount_type = Column(String(16), nullable=True)  # percentage | fixed
    discount_value = Column(Numeric(10, 2), nullable=True)
    coupon_code = Column(String(64), nullable=True)
    tax = Column(Numeric(10, 2), nullable=False, default=0)
    total = Column(Numeric(10, 2), nullable=False, default=0)

    status = Column(
        SAEnum(OrderStatusEnum, name="order_status", values_callable=_enum_values),
        nullable=False,
        default=OrderStatusEnum.pending,
        index=True,
    )
    order_type = Column(
        SAEnum(OrderTypeEnum, name="order_type", values_callable=_enum_values),
        nullable=False,
        default=OrderTypeEnum.delivery,
    )
    table_number = Column(String(16), nullable=True)
    notes = Column(Text, nullable=True)
    created_by = Column(String(128), nullable=False, default="admin")

    is_paid = Column(Boolean, nullable=False, default=False)
    is_viewed = Column(Boolean, nullable=False, default=False)
    payment_method = Column(
        SAEnum(PaymentMethodEnum, name="payment_method", values_callable=_enum_values), nullable=True
    )
    payment_transaction_id = Column(String(64), nullable=True, index=True)
    payment_details = Column(JSON, nullable=True)  # ответ платёжного шлюза

    # связи
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderItem.id",
    )

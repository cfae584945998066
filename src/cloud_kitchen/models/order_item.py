from sqlalchemy import Column, Integer, String, Text, Numeric, Boolean, JSON, ForeignKey
from sqlalchemy.orm import relationship
from ..db.base import Base


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    dish_id = Column(Integer, nullable=False)  # блюдо могут удалить, позиция заказа остаётся
    dish_name = Column(String(128), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    price = Column(Numeric(10, 2), nullable=False)  # цена за единицу после скидки на блюдо
    original_price = Column(Numeric(10, 2), nullable=True)  # до скидки, если она была
    dish_discount_type = Column(String(16), nullable=True)
    dish_discount_value = Column(Numeric(10, 2), nullable=True)
    is_veg = Column(Boolean, nullable=False, default=True)
    notes = Column(Text, nullable=True)
    variant_id = Column(String(64), nullable=True)
    variant_name = Column(String(128), nullable=True)
    selected_customizations = Column(JSON, nullable=False, default=list)

    # связи
    order = relationship("Order", back_populates="items")

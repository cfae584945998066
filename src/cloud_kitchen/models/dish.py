import enum
from sqlalchemy import Column, Integer, String, Text, Numeric, Boolean, JSON, Enum as SAEnum
from ..db.base import Base, TimestampMixin


class DiscountTypeEnum(str, enum.Enum):
    none = "none"
    percentage = "percentage"
    fixed = "fixed"


class Dish(TimestampMixin, Base):
    __tablename__ = "dishes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(128), nullable=False, index=True)
    # без ForeignKey: удаление категории не затрагивает блюда
    category_id = Column(Integer, nullable=False, index=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    image_url = Column(String(512), nullable=True)
    is_veg = Column(Boolean, nullable=False, default=True)
    is_available = Column(Boolean, nullable=False, default=True)
    tags = Column(JSON, nullable=False, default=list)  # spicy, bestseller
    variants = Column(JSON, nullable=False, default=list)  # [{id, name, price}]
    customizations = Column(JSON, nullable=False, default=list)  # [{id, name, min_selection, max_selection, options}]
    discount_type = Column(
        SAEnum(DiscountTypeEnum, name="discount_type"), nullable=False, default=DiscountTypeEnum.none
    )
    discount_value = Column(Numeric(10, 2), nullable=False, default=0)

import enum
from sqlalchemy import Column, Integer, String, Text, Numeric, Boolean, Enum as SAEnum
from ..db.base import Base, TimestampMixin


class SectionTypeEnum(str, enum.Enum):
    offers = "offers"
    todaysSpecial = "todaysSpecial"
    whatsNew = "whatsNew"


class SectionItem(TimestampMixin, Base):
    __tablename__ = "section_items"

    id = Column(Integer, primary_key=True, index=True)
    section_type = Column(SAEnum(SectionTypeEnum, name="section_type"), nullable=False, index=True)
    title = Column(String(128), nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String(512), nullable=True)
    price = Column(Numeric(10, 2), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    priority = Column(Integer, nullable=False, default=0)  # меньше = выше в карусели
    coupon_code = Column(String(64), nullable=True, index=True)
    discount_type = Column(String(16), nullable=True)  # percentage | fixed
    discount_value = Column(Numeric(10, 2), nullable=True)

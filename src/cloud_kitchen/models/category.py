from sqlalchemy import Column, Integer, String, Text, Boolean
from ..db.base import Base, TimestampMixin


class Category(TimestampMixin, Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(128), nullable=False)
    slug = Column(String(128), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    order = Column(Integer, nullable=False, default=0)  # порядок в меню
    is_active = Column(Boolean, nullable=False, default=True)

from sqlalchemy import Column, Integer, String, Boolean, JSON
from ..db.base import Base, TimestampMixin


class Restaurant(TimestampMixin, Base):
    """Профиль ресторана. В таблице хранится одна строка."""

    __tablename__ = "restaurant"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(128), nullable=False)
    logo_url = Column(String(512), nullable=True)
    tagline = Column(String(256), nullable=True)
    address = Column(String(512), nullable=True)
    phone = Column(String(32), nullable=True)
    whatsapp_number = Column(String(32), nullable=True)  # с кодом страны, например 919876543210
    email = Column(String(128), nullable=True)
    opening_hours = Column(String(128), nullable=True)
    social_links = Column(JSON, nullable=False, default=dict)
    is_gst_enabled = Column(Boolean, nullable=False, default=False)
    gst_number = Column(String(32), nullable=True)

from sqlalchemy import Column, Integer, String
from ..db.base import Base, TimestampMixin


class AdminDevice(TimestampMixin, Base):
    """Токен устройства администратора для push-уведомлений."""

    __tablename__ = "admin_devices"

    id = Column(Integer, primary_key=True, index=True)
    token = Column(String(512), nullable=False, unique=True)
    user_id = Column(String(128), nullable=True, index=True)

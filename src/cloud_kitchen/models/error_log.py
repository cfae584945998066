from sqlalchemy import Column, Integer, String, Text, JSON
from ..db.base import Base, TimestampMixin


class ErrorLog(TimestampMixin, Base):
    __tablename__ = "error_logs"

    id = Column(Integer, primary_key=True, index=True)
    message = Column(Text, nullable=False)
    stack = Column(Text, nullable=True)
    url = Column(String(1024), nullable=True)
    user_agent = Column(String(512), nullable=True)
    user_id = Column(String(128), nullable=True)
    additional_info = Column(JSON, nullable=True)

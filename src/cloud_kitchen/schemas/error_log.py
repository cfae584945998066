from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel


class ErrorLogCreate(BaseModel):
    message: str
    stack: Optional[str] = None
    url: Optional[str] = None
    user_agent: Optional[str] = None
    user_id: Optional[str] = None
    additional_info: Optional[Dict[str, Any]] = None


class ErrorLogRead(ErrorLogCreate):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel

from cloud_kitchen.models.section_item import SectionTypeEnum


class SectionItemBase(BaseModel):
    section_type: SectionTypeEnum
    title: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    price: Optional[Decimal] = None
    is_active: bool = True
    priority: int = 0
    coupon_code: Optional[str] = None
    discount_type: Optional[Literal["percentage", "fixed"]] = None
    discount_value: Optional[Decimal] = None


class SectionItemCreate(SectionItemBase):
    pass


class SectionItemUpdate(BaseModel):
    section_type: Optional[SectionTypeEnum] = None
    title: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    price: Optional[Decimal] = None
    is_active: Optional[bool] = None
    priority: Optional[int] = None
    coupon_code: Optional[str] = None
    discount_type: Optional[Literal["percentage", "fixed"]] = None
    discount_value: Optional[Decimal] = None

    class Config:
        extra = "forbid"


class SectionItemRead(SectionItemBase):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

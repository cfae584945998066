from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, condecimal, conint, model_validator

from cloud_kitchen.models.dish import DiscountTypeEnum


def _check_unique(ids, what: str) -> None:
    seen = set()
    for item_id in ids:
        if item_id in seen:
            raise ValueError(f"Duplicate {what} id '{item_id}'")
        seen.add(item_id)


def _check_dish_options(dish):
    """id вариантов и групп опций внутри блюда не повторяются."""
    _check_unique((v.id for v in dish.variants or []), "variant")
    _check_unique((g.id for g in dish.customizations or []), "customization group")
    return dish


class DishVariant(BaseModel):
    id: str
    name: str
    price: condecimal(ge=0)


class CustomizationOption(BaseModel):
    id: str
    name: str
    price: condecimal(ge=0) = Decimal("0")


class CustomizationGroup(BaseModel):
    id: str
    name: str
    min_selection: conint(ge=0) = 0
    max_selection: conint(ge=0) = 1
    options: List[CustomizationOption] = []

    @model_validator(mode="after")
    def check_selection(self):
        if self.min_selection > self.max_selection:
            raise ValueError(f"Group '{self.name}': min_selection is greater than max_selection")
        _check_unique((o.id for o in self.options), f"option in group '{self.name}'")
        return self


class DishBase(BaseModel):
    name: str
    category_id: int
    description: Optional[str] = None
    price: condecimal(ge=0)
    image_url: Optional[str] = None
    is_veg: bool = True
    is_available: bool = True
    tags: List[str] = []
    variants: List[DishVariant] = []
    customizations: List[CustomizationGroup] = []
    discount_type: DiscountTypeEnum = DiscountTypeEnum.none
    discount_value: condecimal(ge=0) = Decimal("0")

    @model_validator(mode="after")
    def check_unique_ids(self):
        return _check_dish_options(self)


class DishCreate(DishBase):
    pass


class DishUpdate(BaseModel):
    name: Optional[str] = None
    category_id: Optional[int] = None
    description: Optional[str] = None
    price: Optional[condecimal(ge=0)] = None
    image_url: Optional[str] = None
    is_veg: Optional[bool] = None
    is_available: Optional[bool] = None
    tags: Optional[List[str]] = None
    variants: Optional[List[DishVariant]] = None
    customizations: Optional[List[CustomizationGroup]] = None
    discount_type: Optional[DiscountTypeEnum] = None
    discount_value: Optional[condecimal(ge=0)] = None

    @model_validator(mode="after")
    def check_unique_ids(self):
        return _check_dish_options(self)

    class Config:
        extra = "forbid"


class DishRead(DishBase):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MenuDishRead(DishRead):
    """Блюдо для витрины: с уже посчитанной скидкой."""

    discounted_price: Decimal
    has_discount: bool = False

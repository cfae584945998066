from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel

from cloud_kitchen.schemas.category import CategoryRead
from cloud_kitchen.schemas.dish import CustomizationGroup, DishVariant, MenuDishRead
from cloud_kitchen.schemas.restaurant import RestaurantRead
from cloud_kitchen.schemas.section_item import SectionItemRead
from cloud_kitchen.models.dish import DiscountTypeEnum


class MenuCategory(CategoryRead):
    dishes: List[MenuDishRead] = []


class MenuRead(BaseModel):
    restaurant: RestaurantRead
    categories: List[MenuCategory] = []
    sections: Dict[str, List[SectionItemRead]] = {}


class MenuImportCategory(BaseModel):
    name: str
    slug: str
    description: Optional[str] = None
    order: int = 0
    is_active: bool = True


class MenuImportDish(BaseModel):
    name: str
    category_slug: str
    description: Optional[str] = None
    price: Decimal
    image_url: Optional[str] = None
    is_veg: bool = True
    is_available: bool = True
    tags: List[str] = []
    variants: List[DishVariant] = []
    customizations: List[CustomizationGroup] = []
    discount_type: DiscountTypeEnum = DiscountTypeEnum.none
    discount_value: Decimal = Decimal("0")


class MenuImportRequest(BaseModel):
    categories: List[MenuImportCategory] = []
    dishes: List[MenuImportDish] = []


class MenuImportResult(BaseModel):
    categories: int = 0
    dishes: int = 0
    skipped: List[str] = []  # блюда с неизвестной категорией

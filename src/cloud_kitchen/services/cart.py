"""
Корзина покупателя: позиции, объединение одинаковых позиций и итоги.

Блюдо передаётся как ORM-модель Dish или схема DishRead; варианты
и группы кастомизаций могут быть как словарями (JSON-колонка), так и моделями.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional

from cloud_kitchen.exceptions import CartError
from cloud_kitchen.schemas.cart import CartLine, CartTotals, SelectedOptionIn, customizations_key
from cloud_kitchen.schemas.order import SelectedCustomization
from cloud_kitchen.services.discount import calculate_dish_discount, discount_amount

CENT = Decimal("0.01")


def _get(obj: Any, key: str, default: Any = None) -> Any:
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


def _money(value: Any) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def _enum_text(value: Any) -> Optional[str]:
    return getattr(value, "value", value)


def gst_applies(restaurant: Optional[Any]) -> bool:
    """Налог считается только если GST включён и указан GST-номер."""
    return bool(restaurant is not None and _get(restaurant, "is_gst_enabled") and _get(restaurant, "gst_number"))


def compute_totals(
    subtotal: Decimal,
    restaurant: Optional[Any] = None,
    tax_rate: Decimal = Decimal("0.05"),
    discount_type: Optional[str] = None,
    discount_value: Optional[Decimal] = None,
    coupon_code: Optional[str] = None,
) -> CartTotals:
    """
    Итоги заказа:
    - discount: скидка по купону от subtotal
    - tax: tax_rate от (subtotal - discount), если у ресторана есть GST
    - total = subtotal - discount + tax
    """
    subtotal = _money(subtotal)
    discount = _money(discount_amount(subtotal, discount_type, discount_value)) if discount_type else Decimal("0.00")
    taxable = subtotal - discount
    tax = _money(taxable * Decimal(str(tax_rate))) if gst_applies(restaurant) else Decimal("0.00")

    return CartTotals(
        subtotal=subtotal,
        discount=discount,
        discount_type=discount_type if discount > 0 else None,
        discount_value=discount_value if discount > 0 else None,
        coupon_code=coupon_code if discount > 0 else None,
        tax=tax,
        total=_money(taxable + tax),
    )


def _resolve_customizations(dish: Any, selected: Iterable[SelectedOptionIn]) -> List[SelectedCustomization]:
    groups = {str(_get(g, "id")): g for g in (_get(dish, "customizations") or [])}
    chosen: Dict[str, List[SelectedCustomization]] = {group_id: [] for group_id in groups}

    for sel in selected:
        group = groups.get(sel.group_id)
        if group is None:
            raise CartError(f"Unknown customization group '{sel.group_id}' for dish {_get(dish, 'id')}")
        options = {str(_get(o, "id")): o for o in (_get(group, "options") or [])}
        option = options.get(sel.option_id)
        if option is None:
            raise CartError(f"Unknown option '{sel.option_id}' in group '{_get(group, 'name')}'")
        if any(c.option_id == sel.option_id for c in chosen[sel.group_id]):
            continue
        chosen[sel.group_id].append(
            SelectedCustomization(
                group_id=sel.group_id,
                group_name=_get(group, "name"),
                option_id=sel.option_id,
                option_name=_get(option, "name"),
                price=Decimal(str(_get(option, "price") or 0)),
            )
        )

    result: List[SelectedCustomization] = []
    for group_id, group in groups.items():
        count = len(chosen[group_id])
        min_sel = int(_get(group, "min_selection") or 0)
        max_sel = _get(group, "max_selection")
        if count < min_sel:
            raise CartError(f"Select at least {min_sel} option(s) in '{_get(group, 'name')}'")
        if max_sel is not None and count > int(max_sel):
            raise CartError(f"Select at most {max_sel} option(s) in '{_get(group, 'name')}'")
        result.extend(chosen[group_id])
    return result


class Cart:
    """Список позиций корзины с итогами."""

    def __init__(self, lines: Optional[List[CartLine]] = None):
        self.lines: List[CartLine] = list(lines or [])

    def _find(self, dish_id: int, variant_id: Optional[str], customizations_key: Optional[str]) -> List[CartLine]:
        return [
            line
            for line in self.lines
            if line.dish_id == dish_id
            and line.variant_id == variant_id
            and (customizations_key is None or line.customizations_key == customizations_key)
        ]

    def add(
        self,
        dish: Any,
        variant_id: Optional[str] = None,
        quantity: int = 1,
        selected_customizations: Optional[Iterable[SelectedOptionIn]] = None,
        notes: Optional[str] = None,
    ) -> CartLine:
        if quantity < 1:
            raise CartError("Quantity must be at least 1")
        if not _get(dish, "is_available", True):
            raise CartError(f"Dish '{_get(dish, 'name')}' is not available")

        variant = None
        if variant_id is not None:
            variant = next((v for v in (_get(dish, "variants") or []) if str(_get(v, "id")) == variant_id), None)
            if variant is None:
                raise CartError(f"Unknown variant '{variant_id}' for dish '{_get(dish, 'name')}'")

        customizations = _resolve_customizations(dish, selected_customizations or [])
        key = customizations_key(customizations)

        for line in self._find(_get(dish, "id"), variant_id, key):
            if line.notes == notes:
                line.quantity += quantity
                return line

        base_price = Decimal(str(_get(variant, "price"))) if variant is not None else Decimal(str(_get(dish, "price")))
        options_price = sum((c.price for c in customizations), Decimal("0"))
        discount = calculate_dish_discount(dish, base_price)

        line = CartLine(
            dish_id=_get(dish, "id"),
            dish_name=_get(dish, "name"),
            category_id=_get(dish, "category_id"),
            is_veg=bool(_get(dish, "is_veg", True)),
            quantity=quantity,
            variant_id=variant_id,
            variant_name=_get(variant, "name") if variant is not None else None,
            selected_customizations=customizations,
            price=_money(discount.discounted_price + options_price),
            original_price=_money(base_price + options_price),
            dish_discount_type=_enum_text(_get(dish, "discount_type")) if discount.has_discount else None,
            dish_discount_value=Decimal(str(_get(dish, "discount_value"))) if discount.has_discount else None,
            notes=notes,
        )
        self.lines.append(line)
        return line

    def remove(self, dish_id: int, variant_id: Optional[str] = None, customizations_key: Optional[str] = None) -> None:
        """customizations_key=None удаляет позиции блюда с любыми опциями."""
        doomed = {id(line) for line in self._find(dish_id, variant_id, customizations_key)}
        self.lines = [line for line in self.lines if id(line) not in doomed]

    def update_quantity(
        self,
        dish_id: int,
        quantity: int,
        variant_id: Optional[str] = None,
        customizations_key: Optional[str] = None,
    ) -> None:
        if quantity <= 0:
            self.remove(dish_id, variant_id, customizations_key)
            return
        for line in self._find(dish_id, variant_id, customizations_key):
            line.quantity = quantity

    def clear(self) -> None:
        self.lines = []

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def subtotal(self) -> Decimal:
        return _money(sum((line.line_total for line in self.lines), Decimal("0")))

    def totals(
        self,
        restaurant: Optional[Any] = None,
        tax_rate: Decimal = Decimal("0.05"),
        coupon: Optional[Any] = None,
    ) -> CartTotals:
        """coupon - SectionItem с coupon_code и discount_type/discount_value."""
        if coupon is None:
            return compute_totals(self.subtotal, restaurant, tax_rate)
        return compute_totals(
            self.subtotal,
            restaurant,
            tax_rate,
            discount_type=_get(coupon, "discount_type"),
            discount_value=_get(coupon, "discount_value"),
            coupon_code=_get(coupon, "coupon_code"),
        )

from pydantic import BaseModel
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional, Union

Number = Union[Decimal, int, float, str]


class DishDiscount(BaseModel):
    original_price: Decimal
    discounted_price: Decimal
    has_discount: bool
    discount_amount: Decimal


def _to_decimal(value: Optional[Number]) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _type_name(discount_type: Any) -> Optional[str]:
    # принимает и DiscountTypeEnum, и просто строку
    return getattr(discount_type, "value", discount_type)


def discount_amount(price: Number, discount_type: Any, discount_value: Optional[Number]) -> Decimal:
    """
    Размер скидки для суммы price.
    percentage: price * value / 100, fixed: min(value, price), иначе 0.
    Скидка никогда не больше самой суммы.
    """
    price = _to_decimal(price)
    value = _to_decimal(discount_value)
    kind = _type_name(discount_type)

    if not kind or kind == "none" or value <= 0:
        return Decimal("0")
    if kind == "percentage":
        amount = price * value / Decimal("100")
    elif kind == "fixed":
        amount = min(value, price)
    else:
        raise ValueError(f"Unknown discount type: {kind}")
    return min(amount, price)


def apply_discount(price: Number, discount_type: Any, discount_value: Optional[Number]) -> Decimal:
    """Сумма после скидки, не меньше нуля. Без округления."""
    price = _to_decimal(price)
    return max(Decimal("0"), price - discount_amount(price, discount_type, discount_value))


def calculate_dish_discount(dish: Any, base_price: Optional[Number] = None) -> DishDiscount:
    """
    Считает цену блюда со скидкой.

    dish - любой объект с price, discount_type и discount_value (ORM-модель или схема).
    base_price - цена варианта блюда; по умолчанию dish.price.
    Итоговая цена округляется до целого (половина вверх).
    """
    price = _to_decimal(dish.price if base_price is None else base_price)
    kind = _type_name(getattr(dish, "discount_type", None))
    value = _to_decimal(getattr(dish, "discount_value", None))

    if not kind or kind == "none" or value <= 0:
        return DishDiscount(
            original_price=price,
            discounted_price=price,
            has_discount=False,
            discount_amount=Decimal("0"),
        )

    amount = discount_amount(price, kind, value)
    discounted = max(Decimal("0"), price - amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP)

    return DishDiscount(
        original_price=price,
        discounted_price=discounted,
        has_discount=True,
        discount_amount=amount,
    )

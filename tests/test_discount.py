from decimal import Decimal

import pytest

from cloud_kitchen.services.discount import apply_discount, calculate_dish_discount, discount_amount


def test_percentage_discount(make_dish):
    d = calculate_dish_discount(make_dish(price=Decimal("200"), discount_type="percentage", discount_value=10))
    assert d.has_discount is True
    assert d.original_price == Decimal("200")
    assert d.discounted_price == Decimal("180")
    assert d.discount_amount == Decimal("20")


def test_fixed_discount_never_below_zero(make_dish):
    d = calculate_dish_discount(make_dish(price=Decimal("50"), discount_type="fixed", discount_value=100))
    assert d.discounted_price == Decimal("0")
    assert d.discount_amount == Decimal("50")


@pytest.mark.parametrize("kind, value", [("none", 10), (None, 10), ("percentage", 0), ("fixed", None)])
def test_no_discount(make_dish, kind, value):
    d = calculate_dish_discount(make_dish(discount_type=kind, discount_value=value))
    assert d.has_discount is False
    assert d.discounted_price == d.original_price == Decimal("200")


def test_discounted_price_rounds_half_up_to_whole_unit(make_dish):
    # 199 * 15% = 29.85 -> 169.15 -> 169
    d = calculate_dish_discount(make_dish(price=Decimal("199"), discount_type="percentage", discount_value=15))
    assert d.discounted_price == Decimal("169")
    # 101 * 50% = 50.5 -> 51
    d = calculate_dish_discount(make_dish(price=Decimal("101"), discount_type="percentage", discount_value=50))
    assert d.discounted_price == Decimal("51")


def test_variant_price_overrides_dish_price(make_dish):
    dish = make_dish(price=Decimal("200"), discount_type="percentage", discount_value=10)
    d = calculate_dish_discount(dish, base_price=Decimal("320"))
    assert d.original_price == Decimal("320")
    assert d.discounted_price == Decimal("288")


def test_apply_discount_keeps_cents():
    assert apply_discount(Decimal("99.90"), "percentage", 10) == Decimal("89.910")
    assert apply_discount(Decimal("30"), "fixed", 45) == Decimal("0")


def test_unknown_discount_type():
    with pytest.raises(ValueError):
        discount_amount(Decimal("100"), "bogo", 1)

from decimal import Decimal
from types import SimpleNamespace

import pytest

from cloud_kitchen.exceptions import CartError
from cloud_kitchen.schemas.cart import SelectedOptionIn
from cloud_kitchen.services.cart import Cart, compute_totals, gst_applies

SPICE = {
    "id": "spice",
    "name": "Spice level",
    "min_selection": 1,
    "max_selection": 1,
    "options": [
        {"id": "mild", "name": "Mild", "price": "0"},
        {"id": "hot", "name": "Hot", "price": "0"},
    ],
}
EXTRAS = {
    "id": "extras",
    "name": "Extras",
    "min_selection": 0,
    "max_selection": 2,
    "options": [
        {"id": "cheese", "name": "Cheese", "price": "30"},
        {"id": "butter", "name": "Butter", "price": "15"},
        {"id": "onion", "name": "Onion", "price": "10"},
    ],
}

GST_ON = SimpleNamespace(is_gst_enabled=True, gst_number="23ABCDE1234F1Z5")


def _opts(*pairs):
    return [SelectedOptionIn(group_id=g, option_id=o) for g, o in pairs]


@pytest.fixture()
def curry(make_dish):
    return make_dish(
        id=7,
        name="Paneer Curry",
        price=Decimal("200"),
        variants=[{"id": "half", "name": "Half", "price": "120"}, {"id": "full", "name": "Full", "price": "200"}],
        customizations=[SPICE, EXTRAS],
        discount_type="percentage",
        discount_value=Decimal("10"),
    )


def test_line_price_applies_discount_to_base_only(curry):
    cart = Cart()
    line = cart.add(curry, "full", 1, _opts(("spice", "hot"), ("extras", "cheese")))

    # 200 - 10% = 180, сыр +30 без скидки
    assert line.price == Decimal("210.00")
    assert line.original_price == Decimal("230.00")
    assert line.variant_name == "Full"
    assert line.dish_discount_type == "percentage"
    assert [c.option_name for c in line.selected_customizations] == ["Hot", "Cheese"]


def test_same_line_is_merged(curry):
    cart = Cart()
    cart.add(curry, "half", 1, _opts(("spice", "mild"), ("extras", "cheese"), ("extras", "butter")))
    cart.add(curry, "half", 2, _opts(("extras", "butter"), ("extras", "cheese"), ("spice", "mild")))

    assert len(cart.lines) == 1
    assert cart.item_count == 3


def test_different_options_or_notes_are_separate_lines(curry):
    cart = Cart()
    cart.add(curry, "half", 1, _opts(("spice", "mild")))
    cart.add(curry, "half", 1, _opts(("spice", "hot")))
    cart.add(curry, "half", 1, _opts(("spice", "hot")), notes="no onion")
    cart.add(curry, "full", 1, _opts(("spice", "hot")))

    assert len(cart.lines) == 4


def test_min_selection_enforced(curry):
    with pytest.raises(CartError):
        Cart().add(curry, "full", 1, [])


def test_max_selection_enforced(curry):
    with pytest.raises(CartError):
        Cart().add(
            curry,
            "full",
            1,
            _opts(("spice", "mild"), ("extras", "cheese"), ("extras", "butter"), ("extras", "onion")),
        )


@pytest.mark.parametrize(
    "variant, options",
    [("family", [("spice", "mild")]), ("full", [("sauce", "mild")]), ("full", [("spice", "extra-hot")])],
)
def test_unknown_variant_group_or_option(curry, variant, options):
    with pytest.raises(CartError):
        Cart().add(curry, variant, 1, _opts(*options))


def test_same_option_id_in_different_groups_not_merged(make_dish):
    def group(group_id, price):
        return {
            "id": group_id,
            "name": group_id.title(),
            "min_selection": 0,
            "max_selection": 1,
            "options": [{"id": "extra", "name": "Extra", "price": price}],
        }

    pasta = make_dish(id=3, price=Decimal("200"), customizations=[group("sauce", "10"), group("cheese", "50")])
    cart = Cart()
    sauce = cart.add(pasta, None, 1, _opts(("sauce", "extra")))
    cheese = cart.add(pasta, None, 1, _opts(("cheese", "extra")))

    assert len(cart.lines) == 2
    assert sauce.customizations_key == "sauce:extra"
    assert cheese.price == Decimal("250.00")
    assert cart.subtotal == Decimal("460.00")


def test_unavailable_dish_rejected(make_dish):
    with pytest.raises(CartError):
        Cart().add(make_dish(is_available=False))


def test_remove_update_and_clear(make_dish, curry):
    cart = Cart()
    plain = make_dish(id=1, price=Decimal("99.50"))
    cart.add(plain, quantity=2)
    cart.add(curry, "half", 1, _opts(("spice", "mild")))
    cart.add(curry, "half", 1, _opts(("spice", "hot")))

    cart.update_quantity(1, 5)
    assert cart.item_count == 7

    cart.remove(7, "half", "spice:hot")
    assert cart.item_count == 6

    cart.update_quantity(7, 0, "half")
    assert [line.dish_id for line in cart.lines] == [1]
    assert cart.subtotal == Decimal("497.50")

    cart.clear()
    assert cart.item_count == 0
    assert cart.subtotal == Decimal("0.00")


def test_totals_with_gst_and_coupon(make_dish):
    cart = Cart()
    cart.add(make_dish(price=Decimal("250")), quantity=2)
    coupon = SimpleNamespace(coupon_code="SAVE10", discount_type="percentage", discount_value=Decimal("10"))

    totals = cart.totals(GST_ON, Decimal("0.05"), coupon)

    assert totals.subtotal == Decimal("500.00")
    assert totals.discount == Decimal("50.00")
    assert totals.tax == Decimal("22.50")
    assert totals.total == Decimal("472.50")
    assert totals.coupon_code == "SAVE10"


def test_no_tax_without_gst_number():
    assert gst_applies(SimpleNamespace(is_gst_enabled=True, gst_number="")) is False
    assert gst_applies(SimpleNamespace(is_gst_enabled=False, gst_number="23ABCDE1234F1Z5")) is False
    assert gst_applies(None) is False

    totals = compute_totals(Decimal("100"), SimpleNamespace(is_gst_enabled=True, gst_number=None))
    assert totals.tax == Decimal("0.00")
    assert totals.total == Decimal("100.00")


def test_fixed_coupon_capped_at_subtotal():
    totals = compute_totals(Decimal("40"), GST_ON, Decimal("0.05"), "fixed", Decimal("100"), "BIG100")
    assert totals.discount == Decimal("40.00")
    assert totals.tax == Decimal("0.00")
    assert totals.total == Decimal("0.00")

from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest

from cloud_kitchen.services.receipts import build_bill, build_kot
from cloud_kitchen.services.thermal_printer import PRINTER_WIDTH


@pytest.fixture()
def order():
    items = [
        SimpleNamespace(
            dish_name="Margherita",
            variant_name="Large",
            quantity=2,
            price=Decimal("318.00"),
            is_veg=True,
            notes="extra crispy",
            selected_customizations=[{"option_name": "Cheese"}],
        ),
        SimpleNamespace(
            dish_name="Chicken Wings",
            variant_name=None,
            quantity=1,
            price=Decimal("250.00"),
            is_veg=False,
            notes=None,
            selected_customizations=[],
        ),
    ]
    return SimpleNamespace(
        order_number="ORD-20260115-193000-042",
        created_at=datetime(2026, 1, 15, 19, 30),
        order_type="delivery",
        table_number=None,
        customer_name="Asha",
        customer_phone="9876543210",
        items=items,
        subtotal=Decimal("886.00"),
        discount=Decimal("50.00"),
        coupon_code="SAVE50",
        tax=Decimal("41.80"),
        total=Decimal("877.80"),
        is_paid=False,
        payment_method=None,
        notes="Ring the bell twice",
    )


@pytest.fixture()
def restaurant():
    return SimpleNamespace(
        name="SG Cloud Kitchen",
        address="Plot 213, Shraddha Shri Colony, New Malviya Nagar, Indore",
        phone="744-044-0128",
        email="kitchen@example.com",
        is_gst_enabled=True,
        gst_number="23ABCDE1234F1Z5",
    )


def test_bill_layout(order, restaurant):
    bill = build_bill(order, restaurant)
    lines = bill.split("\n")

    assert "SG CLOUD KITCHEN" in bill
    assert "TAX INVOICE" in bill
    assert "GSTIN: 23ABCDE1234F1Z5" in bill
    assert "15/01/2026" in bill
    assert "07:30 PM" in bill
    assert "Margherita (Large)" in bill
    assert "  + Cheese" in lines
    assert "Discount (SAVE50):" in bill
    assert "GST (5%):" in bill
    assert "Rs.877.80" in bill
    assert "** UNPAID **" in bill
    assert all(len(line) <= PRINTER_WIDTH for line in lines)


def test_bill_item_amounts(order):
    bill = build_bill(order)
    assert any(line.startswith("[V] 2 x Rs.318.00") and line.endswith("Rs.636.00") for line in bill.split("\n"))
    assert any(line.startswith("[N] 1 x Rs.250.00") for line in bill.split("\n"))


def test_bill_long_customer_name_fits_paper(order, restaurant):
    order.customer_name = "Venkataraman Subramaniam Iyer Jr"
    lines = build_bill(order, restaurant).split("\n")

    assert any(line.startswith(" Venkataraman") for line in lines)
    assert all(len(line) <= PRINTER_WIDTH for line in lines)


def test_bill_paid_without_restaurant(order):
    order.is_paid = True
    order.payment_method = "upi"
    order.discount = Decimal("0")
    order.tax = Decimal("0")
    bill = build_bill(order, None)

    assert "TAX INVOICE" in bill
    assert "PAID" in bill
    assert "UPI" in bill
    assert "Discount" not in bill
    assert "GST" not in bill


def test_kot_lists_items_without_prices(order, restaurant):
    kot = build_kot(order, restaurant, printed_at=datetime(2026, 1, 15, 19, 31))
    lines = kot.split("\n")

    assert "KITCHEN ORDER TICKET" in kot
    assert "1. Margherita (Large)" in lines
    assert "   [VEG]" in lines
    assert "   + Cheese" in lines
    assert "   Qty: 2" in lines
    assert "   ** extra crispy **" in lines
    assert "2. Chicken Wings" in lines
    assert "   [NON-VEG]" in lines
    assert "SPECIAL INSTRUCTIONS:" in lines
    assert "Ring the bell twice" in lines
    assert "Rs." not in kot
    assert "15/01/2026 07:31 PM" in kot

"""
Тексты для печати: счёт (tax invoice) и KOT для кухни.

order - ORM-модель Order или OrderRead, restaurant - Restaurant/RestaurantRead или None.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from cloud_kitchen.services.thermal_printer import (
    PRINTER_WIDTH,
    center_text,
    format_currency,
    separator,
    split_line,
    truncate,
    wrap_text,
)

DATE_FORMAT = "%d/%m/%Y"
TIME_FORMAT = "%I:%M %p"


def _enum_text(value: Any) -> str:
    return str(getattr(value, "value", value) or "")


def _percent_label(rate: Decimal) -> str:
    text = f"{Decimal(str(rate)) * 100:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _item_title(item: Any) -> str:
    title = item.dish_name
    if item.variant_name:
        title = f"{title} ({item.variant_name})"
    return title


def _option_names(item: Any) -> List[str]:
    names = []
    for option in item.selected_customizations or []:
        name = option.get("option_name") if isinstance(option, dict) else option.option_name
        if name:
            names.append(name)
    return names


def _order_header(order: Any, number_label: str) -> List[str]:
    created_at = order.created_at or datetime.now()
    lines = [
        split_line(number_label, order.order_number),
        split_line("Date:", created_at.strftime(DATE_FORMAT)),
        split_line("Time:", created_at.strftime(TIME_FORMAT)),
        split_line("Type:", _enum_text(order.order_type).upper()),
    ]
    if order.table_number:
        lines.append(split_line("Table:", order.table_number))
    return lines


def build_bill(order: Any, restaurant: Optional[Any] = None, tax_rate: Decimal = Decimal("0.05")) -> str:
    lines: List[str] = [""]

    if restaurant is not None and restaurant.name:
        lines += [center_text(line) for line in wrap_text(restaurant.name.upper())]
    lines.append(center_text("TAX INVOICE"))
    lines.append(separator("="))

    if restaurant is not None:
        if restaurant.address:
            lines += [center_text(line) for line in wrap_text(restaurant.address, PRINTER_WIDTH)]
        if restaurant.phone:
            lines.append(center_text(f"Tel: {restaurant.phone}"))
        if restaurant.email:
            lines.append(center_text(restaurant.email))
        if restaurant.is_gst_enabled and restaurant.gst_number:
            lines.append(center_text(f"GSTIN: {restaurant.gst_number}"))
    lines.append(separator("="))

    lines += _order_header(order, "Bill No:")

    if order.customer_name or order.customer_phone:
        lines.append(separator("-"))
        if order.customer_name:
            lines.append(split_line("Customer:", order.customer_name))
        if order.customer_phone:
            lines.append(split_line("Phone:", order.customer_phone))
    lines.append(separator("="))

    lines.append(split_line("Item", "Amount"))
    lines.append(separator("-"))

    for item in order.items:
        lines.append(truncate(_item_title(item), PRINTER_WIDTH))
        for name in _option_names(item):
            lines.append(truncate(f"  + {name}", PRINTER_WIDTH))
        veg_tag = "[V]" if item.is_veg else "[N]"
        price = Decimal(str(item.price))
        lines.append(
            split_line(
                f"{veg_tag} {item.quantity} x {format_currency(price)}",
                format_currency(price * item.quantity),
            )
        )

    lines.append(separator("-"))
    lines.append(split_line("Subtotal:", format_currency(order.subtotal)))
    if order.discount and Decimal(str(order.discount)) > 0:
        label = f"Discount ({order.coupon_code}):" if order.coupon_code else "Discount:"
        lines.append(split_line(label, "-" + format_currency(order.discount)))
    if order.tax and Decimal(str(order.tax)) > 0:
        lines.append(split_line(f"GST ({_percent_label(tax_rate)}%):", format_currency(order.tax)))
    lines.append(separator("="))
    lines.append(split_line("TOTAL:", format_currency(order.total)))
    lines.append(separator("="))

    if order.is_paid:
        lines.append(split_line("Payment:", "PAID"))
        if order.payment_method:
            lines.append(split_line("Method:", _enum_text(order.payment_method).upper()))
    else:
        lines.append(center_text("** UNPAID **"))
    lines.append(separator("-"))

    lines += [
        "",
        center_text("Thank you for your order!"),
        center_text("Please visit again"),
        "",
        separator("="),
        center_text("Powered by Kitchen App"),
        "",
    ]
    return "\n".join(lines)


def build_kot(order: Any, restaurant: Optional[Any] = None, printed_at: Optional[datetime] = None) -> str:
    printed_at = printed_at or datetime.now()

    lines: List[str] = [
        center_text("KITCHEN ORDER TICKET"),
        center_text("(KOT)"),
        separator("="),
    ]
    if restaurant is not None and restaurant.name:
        lines.append(center_text(restaurant.name))
        lines.append(separator("-"))

    lines += _order_header(order, "Order:")
    lines.append(separator("="))

    lines.append("ITEMS:")
    lines.append(separator("-"))
    for index, item in enumerate(order.items, start=1):
        lines.append(f"{index}. {_item_title(item)}")
        lines.append("   [VEG]" if item.is_veg else "   [NON-VEG]")
        for name in _option_names(item):
            lines.append(f"   + {name}")
        lines.append(f"   Qty: {item.quantity}")
        if item.notes:
            lines.append(f"   ** {item.notes} **")
        lines.append("")

    lines.append(separator("-"))
    lines.append(split_line("Total Items:", str(len(order.items))))
    lines.append(separator("="))

    if order.notes:
        lines.append("SPECIAL INSTRUCTIONS:")
        lines += wrap_text(order.notes)
        lines.append(separator("="))

    if order.customer_name:
        lines.append(split_line("Customer:", order.customer_name))

    lines += [
        "",
        center_text("--- KOT ---"),
        center_text(printed_at.strftime(f"{DATE_FORMAT} {TIME_FORMAT}")),
        "",
    ]
    return "\n".join(lines)

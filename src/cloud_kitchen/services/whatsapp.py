import re
from decimal import Decimal
from typing import Optional
from urllib.parse import quote

from cloud_kitchen.schemas.cart import CartQuote

_MOBILE_UA = re.compile(r"iPhone|iPad|iPod|Android", re.IGNORECASE)


def is_mobile_user_agent(user_agent: Optional[str]) -> bool:
    return bool(user_agent and _MOBILE_UA.search(user_agent))


def _rs(amount: Decimal) -> str:
    return f"Rs.{amount:.2f}"


def generate_whatsapp_message(
    cart: CartQuote,
    user_name: Optional[str] = None,
    user_phone: Optional[str] = None,
    user_address: Optional[str] = None,
    order_number: Optional[str] = None,
) -> str:
    """Текст заказа для отправки ресторану в WhatsApp."""
    greeting = f"Hi, I'm {user_name}!" if user_name else "Hi!"
    phone_info = f" (Phone: {user_phone})" if user_phone else ""
    address_info = f"\n📍 *Address: {user_address}*" if user_address else ""

    message = f"{greeting}{phone_info}{address_info}\n\n"
    if order_number:
        message += f"🆔 *Order ID: {order_number}*\n"
    message += "🛒 *My Order Details*\n"
    message += "=" * 30 + "\n\n"

    for index, item in enumerate(cart.items, start=1):
        variant = f" ({item.variant_name})" if item.variant_name else ""
        message += f"{index}. *{item.dish_name}*{variant}\n"
        message += f"   {'🟢 Veg' if item.is_veg else '🔴 Non-Veg'}\n"
        if item.selected_customizations:
            names = ", ".join(c.option_name for c in item.selected_customizations)
            message += f"   Customizations: {names}\n"
        if item.notes:
            message += f"   Note: _{item.notes}_\n"
        message += f"   Qty: {item.quantity} × {_rs(item.price)}\n"
        message += f"   Subtotal: {_rs(item.line_total)}\n\n"

    message += "=" * 30 + "\n"
    message += "*Bill Summary*\n"
    message += "=" * 30 + "\n"
    message += f"Subtotal: {_rs(cart.subtotal)}\n"
    if cart.discount > 0:
        coupon = f" ({cart.coupon_code})" if cart.coupon_code else ""
        message += f"Discount{coupon}: -{_rs(cart.discount)}\n"
    if cart.tax > 0:
        message += f"Tax (GST): {_rs(cart.tax)}\n"
    message += "─" * 30 + "\n"
    message += f"*Total Amount: {_rs(cart.total)}*\n\n"
    message += "Please confirm my order. Thank you! 🙏"
    return message


def whatsapp_url(phone_number: str, message: str, mobile: bool = False) -> str:
    """Deep link: приложение на телефоне, WhatsApp Web на десктопе."""
    text = quote(message, safe="")
    if mobile:
        return f"whatsapp://send?phone={phone_number}&text={text}"
    return f"https://web.whatsapp.com/send?phone={phone_number}&text={text}"

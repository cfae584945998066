import re
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from cloud_kitchen.config import settings
from cloud_kitchen.crud.dish import get_dishes_by_ids
from cloud_kitchen.crud.restaurant import get_restaurant_or_default
from cloud_kitchen.crud.section_item import get_active_coupon
from cloud_kitchen.exceptions import CartError, CheckoutError
from cloud_kitchen.schemas.cart import CartLineIn, CartQuote, CartTotals
from cloud_kitchen.schemas.restaurant import RestaurantRead
from cloud_kitchen.services.cart import Cart

# 10 цифр, первая 6-9
INDIAN_MOBILE_RE = re.compile(r"^[6-9][0-9]{9}$")


def validate_customer_phone(phone: str) -> str:
    phone = (phone or "").strip()
    if not phone:
        raise CheckoutError("Mobile number is required")
    if not INDIAN_MOBILE_RE.match(phone):
        raise CheckoutError("Please enter a valid 10-digit mobile number starting with 6, 7, 8 or 9")
    return phone


def restaurant_whatsapp_number(restaurant: RestaurantRead) -> str:
    """WhatsApp-номер ресторана, иначе цифры из обычного телефона."""
    if restaurant.whatsapp_number:
        return re.sub(r"[^0-9]", "", restaurant.whatsapp_number)
    return re.sub(r"[^0-9]", "", restaurant.phone or "")


async def price_cart(
    db: AsyncSession,
    lines: List[CartLineIn],
    coupon_code: Optional[str] = None,
) -> Tuple[Cart, CartTotals, RestaurantRead]:
    """
    Собирает корзину по текущим ценам из базы.
    Цены от клиента не принимаются, только ID блюд, вариантов и опций.
    """
    if not lines:
        raise CartError("Cart is empty")

    dishes = await get_dishes_by_ids(db, (line.dish_id for line in lines))
    cart = Cart()
    for line in lines:
        dish = dishes.get(line.dish_id)
        if dish is None:
            raise CartError(f"Dish {line.dish_id} not found")
        cart.add(dish, line.variant_id, line.quantity, line.customizations, line.notes)

    coupon = None
    if coupon_code:
        coupon = await get_active_coupon(db, coupon_code)
        if coupon is None:
            raise CartError(f"Coupon '{coupon_code}' is not valid")

    restaurant = await get_restaurant_or_default(db)
    totals = cart.totals(restaurant, settings.TAX_RATE, coupon)
    return cart, totals, restaurant


def build_quote(cart: Cart, totals: CartTotals) -> CartQuote:
    return CartQuote(**totals.model_dump(), items=cart.lines, item_count=cart.item_count)

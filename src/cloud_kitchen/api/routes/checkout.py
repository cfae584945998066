import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from cloud_kitchen.api.routes.payment import public_base_url
from cloud_kitchen.crud.device import get_device_tokens
from cloud_kitchen.crud.order import attach_payment_transaction, create_order_from_cart
from cloud_kitchen.db.session import get_async_session
from cloud_kitchen.exceptions import CheckoutError
from cloud_kitchen.schemas.cart import CartQuote, CartQuoteRequest, CheckoutRequest, CheckoutResponse
from cloud_kitchen.schemas.order import OrderRead
from cloud_kitchen.services.checkout import build_quote, price_cart, restaurant_whatsapp_number
from cloud_kitchen.services.checkout import validate_customer_phone
from cloud_kitchen.services.notifications import FcmClient, get_fcm_client, notify_new_order
from cloud_kitchen.services.phonepe import PhonePeClient, get_phonepe_client, start_payment
from cloud_kitchen.services.whatsapp import generate_whatsapp_message, is_mobile_user_agent, whatsapp_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["checkout"])


@router.post("/cart/quote", response_model=CartQuote)
async def quote_cart(quote_in: CartQuoteRequest, db: AsyncSession = Depends(get_async_session)):
    """
    Пересчёт корзины по текущим ценам: позиции, скидки, купон, GST, итог.
    Заказ не создаётся.
    """
    cart, totals, _ = await price_cart(db, quote_in.items, quote_in.coupon_code)
    return build_quote(cart, totals)


@router.post("/checkout", response_model=CheckoutResponse, status_code=201)
async def checkout(
    checkout_in: CheckoutRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_async_session),
    fcm: FcmClient = Depends(get_fcm_client),
    phonepe: PhonePeClient = Depends(get_phonepe_client),
):
    """
    Оформление заказа с витрины.

    whatsapp: заказ pending/cash, в ответе ссылка на чат с рестораном и готовым текстом.
    online: заказ payment_pending, в ответе URL страницы оплаты PhonePe.
    В обоих случаях администраторам уходит push в фоне.
    """
    phone = validate_customer_phone(checkout_in.customer_phone)
    cart, totals, restaurant = await price_cart(db, checkout_in.items, checkout_in.coupon_code)

    online = checkout_in.payment_mode == "online"
    restaurant_number = restaurant_whatsapp_number(restaurant)
    if not online and not restaurant_number:
        raise CheckoutError("Restaurant WhatsApp number is not configured")

    order = await create_order_from_cart(
        db,
        cart,
        totals,
        customer_name=checkout_in.customer_name,
        customer_phone=phone,
        customer_address=checkout_in.customer_address,
        online_payment=online,
    )
    logger.info(
        "Order %s placed via %s",
        order.order_number,
        checkout_in.payment_mode,
        extra={"order_id": order.id, "order_number": order.order_number, "payment_mode": checkout_in.payment_mode},
    )

    tokens = await get_device_tokens(db)
    background_tasks.add_task(notify_new_order, fcm, tokens, order.order_number, order.total, order.id)

    response = CheckoutResponse(order=OrderRead.from_orm_with_count(order))
    if online:
        transaction_id, url = await start_payment(
            phonepe, public_base_url(request), order_id=order.id, amount=order.total, user_id=phone, phone=phone
        )
        await attach_payment_transaction(db, order, transaction_id)
        response.payment_url = url
        response.transaction_id = transaction_id
    else:
        message = generate_whatsapp_message(
            build_quote(cart, totals),
            user_name=checkout_in.customer_name,
            user_phone=phone,
            user_address=checkout_in.customer_address,
            order_number=order.order_number,
        )
        mobile = is_mobile_user_agent(request.headers.get("user-agent"))
        response.whatsapp_url = whatsapp_url(restaurant_number, message, mobile=mobile)
    return response

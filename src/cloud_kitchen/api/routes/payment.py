import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Header, HTTPException, Query, Request
from fastapi.responses import RedirectResponse
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from cloud_kitchen.config import settings
from cloud_kitchen.crud.order import attach_payment_transaction, get_order_by_id, get_order_by_transaction
from cloud_kitchen.crud.order import set_payment_result
from cloud_kitchen.db.session import get_async_session
from cloud_kitchen.exceptions import PaymentGatewayError
from cloud_kitchen.schemas.payment import PaymentInitiateRequest, PaymentInitiateResponse
from cloud_kitchen.services.phonepe import PhonePeClient, decode_callback, get_phonepe_client, start_payment

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/payment", tags=["payment"])

PAYMENT_SUCCESS = "PAYMENT_SUCCESS"


class PaymentCallback(BaseModel):
    response: str  # base64 JSON от шлюза


def public_base_url(request: Request) -> str:
    """Базовый URL для редиректов шлюза: из настроек или из самого запроса."""
    return (settings.PUBLIC_BASE_URL or str(request.base_url)).rstrip("/")


@router.post("/initiate", response_model=PaymentInitiateResponse)
async def initiate_payment(
    payment_in: PaymentInitiateRequest,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    phonepe: PhonePeClient = Depends(get_phonepe_client),
):
    """
    Открывает платёж PhonePe для существующего заказа и возвращает URL страницы оплаты.
    """
    order = await get_order_by_id(db, payment_in.order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    transaction_id, url = await start_payment(
        phonepe,
        public_base_url(request),
        order_id=order.id,
        amount=payment_in.amount,
        user_id=payment_in.user_id,
        phone=payment_in.phone,
    )
    await attach_payment_transaction(db, order, transaction_id)
    return PaymentInitiateResponse(url=url, transaction_id=transaction_id, amount=payment_in.amount)


@router.post("/status")
async def payment_status(
    order_id: Optional[int] = Query(None),
    merchant_id: Optional[str] = Form(None, alias="merchantId"),
    transaction_id: Optional[str] = Form(None, alias="transactionId"),
    db: AsyncSession = Depends(get_async_session),
    phonepe: PhonePeClient = Depends(get_phonepe_client),
):
    """
    Сюда шлюз возвращает покупателя (form POST).
    Транзакция должна совпадать с сохранённой в заказе, оплаченный заказ не трогаем.
    Статус перепроверяется запросом к шлюзу, затем редирект 303 на витрину.
    """
    if not order_id or not transaction_id:
        return RedirectResponse("/cart", status_code=303)

    order = await get_order_by_id(db, order_id)
    if order is None or order.payment_transaction_id != transaction_id:
        logger.error(
            "Payment status for order %s with unexpected transaction %s",
            order_id,
            transaction_id,
            extra={"order_id": order_id, "transaction_id": transaction_id},
        )
        return RedirectResponse("/cart?error=internal_error", status_code=303)
    if order.is_paid:
        return RedirectResponse(f"/order-success/{order_id}", status_code=303)

    try:
        response = await phonepe.check_payment_status(transaction_id)
    except PaymentGatewayError:
        logger.exception(
            "Payment status check failed for order %s", order_id, extra={"transaction_id": transaction_id}
        )
        return RedirectResponse("/cart?error=internal_error", status_code=303)

    paid = bool(response.get("success")) and response.get("code") == PAYMENT_SUCCESS
    details = {"transaction_id": transaction_id}
    if paid:
        details["merchant_id"] = merchant_id
    else:
        details.update(code=response.get("code"), message=response.get("message"))

    await set_payment_result(db, order_id, paid, details)

    if paid:
        return RedirectResponse(f"/order-success/{order_id}", status_code=303)
    return RedirectResponse(f"/cart?error=payment_failed&orderId={order_id}", status_code=303)


@router.post("/callback")
async def payment_callback(
    callback_in: PaymentCallback,
    x_verify: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Server-to-server уведомление шлюза. Подпись проверяется по X-VERIFY,
    заказ ищется по merchantTransactionId.
    """
    try:
        payload = decode_callback(
            callback_in.response, x_verify, settings.PHONEPE_SALT_KEY, settings.PHONEPE_SALT_INDEX
        )
    except PaymentGatewayError as e:
        logger.warning("Rejected payment callback: %s", e)
        raise HTTPException(status_code=400, detail=str(e))

    data = payload.get("data") or {}
    transaction_id = data.get("merchantTransactionId")
    order = await get_order_by_transaction(db, transaction_id) if transaction_id else None
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    if order.is_paid:
        # статус уже подтверждён редиректом покупателя
        return {"success": True}

    paid = bool(payload.get("success")) and payload.get("code") == PAYMENT_SUCCESS
    details = {"transaction_id": transaction_id, "code": payload.get("code")}
    await set_payment_result(db, order.id, paid, details)
    return {"success": True}

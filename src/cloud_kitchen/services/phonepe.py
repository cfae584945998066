"""
Клиент платёжного шлюза PhonePe (PG v1: pay / status).

Каждый запрос подписывается заголовком X-VERIFY:
sha256(base64(payload) + endpoint + salt_key) + "###" + salt_index.
"""
import base64
import hashlib
import hmac
import json
import logging
import time
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional, Tuple

import httpx

from cloud_kitchen.config import settings
from cloud_kitchen.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)

BASE_URLS = {
    "sandbox": "https://api-preprod.phonepe.com/apis/hermes",
    "production": "https://api.phonepe.com/apis/hermes",
}
PAY_ENDPOINT = "/pg/v1/pay"


def generate_checksum(payload: Dict[str, Any], endpoint: str, salt_key: str, salt_index: str) -> Tuple[str, str]:
    """Возвращает (checksum, base64_payload)."""
    base64_payload = base64.b64encode(json.dumps(payload, separators=(",", ":")).encode()).decode()
    digest = hashlib.sha256((base64_payload + endpoint + salt_key).encode()).hexdigest()
    return f"{digest}###{salt_index}", base64_payload


def status_checksum(endpoint: str, salt_key: str, salt_index: str) -> str:
    digest = hashlib.sha256((endpoint + salt_key).encode()).hexdigest()
    return f"{digest}###{salt_index}"


def to_paise(amount: Decimal) -> int:
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PhonePeClient:
    def __init__(
        self,
        merchant_id: str,
        salt_key: str,
        salt_index: str = "1",
        env: str = "sandbox",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.merchant_id = merchant_id
        self.salt_key = salt_key
        self.salt_index = salt_index
        self.base_url = BASE_URLS["production"] if env == "production" else BASE_URLS["sandbox"]
        self._transport = transport
        self._timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, transport=self._transport, timeout=self._timeout)

    async def _send(self, method: str, endpoint: str, **kwargs) -> Dict[str, Any]:
        try:
            async with self._client() as client:
                response = await client.request(method, endpoint, **kwargs)
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("PhonePe %s %s failed: %s", method, endpoint, exc)
            raise PaymentGatewayError(f"Payment gateway request failed: {exc}") from exc

    async def initiate_payment(
        self,
        transaction_id: str,
        amount: Decimal,
        user_id: str,
        redirect_url: str,
        callback_url: str,
        phone: Optional[str] = None,
    ) -> Dict[str, Any]:
        payload = {
            "merchantId": self.merchant_id,
            "merchantTransactionId": transaction_id,
            "merchantUserId": user_id,
            "amount": to_paise(amount),  # в пайсах
            "redirectUrl": redirect_url,
            "redirectMode": "POST",
            "callbackUrl": callback_url,
            "mobileNumber": phone,
            "paymentInstrument": {"type": "PAY_PAGE"},
        }
        checksum, base64_payload = generate_checksum(payload, PAY_ENDPOINT, self.salt_key, self.salt_index)
        return await self._send(
            "POST",
            PAY_ENDPOINT,
            headers={"Content-Type": "application/json", "X-VERIFY": checksum},
            json={"request": base64_payload},
        )

    async def check_payment_status(self, transaction_id: str) -> Dict[str, Any]:
        endpoint = f"/pg/v1/status/{self.merchant_id}/{transaction_id}"
        return await self._send(
            "GET",
            endpoint,
            headers={
                "Content-Type": "application/json",
                "X-VERIFY": status_checksum(endpoint, self.salt_key, self.salt_index),
                "X-MERCHANT-ID": self.merchant_id,
            },
        )


def redirect_url_from(response: Dict[str, Any]) -> Optional[str]:
    """URL страницы оплаты из ответа /pg/v1/pay, если шлюз его вернул."""
    if not response.get("success"):
        return None
    data = response.get("data") or {}
    return ((data.get("instrumentResponse") or {}).get("redirectInfo") or {}).get("url")


def get_phonepe_client() -> PhonePeClient:
    """Зависимость FastAPI; в тестах подменяется через dependency_overrides."""
    return PhonePeClient(
        merchant_id=settings.PHONEPE_MERCHANT_ID,
        salt_key=settings.PHONEPE_SALT_KEY,
        salt_index=settings.PHONEPE_SALT_INDEX,
        env=settings.PHONEPE_ENV,
    )


async def start_payment(
    client: PhonePeClient,
    base_url: str,
    order_id: int,
    amount: Decimal,
    user_id: str,
    phone: Optional[str] = None,
) -> Tuple[str, str]:
    """
    Открывает платёж в шлюзе. Возвращает (transaction_id, url страницы оплаты).
    Шлюз вернёт покупателя POST-запросом на /api/payment/status?order_id=...
    """
    transaction_id = f"T{int(time.time() * 1000)}"
    response = await client.initiate_payment(
        transaction_id=transaction_id,
        amount=amount,
        user_id=user_id,
        phone=phone,
        redirect_url=f"{base_url}/api/payment/status?order_id={order_id}",
        callback_url=f"{base_url}/api/payment/callback",
    )
    url = redirect_url_from(response)
    if not url:
        logger.error("PhonePe initiation error: %s", response)
        raise PaymentGatewayError(response.get("message") or "Failed to initiate payment")
    return transaction_id, url


def decode_callback(encoded_response: str, x_verify: str, salt_key: str, salt_index: str) -> Dict[str, Any]:
    """
    Проверяет подпись server-to-server callback и возвращает расшифрованный JSON.
    Подпись: sha256(base64_response + salt_key) + "###" + salt_index.
    """
    expected = f"{hashlib.sha256((encoded_response + salt_key).encode()).hexdigest()}###{salt_index}"
    if not hmac.compare_digest(expected, x_verify or ""):
        raise PaymentGatewayError("Invalid callback checksum")
    try:
        return json.loads(base64.b64decode(encoded_response))
    except ValueError as exc:
        raise PaymentGatewayError("Malformed callback payload") from exc

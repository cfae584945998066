"""
Push-уведомления администраторам через FCM HTTP v1.

Мультикаст = отдельный запрос на каждый токен, как sendEachForMulticast:
ошибка одного токена не мешает остальным.
"""
import logging
from decimal import Decimal
from typing import Callable, Dict, List, Optional

import httpx
from google.auth.transport.requests import Request
from google.oauth2 import service_account
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from cloud_kitchen.config import settings
from cloud_kitchen.exceptions import NotificationError

logger = logging.getLogger(__name__)

# The v1 API requires this scope
SCOPES = ["https://www.googleapis.com/auth/firebase.messaging"]

TokenProvider = Callable[[], Optional[str]]


class MulticastResult(BaseModel):
    success_count: int = 0
    failure_count: int = 0
    failed_tokens: List[str] = []


def service_account_token_provider(service_account_file: str) -> TokenProvider:
    """
    OAuth-токен для FCM из JSON сервисного аккаунта.
    Credentials кэшируются, refresh выполняется только когда токен протух.
    """
    credentials = None

    def provide() -> Optional[str]:
        nonlocal credentials
        if not service_account_file:
            return None
        if credentials is None:
            credentials = service_account.Credentials.from_service_account_file(service_account_file, scopes=SCOPES)
        if not credentials.valid:
            credentials.refresh(Request())
        return credentials.token

    return provide


def new_order_message(order_number: str, total: Decimal, order_id: Optional[int] = None) -> Dict[str, Dict[str, str]]:
    return {
        "notification": {
            "title": "New Order Received!",
            "body": f"Order {order_number} for Rs.{Decimal(str(total)):.2f}",
        },
        "data": {
            "orderId": str(order_id or ""),
            "orderNumber": order_number,
            "click_action": "/admin/orders",
        },
    }


class FcmClient:
    def __init__(
        self,
        project_id: str,
        token_provider: TokenProvider,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 5.0,
    ):
        self.project_id = project_id
        self._token_provider = token_provider
        self._transport = transport
        self._timeout = timeout

    @property
    def send_url(self) -> str:
        return f"https://fcm.googleapis.com/v1/projects/{self.project_id}/messages:send"

    async def send_multicast(self, tokens: List[str], message: Dict[str, Dict[str, str]]) -> MulticastResult:
        access_token = await run_in_threadpool(self._token_provider)
        if not access_token or not self.project_id:
            raise NotificationError("Push messaging is not configured")

        headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json; charset=UTF-8",
        }
        result = MulticastResult()
        async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
            for token in tokens:
                body = {"message": {"token": token, **message}}
                try:
                    response = await client.post(self.send_url, headers=headers, json=body)
                    response.raise_for_status()
                except httpx.HTTPError as exc:
                    logger.warning("FCM send failed for token %s...: %s", token[:12], exc)
                    result.failure_count += 1
                    result.failed_tokens.append(token)
                    continue
                result.success_count += 1

        logger.info("FCM multicast: %s sent, %s failed", result.success_count, result.failure_count)
        return result


_default_token_provider = service_account_token_provider(settings.FCM_SERVICE_ACCOUNT_FILE)


def get_fcm_client() -> FcmClient:
    """Зависимость FastAPI; в тестах подменяется через dependency_overrides."""
    return FcmClient(
        project_id=settings.FCM_PROJECT_ID,
        token_provider=_default_token_provider,
    )


async def notify_new_order(
    client: FcmClient,
    tokens: List[str],
    order_number: str,
    total: Decimal,
    order_id: Optional[int] = None,
) -> Optional[MulticastResult]:
    """Фоновая отправка после оформления заказа: ошибки только логируем."""
    if not tokens:
        return None
    try:
        return await client.send_multicast(tokens, new_order_message(order_number, total, order_id))
    except NotificationError as exc:
        logger.warning("New order %s: push not sent: %s", order_number, exc)
        return None

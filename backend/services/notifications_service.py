import logging
from typing import Any, Dict, Optional

import httpx

from config import settings
from errors import NotificationError
from schemas import Order

logger = logging.getLogger("token-orders")

TELEGRAM_API_URL = "https://api.telegram.org"


def build_order_message(order: Order) -> str:
    lines = [
        "🆕 *New order!*",
        f"• Name: {order.name}",
        f"• Symbol: {order.symbol}",
        f"• Description: {order.description}",
        f"• Image: {order.image_path}",
        f"• Wallet: {order.wallet_address}",
        f"• Time: {order.time}",
    ]
    return "\n".join(lines)


class TelegramNotifier:
    def __init__(
        self,
        token: Optional[str],
        chat_id: Optional[str],
        *,
        timeout: float = 10,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.token = token
        self.chat_id = chat_id
        self.timeout = timeout
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.token and self.chat_id)

    async def send(self, text: str) -> Dict[str, Any]:
        if not self.is_configured:
            raise NotificationError("Telegram token or chat id is not configured")
        payload = {"chat_id": self.chat_id, "text": text, "parse_mode": "Markdown"}
        try:
            url = f"{TELEGRAM_API_URL}/bot{self.token}/sendMessage"
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, json=payload)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise NotificationError(f"Telegram request failed: {exc}") from exc

        logger.info("Telegram API status: %s", response.status_code)
        if response.status_code >= 300:
            raise NotificationError(
                f"Telegram API returned {response.status_code}: {response.text[:200]}"
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise NotificationError("Telegram API returned a non-JSON body") from exc
        if not isinstance(data, dict):
            raise NotificationError("Telegram API returned an unexpected JSON body")
        if not data.get("ok", False):
            raise NotificationError(f"Telegram API rejected message: {data.get('description')}")
        return data


telegram_notifier = TelegramNotifier(
    settings.telegram_token,
    settings.telegram_chat_id,
    timeout=settings.telegram_timeout_seconds,
)


async def notify_order_saved(order: Order, notifier: Optional[TelegramNotifier] = None) -> Dict[str, Any]:
    return await (notifier or telegram_notifier).send(build_order_message(order))

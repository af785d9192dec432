import asyncio
import json

import httpx
import pytest

from errors import NotificationError
from schemas import Order
from services.notifications_service import TelegramNotifier, build_order_message, notify_order_saved


@pytest.fixture
def order():
    return Order(
        walletAddress="0xABC",
        name="Coin",
        symbol="CN",
        supply="1000",
        decimals="9",
        description="demo",
        imagePath="https://x/y.png",
        time="2026-10-19T12:00:00+00:00",
    )


def test_build_order_message(order):
    message = build_order_message(order)

    assert message.splitlines() == [
        "🆕 *New order!*",
        "• Name: Coin",
        "• Symbol: CN",
        "• Description: demo",
        "• Image: https://x/y.png",
        "• Wallet: 0xABC",
        "• Time: 2026-10-19T12:00:00+00:00",
    ]


def test_send_posts_markdown_message(order):
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={"ok": True, "result": {"message_id": 7}})

    notifier = TelegramNotifier("123:abc", "-1001", transport=httpx.MockTransport(handler))

    data = asyncio.run(notify_order_saved(order, notifier))

    assert data["result"]["message_id"] == 7
    assert len(requests) == 1
    assert requests[0].url.path == "/bot123:abc/sendMessage"
    body = json.loads(requests[0].content)
    assert body["chat_id"] == "-1001"
    assert body["parse_mode"] == "Markdown"
    assert "• Symbol: CN" in body["text"]


def test_send_raises_on_error_status():
    transport = httpx.MockTransport(lambda request: httpx.Response(401, json={"ok": False}))
    notifier = TelegramNotifier("123:abc", "-1001", transport=transport)

    with pytest.raises(NotificationError, match="401"):
        asyncio.run(notifier.send("hello"))


def test_send_raises_when_telegram_rejects():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json={"ok": False, "description": "chat not found"})
    )
    notifier = TelegramNotifier("123:abc", "-1001", transport=transport)

    with pytest.raises(NotificationError, match="chat not found"):
        asyncio.run(notifier.send("hello"))


def test_send_wraps_transport_errors():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    notifier = TelegramNotifier("123:abc", "-1001", transport=httpx.MockTransport(handler))

    with pytest.raises(NotificationError, match="request failed"):
        asyncio.run(notifier.send("hello"))


def test_send_requires_credentials():
    notifier = TelegramNotifier(None, "-1001")

    assert not notifier.is_configured
    with pytest.raises(NotificationError, match="not configured"):
        asyncio.run(notifier.send("hello"))


def test_send_raises_on_non_object_json():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=["ok"]))
    notifier = TelegramNotifier("123:abc", "-1001", transport=transport)

    with pytest.raises(NotificationError, match="unexpected JSON"):
        asyncio.run(notifier.send("hello"))


def test_send_wraps_invalid_url():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"ok": True}))
    notifier = TelegramNotifier("123:abc\x7f", "-1001", transport=transport)

    with pytest.raises(NotificationError, match="request failed"):
        asyncio.run(notifier.send("hello"))

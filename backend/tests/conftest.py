import atexit
import os
import shutil
import tempfile

os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test.service.role-key")
os.environ.setdefault("TELEGRAM_TOKEN", "123456:test-token")
os.environ.setdefault("TELEGRAM_CHAT_ID", "-1001")
_IMAGES_DIR = tempfile.mkdtemp(prefix="order-images-")
atexit.register(shutil.rmtree, _IMAGES_DIR, ignore_errors=True)
os.environ["ORDER_IMAGES_DIR"] = _IMAGES_DIR

import pytest
from fastapi.testclient import TestClient

from config import settings
from errors import NotificationError
from main import app
from services import orders_service

VALID_FIELDS = {
    "walletAddress": "0xABC",
    "name": "Coin",
    "symbol": "CN",
    "supply": "1000",
    "decimals": "9",
    "description": "demo",
    "imageLink": "https://x/y.png",
}

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


@pytest.fixture
def order_fields():
    return dict(VALID_FIELDS)


@pytest.fixture
def images_dir():
    settings.images_dir.mkdir(parents=True, exist_ok=True)
    return settings.images_dir


@pytest.fixture
def stored_orders(monkeypatch):
    orders = []

    def fake_insert(record):
        orders.append(record)
        return {"id": len(orders), **record}

    monkeypatch.setattr(orders_service, "insert_order", fake_insert)
    return orders


@pytest.fixture
def sent_notifications(monkeypatch):
    sent = []

    async def fake_notify(order, notifier=None):
        sent.append(order)
        return {"ok": True}

    monkeypatch.setattr(orders_service, "notify_order_saved", fake_notify)
    return sent


@pytest.fixture
def failing_notifications(monkeypatch):
    async def fake_notify(order, notifier=None):
        raise NotificationError("Telegram API returned 502: bad gateway")

    monkeypatch.setattr(orders_service, "notify_order_saved", fake_notify)


@pytest.fixture
def client(stored_orders, sent_notifications):
    with TestClient(app) as test_client:
        yield test_client

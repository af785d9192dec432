import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from errors import NotificationError, PersistenceError, ValidationError
from repositories.orders_repository import insert_order
from schemas import Order, OrderSubmission, StoredUpload
from services.notifications_service import notify_order_saved
from services.uploads_service import remove_upload

logger = logging.getLogger("token-orders")


async def resolve_image_path(submission: OrderSubmission, upload: Optional[StoredUpload]) -> str:
    """Validate the submission and return the image reference to store.

    Checks run in order and the first failure wins: an image source must be
    present, then every required field (``imageLink`` included) must be
    non-empty. When a file and a link are both given the file is removed and
    the link is kept.
    """
    image_link = (submission.image_link or "").strip()
    if upload is None and not image_link:
        raise ValidationError("Missing image: upload an image file or provide imageLink.")

    missing = submission.missing_fields()
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    if upload is not None:
        await remove_upload(upload.path)
    return image_link


def _build_order(submission: OrderSubmission, image_path: str) -> Order:
    return Order(
        wallet_address=submission.wallet_address.strip(),
        name=submission.name.strip(),
        symbol=submission.symbol.strip(),
        supply=submission.supply.strip(),
        decimals=submission.decimals.strip(),
        description=submission.description.strip(),
        image_path=image_path,
        time=datetime.now(timezone.utc).isoformat(),
    )


async def _persist(order: Order) -> None:
    try:
        await asyncio.to_thread(insert_order, order.to_record())
    except Exception as exc:
        logger.exception("Failed to store order for %s: %s", order.wallet_address, exc)
        raise PersistenceError() from exc


async def save_order(submission: OrderSubmission, upload: Optional[StoredUpload] = None) -> Order:
    image_path = await resolve_image_path(submission, upload)
    order = _build_order(submission, image_path)
    await _persist(order)
    logger.info("Order %s (%s) saved for %s", order.name, order.symbol, order.wallet_address)

    try:
        await notify_order_saved(order)
    except NotificationError as exc:
        logger.warning("Order notification failed: %s", exc.message)
    except Exception as exc:
        logger.exception("Unexpected order notification error: %s", exc)
    return order

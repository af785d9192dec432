import asyncio
import logging
import re
import shutil
import time
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional, Tuple

from fastapi import Request
from starlette.datastructures import UploadFile

from config import settings
from schemas import OrderSubmission, StoredUpload

logger = logging.getLogger("token-orders")

IMAGE_FIELD = "image"
ALLOWED_IMAGE_PATTERN = re.compile(r"jpeg|jpg|png")
_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


def ensure_images_dir(directory: Optional[Path] = None) -> Path:
    target = directory or settings.images_dir
    target.mkdir(parents=True, exist_ok=True)
    return target


def is_allowed_image(content_type: Optional[str], filename: Optional[str]) -> bool:
    """Both the declared media type and the filename extension must name
    jpeg, jpg or png."""
    extension = Path(filename or "").suffix.lower()
    return bool(
        ALLOWED_IMAGE_PATTERN.search(content_type or "")
        and ALLOWED_IMAGE_PATTERN.search(extension)
    )


def build_upload_name(wallet_address: Optional[str], filename: str, timestamp_ms: Optional[int] = None) -> str:
    owner = _UNSAFE_NAME_CHARS.sub("_", wallet_address or "") or "unknown"
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{owner}_{timestamp_ms}{Path(filename).suffix}"


def _write_file(source: BinaryIO, destination: Path) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    with destination.open("wb") as handle:
        shutil.copyfileobj(source, handle)


async def accept_upload(
    upload: Optional[UploadFile],
    wallet_address: Optional[str],
    directory: Optional[Path] = None,
) -> Optional[StoredUpload]:
    if upload is None or not upload.filename:
        return None
    if not is_allowed_image(upload.content_type, upload.filename):
        logger.info(
            "Rejected upload %s (%s): only jpeg, jpg and png images are accepted",
            upload.filename,
            upload.content_type,
        )
        return None
    target_dir = directory or settings.images_dir
    destination = target_dir / build_upload_name(wallet_address, upload.filename)
    try:
        await asyncio.to_thread(_write_file, upload.file, destination)
    finally:
        await upload.close()
    logger.info("Stored upload %s as %s", upload.filename, destination)
    return StoredUpload(
        filename=upload.filename,
        content_type=upload.content_type or "application/octet-stream",
        path=destination,
    )


async def remove_upload(path: Path) -> None:
    try:
        await asyncio.to_thread(path.unlink)
    except OSError as exc:
        logger.warning("Could not remove uploaded file %s: %s", path, exc)


def _as_text_fields(payload: Dict[str, Any]) -> Dict[str, str]:
    fields: Dict[str, str] = {}
    for key, value in payload.items():
        if isinstance(value, bool):
            continue
        if isinstance(value, str):
            fields[key] = value
        elif isinstance(value, (int, float)):
            fields[key] = str(value)
    return fields


async def _read_json(request: Request) -> Dict[str, Any]:
    try:
        payload = await request.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


async def read_submission(request: Request) -> Tuple[OrderSubmission, Optional[StoredUpload]]:
    """Parse a form or JSON order body and run the upload filter on the
    ``image`` part. Accepted images are on disk before the handler runs."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        payload = await _read_json(request)
        return OrderSubmission.model_validate(_as_text_fields(payload)), None

    form = await request.form()
    fields = {key: value for key, value in form.items() if isinstance(value, str)}
    submission = OrderSubmission.model_validate(fields)
    upload = form.get(IMAGE_FIELD)
    stored = await accept_upload(
        upload if isinstance(upload, UploadFile) else None,
        (submission.wallet_address or "").strip(),
    )
    return submission, stored

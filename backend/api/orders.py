from typing import Optional, Tuple

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from schemas import OrderSubmission, StoredUpload
from services import orders_service
from services.uploads_service import read_submission

router = APIRouter(tags=["orders"])

ORDER_SAVED_MESSAGE = "Order saved successfully."


@router.post("/save-order", response_class=PlainTextResponse)
async def save_order(
    submission: Tuple[OrderSubmission, Optional[StoredUpload]] = Depends(read_submission),
) -> str:
    fields, upload = submission
    await orders_service.save_order(fields, upload)
    return ORDER_SAVED_MESSAGE

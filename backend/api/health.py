from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["health"])

HEALTH_MESSAGE = "✅ Order intake backend & Telegram notifier are running!"


@router.get("/", response_class=PlainTextResponse)
async def read_health() -> str:
    return HEALTH_MESSAGE

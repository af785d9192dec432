import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from api import health_router, orders_router
from config import settings
from errors import OrderIntakeError
from services.uploads_service import ensure_images_dir

logger = logging.getLogger("token-orders")

app = FastAPI(title="Token Order Intake API")

allow_origins = settings.allowed_origins or ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(orders_router)


@app.exception_handler(OrderIntakeError)
async def order_intake_error_handler(request: Request, exc: OrderIntakeError) -> PlainTextResponse:
    if exc.status_code < 500:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
    return PlainTextResponse(exc.message, status_code=exc.status_code)


@app.on_event("startup")
async def _on_startup() -> None:
    images_dir = ensure_images_dir()
    logger.info("Storing uploaded images in %s", images_dir)
    if not (settings.telegram_token and settings.telegram_chat_id):
        logger.warning("TELEGRAM_TOKEN or TELEGRAM_CHAT_ID is not set; order notifications will be skipped.")


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)

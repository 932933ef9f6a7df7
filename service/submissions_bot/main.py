import asyncio
from fastapi import FastAPI, Request, Header, HTTPException

from submissions_bot import __version__
from submissions_bot.config import get_settings
from submissions_bot.logging_config import bot_logger as logger
from submissions_bot.telegram_bot.bot import handle_telegram_update, initialize_bot, shutdown_bot

app = FastAPI(
    title="Submissions Admin Bot",
    description="Webhook endpoint for the submissions admin Telegram bot",
    version=__version__
)


# Lifecycle events
@app.on_event("startup")
async def startup_event():
    """Initialize bot on startup."""
    logger.info("[STARTUP] Initializing Telegram bot...")
    await initialize_bot()
    logger.info("[STARTUP] Bot ready")


@app.on_event("shutdown")
async def shutdown_event():
    """Shutdown bot on application shutdown."""
    logger.info("[SHUTDOWN] Shutting down Telegram bot...")
    await shutdown_bot()
    logger.info("[SHUTDOWN] Bot stopped")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    settings = get_settings()
    return {
        "status": "ok",
        "environment": settings.environment,
        "version": __version__
    }


@app.post("/telegram/webhook")
async def telegram_webhook(
    request: Request,
    x_telegram_bot_api_secret_token: str = Header(None)
):
    """
    Webhook endpoint for Telegram updates.

    Each update is handled as its own task so Telegram gets 200 OK at once.
    """
    settings = get_settings()

    # Verify secret token if configured
    if settings.telegram_webhook_secret:
        if x_telegram_bot_api_secret_token != settings.telegram_webhook_secret:
            raise HTTPException(status_code=403, detail="Invalid secret token")

    try:
        update_data = await request.json()
    except ValueError as e:
        logger.warning(f"Ignoring webhook body that is not valid JSON: {e}")
        return {"ok": True}

    asyncio.create_task(handle_telegram_update(update_data))

    return {"ok": True}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

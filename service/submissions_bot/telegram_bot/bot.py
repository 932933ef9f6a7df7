"""
Main Telegram bot application.

Uses python-telegram-bot. Runs in polling mode (`python -m submissions_bot`)
or in webhook mode behind the FastAPI app in submissions_bot.main.
"""

from telegram import Update
from telegram.ext import Application, CommandHandler, MessageHandler, CallbackQueryHandler, filters

from submissions_bot.config import Settings, get_settings
from submissions_bot.logging_config import bot_logger as logger
from submissions_bot.services.file_fetcher import ensure_temp_dir
from submissions_bot.services.submissions import SubmissionRepository
from submissions_bot.supabase_client import get_supabase_anon
from .deps import DEPS_KEY, BotDependencies
from .handlers import (
    handle_start_command,
    handle_text_message,
    handle_other_message,
    handle_callback_query,
    handle_error,
)
from .session import InMemorySessionStore


# Global application instance (initialized once)
_application: Application | None = None


def build_dependencies(settings: Settings) -> BotDependencies:
    return BotDependencies(
        settings=settings,
        repository=SubmissionRepository(get_supabase_anon(), table=settings.submissions_table),
        sessions=InMemorySessionStore(),
    )


def register_handlers(application: Application) -> None:
    application.add_handler(CommandHandler("start", handle_start_command))

    # Text messages (menu labels and search input)
    application.add_handler(
        MessageHandler(filters.TEXT & ~filters.COMMAND, handle_text_message)
    )

    # Everything else still passes the access guard
    application.add_handler(MessageHandler(filters.ALL, handle_other_message))

    # Callback queries (inline keyboard buttons)
    application.add_handler(CallbackQueryHandler(handle_callback_query))

    application.add_error_handler(handle_error)


def get_bot_application() -> Application:
    """Get or create telegram bot application."""
    global _application

    if _application is None:
        settings = get_settings()
        ensure_temp_dir(settings.temp_dir)

        _application = (
            Application.builder()
            .token(settings.telegram_bot_token)
            .build()
        )
        _application.bot_data[DEPS_KEY] = build_dependencies(settings)
        register_handlers(_application)

        logger.info("Telegram bot application initialized")

    return _application


async def handle_telegram_update(update_data: dict) -> None:
    """
    Process incoming webhook update from Telegram.

    This is called by FastAPI webhook endpoint as a background task.
    """
    try:
        app = get_bot_application()

        update = Update.de_json(update_data, app.bot)

        if update:
            await app.process_update(update)
        else:
            logger.warning("Received invalid update data")

    except Exception as e:
        logger.error(f"Failed to process update: {e}", exc_info=True)


async def initialize_bot() -> None:
    """
    Initialize bot application (call on startup).
    """
    app = get_bot_application()
    await app.initialize()
    logger.info("Bot initialized successfully")


async def shutdown_bot() -> None:
    """
    Shutdown bot application (call on shutdown).
    """
    global _application
    if _application:
        await _application.shutdown()
        _application = None
        logger.info("Bot shut down")


def run_polling() -> None:
    """Blocking long-polling loop. Connectivity errors are logged and retried by the updater."""
    app = get_bot_application()
    logger.info(f"{get_settings().attribution_line} Bot is running...")
    app.run_polling(allowed_updates=Update.ALL_TYPES)

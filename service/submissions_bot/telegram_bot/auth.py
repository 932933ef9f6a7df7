"""
Access guard: the bot answers exactly one configured admin chat.

Everyone else gets a single denial and nothing else happens: no state
change, no query.
"""

from functools import wraps
from typing import Awaitable, Callable

from telegram import Update
from telegram.constants import ParseMode
from telegram.ext import ContextTypes

from submissions_bot.logging_config import bot_logger as logger
from .deps import get_deps
from .formatting import with_attribution

ACCESS_DENIED_MESSAGE = "⛔ Access denied. This bot is for administrators only."
ACCESS_DENIED_ANSWER = "⛔ Access denied."

Handler = Callable[[Update, ContextTypes.DEFAULT_TYPE], Awaitable[None]]


def is_admin_chat(chat_id: int | None, admin_chat_id: int) -> bool:
    return chat_id is not None and int(chat_id) == int(admin_chat_id)


async def deny_access(update: Update, attribution: str) -> None:
    """Send the one denial notice appropriate for the event type."""
    if update.callback_query is not None:
        await update.callback_query.answer(ACCESS_DENIED_ANSWER, show_alert=True)
    elif update.effective_message is not None:
        await update.effective_message.reply_text(
            with_attribution(ACCESS_DENIED_MESSAGE, attribution),
            parse_mode=ParseMode.HTML,
        )


def admin_only(handler: Handler) -> Handler:
    """Run `handler` only for the admin chat; deny everyone else."""

    @wraps(handler)
    async def guarded(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        settings = get_deps(context).settings
        chat = update.effective_chat
        chat_id = chat.id if chat else None

        if not is_admin_chat(chat_id, settings.admin_chat_id):
            logger.warning(f"Access denied for chat_id={chat_id} ({handler.__name__})")
            await deny_access(update, settings.attribution_line)
            return

        await handler(update, context)

    return guarded

"""
Telegram bot module for the submissions admin bot.

ARCHITECTURE: Thin routing layer over two collaborators.
- Access guard: only the configured admin chat is served
- Dispatcher: menu label / search input classification per chat state
- Callbacks: document menu and license image downloads
- Supabase (read-only) for submissions, httpx for document downloads
"""

from .bot import handle_telegram_update, initialize_bot, shutdown_bot, run_polling, get_bot_application
from .session import ChatState, SessionStore, InMemorySessionStore

__all__ = [
    "handle_telegram_update",
    "initialize_bot",
    "shutdown_bot",
    "run_polling",
    "get_bot_application",
    "ChatState",
    "SessionStore",
    "InMemorySessionStore",
]

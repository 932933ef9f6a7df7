"""
Shared fixtures: settings, a fake submissions repository and Telegram doubles.

Handlers are coroutines; tests drive them with asyncio.run().
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram import CallbackQuery, Chat, InaccessibleMessage, Update, User

from submissions_bot.config import Settings
from submissions_bot.services.submissions import Submission
from submissions_bot.telegram_bot.deps import DEPS_KEY, BotDependencies
from submissions_bot.telegram_bot.session import InMemorySessionStore

ADMIN_CHAT_ID = 42
STRANGER_CHAT_ID = 1001
ATTRIBUTION = "Made by tests"


class FakeRepository:
    """In-memory stand-in for SubmissionRepository."""

    def __init__(self, submissions=None, error: Exception | None = None):
        self.submissions = [
            s if isinstance(s, Submission) else Submission.model_validate(s)
            for s in (submissions or [])
        ]
        self.error = error
        self.calls = []

    def _newest_first(self, rows):
        return sorted(rows, key=lambda s: s.created_at or "", reverse=True)

    def _maybe_fail(self):
        if self.error is not None:
            raise self.error

    def fetch_all(self, limit: int = 999):
        self.calls.append(("fetch_all", limit))
        self._maybe_fail()
        return self._newest_first(self.submissions)[:limit]

    def fetch_by_winner_id(self, winner_id: str):
        self.calls.append(("fetch_by_winner_id", winner_id))
        self._maybe_fail()
        return self._newest_first([s for s in self.submissions if s.winner_id == winner_id])

    def fetch_by_id(self, submission_id):
        self.calls.append(("fetch_by_id", submission_id))
        self._maybe_fail()
        for s in self.submissions:
            if str(s.id) == str(submission_id):
                return s
        return None


@pytest.fixture
def temp_dir(tmp_path) -> Path:
    path = tmp_path / "downloads"
    path.mkdir()
    return path


@pytest.fixture
def settings(temp_dir) -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_anon_key="anon-key",
        telegram_bot_token="123456:TEST",
        admin_chat_id=ADMIN_CHAT_ID,
        temp_dir=str(temp_dir),
        attribution_line=ATTRIBUTION,
    )


@pytest.fixture
def repository() -> FakeRepository:
    return FakeRepository()


@pytest.fixture
def sessions() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def context(settings, repository, sessions):
    ctx = MagicMock()
    ctx.bot_data = {DEPS_KEY: BotDependencies(settings=settings, repository=repository, sessions=sessions)}
    ctx.bot.send_message = AsyncMock()
    ctx.bot.send_document = AsyncMock()
    ctx.bot.answer_callback_query = AsyncMock()
    return ctx


def make_message_update(text: str | None, chat_id: int = ADMIN_CHAT_ID):
    update = MagicMock()
    update.callback_query = None
    update.effective_chat.id = chat_id
    update.message.text = text
    update.message.reply_text = AsyncMock()
    update.effective_message = update.message
    return update


def make_callback_update(data: str, chat_id: int = ADMIN_CHAT_ID):
    update = MagicMock()
    update.effective_chat.id = chat_id
    update.callback_query.data = data
    update.callback_query.answer = AsyncMock()
    update.callback_query.message.chat_id = chat_id
    update.effective_message = update.callback_query.message
    update.effective_message.reply_text = AsyncMock()
    return update


def replies(update) -> list[str]:
    """Texts sent with update.message.reply_text, in order."""
    return [c.args[0] for c in update.message.reply_text.await_args_list]


def make_inaccessible_callback_update(data: str, bot, chat_id: int = ADMIN_CHAT_ID):
    """
    A real Update for a tap on a card Telegram no longer exposes.

    The message is an InaccessibleMessage: it has `chat` but no `chat_id`.
    Answers go through bot.answer_callback_query.
    """
    query = CallbackQuery(
        id="cbq-1",
        from_user=User(chat_id, "Admin", False),
        chat_instance="ci-1",
        message=InaccessibleMessage(chat=Chat(chat_id, Chat.PRIVATE), message_id=1),
        data=data,
    )
    query.set_bot(bot)
    return Update(update_id=1, callback_query=query)

"""
Collaborators shared by every handler.

Stored once in Application.bot_data so handlers never reach for globals
and tests can hand in fakes.
"""

from dataclasses import dataclass

from telegram.ext import ContextTypes

from submissions_bot.config import Settings
from submissions_bot.services.submissions import SubmissionRepository
from .session import SessionStore

DEPS_KEY = "deps"


@dataclass
class BotDependencies:
    settings: Settings
    repository: SubmissionRepository
    sessions: SessionStore


def get_deps(context: ContextTypes.DEFAULT_TYPE) -> BotDependencies:
    return context.bot_data[DEPS_KEY]

"""
Reply keyboards, inline buttons and the callback payloads they carry.

Callback payloads:
    docs_<submission_id>               - show the document menu
    download_<front|back>_<submission_id> - send one side of the license
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, KeyboardButton, ReplyKeyboardMarkup

from submissions_bot.services.submissions import DocumentSide

LIST_SUBMISSIONS_LABEL = "📋 List Recent Submissions"
SEARCH_BY_WINNER_LABEL = "🔍 Search by Winner ID"
BACK_TO_MENU_LABEL = "🔙 Back to Main Menu"

DOCS_PREFIX = "docs_"
DOWNLOAD_PREFIX = "download_"


@dataclass(frozen=True)
class DocumentsCallback:
    submission_id: str


@dataclass(frozen=True)
class DownloadCallback:
    side: DocumentSide
    submission_id: str


CallbackAction = Union[DocumentsCallback, DownloadCallback]


def documents_callback_data(submission_id) -> str:
    return f"{DOCS_PREFIX}{submission_id}"


def download_callback_data(side: DocumentSide, submission_id) -> str:
    return f"{DOWNLOAD_PREFIX}{side.value}_{submission_id}"


def parse_callback_data(data: str | None) -> CallbackAction | None:
    """
    Parse an inline button payload.

    Returns None for anything that is not a well-formed docs_/download_
    payload, including an unknown side or an empty submission id.
    """
    if not data:
        return None

    if data.startswith(DOCS_PREFIX):
        submission_id = data[len(DOCS_PREFIX):]
        return DocumentsCallback(submission_id) if submission_id else None

    if data.startswith(DOWNLOAD_PREFIX):
        side_value, sep, submission_id = data[len(DOWNLOAD_PREFIX):].partition("_")
        if not sep or not submission_id:
            return None
        try:
            side = DocumentSide(side_value)
        except ValueError:
            return None
        return DownloadCallback(side, submission_id)

    return None


def main_menu_keyboard() -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        [
            [KeyboardButton(LIST_SUBMISSIONS_LABEL)],
            [KeyboardButton(SEARCH_BY_WINNER_LABEL)],
        ],
        resize_keyboard=True,
    )


def search_prompt_keyboard() -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup([[KeyboardButton(BACK_TO_MENU_LABEL)]], resize_keyboard=True)


def view_documents_button(submission_id) -> InlineKeyboardMarkup:
    """The single inline button attached to every submission card."""
    return InlineKeyboardMarkup([[
        InlineKeyboardButton("📄 View Documents", callback_data=documents_callback_data(submission_id))
    ]])


def download_buttons(submission_id) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup([
        [InlineKeyboardButton("🆔 Download Front", callback_data=download_callback_data(DocumentSide.FRONT, submission_id))],
        [InlineKeyboardButton("🆔 Download Back", callback_data=download_callback_data(DocumentSide.BACK, submission_id))],
    ])

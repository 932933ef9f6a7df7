"""
Text rendering for bot messages. All output is HTML parse mode.
"""

from datetime import datetime
from html import escape
from typing import Optional

from submissions_bot.services.submissions import DocumentSide, Submission

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def with_attribution(text: str, attribution: str) -> str:
    """Append the attribution line the bot signs every message with."""
    if not attribution:
        return text
    return f"{text}\n\n{escape(attribution)}"


def format_timestamp(value: Optional[str]) -> str:
    """ISO timestamp from Supabase -> 'YYYY-MM-DD HH:MM:SS'; raw value if unparsable."""
    if not value:
        return "N/A"
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return parsed.strftime(TIMESTAMP_FORMAT)


def _field(value) -> str:
    if value is None or value == "":
        return "N/A"
    return escape(str(value))


def format_submission(submission: Submission, attribution: str) -> str:
    """One card per submission."""
    lines = [
        f"🆔 ID: {_field(submission.id)}",
        f"👤 Winner ID: {_field(submission.winner_id)}",
        f"📝 Name: {_field(submission.full_name)}",
        f"📧 Email: {_field(submission.email)}",
        f"📱 Phone: {_field(submission.phone)}",
        f"📍 Address: {_field(submission.address)}",
        f"💳 Payment: {_field(submission.payment_preference)}",
        f"🚚 Delivery: {_field(submission.delivery_company)}",
        f"📢 Heard From: {_field(submission.heard_from)}",
        f"⏰ Submitted: {escape(format_timestamp(submission.submitted_at))}",
    ]
    return with_attribution("\n".join(lines), attribution)


def format_documents_menu(submission: Submission, attribution: str) -> str:
    text = (
        f"📄 <b>Documents for {_field(submission.full_name)}</b>\n"
        "Please click the buttons below to download the documents:"
    )
    return with_attribution(text, attribution)


def format_document_caption(side: DocumentSide, submission: Submission, attribution: str) -> str:
    return with_attribution(
        f"{side.value.upper()} document for {_field(submission.full_name)}",
        attribution,
    )


def welcome_text(attribution: str) -> str:
    text = (
        "Welcome to the Submissions Admin Bot! 🤖\n\n"
        "Use the keyboard buttons below to:\n"
        "• List recent submissions\n"
        "• Search submissions by winner ID"
    )
    return with_attribution(text, attribution)


def truncate_answer(text: str, limit: int = 200) -> str:
    """Callback answers are capped at 200 characters by Telegram."""
    if len(text) <= limit:
        return text
    return text[:limit - 3] + "..."

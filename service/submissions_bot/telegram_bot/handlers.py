"""
Telegram message, command and callback handlers.

MESSAGE FLOW:
=============
/start and the back button reset the chat to the main menu. The list button
sends one card per submission (newest first, capped). The search button puts
the chat into AWAITING_SEARCH_INPUT; the next text is consumed as a winner id
and the chat goes back to IDLE whatever the search returns.

CALLBACK FLOW:
==============
docs_<id>                 -> document menu with front/back download buttons
download_<side>_<id>      -> download the license image, send it, delete it

Failures in callback flows are reported as an alert on the button answer
rather than as a new chat message.
"""

from html import escape

from telegram import Update, CallbackQuery
from telegram.constants import ParseMode
from telegram.ext import ContextTypes

from submissions_bot.logging_config import bot_logger as logger
from submissions_bot.services import file_fetcher
from submissions_bot.services.submissions import Submission
from .auth import admin_only
from .deps import BotDependencies, get_deps
from .dispatcher import classify_message
from .formatting import (
    format_document_caption,
    format_documents_menu,
    format_submission,
    truncate_answer,
    welcome_text,
    with_attribution,
)
from .keyboards import (
    DocumentsCallback,
    DownloadCallback,
    download_buttons,
    main_menu_keyboard,
    parse_callback_data,
    search_prompt_keyboard,
    view_documents_button,
)
from .session import MenuAction, next_state


# =============================================================================
# COMMANDS AND TEXT
# =============================================================================

@admin_only
async def handle_start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command - reset the chat and show the main menu."""
    deps = get_deps(context)
    await deps.sessions.clear(update.effective_chat.id)

    await update.message.reply_text(
        welcome_text(deps.settings.attribution_line),
        parse_mode=ParseMode.HTML,
        reply_markup=main_menu_keyboard(),
    )


@admin_only
async def handle_text_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Route menu labels and search input."""
    deps = get_deps(context)
    chat_id = update.effective_chat.id
    text = update.message.text or ""

    state = await deps.sessions.get(chat_id)
    action = classify_message(text, state)
    logger.info(f"Message from chat_id={chat_id} in state={state.value} -> {action.value}")

    if action == MenuAction.IGNORE:
        return

    # State moves before any remote call so a failed search still ends it
    await deps.sessions.set(chat_id, next_state(state, action))

    if action == MenuAction.SHOW_MENU:
        await update.message.reply_text(
            with_attribution("Main Menu:", deps.settings.attribution_line),
            parse_mode=ParseMode.HTML,
            reply_markup=main_menu_keyboard(),
        )
    elif action == MenuAction.LIST_SUBMISSIONS:
        await list_submissions(update, deps)
    elif action == MenuAction.PROMPT_SEARCH:
        await update.message.reply_text(
            with_attribution("Please enter the Winner ID to search:", deps.settings.attribution_line),
            parse_mode=ParseMode.HTML,
            reply_markup=search_prompt_keyboard(),
        )
    elif action == MenuAction.SEARCH:
        await search_submissions(update, deps, text.strip())


@admin_only
async def handle_other_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Non-text messages and unknown commands: guarded, otherwise ignored."""
    logger.debug(f"Ignoring unsupported message in chat_id={update.effective_chat.id}")


async def send_submission_cards(update: Update, submissions: list[Submission], attribution: str) -> None:
    """One message per submission, each with its own View Documents button."""
    for submission in submissions:
        await update.message.reply_text(
            format_submission(submission, attribution),
            parse_mode=ParseMode.HTML,
            reply_markup=view_documents_button(submission.id),
        )


async def list_submissions(update: Update, deps: BotDependencies) -> None:
    attribution = deps.settings.attribution_line
    try:
        submissions = deps.repository.fetch_all(limit=deps.settings.list_limit)
    except Exception as e:
        logger.error(f"Error fetching submissions: {e}", exc_info=True)
        await update.message.reply_text(
            with_attribution(f"Error fetching submissions: {escape(str(e))}", attribution),
            parse_mode=ParseMode.HTML,
        )
        return

    if not submissions:
        await update.message.reply_text(
            with_attribution("No submissions found.", attribution),
            parse_mode=ParseMode.HTML,
        )
        return

    await send_submission_cards(update, submissions, attribution)


async def search_submissions(update: Update, deps: BotDependencies, winner_id: str) -> None:
    attribution = deps.settings.attribution_line
    logger.info(f"Searching submissions for winner_id={winner_id!r}")

    try:
        submissions = deps.repository.fetch_by_winner_id(winner_id) if winner_id else []
    except Exception as e:
        logger.error(f"Error searching submissions: {e}", exc_info=True)
        await update.message.reply_text(
            with_attribution(f"Error searching submissions: {escape(str(e))}", attribution),
            parse_mode=ParseMode.HTML,
            reply_markup=main_menu_keyboard(),
        )
        return

    if not submissions:
        await update.message.reply_text(
            with_attribution(f"No submissions found for winner ID: {escape(winner_id)}", attribution),
            parse_mode=ParseMode.HTML,
            reply_markup=main_menu_keyboard(),
        )
        return

    await send_submission_cards(update, submissions, attribution)
    await update.message.reply_text(
        with_attribution(f"Found {len(submissions)} submission(s) for winner ID: {escape(winner_id)}", attribution),
        parse_mode=ParseMode.HTML,
        reply_markup=main_menu_keyboard(),
    )


# =============================================================================
# CALLBACKS
# =============================================================================

@admin_only
async def handle_callback_query(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Dispatch inline button taps."""
    query = update.callback_query
    # Taps on old cards carry an InaccessibleMessage, which has no chat_id
    chat_id = update.effective_chat.id
    logger.info(f"Callback from chat_id={chat_id}: {query.data}")

    action = parse_callback_data(query.data)

    if isinstance(action, DocumentsCallback):
        await handle_documents_callback(query, context, action, chat_id)
    elif isinstance(action, DownloadCallback):
        await handle_download_callback(query, context, action, chat_id)
    else:
        logger.warning(f"Unknown callback data: {query.data}")
        await query.answer()


async def handle_documents_callback(
    query: CallbackQuery,
    context: ContextTypes.DEFAULT_TYPE,
    action: DocumentsCallback,
    chat_id: int,
) -> None:
    deps = get_deps(context)
    try:
        submission = deps.repository.fetch_by_id(action.submission_id)
        if submission is None:
            await query.answer("Submission not found.")
            return

        await context.bot.send_message(
            chat_id=chat_id,
            text=format_documents_menu(submission, deps.settings.attribution_line),
            parse_mode=ParseMode.HTML,
            reply_markup=download_buttons(submission.id),
        )
        await query.answer()

    except Exception as e:
        logger.error(f"Error fetching documents for id={action.submission_id}: {e}", exc_info=True)
        await query.answer(truncate_answer(f"Error fetching documents: {e}"), show_alert=True)


async def handle_download_callback(
    query: CallbackQuery,
    context: ContextTypes.DEFAULT_TYPE,
    action: DownloadCallback,
    chat_id: int,
) -> None:
    """Download one license side, send it as a document, always delete it."""
    deps = get_deps(context)
    settings = deps.settings
    side = action.side

    try:
        submission = deps.repository.fetch_by_id(action.submission_id)
        if submission is None:
            await query.answer("Submission not found.", show_alert=True)
            return

        url = submission.document_url(side)
        if not url:
            await query.answer("Document URL not found.", show_alert=True)
            return

        await context.bot.send_message(
            chat_id=chat_id,
            text=with_attribution(f"⏳ Downloading {side.value} document...", settings.attribution_line),
            parse_mode=ParseMode.HTML,
        )

        async with file_fetcher.transient_download(
            url,
            settings.temp_dir,
            submission.winner_id,
            side.value,
            timeout=settings.download_timeout_seconds,
        ) as local_path:
            with open(local_path, "rb") as document:
                await context.bot.send_document(
                    chat_id=chat_id,
                    document=document,
                    filename=local_path.name,
                    caption=format_document_caption(side, submission, settings.attribution_line),
                    parse_mode=ParseMode.HTML,
                )

        logger.info(f"Sent {side.value} document for submission id={submission.id}")
        await query.answer("Document sent successfully!")

    except Exception as e:
        logger.error(f"Error downloading {side.value} document for id={action.submission_id}: {e}", exc_info=True)
        await query.answer(truncate_answer(f"Error downloading document: {e}"), show_alert=True)


async def handle_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle errors in handlers and polling."""
    logger.error(f"Bot error: {context.error}", exc_info=context.error)

    if isinstance(update, Update) and update.effective_message:
        await update.effective_message.reply_text("❌ Error processing message. Try again or use /start")

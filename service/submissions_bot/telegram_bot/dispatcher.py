"""
Message dispatcher - classifies incoming text into a menu action.

Menu labels are recognised in every state so the back button always works.
Any other text is a search key when the chat is waiting for one and is
ignored otherwise.
"""

from .keyboards import LIST_SUBMISSIONS_LABEL, SEARCH_BY_WINNER_LABEL, BACK_TO_MENU_LABEL
from .session import ChatState, MenuAction

MENU_LABELS = {
    LIST_SUBMISSIONS_LABEL: MenuAction.LIST_SUBMISSIONS,
    SEARCH_BY_WINNER_LABEL: MenuAction.PROMPT_SEARCH,
    BACK_TO_MENU_LABEL: MenuAction.SHOW_MENU,
}


def classify_message(text: str, state: ChatState) -> MenuAction:
    """
    Classify message text given the chat's current state.

    Returns:
        SHOW_MENU / LIST_SUBMISSIONS / PROMPT_SEARCH for menu labels,
        SEARCH for free text while awaiting a winner id,
        IGNORE for free text otherwise.
    """
    action = MENU_LABELS.get(text)
    if action is not None:
        return action

    if state == ChatState.AWAITING_SEARCH_INPUT:
        return MenuAction.SEARCH

    return MenuAction.IGNORE

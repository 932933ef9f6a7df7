from __future__ import annotations

"""
Per-chat session state for the admin bot.

A chat is either idle or waiting for a winner id to search for. Only the
waiting state is stored; a chat with no entry is idle.

For MVP: in-memory dict, reset on restart.
For production: implement SessionStore over Redis or a Supabase table.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict


class ChatState(str, Enum):
    IDLE = "IDLE"
    AWAITING_SEARCH_INPUT = "AWAITING_SEARCH_INPUT"


class MenuAction(str, Enum):
    """What an inbound message asks the bot to do."""
    SHOW_MENU = "SHOW_MENU"
    LIST_SUBMISSIONS = "LIST_SUBMISSIONS"
    PROMPT_SEARCH = "PROMPT_SEARCH"
    SEARCH = "SEARCH"
    IGNORE = "IGNORE"


# Every (state, action) pair has a defined successor.
_TRANSITIONS: Dict[tuple[ChatState, MenuAction], ChatState] = {
    (ChatState.IDLE, MenuAction.SHOW_MENU): ChatState.IDLE,
    (ChatState.IDLE, MenuAction.LIST_SUBMISSIONS): ChatState.IDLE,
    (ChatState.IDLE, MenuAction.PROMPT_SEARCH): ChatState.AWAITING_SEARCH_INPUT,
    (ChatState.IDLE, MenuAction.IGNORE): ChatState.IDLE,
    (ChatState.AWAITING_SEARCH_INPUT, MenuAction.SHOW_MENU): ChatState.IDLE,
    (ChatState.AWAITING_SEARCH_INPUT, MenuAction.LIST_SUBMISSIONS): ChatState.IDLE,
    (ChatState.AWAITING_SEARCH_INPUT, MenuAction.PROMPT_SEARCH): ChatState.AWAITING_SEARCH_INPUT,
    (ChatState.AWAITING_SEARCH_INPUT, MenuAction.SEARCH): ChatState.IDLE,
}


class InvalidTransitionError(ValueError):
    pass


def next_state(state: ChatState, action: MenuAction) -> ChatState:
    """Successor of `state` after performing `action`."""
    try:
        return _TRANSITIONS[(state, action)]
    except KeyError:
        raise InvalidTransitionError(f"Invalid state transition: {state.value} --{action.value}-->")


class SessionStore(ABC):
    """Chat id -> ChatState. Implementations must treat a missing key as IDLE."""

    @abstractmethod
    async def get(self, chat_id: int) -> ChatState: ...

    @abstractmethod
    async def set(self, chat_id: int, state: ChatState) -> None: ...

    @abstractmethod
    async def clear(self, chat_id: int) -> None: ...


class InMemorySessionStore(SessionStore):

    def __init__(self):
        self._states: Dict[int, ChatState] = {}

    async def get(self, chat_id: int) -> ChatState:
        return self._states.get(chat_id, ChatState.IDLE)

    async def set(self, chat_id: int, state: ChatState) -> None:
        if state == ChatState.IDLE:
            self._states.pop(chat_id, None)
        else:
            self._states[chat_id] = state

    async def clear(self, chat_id: int) -> None:
        self._states.pop(chat_id, None)

    def __len__(self) -> int:
        return len(self._states)

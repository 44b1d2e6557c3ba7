"""Turn loop: selection, termination and the GroupChat facade."""

from .state import ConversationState, GroupChatGraphState, StopReason
from .selection import (
    FALLBACK_AGENT,
    KeywordSelectionStrategy,
    PromptSelectionStrategy,
    SelectionStrategy,
    default_selection_parser,
    parse_selection,
)
from .termination import (
    KeywordTerminationStrategy,
    PromptTerminationStrategy,
    TerminationStrategy,
    default_termination_parser,
)
from .builder import build_group_chat_graph
from .group_chat import GroupChat

__all__ = [
    "ConversationState",
    "GroupChatGraphState",
    "StopReason",
    "FALLBACK_AGENT",
    "SelectionStrategy",
    "KeywordSelectionStrategy",
    "PromptSelectionStrategy",
    "default_selection_parser",
    "parse_selection",
    "TerminationStrategy",
    "KeywordTerminationStrategy",
    "PromptTerminationStrategy",
    "default_termination_parser",
    "build_group_chat_graph",
    "GroupChat",
]

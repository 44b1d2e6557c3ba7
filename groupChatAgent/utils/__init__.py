"""Utilities for the group chat."""

from .error_handler import (
    AgentInvocationError,
    ConcurrentInvocationError,
    ConversationCompleteError,
    GroupChatError,
    RegistryError,
    SelectionParseError,
    TerminationParseError,
    handle_model_error,
    with_error_boundary,
)
from .logging_utils import (
    log_agent_response,
    log_error,
    log_routing_decision,
    log_turn,
    log_user_message,
    log_visible_tools,
    setup_logging,
)

__all__ = [
    "AgentInvocationError",
    "ConcurrentInvocationError",
    "ConversationCompleteError",
    "GroupChatError",
    "RegistryError",
    "SelectionParseError",
    "TerminationParseError",
    "handle_model_error",
    "with_error_boundary",
    "log_agent_response",
    "log_error",
    "log_routing_decision",
    "log_turn",
    "log_user_message",
    "log_visible_tools",
    "setup_logging",
]

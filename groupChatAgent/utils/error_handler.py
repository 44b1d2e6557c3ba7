"""Unified error handling for group chat nodes and collaborators."""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any, Callable, Dict, Mapping

LOGGER = logging.getLogger(__name__)


class GroupChatError(Exception):
    """Base exception for group chat errors."""

    def __init__(self, message: str, user_message: str | None = None):
        super().__init__(message)
        self.user_message = user_message or message


class SelectionParseError(GroupChatError):
    """Selection output does not name a registered agent."""

    def __init__(self, raw_value: Any):
        super().__init__(f"Cannot map selection result to an agent: {raw_value!r}")
        self.raw_value = raw_value


class TerminationParseError(GroupChatError):
    """Termination output is not a recognizable true/false answer."""

    def __init__(self, raw_value: Any):
        super().__init__(f"Cannot read termination result as a boolean: {raw_value!r}")
        self.raw_value = raw_value


class AgentInvocationError(GroupChatError):
    """The language model collaborator failed during an agent turn."""

    def __init__(self, agent_name: str, cause: BaseException | str):
        detail = cause if isinstance(cause, str) else f"{type(cause).__name__}: {cause}"
        user_msg = cause if isinstance(cause, str) else handle_model_error(cause)
        super().__init__(f"Agent '{agent_name}' turn failed: {detail}", user_message=user_msg)
        self.agent_name = agent_name


class ConcurrentInvocationError(GroupChatError):
    """A run or reset overlapped a run already in flight on the same conversation."""


class ConversationCompleteError(GroupChatError):
    """invoke() called on a completed conversation that has not been reset."""


class RegistryError(GroupChatError):
    """Agent or tool wiring is invalid (fatal at startup)."""


def with_error_boundary(node_name: str, fallback: Callable[[Mapping[str, Any], Exception], Dict[str, Any]]):
    """Decorator to add error boundary to graph nodes.

    Exceptions never leave the node: they are logged and replaced by the state update
    the ``fallback`` builds from the node's input state and the exception.

    Args:
        node_name: Name of the node for logging
        fallback: Builds the recovery update, e.g. the default speaker for selection

    Example:
        @with_error_boundary("select", lambda state, exc: {"next_agent": AgentIdentity.ORCHESTRATOR})
        async def select_node(state):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def async_wrapper(state):
            try:
                return await func(state)
            except (SelectionParseError, TerminationParseError) as e:
                LOGGER.warning(f"{node_name}: {e} (recovering with default)")
                return fallback(state, e)
            except AgentInvocationError as e:
                LOGGER.error(f"{node_name}: {e}")
                return fallback(state, e)
            except Exception as e:
                LOGGER.exception(f"{node_name} unexpected error", exc_info=e)
                return fallback(state, e)

        @functools.wraps(func)
        def sync_wrapper(state):
            try:
                return func(state)
            except Exception as e:
                LOGGER.exception(f"{node_name} unexpected error", exc_info=e)
                return fallback(state, e)

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


def handle_model_error(error: BaseException) -> str:
    """Convert model invocation errors to user-friendly messages.

    Args:
        error: Exception raised during model invocation

    Returns:
        User-friendly error message
    """
    error_str = str(error).lower()

    if "rate_limit" in error_str or "429" in error_str:
        return "The model is rate limited, please try again later"

    if "timeout" in error_str or isinstance(error, asyncio.TimeoutError):
        return "The model did not respond in time"

    if "context_length" in error_str or "maximum context" in error_str:
        return "The conversation is too long, please reset it"

    if "invalid_api_key" in error_str or "authentication" in error_str:
        return "The model API key is invalid"

    if "quota" in error_str or "insufficient" in error_str:
        return "The model quota is exhausted"

    return f"The model service is unavailable: {error}"

"""GroupChat - the public facade over the turn loop.

Owns one ConversationState, runs the compiled graph against it and yields the
visible subset of the produced messages as they are appended.
"""

from __future__ import annotations

import logging
from contextlib import aclosing
from typing import AsyncIterator, Iterable, Optional

from groupChatAgent.agents.interfaces import LanguageModel
from groupChatAgent.agents.registry import AgentRegistry
from groupChatAgent.agents.schema import AgentIdentity, Message, MessageRole
from groupChatAgent.utils.error_handler import (
    ConcurrentInvocationError,
    ConversationCompleteError,
    GroupChatError,
)
from groupChatAgent.utils.logging_utils import log_user_message
from .builder import build_group_chat_graph
from .selection import SelectionStrategy
from .state import ConversationState, GroupChatGraphState, StopReason
from .termination import TerminationStrategy

LOGGER = logging.getLogger(__name__)


class GroupChat:
    """Turn-taking conversation between registered agents.

    Usage:
        chat.add_user_message("What is the latest issue in my repo?")
        async for message in chat.invoke():
            print(message.content)
        chat.reset()
    """

    def __init__(
        self,
        *,
        registry: AgentRegistry,
        language_model: LanguageModel,
        selection: SelectionStrategy,
        termination: TerminationStrategy,
        max_iterations: int = 3,
        visible_agents: Iterable[AgentIdentity] = (AgentIdentity.ORCHESTRATOR,),
        automatic_reset: bool = False,
        state: Optional[ConversationState] = None,
    ):
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")

        self.registry = registry
        self.max_iterations = max_iterations
        self.visible_agents = frozenset(visible_agents)
        self.automatic_reset = automatic_reset
        self.state = state if state is not None else ConversationState()

        self._app = build_group_chat_graph(
            registry=registry,
            language_model=language_model,
            selection=selection,
            termination=termination,
        )
        self._in_flight = False
        self._stop_reason: Optional[StopReason] = None

    # ========== State mutators ==========

    def add_user_message(self, content: str) -> Message:
        """Append a user message to the conversation."""
        if self._in_flight:
            raise ConcurrentInvocationError("Cannot add a message while a run is in flight")
        message = Message.from_user(content)
        self.state.messages.append(message)
        log_user_message(LOGGER, content)
        return message

    def reset(self) -> None:
        """Clear the conversation (idempotent)."""
        if self._in_flight:
            raise ConcurrentInvocationError("Cannot reset while a run is in flight")
        self.state.reset()
        self._stop_reason = None
        LOGGER.info("Conversation reset")

    # ========== Queries ==========

    @property
    def history(self) -> tuple[Message, ...]:
        return self.state.history

    @property
    def is_complete(self) -> bool:
        return self.state.is_complete

    @property
    def last_stop_reason(self) -> Optional[StopReason]:
        """Rule that ended the most recent run (None before the first run ends)."""
        return self._stop_reason

    def is_visible(self, message: Message) -> bool:
        return (
            message.author in self.visible_agents
            and message.role is MessageRole.ASSISTANT
            and bool(message.content.strip())
        )

    # ========== Run ==========

    def ensure_can_invoke(self) -> None:
        """Raise if invoke() would be refused right now (message count aside).

        Raises:
            ConcurrentInvocationError: A run is already in flight
            ConversationCompleteError: The previous run completed and automatic_reset is off
        """
        if self._in_flight:
            raise ConcurrentInvocationError("A group chat run is already in flight")
        if self.state.is_complete and not self.automatic_reset:
            raise ConversationCompleteError(
                "The conversation has completed; reset it before invoking again"
            )

    async def invoke(self) -> AsyncIterator[Message]:
        """Run the turn loop until termination or the ceiling.

        Yields the visible messages in the order they are appended. Closing the
        iterator early stops the run after the turn in progress; a later invoke()
        continues with the turns that are left.

        Raises:
            ConcurrentInvocationError: A run is already in flight
            ConversationCompleteError: The previous run completed and was not reset
            GroupChatError: There is nothing to respond to
        """
        self.ensure_can_invoke()

        if self.state.is_complete:
            LOGGER.info("Conversation was complete, resetting run counters")
            self.state.is_complete = False
            self.state.iteration_count = 0

        if not self.state.messages:
            raise GroupChatError("No messages to respond to; add a user message first")

        # An earlier run closed early with every turn used up
        if self.state.iteration_count >= self.max_iterations:
            self.state.is_complete = True
            self._stop_reason = StopReason.CEILING
            LOGGER.info(
                f"Run finished: reason={self._stop_reason}, "
                f"turns={self.state.iteration_count}/{self.max_iterations}"
            )
            return

        self._in_flight = True
        self._stop_reason = None
        try:
            initial: GroupChatGraphState = {
                "messages": list(self.state.messages),
                "iteration_count": self.state.iteration_count,
                "max_iterations": self.max_iterations,
                "next_agent": None,
                "is_complete": False,
                "stop_reason": None,
            }
            # Each turn is at most three supersteps (select, invoke, evaluate)
            config = {"recursion_limit": self.max_iterations * 3 + 5}

            last_count = len(self.state.messages)
            stream = self._app.astream(initial, config=config, stream_mode="values")
            async with aclosing(stream):
                async for snapshot in stream:
                    current = snapshot.get("messages", [])
                    new_messages = current[last_count:]
                    last_count = len(current)

                    self.state.messages.extend(new_messages)
                    self.state.iteration_count = snapshot.get("iteration_count", self.state.iteration_count)
                    if snapshot.get("is_complete"):
                        self.state.is_complete = True
                        self._stop_reason = snapshot.get("stop_reason")

                    for message in new_messages:
                        if self.is_visible(message):
                            yield message

            LOGGER.info(
                f"Run finished: reason={self._stop_reason}, "
                f"turns={self.state.iteration_count}/{self.max_iterations}"
            )
        finally:
            self._in_flight = False


__all__ = ["GroupChat"]

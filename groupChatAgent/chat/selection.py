"""Selection strategies - decide which agent speaks next.

The policy over the last message:
- user                                  → orchestrator
- orchestrator + delegation marker      → specialist
- specialist                            → orchestrator
- anything unparsable                   → orchestrator (fallback, applied by the loop)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Sequence, Union

from groupChatAgent.agents.message_utils import describe_message, stringify_content
from groupChatAgent.agents.prompts import SELECTION_PROMPT
from groupChatAgent.agents.registry import AgentRegistry
from groupChatAgent.agents.schema import AgentIdentity, Message, MessageRole
from groupChatAgent.utils.error_handler import SelectionParseError

LOGGER = logging.getLogger(__name__)

SelectionResult = Union[AgentIdentity, str]

FALLBACK_AGENT = AgentIdentity.ORCHESTRATOR


def last_spoken(history: Sequence[Message]) -> Optional[Message]:
    """Most recent user or agent text message (tool intermediates skipped)."""
    for message in reversed(history):
        if message.role is not MessageRole.TOOL:
            return message
    return None


def _agent_spoke_since_user(history: Sequence[Message]) -> bool:
    for message in reversed(history):
        if message.is_from_user:
            return False
        if message.role is MessageRole.ASSISTANT:
            return True
    return False


def parse_selection(value: Any, registry: AgentRegistry) -> AgentIdentity:
    """Map a strategy result onto a registered identity.

    Raises:
        SelectionParseError: The value names no registered agent
    """
    try:
        return registry.resolve(value)
    except KeyError as e:
        raise SelectionParseError(value) from e


class SelectionStrategy(ABC):
    """Base class: history → identity (or a raw label the loop will parse)."""

    def __init__(self, initial_agent: Optional[AgentIdentity] = None):
        """
        Args:
            initial_agent: Speaker chosen, without consulting the policy, while no
                agent has answered the latest user message
        """
        self.initial_agent = initial_agent

    async def select(self, history: Sequence[Message]) -> SelectionResult:
        if self.initial_agent is not None and not _agent_spoke_since_user(history):
            return self.initial_agent
        return await self.choose(history)

    @abstractmethod
    async def choose(self, history: Sequence[Message]) -> SelectionResult:
        ...


class KeywordSelectionStrategy(SelectionStrategy):
    """Deterministic classifier over the last message."""

    def __init__(
        self,
        delegation_marker: str,
        *,
        orchestrator: AgentIdentity = AgentIdentity.ORCHESTRATOR,
        specialist: AgentIdentity = AgentIdentity.SPECIALIST,
        initial_agent: Optional[AgentIdentity] = None,
    ):
        super().__init__(initial_agent)
        if not delegation_marker:
            raise ValueError("delegation_marker must not be empty")
        self.delegation_marker = delegation_marker
        self.orchestrator = orchestrator
        self.specialist = specialist

    async def choose(self, history: Sequence[Message]) -> SelectionResult:
        last = last_spoken(history)
        if last is None or last.is_from_user:
            return self.orchestrator

        if last.author is self.orchestrator:
            if self.delegation_marker.casefold() in last.content.casefold():
                return self.specialist
            LOGGER.debug("Orchestrator spoke without delegating, keeping the turn with it")
            return self.orchestrator

        if last.author is self.specialist:
            return self.orchestrator

        return FALLBACK_AGENT


def default_selection_parser(text: str) -> str:
    """Trimmed model output; empty output names nobody (the loop falls back)."""
    return text.strip()


class PromptSelectionStrategy(SelectionStrategy):
    """Asks a chat model to name the next agent.

    The model output is returned as a raw label; the loop parses it against the
    registry and falls back to the orchestrator when it names nobody.
    """

    def __init__(
        self,
        model: Any,
        registry: AgentRegistry,
        *,
        delegation_marker: str,
        result_parser: Callable[[str], SelectionResult] = default_selection_parser,
        initial_agent: Optional[AgentIdentity] = None,
    ):
        super().__init__(initial_agent)
        self.model = model
        self.registry = registry
        self.delegation_marker = delegation_marker
        self.result_parser = result_parser

    async def choose(self, history: Sequence[Message]) -> SelectionResult:
        last = last_spoken(history)
        if last is None:
            return FALLBACK_AGENT

        prompt = SELECTION_PROMPT.format(
            orchestrator=self.registry.display_name(AgentIdentity.ORCHESTRATOR),
            specialist=self.registry.display_name(AgentIdentity.SPECIALIST),
            delegation_marker=self.delegation_marker,
            last_message=describe_message(last, self.registry.display_name),
        )
        response = await self.model.ainvoke(prompt)
        text = stringify_content(getattr(response, "content", response))
        LOGGER.debug(f"Selection model answered: {text!r}")
        return self.result_parser(text)


__all__ = [
    "FALLBACK_AGENT",
    "SelectionStrategy",
    "KeywordSelectionStrategy",
    "PromptSelectionStrategy",
    "default_selection_parser",
    "last_spoken",
    "parse_selection",
]

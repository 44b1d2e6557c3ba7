"""Termination strategies - decide whether the run is finished.

Only messages from agents in scope are considered (the orchestrator by default),
and the check fires only right after an in-scope agent has spoken. The iteration
ceiling is enforced by the loop, never here.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import AbstractSet, Any, Callable, Iterable, Optional, Sequence

from groupChatAgent.agents.message_utils import describe_message, stringify_content
from groupChatAgent.agents.prompts import TERMINATION_PROMPT
from groupChatAgent.agents.registry import AgentRegistry
from groupChatAgent.agents.schema import AgentIdentity, Message, MessageRole
from groupChatAgent.utils.error_handler import TerminationParseError

LOGGER = logging.getLogger(__name__)


class TerminationStrategy(ABC):
    """Base class: history restricted to ``scope`` → stop/continue."""

    def __init__(self, agents: Iterable[AgentIdentity] = (AgentIdentity.ORCHESTRATOR,)):
        """
        Args:
            agents: Default scope; an empty scope means every agent
        """
        self.agents = frozenset(agents)

    async def should_stop(
        self,
        history: Sequence[Message],
        scope: Optional[AbstractSet[AgentIdentity]] = None,
    ) -> bool:
        scope = frozenset(scope) if scope is not None else self.agents
        agent_messages = [
            m for m in history
            if not m.is_from_user and m.role is MessageRole.ASSISTANT
        ]
        if not agent_messages:
            return False

        if scope and agent_messages[-1].author not in scope:
            return False

        in_scope = [m for m in agent_messages if not scope or m.author in scope]
        try:
            return await self.evaluate(in_scope[-1], history)
        except TerminationParseError as e:
            LOGGER.warning(f"{e} (continuing)")
            return False

    @abstractmethod
    async def evaluate(self, message: Message, history: Sequence[Message]) -> bool:
        """Decide on the most recent in-scope message."""


class KeywordTerminationStrategy(TerminationStrategy):
    """Stops when the in-scope message contains the termination marker (case-insensitive)."""

    def __init__(self, termination_marker: str, agents: Iterable[AgentIdentity] = (AgentIdentity.ORCHESTRATOR,)):
        super().__init__(agents)
        if not termination_marker:
            raise ValueError("termination_marker must not be empty")
        self.termination_marker = termination_marker

    async def evaluate(self, message: Message, history: Sequence[Message]) -> bool:
        return self.termination_marker.casefold() in message.content.casefold()


def default_termination_parser(text: str) -> bool:
    """Read a model answer as a boolean; "true" wins over "false"."""
    lowered = text.strip().lower()
    if "true" in lowered:
        return True
    if "false" in lowered:
        return False
    raise TerminationParseError(text)


class PromptTerminationStrategy(TerminationStrategy):
    """Asks a chat model whether the in-scope message ends the conversation."""

    def __init__(
        self,
        model: Any,
        registry: AgentRegistry,
        *,
        termination_marker: str,
        result_parser: Callable[[str], bool] = default_termination_parser,
        agents: Iterable[AgentIdentity] = (AgentIdentity.ORCHESTRATOR,),
    ):
        super().__init__(agents)
        self.model = model
        self.registry = registry
        self.termination_marker = termination_marker
        self.result_parser = result_parser

    async def evaluate(self, message: Message, history: Sequence[Message]) -> bool:
        prompt = TERMINATION_PROMPT.format(
            orchestrator=self.registry.display_name(AgentIdentity.ORCHESTRATOR),
            termination_marker=self.termination_marker,
            last_message=describe_message(message, self.registry.display_name),
        )
        response = await self.model.ainvoke(prompt)
        text = stringify_content(getattr(response, "content", response))
        LOGGER.debug(f"Termination model answered: {text!r}")
        return self.result_parser(text)


__all__ = [
    "TerminationStrategy",
    "KeywordTerminationStrategy",
    "PromptTerminationStrategy",
    "default_termination_parser",
]

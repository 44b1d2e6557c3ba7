"""Group chat state definitions.

- ConversationState: the message log owned by one GroupChat (survives between runs)
- GroupChatGraphState: the LangGraph state of a single run of the turn loop
"""

from __future__ import annotations

import operator
from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, List, Optional, TypedDict

from groupChatAgent.agents.schema import AgentIdentity, Message


class StopReason(str, Enum):
    """Why a run reached Terminated."""

    TERMINATION_STRATEGY = "termination_strategy"
    CEILING = "ceiling"


@dataclass
class ConversationState:
    """Ordered message log, turn counter and completion flag.

    Only the turn loop appends to it; reset() is the only other mutator.
    """

    messages: List[Message] = field(default_factory=list)
    iteration_count: int = 0
    is_complete: bool = False

    def reset(self) -> None:
        """Clear history and counters. Calling it repeatedly has the same effect as once."""
        self.messages = []
        self.iteration_count = 0
        self.is_complete = False

    @property
    def history(self) -> tuple[Message, ...]:
        return tuple(self.messages)


class GroupChatGraphState(TypedDict, total=False):
    """State for one run of the turn loop."""

    messages: Annotated[List[Message], operator.add]
    """Conversation history; nodes return only the messages they add."""

    iteration_count: int
    """Agent turns taken so far (one per invoke node execution)."""

    max_iterations: int
    """Ceiling on agent turns."""

    next_agent: Optional[AgentIdentity]
    """Speaker chosen by the select node."""

    is_complete: bool
    """Set by the evaluate node when the run must stop."""

    stop_reason: Optional[StopReason]
    """Which rule stopped the run."""


__all__ = ["StopReason", "ConversationState", "GroupChatGraphState"]

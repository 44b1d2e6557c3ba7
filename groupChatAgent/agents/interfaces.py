"""Interfaces for the group chat's external collaborators."""

from __future__ import annotations

from typing import Dict, List, Protocol, Sequence

from langchain_core.tools import BaseTool

from .registry import CapabilityScope
from .schema import AgentDefinition, Message


class LanguageModel(Protocol):
    """Runs one agent turn.

    Implementations may call the tools bound in ``scope`` and must return the
    produced messages ending with the agent's final text. Failures are raised as
    ``AgentInvocationError``, never returned as an empty result.
    """

    async def invoke(
        self,
        definition: AgentDefinition,
        scope: CapabilityScope,
        history: Sequence[Message],
    ) -> List[Message]:
        ...


class ToolProvider(Protocol):
    """Enumerates the external tools available to the registry (once, at startup)."""

    async def list_capabilities(self) -> Dict[str, BaseTool]:
        ...

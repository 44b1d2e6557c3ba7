"""Agent definitions, registry and model invocation."""

from .schema import AgentDefinition, AgentIdentity, Message, MessageRole
from .registry import AgentRegistry, CapabilityScope
from .interfaces import LanguageModel, ToolProvider
from .invoker import ChatModelInvoker, build_agent_turn_graph
from .prompts import build_orchestrator_instructions, build_specialist_instructions

__all__ = [
    "AgentDefinition",
    "AgentIdentity",
    "Message",
    "MessageRole",
    "AgentRegistry",
    "CapabilityScope",
    "LanguageModel",
    "ToolProvider",
    "ChatModelInvoker",
    "build_agent_turn_graph",
    "build_orchestrator_instructions",
    "build_specialist_instructions",
]

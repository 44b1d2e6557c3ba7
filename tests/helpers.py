"""Scripted collaborators shared by the test suite."""

from typing import Any, Dict, List, Optional, Sequence

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage
from langchain_core.outputs import ChatGeneration, ChatResult
from langchain_core.tools import tool
from pydantic import Field

from groupChatAgent.agents import AgentDefinition, AgentIdentity, Message
from groupChatAgent.chat import SelectionStrategy, TerminationStrategy
from groupChatAgent.utils.error_handler import AgentInvocationError

ORCHESTRATOR_NAME = "Orchestrator"
SPECIALIST_NAME = "GitHubSpecialist"
DELEGATION_MARKER = f"Asking {SPECIALIST_NAME}"
TERMINATION_MARKER = "Do you want me to do something else?"


@tool
def list_issues(repo: str) -> str:
    """List the open issues of a GitHub repository."""
    return f"#42 Crash on startup ({repo})"


@tool
def get_secret(name: str) -> str:
    """Read a secret (must never be reachable by the orchestrator)."""
    return f"secret:{name}"


class ScriptedChatModel(BaseChatModel):
    """Chat model that replays queued responses and records what it saw."""

    responses: List[Any] = Field(default_factory=list)
    calls: List[List[BaseMessage]] = Field(default_factory=list)
    bound_tools: List[List[str]] = Field(default_factory=list)

    @property
    def _llm_type(self) -> str:
        return "scripted"

    def _generate(self, messages, stop=None, run_manager=None, **kwargs) -> ChatResult:
        self.calls.append(list(messages))
        if not self.responses:
            raise RuntimeError("No scripted response left")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        if isinstance(response, str):
            response = AIMessage(content=response)
        return ChatResult(generations=[ChatGeneration(message=response)])

    def bind_tools(self, tools, **kwargs):
        self.bound_tools.append([t.name for t in tools])
        return self


class ScriptedLanguageModel:
    """LanguageModel stub: one queued reply (text or exception) per agent turn."""

    def __init__(self, replies: Dict[AgentIdentity, List[Any]]):
        self.replies = {identity: list(items) for identity, items in replies.items()}
        self.calls: List[tuple] = []

    async def invoke(self, definition, scope, history: Sequence[Message]) -> List[Message]:
        self.calls.append((definition.identity, scope, tuple(history)))
        reply = self.replies[definition.identity].pop(0)
        if isinstance(reply, BaseException):
            raise AgentInvocationError(definition.name, reply)
        return [Message(author=definition.identity, content=reply)]

    @property
    def speakers(self) -> List[AgentIdentity]:
        return [identity for identity, _, _ in self.calls]


class FixedSelection(SelectionStrategy):
    """Always answers the same label (or raises it when it is an exception)."""

    def __init__(self, label: Any):
        super().__init__()
        self.label = label

    async def choose(self, history):
        if isinstance(self.label, BaseException):
            raise self.label
        return self.label


class NeverStop(TerminationStrategy):
    def __init__(self):
        super().__init__(agents=())
        self.evaluations = 0

    async def evaluate(self, message, history):
        self.evaluations += 1
        return False


def tool_call(name: str, args: Dict[str, Any], call_id: str = "call_1") -> AIMessage:
    return AIMessage(content="", tool_calls=[{"name": name, "args": args, "id": call_id}])


def make_definitions(capabilities: Optional[Sequence[str]] = ("list_issues",)) -> List[AgentDefinition]:
    return [
        AgentDefinition(
            identity=AgentIdentity.ORCHESTRATOR,
            name=ORCHESTRATOR_NAME,
            instructions="You coordinate.",
            description="Coordinator",
        ),
        AgentDefinition(
            identity=AgentIdentity.SPECIALIST,
            name=SPECIALIST_NAME,
            instructions="You fetch GitHub data.",
            capabilities=frozenset(capabilities or ()),
            description="GitHub data",
        ),
    ]

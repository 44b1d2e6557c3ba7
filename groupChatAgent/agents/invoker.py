"""Chat model invoker - one agent turn as a small LangGraph loop.

Each agent gets its own compiled turn graph, built once from its CapabilityScope:

    START → agent ⇄ tools → END      (agent with capabilities)
    START → agent → END              (agent without capabilities: no tools node,
                                      model never bound to tools)
"""

from __future__ import annotations

import logging
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Sequence, TypedDict

from langchain_core.messages import AIMessage, BaseMessage
from langgraph.graph import END, START, StateGraph
from langgraph.graph.message import add_messages
from langgraph.prebuilt import ToolNode

from groupChatAgent.utils.error_handler import AgentInvocationError
from groupChatAgent.utils.logging_utils import log_routing_decision, log_visible_tools
from .message_utils import from_langchain_messages, stringify_content, to_langchain_messages
from .registry import CapabilityScope
from .schema import AgentDefinition, AgentIdentity, Message, MessageRole

LOGGER = logging.getLogger(__name__)


class AgentTurnState(TypedDict):
    """State of a single agent turn."""

    messages: Annotated[Sequence[BaseMessage], add_messages]
    tool_rounds: int
    max_tool_rounds: int


def build_agent_turn_graph(model: Any, scope: CapabilityScope):
    """Build the turn graph for one agent.

    Args:
        model: LangChain chat model shared by all agents
        scope: The agent's capability view; only its tools are bound

    Returns:
        Compiled StateGraph
    """
    tools = list(scope.tools)
    runnable = model.bind_tools(tools) if tools else model

    async def agent_node(state: AgentTurnState) -> dict:
        response: AIMessage = await runnable.ainvoke(state["messages"])
        rounds = state.get("tool_rounds", 0)
        if tools and getattr(response, "tool_calls", None):
            rounds += 1
        return {"messages": [response], "tool_rounds": rounds}

    def should_continue(state: AgentTurnState) -> Literal["continue", "end"]:
        last_message = state["messages"][-1]
        if not tools or not getattr(last_message, "tool_calls", None):
            return "end"

        rounds = state.get("tool_rounds", 0)
        max_rounds = state.get("max_tool_rounds", 8)
        if rounds > max_rounds:
            log_routing_decision(LOGGER, "agent", "end", f"Tool round limit reached ({max_rounds})")
            return "end"
        return "continue"

    workflow = StateGraph(AgentTurnState)
    workflow.add_node("agent", agent_node)
    workflow.add_edge(START, "agent")

    if tools:
        workflow.add_node("tools", ToolNode(tools))
        workflow.add_conditional_edges(
            "agent",
            should_continue,
            {"continue": "tools", "end": END},
        )
        workflow.add_edge("tools", "agent")
    else:
        workflow.add_edge("agent", END)

    return workflow.compile()


class ChatModelInvoker:
    """LanguageModel collaborator backed by a LangChain chat model.

    Examples:
        >>> invoker = ChatModelInvoker(ChatOpenAI(model="gpt-5-nano"), names={...})
        >>> messages = await invoker.invoke(definition, registry.scope(definition.identity), history)
    """

    def __init__(
        self,
        model: Any,
        *,
        names: Optional[Mapping[AgentIdentity, str]] = None,
        max_tool_rounds: int = 8,
    ):
        """
        Args:
            model: LangChain chat model (must support bind_tools for agents with tools)
            names: Display names used to label other agents' messages
            max_tool_rounds: Maximum tool-calling rounds within one turn
        """
        self.model = model
        self.names = dict(names or {})
        self.max_tool_rounds = max_tool_rounds
        self._graphs: Dict[AgentIdentity, Any] = {}

    def _name_of(self, identity: AgentIdentity) -> str:
        return self.names.get(identity, identity.value)

    def _graph_for(self, scope: CapabilityScope):
        # Scopes are immutable, so one compiled graph per owner is reused for the process
        if scope.owner not in self._graphs:
            log_visible_tools(LOGGER, self._name_of(scope.owner), scope.tools)
            self._graphs[scope.owner] = build_agent_turn_graph(self.model, scope)
        return self._graphs[scope.owner]

    async def invoke(
        self,
        definition: AgentDefinition,
        scope: CapabilityScope,
        history: Sequence[Message],
    ) -> List[Message]:
        """Run one turn for ``definition`` and return the messages it produced.

        Raises:
            AgentInvocationError: Model/tool/transport failure, or no final text
        """
        if scope.owner is not definition.identity:
            raise AgentInvocationError(definition.name, f"Scope belongs to '{scope.owner.value}'")

        input_messages = to_langchain_messages(
            history,
            instructions=definition.instructions,
            name_of=self._name_of,
        )
        initial_state = {
            "messages": input_messages,
            "tool_rounds": 0,
            "max_tool_rounds": self.max_tool_rounds,
        }

        try:
            final_state = await self._graph_for(scope).ainvoke(
                initial_state,
                config={"recursion_limit": self.max_tool_rounds * 2 + 5},
            )
        except Exception as e:
            raise AgentInvocationError(definition.name, e) from e

        produced = final_state["messages"][len(input_messages):]
        last = produced[-1] if produced else None
        if not isinstance(last, AIMessage) or getattr(last, "tool_calls", None) or not stringify_content(last.content).strip():
            raise AgentInvocationError(definition.name, "The model returned no final text response")

        messages = from_langchain_messages(produced, definition.identity)
        tool_count = sum(1 for m in messages if m.role is MessageRole.TOOL)
        LOGGER.debug(f"[{definition.name}] produced {len(messages)} message(s), {tool_count} tool result(s)")
        return messages


__all__ = ["AgentTurnState", "build_agent_turn_graph", "ChatModelInvoker"]

"""Graph builder for the group chat turn loop.

    START → select → invoke → evaluate → END
              ↑___________________|
              (not complete, ceiling not reached)

- select:   SelectionStrategy output parsed against the registry (fallback: orchestrator)
- invoke:   one agent turn through its CapabilityScope; failures become a message
- evaluate: TerminationStrategy plus the hard iteration ceiling
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping

from langgraph.graph import END, START, StateGraph

from groupChatAgent.agents.interfaces import LanguageModel
from groupChatAgent.agents.registry import AgentRegistry
from groupChatAgent.agents.schema import Message, MessageRole
from groupChatAgent.utils.error_handler import AgentInvocationError, handle_model_error, with_error_boundary
from groupChatAgent.utils.logging_utils import log_agent_response, log_turn
from .routing import evaluate_route
from .selection import FALLBACK_AGENT, SelectionStrategy, parse_selection
from .state import GroupChatGraphState, StopReason
from .termination import TerminationStrategy

LOGGER = logging.getLogger(__name__)


def _ceiling_reached(state: Mapping[str, Any]) -> bool:
    return state.get("iteration_count", 0) >= state.get("max_iterations", 1)


def build_group_chat_graph(
    *,
    registry: AgentRegistry,
    language_model: LanguageModel,
    selection: SelectionStrategy,
    termination: TerminationStrategy,
):
    """Build the turn loop graph.

    Args:
        registry: Agent registry (definitions and capability scopes)
        language_model: Collaborator that runs one agent turn
        selection: Next-speaker strategy
        termination: Stop/continue strategy (its own `agents` set is the scope)

    Returns:
        Compiled LangGraph application
    """
    # ========== select ==========

    def _select_fallback(state: Mapping[str, Any], error: Exception) -> Dict[str, Any]:
        return {"next_agent": FALLBACK_AGENT}

    @with_error_boundary("select", _select_fallback)
    async def select_node(state: GroupChatGraphState) -> dict:
        raw = await selection.select(state.get("messages", []))
        identity = parse_selection(raw, registry)
        LOGGER.info(f"Selected next speaker: {registry.display_name(identity)}")
        return {"next_agent": identity}

    # ========== invoke ==========

    def _invoke_fallback(state: Mapping[str, Any], error: Exception) -> Dict[str, Any]:
        identity = state.get("next_agent") or FALLBACK_AGENT
        user_msg = getattr(error, "user_message", None) or handle_model_error(error)
        failure = Message(
            author=identity,
            content=f"Failed to respond: {user_msg}",
            role=MessageRole.ASSISTANT,
        )
        return {
            "messages": [failure],
            "iteration_count": state.get("iteration_count", 0) + 1,
        }

    @with_error_boundary("invoke", _invoke_fallback)
    async def invoke_node(state: GroupChatGraphState) -> dict:
        identity = state.get("next_agent") or FALLBACK_AGENT
        definition = registry.get(identity)
        iteration = state.get("iteration_count", 0) + 1
        history = state.get("messages", [])

        log_turn(LOGGER, definition.name, iteration, state.get("max_iterations", 0), len(history))

        produced = await language_model.invoke(definition, registry.scope(identity), history)
        if not produced:
            raise AgentInvocationError(definition.name, "The model returned no messages")

        for message in produced:
            if message.role is MessageRole.ASSISTANT:
                log_agent_response(LOGGER, definition.name, message.content)

        return {"messages": list(produced), "iteration_count": iteration}

    # ========== evaluate ==========

    def _evaluate_fallback(state: Mapping[str, Any], error: Exception) -> Dict[str, Any]:
        if _ceiling_reached(state):
            return {"is_complete": True, "stop_reason": StopReason.CEILING}
        return {"is_complete": False}

    @with_error_boundary("evaluate", _evaluate_fallback)
    async def evaluate_node(state: GroupChatGraphState) -> dict:
        # The strategy is consulted on every turn so a final answer on the last
        # allowed turn is reported as such; the ceiling never depends on it.
        if await termination.should_stop(state.get("messages", [])):
            return {"is_complete": True, "stop_reason": StopReason.TERMINATION_STRATEGY}

        if _ceiling_reached(state):
            LOGGER.info(
                f"Iteration ceiling reached ({state.get('iteration_count')}/{state.get('max_iterations')})"
            )
            return {"is_complete": True, "stop_reason": StopReason.CEILING}

        return {"is_complete": False}

    # ========== Build Graph ==========
    graph = StateGraph(GroupChatGraphState)

    graph.add_node("select", select_node)
    graph.add_node("invoke", invoke_node)
    graph.add_node("evaluate", evaluate_node)

    graph.add_edge(START, "select")
    graph.add_edge("select", "invoke")
    graph.add_edge("invoke", "evaluate")
    graph.add_conditional_edges(
        "evaluate",
        evaluate_route,
        {
            "select": "select",
            "end": END,
        },
    )

    return graph.compile()


__all__ = ["build_group_chat_graph"]

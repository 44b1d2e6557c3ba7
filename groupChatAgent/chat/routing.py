"""Conditional routing for the group chat turn loop."""

from __future__ import annotations

import logging
from typing import Literal

from groupChatAgent.utils.logging_utils import log_routing_decision
from .state import GroupChatGraphState

LOGGER = logging.getLogger(__name__)


def evaluate_route(state: GroupChatGraphState) -> Literal["select", "end"]:
    """Route after the evaluate node.

    Returns:
        "end": The evaluate node marked the run complete (termination or ceiling)
        "select": Another turn is allowed
    """
    iterations = state.get("iteration_count", 0)
    max_iterations = state.get("max_iterations", 0)

    if state.get("is_complete", False):
        decision = "end"
        reason = f"Run complete ({state.get('stop_reason')}) after {iterations}/{max_iterations} turn(s)"
    else:
        decision = "select"
        reason = f"Continuing ({iterations}/{max_iterations} turn(s) used)"

    log_routing_decision(LOGGER, "evaluate", decision, reason)
    return decision


__all__ = ["evaluate_route"]

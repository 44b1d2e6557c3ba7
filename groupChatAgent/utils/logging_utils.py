"""Logging utilities for the group chat."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

ROOT_LOGGER_NAME = "groupChatAgent"

_preview_limit = 200


def setup_logging(
    log_dir: str | Path = "logs",
    level: int | str = logging.DEBUG,
    message_max_length: int = 200,
) -> logging.Logger:
    """Setup logging configuration for the package.

    Args:
        log_dir: Directory for the timestamped log file
        level: Level for the file handler (default: DEBUG)
        message_max_length: Preview length for logged message content

    Returns:
        Configured package logger
    """
    global _preview_limit
    _preview_limit = message_max_length

    logs_dir = Path(log_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / f"group_chat_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"

    # Module loggers are children of this one (logging.getLogger(__name__))
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    logger.handlers = []

    # File handler (detailed logs)
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))

    # Console handler (user-friendly)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    logger.info("=" * 80)
    logger.info("Group chat session started")
    logger.info(f"Log file: {log_file}")
    logger.info("=" * 80)

    return logger


def _preview(content: str, limit: Optional[int] = None) -> str:
    limit = limit or _preview_limit
    return f"{content[:limit]}{'...' if len(content) > limit else ''}"


def log_routing_decision(logger: logging.Logger, from_node: str, decision: str, reason: str = "") -> None:
    """Log routing decision.

    Args:
        logger: Logger instance
        from_node: Source node making the decision
        decision: Routing destination
        reason: Reason for the routing decision
    """
    logger.info(f"Routing decision from {from_node}: → {decision}")
    if reason:
        logger.info(f"  → Reason: {reason}")


def log_turn(logger: logging.Logger, agent_name: str, iteration: int, ceiling: int, history_length: int) -> None:
    """Log the start of an agent turn.

    Args:
        logger: Logger instance
        agent_name: Display name of the agent taking the turn
        iteration: 1-based turn number
        ceiling: Configured maximum number of turns
        history_length: Messages visible to the agent
    """
    logger.info("=" * 80)
    logger.info(f"Turn {iteration}/{ceiling}: {agent_name}")
    logger.info(f"  History: {history_length} message(s)")
    logger.info("=" * 80)


def log_user_message(logger: logging.Logger, content: str) -> None:
    """Log user input."""
    logger.info(f"User input: {_preview(content)}")


def log_agent_response(logger: logging.Logger, agent_name: str, content: str, limit: Optional[int] = None) -> None:
    """Log agent response (truncated)."""
    logger.info(f"[{agent_name}] response: {_preview(content, limit)}")


def log_visible_tools(logger: logging.Logger, agent_name: str, tools: Iterable) -> None:
    """Log the tools bound for an agent turn.

    Args:
        logger: Logger instance
        agent_name: Agent display name
        tools: List of tool names or tool objects
    """
    tool_names = [t.name if hasattr(t, "name") else str(t) for t in tools]
    logger.info(f"Visible tools for {agent_name}: [{', '.join(tool_names)}] ({len(tool_names)} total)")


def log_error(logger: logging.Logger, error: Exception, context: Optional[str] = None) -> None:
    """Log error with context.

    Args:
        logger: Logger instance
        error: Exception instance
        context: Additional context about where the error occurred
    """
    logger.error(f"Error occurred: {type(error).__name__}: {error}")
    if context:
        logger.error(f"  Context: {context}")
    logger.debug("Full traceback:", exc_info=error)

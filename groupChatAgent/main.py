#!/usr/bin/env python3
"""Group chat - main entry point.

Usage:
    python -m groupChatAgent.main
    # Or, once installed:
    group-chat

An orchestrator agent and a GitHub specialist agent take turns on every question:
the orchestrator announces what it needs, the specialist fetches it through the
GitHub MCP server, and the orchestrator answers.
"""

import asyncio
import logging
import sys

from groupChatAgent.cli import GroupChatCLI
from groupChatAgent.config import get_settings
from groupChatAgent.config.project_root import resolve_project_path
from groupChatAgent.runtime import build_group_chat_app
from groupChatAgent.utils.logging_utils import log_error, setup_logging

LOGGER = logging.getLogger(__name__)


async def main() -> int:
    """Main entry point; returns the process exit code."""
    settings = get_settings()
    setup_logging(
        resolve_project_path(settings.observability.log_dir),
        level=settings.observability.log_level,
        message_max_length=settings.observability.log_message_max_length,
    )

    try:
        app = await build_group_chat_app(settings)
    except Exception as e:
        log_error(LOGGER, e, context="main - build_group_chat_app()")
        print(f"Startup failed: {e}", file=sys.stderr)
        return 1

    cli = GroupChatCLI(app.chat, reset_after_each_query=settings.chat.reset_after_each_query)
    try:
        await cli.run()
    finally:
        await app.shutdown()
    return 0


def run():
    """Console script entry point."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\nGoodbye!")
        sys.exit(0)


if __name__ == "__main__":
    run()

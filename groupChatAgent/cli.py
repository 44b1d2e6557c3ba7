"""Interactive command line for the group chat."""

from __future__ import annotations

import logging
from contextlib import aclosing
from typing import Awaitable, Callable, Dict

from shared.cli.base_cli import BaseCLI
from groupChatAgent.chat import GroupChat
from groupChatAgent.utils.logging_utils import log_error

LOGGER = logging.getLogger(__name__)


class GroupChatCLI(BaseCLI):
    """CLI for the orchestrator/specialist group chat.

    Every line that is not a command starts one full run; only the orchestrator's
    messages are printed, as ``[<name>] <content>``.
    """

    BASE_COMMANDS: Dict[str, str] = {
        "exit": "Quit the program",
        "reset": "Clear the conversation history",
        "help": "Show this help",
    }

    def __init__(self, chat: GroupChat, *, reset_after_each_query: bool = True):
        self.chat = chat
        self.reset_after_each_query = reset_after_each_query
        super().__init__()

    def _build_command_handlers(self) -> Dict[str, Callable[[], Awaitable[bool]]]:
        handlers = super()._build_command_handlers()
        handlers["reset"] = self._handle_reset
        return handlers

    def print_welcome(self):
        catalog = self.chat.registry.get_catalog_text()
        print("=" * 60)
        print("GitHub group chat")
        print("=" * 60)
        print(catalog)
        print()
        print("Ask a question about a GitHub repository.")
        print("Type 'reset' to clear the history, 'exit' to quit.")
        print()

    async def _handle_reset(self) -> bool:
        self.chat.reset()
        print("[Chat history cleared]")
        return True

    async def handle_user_message(self, message: str):
        """Run the group chat on one user line and print the visible replies."""
        try:
            # Refuse before appending so a rejected line leaves no unanswered message
            self.chat.ensure_can_invoke()
            self.chat.add_user_message(message)
            async with aclosing(self.chat.invoke()) as replies:
                async for reply in replies:
                    print(f"[{self.chat.registry.display_name(reply.author)}] {reply.content}")
        except Exception as e:
            log_error(LOGGER, e, context="handle_user_message - chat.invoke()")
            print(f"Error: {e}")

        if self.reset_after_each_query:
            self.chat.reset()

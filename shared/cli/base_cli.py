"""Base CLI framework for chat interfaces."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Dict

LOGGER = logging.getLogger(__name__)


class BaseCLI(ABC):
    """Base CLI class handling the read-eval loop.

    Provides:
    - Plain-word commands matched case-insensitively on the whole line (exit, help)
    - Main input/output loop; blank lines are ignored
    - Catch-all that reports a failed line and keeps the loop alive

    Subclasses implement:
    - Welcome message
    - User message processing logic
    - Custom commands (optional)
    """

    BASE_COMMANDS: Dict[str, str] = {
        "exit": "Quit the program",
        "help": "Show this help",
    }

    prompt: str = "User > "

    def __init__(self):
        self._command_handlers = self._build_command_handlers()
        self._running = False

        LOGGER.info(f"{self.__class__.__name__} initialized")

    def _build_command_handlers(self) -> Dict[str, Callable[[], Awaitable[bool]]]:
        """Command handler mapping; subclasses extend it with their own commands."""
        return {
            "exit": self._handle_exit,
            "help": self._handle_help,
        }

    @property
    def commands(self) -> Dict[str, str]:
        return self.BASE_COMMANDS

    # ========== Main Loop ==========

    async def run(self):
        """Main CLI loop until ``exit``, EOF or Ctrl+C."""
        self._running = True
        self.print_welcome()

        while self._running:
            try:
                user_input = (await self.get_input()).strip()

                if not user_input:
                    continue

                if self.is_command(user_input):
                    should_continue = await self.handle_command(user_input)
                    if not should_continue:
                        break
                else:
                    await self.handle_user_message(user_input)

            except (KeyboardInterrupt, EOFError):
                print("\nGoodbye!")
                LOGGER.info("Session interrupted by user")
                break
            except Exception as e:
                LOGGER.error(f"Unexpected error in main loop: {e}", exc_info=True)
                print(f"Error: {e}")

        self._running = False
        await self.on_shutdown()

    async def on_shutdown(self):
        """Cleanup before shutdown (override to release resources)."""
        LOGGER.info("CLI shutting down")

    # ========== Command Handling ==========

    def is_command(self, text: str) -> bool:
        return text.strip().lower() in self._command_handlers

    async def handle_command(self, cmd: str) -> bool:
        """Run a command.

        Returns:
            True to continue main loop, False to exit
        """
        handler = self._command_handlers[cmd.strip().lower()]
        return await handler()

    async def _handle_exit(self) -> bool:
        print("Goodbye!")
        LOGGER.info("Exit requested by user")
        return False

    async def _handle_help(self) -> bool:
        print("\nAvailable commands:")
        for cmd, desc in self.commands.items():
            print(f"  {cmd:<10} {desc}")
        print()
        return True

    # ========== Abstract Methods (Subclass Implementation) ==========

    @abstractmethod
    def print_welcome(self):
        """Print welcome message."""

    async def get_input(self) -> str:
        """Read one line without blocking the event loop.

        Raises:
            EOFError: Input stream closed
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: input(self.prompt))

    @abstractmethod
    async def handle_user_message(self, message: str):
        """Process one line of user text."""


__all__ = ["BaseCLI"]

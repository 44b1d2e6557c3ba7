"""MCP server connection over stdio."""

import logging
import os
import re
from contextlib import AsyncExitStack
from typing import Any, Dict, List, Mapping, Optional

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client

LOGGER = logging.getLogger(__name__)

_ENV_REF = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def resolve_env(env: Mapping[str, Any], environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Resolve ``${VAR}`` references against the process environment.

    Unset variables resolve to an empty string.
    """
    environ = os.environ if environ is None else environ
    resolved = {}
    for key, value in env.items():
        resolved[key] = _ENV_REF.sub(lambda m: environ.get(m.group(1), ""), str(value))
    return resolved


class StdioMCPConnection:
    """Client session to one MCP server process spoken to over stdin/stdout.

    start() and close() must run in the same task: the stdio transport holds a
    task group that cannot be exited from another task.
    """

    def __init__(self, server_id: str, command: str, args: List[str], env: Dict[str, str]):
        self.server_id = server_id
        self.command = command
        self.args = list(args)
        self.env = dict(env)
        self._stack: Optional[AsyncExitStack] = None
        self._session: Optional[ClientSession] = None

    @property
    def is_initialized(self) -> bool:
        return self._session is not None

    async def start(self):
        """Spawn the server and run the MCP initialize handshake."""
        full_env = os.environ.copy()
        full_env.update(resolve_env(self.env))

        LOGGER.debug(f"  Starting stdio server: {self.command} {' '.join(self.args)}")

        server_params = StdioServerParameters(
            command=self.command,
            args=self.args,
            env=full_env,
        )

        stack = AsyncExitStack()
        try:
            read_stream, write_stream = await stack.enter_async_context(stdio_client(server_params))
            session = await stack.enter_async_context(ClientSession(read_stream, write_stream))
            await session.initialize()
        except BaseException:
            await stack.aclose()
            raise

        self._stack = stack
        self._session = session
        LOGGER.debug(f"  ✓ Stdio connection established for server: {self.server_id}")

    def _require_session(self) -> ClientSession:
        if self._session is None:
            raise RuntimeError(f"Server not initialized: {self.server_id}")
        return self._session

    async def call_tool(self, tool_name: str, arguments: Dict[str, Any]) -> str:
        """Call a tool and flatten its text content.

        Raises:
            RuntimeError: The server reported the call as failed
        """
        session = self._require_session()

        LOGGER.debug(f"  Calling tool: {tool_name} on server {self.server_id}")
        result = await session.call_tool(tool_name, arguments)

        text_parts = [item.text for item in (result.content or []) if hasattr(item, "text")]
        text = "\n".join(text_parts)

        if getattr(result, "isError", False):
            raise RuntimeError(text or f"Tool '{tool_name}' reported an error")
        return text

    async def list_tools(self) -> List[Any]:
        session = self._require_session()
        result = await session.list_tools()
        return list(result.tools)

    async def get_tool_info(self, tool_name: str):
        for tool in await self.list_tools():
            if tool.name == tool_name:
                return tool
        raise ValueError(f"Tool not found on server '{self.server_id}': {tool_name}")

    async def close(self):
        """Close the session and stop the server process."""
        stack, self._stack, self._session = self._stack, None, None
        if stack is not None:
            await stack.aclose()
        LOGGER.debug(f"  ✓ Closed stdio connection for server: {self.server_id}")


def create_connection(
    server_id: str,
    command: str,
    args: List[str],
    env: Dict[str, str],
    mode: str = "stdio",
) -> StdioMCPConnection:
    """Create a connection for the configured transport (stdio only)."""
    if mode != "stdio":
        raise ValueError(f"Unsupported connection mode for '{server_id}': {mode}")
    return StdioMCPConnection(server_id, command, args, env)

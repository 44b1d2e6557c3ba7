"""MCP server lifecycle manager with lazy startup support."""

import asyncio
import logging
from typing import Dict, List

from .connection import StdioMCPConnection, create_connection

LOGGER = logging.getLogger(__name__)


class MCPServerManager:
    """
    Manages lifecycle of MCP servers with lazy startup.

    Features:
    - Lazy startup: a server starts on first use (discovery or tool call)
    - Startup is serialized, so parallel tool calls share one process
    - All servers closed on shutdown
    """

    def __init__(self, config: dict):
        """
        Args:
            config: MCP configuration dict loaded from mcp_servers.yaml
        """
        self.config = config
        self._servers: Dict[str, StdioMCPConnection] = {}
        self._server_configs: Dict[str, dict] = {}
        self._lock = asyncio.Lock()

        for server_id, server_cfg in (config.get("servers") or {}).items():
            if server_cfg.get("enabled", True):
                self._server_configs[server_id] = server_cfg
                LOGGER.debug(f"  Registered MCP server config: {server_id}")

    @property
    def settings(self) -> dict:
        return self.config.get("settings") or {}

    def server_config(self, server_id: str) -> dict:
        if server_id not in self._server_configs:
            raise ValueError(f"MCP server not configured: {server_id}")
        return self._server_configs[server_id]

    async def get_server(self, server_id: str) -> StdioMCPConnection:
        """
        Get server connection (lazy startup).

        Raises:
            ValueError: If server not configured
            RuntimeError: If server fails to start
        """
        async with self._lock:
            if server_id in self._servers:
                return self._servers[server_id]

            self.server_config(server_id)

            LOGGER.info(f"🚀 Starting MCP server: {server_id}")
            connection = await self._start_server(server_id)
            self._servers[server_id] = connection
            return connection

    async def _start_server(self, server_id: str) -> StdioMCPConnection:
        cfg = self._server_configs[server_id]
        connection_mode = cfg.get("connection_mode", self.settings.get("default_connection_mode", "stdio"))

        connection = create_connection(
            server_id=server_id,
            command=cfg["command"],
            args=cfg.get("args") or [],
            env=cfg.get("env") or {},
            mode=connection_mode,
        )

        startup_timeout = self.settings.get("startup_timeout", 30)

        # asyncio.timeout keeps start() in the calling task (wait_for would not)
        try:
            async with asyncio.timeout(startup_timeout):
                await connection.start()
        except TimeoutError as e:
            raise RuntimeError(f"MCP server startup timeout: {server_id}") from e
        except Exception as e:
            raise RuntimeError(f"Failed to start MCP server '{server_id}': {e}") from e

        LOGGER.info(f"  ✓ MCP server started: {server_id} (mode: {connection_mode})")
        return connection

    async def shutdown(self):
        """Shutdown all MCP servers. Call once when the application exits."""
        if not self._servers:
            return

        LOGGER.info(f"Shutting down {len(self._servers)} MCP server(s)...")

        for server_id, connection in self._servers.items():
            try:
                await connection.close()
                LOGGER.info(f"  ✓ Closed: {server_id}")
            except Exception as e:
                LOGGER.error(f"  ✗ Failed to close {server_id}: {e}")

        self._servers.clear()

    def is_server_started(self, server_id: str) -> bool:
        return server_id in self._servers

    def list_configured_servers(self) -> List[str]:
        return list(self._server_configs.keys())

    def list_started_servers(self) -> List[str]:
        return list(self._servers.keys())

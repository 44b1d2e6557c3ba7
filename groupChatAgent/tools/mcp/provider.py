"""ToolProvider over MCP servers: static tools plus dynamic discovery."""

import logging
from typing import Dict, Optional

from langchain_core.tools import BaseTool

from groupChatAgent.utils.error_handler import RegistryError
from .loader import _resolve_tool_name, load_mcp_tools
from .manager import MCPServerManager
from .wrapper import MCPToolWrapper

LOGGER = logging.getLogger(__name__)


class MCPToolProvider:
    """Enumerates the MCP tools available to the agents.

    Static ``tools`` entries never start a server. Servers with ``discover: true``
    are started and asked for their tool list; every advertised tool is wrapped
    with its description and input schema. The catalog is built once and cached.
    """

    def __init__(self, config: dict, manager: MCPServerManager):
        self.config = config
        self.manager = manager
        self._catalog: Optional[Dict[str, BaseTool]] = None

    async def list_capabilities(self) -> Dict[str, BaseTool]:
        """Tool catalog keyed by final tool name.

        Raises:
            RegistryError: Two tools resolve to the same name
            RuntimeError: A discoverable server failed to start
        """
        if self._catalog is not None:
            return dict(self._catalog)

        catalog: Dict[str, BaseTool] = {}
        for tool in load_mcp_tools(self.config, self.manager):
            self._add(catalog, tool)

        for server_id in self.manager.list_configured_servers():
            server_cfg = self.manager.server_config(server_id)
            if server_cfg.get("discover", False):
                await self._discover(server_id, server_cfg, catalog)

        LOGGER.info(f"MCP tool catalog ready: {len(catalog)} tool(s)")
        self._catalog = catalog
        return dict(catalog)

    async def _discover(self, server_id: str, server_cfg: dict, catalog: Dict[str, BaseTool]):
        namespace_strategy = self.manager.settings.get("namespace_strategy", "alias")
        static_cfg = server_cfg.get("tools") or {}

        connection = await self.manager.get_server(server_id)
        advertised = await connection.list_tools()
        LOGGER.info(f"  Discovered {len(advertised)} tool(s) on MCP server: {server_id}")

        for tool in advertised:
            # Statically configured tools keep their own entry
            if tool.name in static_cfg:
                continue

            final_name = _resolve_tool_name(server_id, tool.name, None, namespace_strategy)
            wrapper = MCPToolWrapper(
                server_id=server_id,
                tool_name=final_name,
                original_tool_name=tool.name,
                description=tool.description or f"MCP tool '{tool.name}' from server '{server_id}'",
                manager=self.manager,
                input_schema=getattr(tool, "inputSchema", None),
            )
            self._add(catalog, wrapper)
            LOGGER.debug(f"    ✓ Discovered MCP tool: {final_name} (server: {server_id})")

    @staticmethod
    def _add(catalog: Dict[str, BaseTool], tool: BaseTool):
        if tool.name in catalog:
            raise RegistryError(f"Duplicate MCP tool name: {tool.name}")
        catalog[tool.name] = tool

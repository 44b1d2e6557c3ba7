"""MCP tool wrapper for LangChain BaseTool integration."""

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from langchain_core.tools import BaseTool
from pydantic import ConfigDict, Field

if TYPE_CHECKING:
    from .manager import MCPServerManager

LOGGER = logging.getLogger(__name__)

_EMPTY_SCHEMA: Dict[str, Any] = {"type": "object", "properties": {}}


class MCPToolWrapper(BaseTool):
    """
    LangChain BaseTool wrapper for MCP tools.

    Features:
    - Lazy server startup: server only starts on first tool call
    - JSON schema arguments as advertised by the server
    - Failures returned as tool output, so the calling agent can report them
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    server_id: str = Field(description="MCP server identifier")
    original_tool_name: str = Field(description="Original tool name on MCP server")
    manager: Any = Field(description="MCPServerManager instance", exclude=True)

    def __init__(
        self,
        server_id: str,
        tool_name: str,
        original_tool_name: str,
        description: str,
        manager: "MCPServerManager",
        input_schema: Optional[Dict[str, Any]] = None,
    ):
        """
        Args:
            server_id: MCP server identifier
            tool_name: Final tool name (may be aliased)
            original_tool_name: Original tool name on MCP server
            description: Tool description
            manager: MCPServerManager instance
            input_schema: JSON schema of the tool arguments (from tools/list)
        """
        super().__init__(
            name=tool_name,
            description=description,
            server_id=server_id,
            original_tool_name=original_tool_name,
            manager=manager,
            args_schema=input_schema or dict(_EMPTY_SCHEMA),
        )

    async def _arun(self, **kwargs) -> str:
        try:
            connection = await self.manager.get_server(self.server_id)

            LOGGER.debug(
                f"Executing MCP tool: {self.name} "
                f"(server: {self.server_id}, tool: {self.original_tool_name})"
            )
            return await connection.call_tool(self.original_tool_name, kwargs)

        except Exception as e:
            error_msg = (
                f"MCP tool execution failed:\n"
                f"  Tool: {self.name}\n"
                f"  Server: {self.server_id}\n"
                f"  Error: {str(e)}"
            )
            LOGGER.error(error_msg)
            return error_msg

    def _run(self, **kwargs) -> str:
        raise NotImplementedError(f"MCP tool '{self.name}' is async-only, use ainvoke()")

"""MCP (Model Context Protocol) integration for the group chat."""

from .connection import StdioMCPConnection, create_connection, resolve_env
from .manager import MCPServerManager
from .wrapper import MCPToolWrapper
from .loader import load_mcp_config, load_mcp_tools
from .provider import MCPToolProvider

__all__ = [
    "StdioMCPConnection",
    "create_connection",
    "resolve_env",
    "MCPServerManager",
    "MCPToolWrapper",
    "MCPToolProvider",
    "load_mcp_config",
    "load_mcp_tools",
]

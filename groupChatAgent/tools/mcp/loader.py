"""Configuration loader and tool factory for MCP integration."""

import logging
from pathlib import Path
from typing import List, Optional

import yaml
from langchain_core.tools import BaseTool

from .manager import MCPServerManager
from .wrapper import MCPToolWrapper

LOGGER = logging.getLogger(__name__)


def load_mcp_config(config_path: Path) -> dict:
    """
    Load MCP configuration from YAML file.

    Args:
        config_path: Path to mcp_servers.yaml

    Returns:
        Configuration dictionary (``servers`` and ``settings`` always present)

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"MCP config not found: {config_path}")

    with open(config_path, encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    config.setdefault("servers", {})
    config.setdefault("settings", {})
    if config["servers"] is None:
        config["servers"] = {}
    if config["settings"] is None:
        config["settings"] = {}
    return config


def load_mcp_tools(config: dict, manager: MCPServerManager) -> List[BaseTool]:
    """
    Create wrappers for the statically configured tools.

    This does NOT start servers - servers are started lazily on first tool call.
    Servers marked ``discover: true`` are enumerated by MCPToolProvider instead.
    """
    tools = []
    namespace_strategy = config.get("settings", {}).get("namespace_strategy", "alias")

    for server_id, server_cfg in config.get("servers", {}).items():
        if not server_cfg.get("enabled", True):
            LOGGER.debug(f"  Skipping disabled MCP server: {server_id}")
            continue

        tools_config = server_cfg.get("tools") or {}
        if not tools_config:
            if not server_cfg.get("discover", False):
                LOGGER.warning(f"  No tools configured for MCP server: {server_id}")
            continue

        for tool_name, tool_cfg in tools_config.items():
            tool_cfg = tool_cfg or {}
            if not tool_cfg.get("enabled", True):
                LOGGER.debug(f"    Skipping disabled tool: {server_id}.{tool_name}")
                continue

            final_name = _resolve_tool_name(server_id, tool_name, tool_cfg, namespace_strategy)
            description = tool_cfg.get(
                "description",
                f"MCP tool '{tool_name}' from server '{server_id}'"
            )

            wrapper = MCPToolWrapper(
                server_id=server_id,
                tool_name=final_name,
                original_tool_name=tool_name,
                description=description,
                manager=manager,
                input_schema=tool_cfg.get("input_schema"),
            )

            tools.append(wrapper)
            LOGGER.info(f"    ✓ Loaded MCP tool: {final_name} (server: {server_id})")

    return tools


def _resolve_tool_name(
    server_id: str,
    tool_name: str,
    tool_cfg: Optional[dict],
    namespace_strategy: str
) -> str:
    """
    Determine final tool name based on configuration.

    Priority: configured alias, then the namespace strategy ("prefix" gives
    ``mcp__<server>__<tool>``), then the original name.
    """
    if tool_cfg and "alias" in tool_cfg:
        return tool_cfg["alias"]

    if namespace_strategy == "prefix":
        return f"mcp__{server_id}__{tool_name}"

    return tool_name

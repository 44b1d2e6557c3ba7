"""Test MCP tool discovery and the tool wrapper."""

import json

import pytest

from groupChatAgent.tools.mcp import MCPServerManager, MCPToolProvider, MCPToolWrapper
from groupChatAgent.utils.error_handler import RegistryError


@pytest.mark.asyncio
async def test_discovery_lists_every_server_tool(github_mcp_config):
    manager = MCPServerManager(github_mcp_config)
    provider = MCPToolProvider(github_mcp_config, manager)

    try:
        tools = await provider.list_capabilities()

        # Static alias replaces the discovered name
        assert sorted(tools) == ["broken_tool", "get_token_hint", "github_commits", "list_issues"]
        assert all(isinstance(t, MCPToolWrapper) for t in tools.values())
        assert tools["list_issues"].description == "List issues in a GitHub repository"
        assert tools["list_issues"].args_schema["required"] == ["owner", "repo"]

        # Enumerated once
        assert await provider.list_capabilities() == tools
    finally:
        await manager.shutdown()


@pytest.mark.asyncio
async def test_wrapped_tools_call_the_server(github_mcp_config):
    manager = MCPServerManager(github_mcp_config)
    provider = MCPToolProvider(github_mcp_config, manager)

    try:
        tools = await provider.list_capabilities()

        issues = json.loads(await tools["list_issues"].ainvoke({"owner": "octo", "repo": "hello"}))
        assert issues[0]["number"] == 42

        commits = await tools["github_commits"].ainvoke({"owner": "octo", "repo": "hello"})
        assert "Fix crash on startup" in commits

        # Failures come back as text the specialist can report
        failure = await tools["broken_tool"].ainvoke({})
        assert failure.startswith("MCP tool execution failed")
        assert "rate limit" in failure
    finally:
        await manager.shutdown()


@pytest.mark.asyncio
async def test_static_only_config_does_not_start_servers(github_mcp_config):
    github_mcp_config["servers"]["github"]["discover"] = False
    manager = MCPServerManager(github_mcp_config)
    provider = MCPToolProvider(github_mcp_config, manager)

    tools = await provider.list_capabilities()

    assert list(tools) == ["github_commits"]
    assert manager.list_started_servers() == []


@pytest.mark.asyncio
async def test_duplicate_tool_names_rejected():
    config = {
        "servers": {
            "a": {"command": "npx", "tools": {"search": {}}},
            "b": {"command": "npx", "tools": {"search": {}}},
        },
        "settings": {"namespace_strategy": "alias"},
    }
    provider = MCPToolProvider(config, MCPServerManager(config))

    with pytest.raises(RegistryError, match="search"):
        await provider.list_capabilities()


def test_wrapper_is_async_only():
    config = {"servers": {"a": {"command": "npx", "tools": {"search": {}}}}, "settings": {}}
    wrapper = MCPToolWrapper(
        server_id="a",
        tool_name="search",
        original_tool_name="search",
        description="Search",
        manager=MCPServerManager(config),
    )
    with pytest.raises(NotImplementedError):
        wrapper.invoke({})

"""Test MCP configuration loader."""

from pathlib import Path

import pytest
import yaml

from groupChatAgent.config import resolve_project_path
from groupChatAgent.tools.mcp import MCPServerManager, load_mcp_config, load_mcp_tools


def test_load_mcp_config(tmp_path):
    config_path = tmp_path / "mcp_servers.yaml"
    test_config = {
        "servers": {
            "github": {
                "command": "npx",
                "args": ["-y", "@modelcontextprotocol/server-github"],
                "discover": True,
            }
        },
        "settings": {"namespace_strategy": "prefix"},
    }
    config_path.write_text(yaml.safe_dump(test_config), encoding="utf-8")

    assert load_mcp_config(config_path) == test_config


def test_load_empty_config(tmp_path):
    config_path = tmp_path / "empty.yaml"
    config_path.write_text("", encoding="utf-8")

    assert load_mcp_config(config_path) == {"servers": {}, "settings": {}}


def test_load_mcp_config_nonexistent():
    with pytest.raises(FileNotFoundError):
        load_mcp_config(Path("/nonexistent/config.yaml"))


def test_bundled_config_declares_github_server():
    config = load_mcp_config(resolve_project_path("groupChatAgent/config/mcp_servers.yaml"))
    github = config["servers"]["github"]

    assert github["command"] == "npx"
    assert "@modelcontextprotocol/server-github" in github["args"]
    assert github["discover"] is True
    assert github["env"]["GITHUB_PERSONAL_ACCESS_TOKEN"] == "${GITHUB_PERSONAL_ACCESS_TOKEN}"


def test_load_static_tools_does_not_start_servers(github_mcp_config):
    manager = MCPServerManager(github_mcp_config)
    tools = load_mcp_tools(github_mcp_config, manager)

    assert [t.name for t in tools] == ["github_commits"]
    assert tools[0].original_tool_name == "list_commits"
    assert tools[0].description == "Recent commits of a repository"
    assert manager.list_started_servers() == []


def test_prefix_namespace_strategy():
    config = {
        "servers": {"github": {"command": "npx", "tools": {"list_issues": {}, "get_issue": {"alias": "issue"}}}},
        "settings": {"namespace_strategy": "prefix"},
    }
    tools = load_mcp_tools(config, MCPServerManager(config))

    assert sorted(t.name for t in tools) == ["issue", "mcp__github__list_issues"]


def test_disabled_servers_and_tools_are_skipped():
    config = {
        "servers": {
            "off": {"command": "npx", "enabled": False, "tools": {"t1": {"alias": "t1"}}},
            "on": {"command": "npx", "tools": {"t2": {"enabled": False}, "t3": {}}},
        },
        "settings": {},
    }
    manager = MCPServerManager(config)

    assert [t.name for t in load_mcp_tools(config, manager)] == ["t3"]
    assert manager.list_configured_servers() == ["on"]

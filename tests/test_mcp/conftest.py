"""Pytest fixtures for MCP tests."""

import sys
from pathlib import Path

import pytest


@pytest.fixture
def fake_server_path():
    """Path to the fake GitHub stdio server."""
    return Path(__file__).parent.parent / "mcp_servers" / "fake_github_server.py"


@pytest.fixture
def github_mcp_config(fake_server_path):
    """MCP configuration with one discoverable server and one static alias."""
    return {
        "servers": {
            "github": {
                "command": sys.executable,
                "args": [str(fake_server_path)],
                "enabled": True,
                "discover": True,
                "env": {"GITHUB_PERSONAL_ACCESS_TOKEN": "${FAKE_GITHUB_TOKEN}"},
                "tools": {
                    "list_commits": {
                        "alias": "github_commits",
                        "description": "Recent commits of a repository",
                    },
                },
            },
        },
        "settings": {
            "namespace_strategy": "alias",
            "startup_timeout": 30,
            "default_connection_mode": "stdio",
        },
    }

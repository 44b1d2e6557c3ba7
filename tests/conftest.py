"""Pytest configuration and fixtures for all tests.

This file is automatically loaded by pytest and ensures proper test environment setup.
"""

import sys
from pathlib import Path

import pytest

# Ensure project root is in PYTHONPATH for imports to work
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from groupChatAgent.agents import AgentRegistry  # noqa: E402
from tests.helpers import ScriptedChatModel, list_issues, make_definitions  # noqa: E402


@pytest.fixture
def github_tool():
    return list_issues


@pytest.fixture
def registry(github_tool):
    return AgentRegistry(make_definitions(), {github_tool.name: github_tool})


@pytest.fixture
def scripted_chat_model():
    return ScriptedChatModel()


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    from groupChatAgent.config.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

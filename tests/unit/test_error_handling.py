"""Unit tests for error types, the node error boundary and logging helpers"""

import asyncio
import logging

import pytest

from groupChatAgent.utils import (
    AgentInvocationError,
    GroupChatError,
    SelectionParseError,
    handle_model_error,
    log_agent_response,
    setup_logging,
    with_error_boundary,
)
from groupChatAgent.utils import logging_utils
from groupChatAgent.utils.logging_utils import ROOT_LOGGER_NAME


class TestHandleModelError:
    """测试模型错误到用户提示的转换"""

    @pytest.mark.parametrize("error, expected", [
        (RuntimeError("Error code: 429"), "rate limited"),
        (asyncio.TimeoutError(), "did not respond in time"),
        (RuntimeError("maximum context length exceeded"), "too long"),
        (RuntimeError("invalid_api_key"), "API key is invalid"),
        (RuntimeError("insufficient_quota"), "quota"),
        (RuntimeError("boom"), "unavailable: boom"),
    ])
    def test_messages(self, error, expected):
        assert expected in handle_model_error(error)

    def test_invocation_error_carries_user_message(self):
        error = AgentInvocationError("GitHubSpecialist", RuntimeError("boom"))
        assert isinstance(error, GroupChatError)
        assert error.agent_name == "GitHubSpecialist"
        assert error.user_message == "The model service is unavailable: boom"
        assert "GitHubSpecialist" in str(error)

    def test_invocation_error_from_text(self):
        error = AgentInvocationError("Orchestrator", "no final text")
        assert error.user_message == "no final text"


class TestErrorBoundary:
    """测试节点错误边界"""

    @pytest.mark.asyncio
    async def test_async_node_recovers(self):
        seen = []

        def fallback(state, exc):
            seen.append(exc)
            return {"next_agent": "fallback"}

        @with_error_boundary("select", fallback)
        async def node(state):
            raise SelectionParseError("Bob")

        assert await node({}) == {"next_agent": "fallback"}
        assert isinstance(seen[0], SelectionParseError)

    @pytest.mark.asyncio
    async def test_async_node_passes_through(self):
        @with_error_boundary("select", lambda state, exc: {})
        async def node(state):
            return {"ok": state["x"]}

        assert await node({"x": 1}) == {"ok": 1}

    def test_sync_node_recovers(self):
        @with_error_boundary("evaluate", lambda state, exc: {"is_complete": True})
        def node(state):
            raise ValueError("bad")

        assert node({}) == {"is_complete": True}


class TestLogging:
    """测试日志配置"""

    def test_setup_logging_writes_file(self, tmp_path, monkeypatch):
        monkeypatch.setattr(logging_utils, "_preview_limit", logging_utils._preview_limit)
        logger = setup_logging(tmp_path / "logs", message_max_length=10)
        try:
            log_agent_response(logging.getLogger(f"{ROOT_LOGGER_NAME}.chat.builder"), "Orchestrator", "x" * 50)
            for handler in logger.handlers:
                handler.flush()

            log_files = list((tmp_path / "logs").glob("group_chat_*.log"))
            assert len(log_files) == 1
            content = log_files[0].read_text(encoding="utf-8")
            assert "[Orchestrator] response: xxxxxxxxxx..." in content
            assert logger.propagate is False
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)

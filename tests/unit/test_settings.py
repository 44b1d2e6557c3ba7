"""Unit tests for settings and model construction"""

import pytest
from pydantic import ValidationError

from groupChatAgent.config import GroupChatSettings, ModelSettings, get_settings, resolve_project_path
from groupChatAgent.config.project_root import get_project_root
from groupChatAgent.runtime import build_chat_model


class TestGroupChatSettings:
    """测试群聊配置"""

    def test_defaults(self, monkeypatch):
        for name in ["GROUP_CHAT_MAX_ITERATIONS", "GROUP_CHAT_SPECIALIST_NAME", "GROUP_CHAT_DELEGATION_MARKER"]:
            monkeypatch.delenv(name, raising=False)
        settings = GroupChatSettings(_env_file=None)

        assert settings.max_iterations == 3
        assert settings.selection_mode == "keyword"
        assert settings.delegation_marker == "Asking GitHubSpecialist"
        assert settings.termination_marker == "Do you want me to do something else?"
        assert settings.reset_after_each_query is True
        assert settings.automatic_reset is False

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("GROUP_CHAT_MAX_ITERATIONS", "5")
        monkeypatch.setenv("GROUP_CHAT_SPECIALIST_NAME", "RepoBot")
        monkeypatch.delenv("GROUP_CHAT_DELEGATION_MARKER", raising=False)

        settings = GroupChatSettings(_env_file=None)

        assert settings.max_iterations == 5
        assert settings.delegation_marker == "Asking RepoBot"

    @pytest.mark.parametrize("value", [0, 51])
    def test_ceiling_bounds(self, value):
        with pytest.raises(ValidationError):
            GroupChatSettings(_env_file=None, max_iterations=value)

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValidationError):
            GroupChatSettings(_env_file=None, selection_mode="random")

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestModelSettings:
    """测试模型配置与构建"""

    def test_api_key_aliases(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        monkeypatch.setenv("MODEL_CHAT_API_KEY", "sk-alias")
        monkeypatch.setenv("OPENAI_MODEL", "gpt-4o-mini")

        settings = ModelSettings(_env_file=None)

        assert settings.chat_api_key == "sk-alias"
        assert settings.chat == "gpt-4o-mini"

    def test_missing_api_key_is_fatal(self):
        settings = ModelSettings(_env_file=None, chat_api_key=None)
        with pytest.raises(RuntimeError, match="API Key"):
            build_chat_model(settings)

    def test_build_chat_model(self):
        settings = ModelSettings(_env_file=None, chat="gpt-5-nano-2025-08-07", chat_api_key="sk-test")
        model = build_chat_model(settings)
        assert model.model_name == "gpt-5-nano-2025-08-07"


class TestProjectRoot:
    def test_relative_paths_resolve_against_root(self):
        root = get_project_root()
        assert (root / "groupChatAgent").is_dir()
        assert resolve_project_path("groupChatAgent/config/mcp_servers.yaml").is_file()

    def test_absolute_paths_unchanged(self, tmp_path):
        assert resolve_project_path(tmp_path) == tmp_path

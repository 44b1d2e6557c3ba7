"""Integration test of the assembled application with scripted collaborators"""

import pytest

from groupChatAgent.agents import AgentIdentity
from groupChatAgent.chat import StopReason
from groupChatAgent.config import GroupChatSettings, ModelSettings, Settings
from groupChatAgent.runtime import build_agent_definitions, build_group_chat_app
from tests.helpers import ScriptedChatModel, list_issues, tool_call

ORCH = AgentIdentity.ORCHESTRATOR
GH = AgentIdentity.SPECIALIST

class FakeToolProvider:
    def __init__(self, tools):
        self.tools = {t.name: t for t in tools}
        self.calls = 0

    async def list_capabilities(self):
        self.calls += 1
        return dict(self.tools)

def make_settings(**chat_overrides):
    return Settings(
        models=ModelSettings(_env_file=None, chat_api_key="sk-test"),
        chat=GroupChatSettings(_env_file=None, **chat_overrides),
    )

class TestAgentDefinitions:
    """测试 agent 定义的构建"""

    def test_specialist_gets_every_tool(self):
        definitions = build_agent_definitions(make_settings(), ["list_issues", "get_issue"])
        by_identity = {d.identity: d for d in definitions}

        assert by_identity[ORCH].capabilities == frozenset()
        assert by_identity[GH].capabilities == frozenset({"list_issues", "get_issue"})
        assert "Asking GitHubSpecialist" in by_identity[ORCH].instructions
        assert "Do you want me to do something else?" in by_identity[ORCH].instructions
        assert "Orchestrator" in by_identity[GH].instructions

class TestBuildGroupChatApp:
    """测试应用组装与端到端对话"""

    @pytest.mark.asyncio
    async def test_end_to_end_with_tools(self):
        model = ScriptedChatModel(responses=[
            "Asking GitHubSpecialist to list the issues of octo/hello",
            tool_call("list_issues", {"repo": "octo/hello"}),
            "Returned data successfully. Here's what I found: #42 Crash on startup",
            "From what the GitHubSpecialist provided, the latest issue is #42. "
            "Do you want me to do something else?",
        ])
        provider = FakeToolProvider([list_issues])

        app = await build_group_chat_app(make_settings(), chat_model=model, tool_provider=provider)
        try:
            assert app.manager is None
            assert provider.calls == 1

            app.chat.add_user_message("What is the latest issue in octo/hello?")
            visible = [m async for m in app.chat.invoke()]
        finally:
            await app.shutdown()

        assert len(visible) == 2
        assert visible[-1].content.startswith("From what the GitHubSpecialist provided")
        assert app.chat.last_stop_reason is StopReason.TERMINATION_STRATEGY
        # Only the specialist's turn graph was bound to tools
        assert model.bound_tools == [["list_issues"]]
        assert app.registry.scope(ORCH).is_empty

    @pytest.mark.asyncio
    async def test_missing_api_key_fails_startup(self):
        settings = Settings(
            models=ModelSettings(_env_file=None, chat_api_key=None),
            chat=GroupChatSettings(_env_file=None),
        )
        with pytest.raises(RuntimeError, match="API Key"):
            await build_group_chat_app(settings, tool_provider=FakeToolProvider([list_issues]))

    @pytest.mark.asyncio
    async def test_prompt_mode_asks_the_model(self):
        model = ScriptedChatModel(responses=[
            "Asking GitHubSpecialist to list the issues of octo/hello",  # orchestrator turn
            "false",                                                     # termination
            "GitHubSpecialist",                                          # selection
            "Returned data successfully. Here's what I found: #42",      # specialist turn
            "Orchestrator",                                              # selection
            "The latest issue is #42. Do you want me to do something else?",
            "true",                                                      # termination
        ])
        app = await build_group_chat_app(
            make_settings(selection_mode="prompt", termination_mode="prompt"),
            chat_model=model,
            tool_provider=FakeToolProvider([list_issues]),
        )

        app.chat.add_user_message("What is the latest issue in octo/hello?")
        visible = [m async for m in app.chat.invoke()]

        assert [m.content for m in visible][-1].startswith("The latest issue is #42")
        assert app.chat.state.iteration_count == 3
        assert app.chat.last_stop_reason is StopReason.TERMINATION_STRATEGY
        assert model.responses == []

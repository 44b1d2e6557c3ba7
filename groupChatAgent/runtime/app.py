"""Runtime assembly for the group chat."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from groupChatAgent.agents import (
    AgentDefinition,
    AgentIdentity,
    AgentRegistry,
    ChatModelInvoker,
    ToolProvider,
    build_orchestrator_instructions,
    build_specialist_instructions,
)
from groupChatAgent.chat import (
    GroupChat,
    KeywordSelectionStrategy,
    KeywordTerminationStrategy,
    PromptSelectionStrategy,
    PromptTerminationStrategy,
    SelectionStrategy,
    TerminationStrategy,
)
from groupChatAgent.config import Settings, get_settings
from groupChatAgent.config.project_root import resolve_project_path
from groupChatAgent.tools.mcp import MCPServerManager, MCPToolProvider, load_mcp_config
from .model_resolver import build_chat_model

LOGGER = logging.getLogger(__name__)

TERMINATION_AGENTS = (AgentIdentity.ORCHESTRATOR,)


@dataclass
class GroupChatApp:
    """Assembled application: the chat plus the resources it owns."""

    chat: GroupChat
    registry: AgentRegistry
    settings: Settings
    manager: Optional[MCPServerManager] = None

    async def shutdown(self) -> None:
        """Close MCP servers (safe to call more than once)."""
        if self.manager is not None:
            await self.manager.shutdown()


def build_agent_definitions(settings: Settings, tool_names: Iterable[str]) -> List[AgentDefinition]:
    """Orchestrator without tools, specialist with every enumerated tool."""
    chat_cfg = settings.chat
    return [
        AgentDefinition(
            identity=AgentIdentity.ORCHESTRATOR,
            name=chat_cfg.orchestrator_name,
            instructions=build_orchestrator_instructions(
                specialist=chat_cfg.specialist_name,
                delegation_marker=chat_cfg.delegation_marker,
                termination_marker=chat_cfg.termination_marker,
            ),
            description="Coordinates the conversation and answers the user",
        ),
        AgentDefinition(
            identity=AgentIdentity.SPECIALIST,
            name=chat_cfg.specialist_name,
            instructions=build_specialist_instructions(orchestrator=chat_cfg.orchestrator_name),
            capabilities=frozenset(tool_names),
            description="Retrieves data through the GitHub MCP tools",
        ),
    ]


def _build_selection(settings: Settings, registry: AgentRegistry, chat_model: Any) -> SelectionStrategy:
    chat_cfg = settings.chat
    if chat_cfg.selection_mode == "prompt":
        return PromptSelectionStrategy(
            chat_model,
            registry,
            delegation_marker=chat_cfg.delegation_marker,
            initial_agent=AgentIdentity.ORCHESTRATOR,
        )
    return KeywordSelectionStrategy(
        chat_cfg.delegation_marker,
        initial_agent=AgentIdentity.ORCHESTRATOR,
    )


def _build_termination(settings: Settings, registry: AgentRegistry, chat_model: Any) -> TerminationStrategy:
    chat_cfg = settings.chat
    if chat_cfg.termination_mode == "prompt":
        return PromptTerminationStrategy(
            chat_model,
            registry,
            termination_marker=chat_cfg.termination_marker,
            agents=TERMINATION_AGENTS,
        )
    return KeywordTerminationStrategy(chat_cfg.termination_marker, agents=TERMINATION_AGENTS)


async def build_group_chat_app(
    settings: Optional[Settings] = None,
    *,
    chat_model: Any = None,
    tool_provider: Optional[ToolProvider] = None,
) -> GroupChatApp:
    """Assemble the group chat.

    Steps: MCP config → tool enumeration → agent registry → chat model →
    strategies → GroupChat.

    Args:
        settings: Application settings (default: get_settings())
        chat_model: LangChain chat model; built from settings when omitted
        tool_provider: Tool source; MCPToolProvider over the configured servers when omitted

    Raises:
        RegistryError: Agent/tool wiring is invalid
        RuntimeError: Model credentials missing or an MCP server failed to start
    """
    settings = settings or get_settings()

    manager: Optional[MCPServerManager] = None
    if tool_provider is None:
        config_path = resolve_project_path(settings.mcp.config_path)
        LOGGER.info(f"Loading MCP config: {config_path}")
        mcp_config = load_mcp_config(config_path)
        manager = MCPServerManager(mcp_config)
        tool_provider = MCPToolProvider(mcp_config, manager)

    try:
        catalog = await tool_provider.list_capabilities()
        LOGGER.info(f"Enumerated {len(catalog)} tool(s): {sorted(catalog)}")

        definitions = build_agent_definitions(settings, catalog.keys())
        registry = AgentRegistry(definitions, catalog)
        LOGGER.info(f"Agent registry ready:\n{registry.get_catalog_text()}")

        if chat_model is None:
            chat_model = build_chat_model(settings.models)

        names = {definition.identity: definition.name for definition in definitions}
        language_model = ChatModelInvoker(
            chat_model,
            names=names,
            max_tool_rounds=settings.chat.max_tool_rounds,
        )

        chat = GroupChat(
            registry=registry,
            language_model=language_model,
            selection=_build_selection(settings, registry, chat_model),
            termination=_build_termination(settings, registry, chat_model),
            max_iterations=settings.chat.max_iterations,
            visible_agents=(AgentIdentity.ORCHESTRATOR,),
            automatic_reset=settings.chat.automatic_reset,
        )
    except BaseException:
        if manager is not None:
            await manager.shutdown()
        raise

    return GroupChatApp(chat=chat, registry=registry, settings=settings, manager=manager)


__all__ = ["GroupChatApp", "build_agent_definitions", "build_group_chat_app"]

"""Agent Registry - 不可变的 agent 注册表与能力视图

启动时从 agent 定义和工具目录构建一次，之后只读：
- AgentRegistry: 按身份索引的 AgentDefinition 集合
- CapabilityScope: 每个 agent 的只读工具视图（独立计算，互不共享）
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Iterator, List, Mapping, Tuple, Union

from langchain_core.tools import BaseTool

from groupChatAgent.utils.error_handler import RegistryError
from .schema import AgentDefinition, AgentIdentity

LOGGER = logging.getLogger(__name__)

_LABEL_STRIP_CHARS = " \t\r\n\"'`*.:,;!@[]()"


@dataclass(frozen=True)
class CapabilityScope:
    """某个 agent 的只读执行上下文

    只暴露该 agent 定义中列出的工具。没有能力的 agent 得到空视图，
    不存在全局工具命名空间可供绕过。

    Attributes:
        owner: 所属 agent
        bindings: 允许使用的工具名集合
        tools: 与 bindings 对应的工具对象（按名称排序）
    """

    owner: AgentIdentity
    bindings: FrozenSet[str]
    tools: Tuple[BaseTool, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.bindings

    def get_tool(self, name: str) -> BaseTool:
        """获取作用域内的工具

        Raises:
            KeyError: 工具不在该 agent 的作用域内
        """
        for tool in self.tools:
            if tool.name == name:
                return tool
        raise KeyError(f"Tool '{name}' is not bound for agent '{self.owner.value}'")


class AgentRegistry:
    """Agent 注册表（构建后不可变）

    Examples:
        >>> registry = AgentRegistry(definitions, tool_catalog)
        >>> registry.get(AgentIdentity.SPECIALIST).name
        'GitHubSpecialist'
        >>> registry.resolve("githubspecialist")
        <AgentIdentity.SPECIALIST: 'specialist'>
    """

    def __init__(
        self,
        definitions: Iterable[AgentDefinition],
        tool_catalog: Mapping[str, BaseTool] | None = None,
    ):
        """构建注册表和所有能力视图

        Args:
            definitions: Agent 定义
            tool_catalog: 工具名 -> 工具对象（来自 ToolProvider.list_capabilities()）

        Raises:
            RegistryError: 身份重复、缺少 orchestrator、或引用了不存在的工具
        """
        catalog = dict(tool_catalog or {})
        agents: Dict[AgentIdentity, AgentDefinition] = {}

        for definition in definitions:
            if definition.identity in agents:
                raise RegistryError(f"Duplicate agent identity: {definition.identity.value}")
            missing = sorted(definition.capabilities - catalog.keys())
            if missing:
                raise RegistryError(
                    f"Agent '{definition.name}' references unknown tools: {', '.join(missing)}"
                )
            agents[definition.identity] = definition

        if AgentIdentity.ORCHESTRATOR not in agents:
            raise RegistryError("An orchestrator agent must be registered")

        self._agents: Mapping[AgentIdentity, AgentDefinition] = MappingProxyType(agents)
        self._scopes: Mapping[AgentIdentity, CapabilityScope] = MappingProxyType({
            identity: self._build_scope(definition, catalog)
            for identity, definition in agents.items()
        })

        for identity, scope in self._scopes.items():
            LOGGER.info(
                f"Registered agent: {agents[identity].name} ({identity.value}), "
                f"{len(scope.bindings)} tool(s)"
            )

    @staticmethod
    def _build_scope(definition: AgentDefinition, catalog: Mapping[str, BaseTool]) -> CapabilityScope:
        # 每个视图独立计算，不与其他 agent 共享可变集合
        bindings = frozenset(definition.capabilities)
        tools = tuple(catalog[name] for name in sorted(bindings))
        return CapabilityScope(owner=definition.identity, bindings=bindings, tools=tools)

    # ========== Query Methods ==========

    def get(self, identity: AgentIdentity) -> AgentDefinition:
        """获取 agent 定义

        Raises:
            KeyError: Agent 未注册
        """
        if identity not in self._agents:
            raise KeyError(f"Agent not registered: {identity}")
        return self._agents[identity]

    def scope(self, identity: AgentIdentity) -> CapabilityScope:
        """获取 agent 的能力视图"""
        if identity not in self._scopes:
            raise KeyError(f"Agent not registered: {identity}")
        return self._scopes[identity]

    def display_name(self, identity: AgentIdentity | None) -> str:
        """身份 -> 显示名称（None 表示用户）"""
        if identity is None:
            return "User"
        return self.get(identity).name

    def resolve(self, label: Union[AgentIdentity, str]) -> AgentIdentity:
        """把模型输出或用户输入解析为已注册的身份

        接受枚举值、身份字符串（"specialist"）或显示名称（"GitHubSpecialist"），
        忽略大小写和包裹的引号/标点。

        Raises:
            KeyError: 无法匹配任何已注册 agent
        """
        if isinstance(label, AgentIdentity):
            if label in self._agents:
                return label
            raise KeyError(f"Agent not registered: {label.value}")

        if not isinstance(label, str):
            raise KeyError(f"Unsupported agent label: {label!r}")

        normalized = label.strip(_LABEL_STRIP_CHARS).casefold()
        for identity, definition in self._agents.items():
            if normalized in (identity.value, definition.name.casefold()):
                return identity
        raise KeyError(f"Unknown agent: {label!r}")

    @property
    def identities(self) -> FrozenSet[AgentIdentity]:
        return frozenset(self._agents)

    def list_definitions(self) -> List[AgentDefinition]:
        return list(self._agents.values())

    def __contains__(self, identity: object) -> bool:
        return identity in self._agents

    def __iter__(self) -> Iterator[AgentDefinition]:
        return iter(self._agents.values())

    def __len__(self) -> int:
        return len(self._agents)

    def get_catalog_text(self) -> str:
        """生成 agent 目录文本（用于 CLI 欢迎信息）"""
        lines = []
        for definition in self._agents.values():
            tools = self._scopes[definition.identity].bindings
            tool_text = f"{len(tools)} tool(s)" if tools else "no tools"
            lines.append(f"- {definition.name}: {definition.description or definition.identity.value} ({tool_text})")
        return "\n".join(lines)

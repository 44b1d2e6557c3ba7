"""Agent & Message Schema

群聊中的数据模型：
- AgentIdentity: 封闭的 agent 身份集合（决策逻辑只比较枚举值，名称仅用于显示）
- AgentDefinition: agent 的静态定义（身份、指令、可用工具）
- Message: 追加到对话后不可变的消息
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional


class AgentIdentity(str, Enum):
    """Agent 身份（封闭集合）"""

    ORCHESTRATOR = "orchestrator"  # 协调者：不持有工具，负责委派与最终回答
    SPECIALIST = "specialist"  # 专家：唯一持有外部工具的 agent


class MessageRole(str, Enum):
    """消息角色"""

    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"  # 工具调用的中间结果


@dataclass(frozen=True, slots=True)
class Message:
    """对话中的一条消息

    Attributes:
        author: 发言的 agent；None 表示外部用户
        content: 文本内容
        role: 消息角色
        name: 工具消息对应的工具名（仅 role=TOOL 时有值）
    """

    author: Optional[AgentIdentity]
    content: str
    role: MessageRole = MessageRole.ASSISTANT
    name: Optional[str] = None

    @classmethod
    def from_user(cls, content: str) -> "Message":
        return cls(author=None, content=content, role=MessageRole.USER)

    @property
    def is_from_user(self) -> bool:
        return self.author is None


@dataclass(frozen=True)
class AgentDefinition:
    """Agent 的静态定义（启动时创建，之后不再修改）

    Attributes:
        identity: Agent 身份
        name: 显示名称（如 "Orchestrator", "GitHubSpecialist"）
        instructions: 系统指令
        capabilities: 允许使用的工具名集合
        description: 简短描述（用于日志和帮助信息）

    Examples:
        >>> orchestrator = AgentDefinition(
        ...     identity=AgentIdentity.ORCHESTRATOR,
        ...     name="Orchestrator",
        ...     instructions="You coordinate with the GitHubSpecialist...",
        ... )
        >>> orchestrator.has_tools
        False
    """

    identity: AgentIdentity
    name: str
    instructions: str
    capabilities: FrozenSet[str] = field(default_factory=frozenset)
    description: str = ""

    def __post_init__(self):
        # 允许传入 list/set，统一冻结
        object.__setattr__(self, "capabilities", frozenset(self.capabilities))

    @property
    def has_tools(self) -> bool:
        return bool(self.capabilities)

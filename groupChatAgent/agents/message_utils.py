"""Message formatting and conversion utilities."""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage, ToolMessage

from .schema import AgentIdentity, Message, MessageRole


def stringify_content(content: Any) -> str:
    """Convert message content to string.

    Handles:
    - List content (content blocks)
    - Dict content with "text" field
    - Simple string content
    """
    if isinstance(content, list):
        pieces: list[str] = []
        for item in content:
            if isinstance(item, dict):
                if "text" in item:
                    pieces.append(str(item["text"]))
            else:
                pieces.append(str(item))
        return "\n".join(pieces)
    return str(content)


def to_langchain_messages(
    history: Sequence[Message],
    *,
    instructions: Optional[str] = None,
    name_of: Callable[[AgentIdentity], str] = lambda identity: identity.value,
) -> List[BaseMessage]:
    """Convert conversation history to the LangChain messages an agent turn sees.

    Tool intermediates belong to the turn that produced them and are left out;
    the producing agent's final text carries their result forward.
    """
    messages: List[BaseMessage] = []
    if instructions:
        messages.append(SystemMessage(content=instructions))

    for message in history:
        if message.role is MessageRole.TOOL or not message.content:
            continue
        if message.is_from_user:
            messages.append(HumanMessage(content=message.content))
        else:
            messages.append(AIMessage(content=message.content, name=name_of(message.author)))
    return messages


def from_langchain_messages(messages: Sequence[BaseMessage], author: AgentIdentity) -> List[Message]:
    """Convert the messages produced during one agent turn back to chat messages.

    Tool-call requests are dropped (any text beside them is thinking aloud);
    tool results are kept as TOOL messages.
    """
    converted: List[Message] = []
    for message in messages:
        if isinstance(message, ToolMessage):
            converted.append(Message(
                author=author,
                content=stringify_content(message.content),
                role=MessageRole.TOOL,
                name=message.name,
            ))
        elif isinstance(message, AIMessage) and not message.tool_calls:
            text = stringify_content(message.content)
            if text.strip():
                converted.append(Message(author=author, content=text, role=MessageRole.ASSISTANT))
    return converted


def describe_message(message: Message, name_of: Callable[[AgentIdentity], str]) -> str:
    """One-line "<author>: <content>" rendering used by decision prompts."""
    author = "User" if message.is_from_user else name_of(message.author)
    return f"{author}: {message.content}"


__all__ = ["stringify_content", "to_langchain_messages", "from_langchain_messages", "describe_message"]

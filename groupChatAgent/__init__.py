"""Top-level package exports for the group chat."""

from .chat import GroupChat
from .runtime.app import GroupChatApp, build_group_chat_app

__all__ = ["GroupChat", "GroupChatApp", "build_group_chat_app"]

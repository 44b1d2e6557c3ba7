"""Runtime assembly."""

from .app import GroupChatApp, build_agent_definitions, build_group_chat_app
from .model_resolver import build_chat_model

__all__ = ["GroupChatApp", "build_agent_definitions", "build_group_chat_app", "build_chat_model"]

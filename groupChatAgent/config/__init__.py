"""Configuration package."""

from .project_root import get_project_root, resolve_project_path
from .settings import (
    GroupChatSettings,
    MCPSettings,
    ModelSettings,
    ObservabilitySettings,
    Settings,
    get_settings,
)

__all__ = [
    "get_project_root",
    "resolve_project_path",
    "GroupChatSettings",
    "MCPSettings",
    "ModelSettings",
    "ObservabilitySettings",
    "Settings",
    "get_settings",
]

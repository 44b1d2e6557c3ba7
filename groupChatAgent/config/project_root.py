"""Project root path detection - works regardless of working directory."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path


@lru_cache(maxsize=1)
def get_project_root() -> Path:
    """Get absolute path to project root directory.

    Found by walking up from this file to the directory that contains the
    'groupChatAgent' package, so relative config paths work from any cwd.

    Example:
        >>> root = get_project_root()
        >>> mcp_config = root / "groupChatAgent" / "config" / "mcp_servers.yaml"
    """
    # project_root.py -> config/ -> groupChatAgent/ -> project_root/
    project_root = Path(__file__).resolve().parent.parent.parent

    if not (project_root / "groupChatAgent").exists():
        raise RuntimeError(
            f"Could not locate project root. Expected 'groupChatAgent' directory at {project_root}"
        )

    return project_root


def resolve_project_path(relative_path: str | Path) -> Path:
    """Resolve a path relative to project root.

    Absolute paths are returned unchanged.

    Example:
        >>> logs_dir = resolve_project_path("logs")
    """
    path = Path(relative_path)
    if path.is_absolute():
        return path
    return get_project_root() / path


__all__ = ["get_project_root", "resolve_project_path"]

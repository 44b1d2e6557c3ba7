"""Environment-bound configuration objects.

This module provides Pydantic BaseSettings-based configuration loading from .env files.
Model credentials accept several alias names (e.g., OPENAI_API_KEY and MODEL_CHAT_API_KEY
both work); group chat knobs use the GROUP_CHAT_ prefix.

Example:
    from groupChatAgent.config.settings import get_settings

    settings = get_settings()  # Cached singleton
    api_key = settings.models.chat_api_key
    ceiling = settings.chat.max_iterations
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


load_dotenv()


class ModelSettings(BaseSettings):
    """Chat model identifier and credentials.

    One model slot drives every agent turn and, in prompt mode, the selection and
    termination decisions:
    - OPENAI_MODEL, MODEL_CHAT, MODEL_CHAT_ID (model id)
    - OPENAI_API_KEY, MODEL_CHAT_API_KEY (credential)
    - OPENAI_BASE_URL, MODEL_CHAT_BASE_URL (optional OpenAI-compatible endpoint)
    """

    chat: str = Field(
        default="gpt-5-nano-2025-08-07",
        validation_alias=AliasChoices("OPENAI_MODEL", "MODEL_CHAT", "MODEL_CHAT_ID"),
    )
    chat_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "MODEL_CHAT_API_KEY"),
    )
    chat_base_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_BASE_URL", "MODEL_CHAT_BASE_URL"),
    )
    # Some reasoning models reject any non-default temperature
    temperature: Optional[float] = Field(
        default=None,
        ge=0.0,
        le=2.0,
        validation_alias=AliasChoices("MODEL_CHAT_TEMPERATURE"),
    )
    timeout: float = Field(
        default=120.0,
        gt=0,
        validation_alias=AliasChoices("MODEL_CHAT_TIMEOUT"),
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


class GroupChatSettings(BaseSettings):
    """Turn-taking controls for the orchestrator/specialist chat.

    - max_iterations: Ceiling on agent turns per run (1-50, default: 3)
    - selection_mode / termination_mode: "keyword" (deterministic) or "prompt" (model-decided)
    - delegation_marker: Phrase that hands the turn to the specialist
      (default: "Asking <specialist_name>")
    - termination_marker: Phrase that ends the run when the orchestrator says it
    - reset_after_each_query: CLI clears history after every answered question
    - automatic_reset: invoke() on a completed conversation reopens it instead of failing
    """

    max_iterations: int = Field(default=3, ge=1, le=50)
    selection_mode: Literal["keyword", "prompt"] = "keyword"
    termination_mode: Literal["keyword", "prompt"] = "keyword"

    orchestrator_name: str = "Orchestrator"
    specialist_name: str = "GitHubSpecialist"
    delegation_marker: str = ""
    termination_marker: str = "Do you want me to do something else?"

    reset_after_each_query: bool = True
    automatic_reset: bool = False
    max_tool_rounds: int = Field(default=8, ge=1, le=50)

    model_config = SettingsConfigDict(
        env_prefix="GROUP_CHAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _default_delegation_marker(self) -> "GroupChatSettings":
        if not self.delegation_marker:
            self.delegation_marker = f"Asking {self.specialist_name}"
        return self


class MCPSettings(BaseSettings):
    """Location of the MCP server catalog (relative paths resolve against project root)."""

    config_path: str = "groupChatAgent/config/mcp_servers.yaml"

    model_config = SettingsConfigDict(
        env_prefix="MCP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class ObservabilitySettings(BaseSettings):
    """Logging configuration.

    - log_dir: Directory for timestamped session log files
    - log_level: Level for the file handler
    - log_message_max_length: Preview length for logged message content
    """

    log_dir: str = Field(default="logs", alias="LOG_DIR")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="DEBUG", alias="LOG_LEVEL")
    log_message_max_length: int = Field(default=200, ge=50, le=5000, alias="LOG_MESSAGE_MAX_LENGTH")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


class Settings(BaseSettings):
    """Root application settings loaded from .env file.

    Hierarchical structure containing four nested settings groups:
    - models: Chat model routing and API credentials (ModelSettings)
    - chat: Turn-taking controls (GroupChatSettings)
    - mcp: Tool server catalog location (MCPSettings)
    - observability: Logging (ObservabilitySettings)

    Use get_settings() to obtain a cached singleton instance.
    """

    environment: str = Field(default="dev", alias="APP_ENV")
    models: ModelSettings = Field(default_factory=ModelSettings)
    chat: GroupChatSettings = Field(default_factory=GroupChatSettings)
    mcp: MCPSettings = Field(default_factory=MCPSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
        case_sensitive=False,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton Settings instance.

    Returns:
        Settings: Cached application settings instance
    """
    return Settings()

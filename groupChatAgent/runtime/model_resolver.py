"""Chat model construction from environment-derived settings.

One ChatOpenAI client serves every agent turn; in prompt mode the selection and
termination strategies reuse it for their decisions.
"""

from __future__ import annotations

from typing import Dict

from langchain_openai import ChatOpenAI

from groupChatAgent.config import ModelSettings


def _chat_kwargs(settings: ModelSettings) -> Dict[str, object]:
    if not settings.chat_api_key:
        raise RuntimeError(
            f"缺少模型 {settings.chat} 的 API Key，请在 .env 中配置 OPENAI_API_KEY。"
        )
    kwargs: Dict[str, object] = {
        "model": settings.chat,
        "api_key": settings.chat_api_key,
        "timeout": settings.timeout,
    }
    if settings.chat_base_url:
        kwargs["base_url"] = settings.chat_base_url
    if settings.temperature is not None:
        kwargs["temperature"] = settings.temperature
    return kwargs


def build_chat_model(settings: ModelSettings) -> ChatOpenAI:
    """Create the chat model client.

    Raises:
        RuntimeError: If the API key is missing

    Example:
        >>> model = build_chat_model(get_settings().models)
    """
    return ChatOpenAI(**_chat_kwargs(settings))


__all__ = ["build_chat_model"]

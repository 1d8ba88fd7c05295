from __future__ import annotations

from functools import lru_cache

from langchain_core.language_models import BaseChatModel

from config.settings import get_settings
from llm.errors import ConfigurationError


def resolve_api_key() -> str:
    """Return the configured OpenAI key, rejecting missing or malformed values."""
    api_key = get_settings().api_key
    if not api_key:
        raise ConfigurationError("OpenAI API key not configured. Set OPENAI_API_KEY.")
    if not api_key.startswith("sk-"):
        raise ConfigurationError('Invalid OpenAI API key format. Key should start with "sk-"')
    return api_key


@lru_cache(maxsize=8)
def get_llm(api_key: str, model: str) -> BaseChatModel:
    """
    Chat model handle for one (credential, model) pair.

    Handles are reused across requests and rebuilt when the key changes.
    The client itself holds no conversation state, so sharing it between
    concurrent requests is safe. Streaming is disabled so the full message,
    including tool-call arguments and refusals, is available at once.
    """
    from langchain_openai import ChatOpenAI

    settings = get_settings()
    return ChatOpenAI(
        model=model,
        api_key=api_key,
        timeout=settings.openai_timeout_seconds,
        max_retries=settings.openai_max_retries,
        streaming=False,
    )

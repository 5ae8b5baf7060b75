"""Text-generation provider package."""

from .anthropic_provider import AnthropicProvider
from .provider import LLMProvider, LLMResponse

__all__ = ["AnthropicProvider", "LLMProvider", "LLMResponse", "build_provider"]


def build_provider(settings) -> LLMProvider | None:
    """Provider from settings; None when no API key is configured (fallback text only)."""
    if not settings.anthropic_api_key:
        return None
    return AnthropicProvider(
        api_key=settings.anthropic_api_key,
        default_model=settings.coaching_model,
        timeout=settings.coaching_timeout_seconds,
    )

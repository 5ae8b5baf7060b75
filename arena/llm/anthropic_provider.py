"""Anthropic Claude provider."""

from typing import Dict, List, Optional

from arena.core.config import get_settings

from .provider import LLMProvider, LLMResponse


class AnthropicProvider(LLMProvider):
    """Anthropic Claude provider implementation (async client)."""

    def __init__(self, api_key: str, default_model: Optional[str] = None, timeout: float = 15.0):
        super().__init__(api_key, default_model)
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "anthropic"

    def get_default_model(self) -> str:
        return get_settings().coaching_model

    def _init_client(self):
        """Initialize the Anthropic client."""
        import anthropic
        # no SDK-level retries; _call_with_retry owns that
        self._client = anthropic.AsyncAnthropic(api_key=self.api_key, timeout=self.timeout, max_retries=0)

    async def complete(
        self,
        messages: List[Dict[str, str]],
        system: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: int = 300,
        temperature: float = 0.4,
    ) -> LLMResponse:
        """Generate a text completion using Claude."""
        self._ensure_client()

        model_name = model or self.default_model
        kwargs = {
            "model": model_name,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": messages,
        }
        if system:
            kwargs["system"] = system

        message = await self._call_with_retry(self._client.messages.create, **kwargs)

        # only text blocks count; anything else is treated as an empty reply
        text = "".join(
            block.text for block in message.content if getattr(block, "type", None) == "text"
        )

        usage = {}
        if getattr(message, "usage", None):
            usage = {
                "prompt_tokens": message.usage.input_tokens,
                "completion_tokens": message.usage.output_tokens,
                "total_tokens": message.usage.input_tokens + message.usage.output_tokens,
            }

        return LLMResponse(
            content=text.strip(),
            model=model_name,
            usage=usage,
            raw_response=message,
        )

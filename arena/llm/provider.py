"""Abstract text-generation provider interface."""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class LLMResponse:
    """Standard response from any LLM provider."""

    content: str
    """The text content of the response."""

    model: str = ""
    """The model that generated this response."""

    usage: Dict[str, int] = field(default_factory=dict)
    """Token usage: {prompt_tokens, completion_tokens, total_tokens}."""

    raw_response: Any = None
    """The raw response object from the provider."""


class LLMProvider(ABC):
    """Abstract base class for text-generation providers.

    Implementations only need plain text completion with an optional
    system prompt; coaching never asks for structured output.
    """

    def __init__(self, api_key: str, default_model: Optional[str] = None):
        """Initialize the provider.

        Args:
            api_key: API key for the provider
            default_model: Default model to use
        """
        self.api_key = api_key
        self.default_model = default_model or self.get_default_model()
        self._client = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name (e.g., 'anthropic')."""
        pass

    @abstractmethod
    def get_default_model(self) -> str:
        """Get the default model for this provider."""
        pass

    @abstractmethod
    async def complete(
        self,
        messages: List[Dict[str, str]],
        system: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: int = 300,
        temperature: float = 0.4,
    ) -> LLMResponse:
        """Generate a text completion.

        Args:
            messages: List of messages [{role: str, content: str}]
            system: System prompt
            model: Model to use (defaults to provider default)
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature

        Returns:
            LLMResponse with the completion
        """
        pass

    # ── Retry helper ──────────────────────────────────────────────

    @staticmethod
    def _is_retryable(exc: Exception) -> bool:
        """Check if an exception is a transient overload/rate-limit error."""
        cls_name = type(exc).__name__
        if cls_name in ("OverloadedError", "RateLimitError"):
            return True

        status = getattr(exc, "status_code", None)
        if status in (429, 529):
            return True

        err_body = getattr(exc, "body", None)
        if isinstance(err_body, dict):
            err_type = err_body.get("error", {}).get("type", "")
            if err_type in ("overloaded_error", "rate_limit_error"):
                return True

        return False

    async def _call_with_retry(
        self,
        fn: Callable[..., Any],
        *args,
        max_retries: int = 2,
        base_delay: float = 1.0,
        **kwargs,
    ) -> Any:
        """Execute an async callable with exponential backoff on transient errors.

        The caller's timeout still bounds the whole attempt chain.
        """
        for attempt in range(max_retries + 1):
            try:
                return await fn(*args, **kwargs)
            except Exception as exc:
                if not self._is_retryable(exc) or attempt == max_retries:
                    raise
                delay = base_delay * (2 ** attempt)
                logger.warning(
                    "[%s] %s, retrying in %.0fs (attempt %d/%d)",
                    self.name, type(exc).__name__, delay, attempt + 1, max_retries,
                )
                await asyncio.sleep(delay)

    # ── Client lifecycle ─────────────────────────────────────────

    def _ensure_client(self):
        """Ensure the client is initialized (lazy loading)."""
        if self._client is None:
            self._init_client()

    @abstractmethod
    def _init_client(self):
        """Initialize the provider's client."""
        pass

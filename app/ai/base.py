"""AI provider abstraction layer.

This module defines the abstract base class for generative-model providers and the
common data structures shared by every vendor implementation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class ModelConfig:
    """Generative model configuration with pricing and capabilities."""

    vendor: str  # "google", "openai"
    model_id: str  # Identifier sent to the vendor API
    display_name: str
    max_tokens: int
    input_cost_per_1m: float  # Cost per 1M input tokens in USD
    output_cost_per_1m: float  # Cost per 1M output tokens in USD
    supports_json_mode: bool = True
    context_window: int = 0  # Total context window size (0 = same as max_tokens)

    def __post_init__(self) -> None:
        """Set context_window to max_tokens if not specified."""
        if self.context_window == 0:
            self.context_window = self.max_tokens

    def calculate_cost(self, prompt_tokens: int, completion_tokens: int) -> float:
        """Calculate the cost for a request in USD.

        Args:
            prompt_tokens: Number of input/prompt tokens
            completion_tokens: Number of output/completion tokens

        Returns:
            Total cost in USD
        """
        input_cost = (prompt_tokens / 1_000_000) * self.input_cost_per_1m
        output_cost = (completion_tokens / 1_000_000) * self.output_cost_per_1m
        return input_cost + output_cost


@dataclass
class ChatMessage:
    """A single message sent to the model."""

    role: str  # "system", "user", "assistant"
    content: str


@dataclass
class ChatResponse:
    """Response from a completion request."""

    content: str
    model: str
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
    cost_usd: float
    finish_reason: str = "stop"

    @classmethod
    def from_tokens(
        cls,
        content: str,
        model: str,
        prompt_tokens: int,
        completion_tokens: int,
        model_config: ModelConfig,
        finish_reason: str = "stop",
    ) -> "ChatResponse":
        """Create a ChatResponse with automatic cost calculation."""
        return cls(
            content=content,
            model=model,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=prompt_tokens + completion_tokens,
            cost_usd=model_config.calculate_cost(prompt_tokens, completion_tokens),
            finish_reason=finish_reason,
        )


class AIProviderError(Exception):
    """Base exception for AI provider errors."""

    def __init__(
        self,
        message: str,
        vendor: str | None = None,
        model: str | None = None,
        status_code: int | None = None,
    ):
        self.vendor = vendor
        self.model = model
        self.status_code = status_code
        super().__init__(message)


class RateLimitError(AIProviderError):
    """Raised when rate limit is exceeded."""

    pass


class QuotaExceededError(AIProviderError):
    """Raised when quota/credits are exhausted."""

    pass


class ModelNotAvailableError(AIProviderError):
    """Raised when the requested model is not available."""

    pass


class AIProvider(ABC):
    """Abstract base class for generative-model providers.

    Implementations translate ``ChatMessage`` lists into the vendor's request format
    and map vendor failures onto ``AIProviderError`` and its subclasses.
    """

    vendor: str  # Provider vendor name (e.g., "google")
    default_model: str  # Default model for this provider

    @abstractmethod
    async def chat(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        max_tokens: int = 2048,
        temperature: float = 0.7,
        system_prompt: str | None = None,
        json_mode: bool = False,
    ) -> ChatResponse:
        """Send a completion request.

        Args:
            messages: List of chat messages
            model: Model to use (defaults to provider's default)
            max_tokens: Maximum tokens in response
            temperature: Sampling temperature (0-2)
            system_prompt: Optional system prompt to prepend
            json_mode: Ask the vendor to constrain output to a JSON object

        Returns:
            ChatResponse with content and usage statistics

        Raises:
            AIProviderError: If the request fails
            RateLimitError: If rate limit is exceeded
            QuotaExceededError: If quota is exhausted
        """
        ...

    def _prepare_messages(
        self,
        messages: list[ChatMessage],
        system_prompt: str | None = None,
    ) -> list[ChatMessage]:
        """Prepare messages by optionally prepending system prompt."""
        if not system_prompt:
            return messages

        # Check if first message is already a system message
        if messages and messages[0].role == "system":
            messages = messages.copy()
            messages[0] = ChatMessage(
                role="system",
                content=f"{system_prompt}\n\n{messages[0].content}",
            )
            return messages

        return [ChatMessage(role="system", content=system_prompt)] + messages

"""OpenAI provider implementation.

Supports:
- GPT-4o, GPT-4o-mini
- JSON response mode (``response_format={"type": "json_object"}``)
"""

import structlog
from openai import AsyncOpenAI

from app.ai.base import (
    AIProvider,
    AIProviderError,
    ChatMessage,
    ChatResponse,
    ModelNotAvailableError,
    QuotaExceededError,
    RateLimitError,
)
from app.ai import get_model_config

logger = structlog.get_logger(__name__)


class OpenAIProvider(AIProvider):
    """OpenAI API provider."""

    vendor = "openai"
    default_model = "gpt-4o-mini"

    def __init__(self, api_key: str):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
        """
        self.client = AsyncOpenAI(api_key=api_key)

    async def chat(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        max_tokens: int = 2048,
        temperature: float = 0.7,
        system_prompt: str | None = None,
        json_mode: bool = False,
    ) -> ChatResponse:
        """Send a chat completion request to OpenAI."""
        model = model or self.default_model
        model_config = get_model_config(model)

        prepared_messages = self._prepare_messages(messages, system_prompt)
        openai_messages = [
            {"role": m.role, "content": m.content} for m in prepared_messages
        ]

        request_kwargs = {}
        if json_mode:
            request_kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await self.client.chat.completions.create(
                model=model_config.model_id,
                messages=openai_messages,
                max_tokens=max_tokens,
                temperature=temperature,
                **request_kwargs,
            )

            usage = response.usage
            return ChatResponse.from_tokens(
                content=response.choices[0].message.content or "",
                model=model,
                prompt_tokens=usage.prompt_tokens if usage else 0,
                completion_tokens=usage.completion_tokens if usage else 0,
                model_config=model_config,
                finish_reason=response.choices[0].finish_reason or "stop",
            )

        except Exception as e:
            error_message = str(e)
            logger.error(
                "OpenAI chat error",
                model=model,
                error=error_message,
            )

            # Map OpenAI errors to our exceptions
            if "rate_limit" in error_message.lower():
                raise RateLimitError(
                    message=error_message,
                    vendor=self.vendor,
                    model=model,
                )
            elif "quota" in error_message.lower() or "insufficient" in error_message.lower():
                raise QuotaExceededError(
                    message=error_message,
                    vendor=self.vendor,
                    model=model,
                )
            elif "model" in error_message.lower() and "not found" in error_message.lower():
                raise ModelNotAvailableError(
                    message=error_message,
                    vendor=self.vendor,
                    model=model,
                )
            else:
                raise AIProviderError(
                    message=error_message,
                    vendor=self.vendor,
                    model=model,
                )

"""Google (Gemini) provider implementation.

Supports:
- Gemini 1.5 / 2.0 / 2.5 Flash
- JSON response mode (``response_mime_type="application/json"``)

API Documentation: https://ai.google.dev/docs
"""

import structlog

from app.ai.base import (
    AIProvider,
    AIProviderError,
    ChatMessage,
    ChatResponse,
    QuotaExceededError,
    RateLimitError,
)
from app.ai import get_model_config

logger = structlog.get_logger(__name__)


class GoogleProvider(AIProvider):
    """Google AI (Gemini) API provider."""

    vendor = "google"
    default_model = "gemini-2.0-flash"

    def __init__(self, api_key: str):
        """Initialize Google provider.

        Args:
            api_key: Google AI API key
        """
        import google.generativeai as genai

        genai.configure(api_key=api_key)
        self.genai = genai

    async def chat(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        max_tokens: int = 2048,
        temperature: float = 0.7,
        system_prompt: str | None = None,
        json_mode: bool = False,
    ) -> ChatResponse:
        """Send a completion request to Google Gemini.

        Args:
            messages: List of chat messages
            model: Model to use (defaults to gemini-2.0-flash)
            max_tokens: Maximum tokens in response
            temperature: Sampling temperature (0-2)
            system_prompt: Optional system prompt to prepend
            json_mode: Constrain the reply to a JSON document

        Returns:
            ChatResponse with content and usage statistics
        """
        model = model or self.default_model
        model_config = get_model_config(model)

        # Gemini uses "user" and "model" roles; system text goes to system_instruction
        gemini_messages = []
        system_instruction = system_prompt or ""

        for msg in messages:
            if msg.role == "system":
                system_instruction = f"{system_instruction}\n\n{msg.content}" if system_instruction else msg.content
            elif msg.role == "assistant":
                gemini_messages.append({
                    "role": "model",
                    "parts": [msg.content],
                })
            else:
                gemini_messages.append({
                    "role": "user",
                    "parts": [msg.content],
                })

        try:
            generation_config = self.genai.GenerationConfig(
                max_output_tokens=max_tokens,
                temperature=temperature,
                response_mime_type="application/json" if json_mode else None,
            )

            gemini_model = self.genai.GenerativeModel(
                model_name=model_config.model_id,
                generation_config=generation_config,
                system_instruction=system_instruction if system_instruction else None,
            )

            response = await gemini_model.generate_content_async(
                gemini_messages,
            )

            content = response.text if response.text else ""

            usage_metadata = getattr(response, "usage_metadata", None)
            prompt_tokens = getattr(usage_metadata, "prompt_token_count", 0) if usage_metadata else 0
            completion_tokens = getattr(usage_metadata, "candidates_token_count", 0) if usage_metadata else 0

            return ChatResponse.from_tokens(
                content=content,
                model=model,
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                model_config=model_config,
                finish_reason=response.candidates[0].finish_reason.name if response.candidates else "STOP",
            )

        except Exception as e:
            error_message = str(e)
            logger.error(
                "Google chat error",
                model=model,
                error=error_message,
            )

            if "quota" in error_message.lower() or "429" in error_message:
                raise RateLimitError(
                    message=error_message,
                    vendor=self.vendor,
                    model=model,
                )
            elif "billing" in error_message.lower():
                raise QuotaExceededError(
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

"""Generative model providers package.

This module provides a vendor-agnostic abstraction over the generative models used to
read the conversation and to pick a book (Google Gemini by default, OpenAI as an
alternative).

Usage:
    from app.ai import get_provider_for_model, get_model_config

    provider = get_provider_for_model(settings.ai_model, settings)
    response = await provider.chat(messages, json_mode=True)
"""

from typing import TYPE_CHECKING

from app.ai.base import (
    AIProvider,
    AIProviderError,
    ChatMessage,
    ChatResponse,
    ModelConfig,
    ModelNotAvailableError,
    QuotaExceededError,
    RateLimitError,
)

if TYPE_CHECKING:
    from app.config import Settings

# Model registry with pricing and capabilities
MODEL_REGISTRY: dict[str, ModelConfig] = {
    # ============= GOOGLE MODELS (default) =============
    "gemini-1.5-flash": ModelConfig(
        vendor="google",
        model_id="gemini-1.5-flash",
        display_name="Gemini 1.5 Flash",
        max_tokens=8192,
        input_cost_per_1m=0.075,
        output_cost_per_1m=0.30,
        context_window=1000000,
    ),
    "gemini-2.0-flash": ModelConfig(
        vendor="google",
        model_id="gemini-2.0-flash",
        display_name="Gemini 2.0 Flash",
        max_tokens=8192,
        input_cost_per_1m=0.10,
        output_cost_per_1m=0.40,
        context_window=1000000,
    ),
    "gemini-2.5-flash": ModelConfig(
        vendor="google",
        model_id="gemini-2.5-flash",
        display_name="Gemini 2.5 Flash",
        max_tokens=65536,
        input_cost_per_1m=0.30,
        output_cost_per_1m=2.50,
        context_window=1000000,
    ),
    # ============= OPENAI MODELS =============
    "gpt-4o-mini": ModelConfig(
        vendor="openai",
        model_id="gpt-4o-mini",
        display_name="GPT-4o Mini",
        max_tokens=16384,
        input_cost_per_1m=0.15,
        output_cost_per_1m=0.60,
        context_window=128000,
    ),
    "gpt-4o": ModelConfig(
        vendor="openai",
        model_id="gpt-4o",
        display_name="GPT-4o",
        max_tokens=16384,
        input_cost_per_1m=2.50,
        output_cost_per_1m=10.00,
        context_window=128000,
    ),
}


def get_model_config(model_id: str) -> ModelConfig:
    """Get model configuration by model ID.

    Args:
        model_id: The model identifier (e.g., "gemini-2.0-flash", "gpt-4o-mini")

    Returns:
        ModelConfig with pricing and capabilities

    Raises:
        ValueError: If model ID is not found in registry
    """
    if model_id not in MODEL_REGISTRY:
        raise ValueError(
            f"Unknown model: {model_id}. "
            f"Available models: {', '.join(MODEL_REGISTRY.keys())}"
        )
    return MODEL_REGISTRY[model_id]


def get_ai_provider(vendor: str, settings: "Settings") -> AIProvider:
    """Factory function to get an AI provider instance.

    Args:
        vendor: Provider vendor name ("google", "openai")
        settings: Application settings holding the API keys

    Returns:
        AIProvider instance configured with the vendor's API key

    Raises:
        ValueError: If vendor is unknown or API key is not configured
    """
    if vendor == "google":
        from app.ai.providers.google_provider import GoogleProvider

        if not settings.google_api_key:
            raise ValueError("Google API key not configured")
        return GoogleProvider(api_key=settings.google_api_key)

    elif vendor == "openai":
        from app.ai.providers.openai_provider import OpenAIProvider

        if not settings.openai_api_key:
            raise ValueError("OpenAI API key not configured")
        return OpenAIProvider(api_key=settings.openai_api_key)

    else:
        raise ValueError(f"Unknown vendor: {vendor}. Supported vendors: google, openai")


def get_provider_for_model(model_id: str, settings: "Settings") -> AIProvider:
    """Get the appropriate provider for a model.

    Raises:
        ValueError: If model is unknown or provider not configured
    """
    config = get_model_config(model_id)
    return get_ai_provider(config.vendor, settings)


__all__ = [
    # Base classes
    "AIProvider",
    "ChatMessage",
    "ChatResponse",
    "ModelConfig",
    # Exceptions
    "AIProviderError",
    "RateLimitError",
    "QuotaExceededError",
    "ModelNotAvailableError",
    # Registry and factory
    "MODEL_REGISTRY",
    "get_model_config",
    "get_ai_provider",
    "get_provider_for_model",
]

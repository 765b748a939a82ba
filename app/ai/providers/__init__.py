"""Generative model provider implementations.

- Google (Gemini Flash family)
- OpenAI (GPT-4o, GPT-4o-mini)
"""

from app.ai.providers.google_provider import GoogleProvider
from app.ai.providers.openai_provider import OpenAIProvider

__all__ = [
    "GoogleProvider",
    "OpenAIProvider",
]

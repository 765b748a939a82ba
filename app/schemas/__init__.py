"""Pydantic schemas package."""

from app.schemas.catalog import CatalogRecord, ImageLinks, SaleInfo, VolumeInfo
from app.schemas.chat import (
    Analysis,
    ChatReply,
    ChatRequest,
    Complexity,
    ConversationTurn,
    MessageResponse,
    Preferences,
    Publication,
    QuestionResponse,
    Recommendation,
    RecommendationResponse,
)
from app.schemas.common import CamelModel, ErrorResponse

__all__ = [
    # Common
    "CamelModel",
    "ErrorResponse",
    # Catalog
    "CatalogRecord",
    "ImageLinks",
    "SaleInfo",
    "VolumeInfo",
    # Chat
    "Analysis",
    "ChatReply",
    "ChatRequest",
    "Complexity",
    "ConversationTurn",
    "MessageResponse",
    "Preferences",
    "Publication",
    "QuestionResponse",
    "Recommendation",
    "RecommendationResponse",
]

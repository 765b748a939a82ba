"""Shared API dependencies."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from app.config import Settings, get_settings
from app.core.exceptions import ValidationError
from app.schemas.chat import ChatRequest
from app.services.recommendation_pipeline import RecommendationPipeline, build_pipeline


@lru_cache
def get_pipeline() -> RecommendationPipeline:
    """Build the recommendation pipeline once per process.

    The pipeline keeps no per-request state, so one instance serves every request.
    """
    return build_pipeline(get_settings())


def require_message(body: ChatRequest) -> ChatRequest:
    """Reject chat requests without a message.

    Declared ahead of ``Pipeline`` on the route so that input errors are
    reported before the pipeline is built.

    Raises:
        ValidationError: If the message is missing or blank
    """
    if not body.message or not body.message.strip():
        raise ValidationError("Message required")
    return body


# Type aliases for cleaner dependency injection
AppSettings = Annotated[Settings, Depends(get_settings)]
MessageRequest = Annotated[ChatRequest, Depends(require_message)]
Pipeline = Annotated[RecommendationPipeline, Depends(get_pipeline)]

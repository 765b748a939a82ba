"""Parse JSON documents out of generative-model replies."""

import json
import re
from typing import TypeVar

import pydantic
import structlog

from app.core.exceptions import ParseError

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)

# Opening fence with optional language tag, and closing fence
_FENCE_RE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove Markdown code-fence markers around a JSON reply."""
    return _FENCE_RE.sub("", text).strip()


def parse_model_json(text: str, model: type[ModelT], source: str) -> ModelT:
    """Decode a model reply into ``model``.

    JSON mode normally returns a bare object, but fenced replies are still accepted.

    Raises:
        ParseError: If the reply is not JSON or does not fit ``model``
    """
    cleaned = strip_code_fences(text or "")
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning("Model reply is not JSON", source=source, error=str(e), reply=cleaned[:200])
        raise ParseError(f"reply is not valid JSON: {e}", source=source) from e

    if not isinstance(payload, dict):
        raise ParseError("reply is not a JSON object", source=source)

    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as e:
        logger.warning("Model reply has unexpected shape", source=source, error=str(e))
        raise ParseError(f"reply does not match {model.__name__}", source=source, details=e.errors()) from e

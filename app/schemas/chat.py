"""Chat schemas: conversation turns, extracted analysis, recommendations and replies."""

from enum import Enum
from typing import Annotated, Literal

from pydantic import ConfigDict, Field, field_validator

from app.schemas.common import CamelModel, none_if_null


class Publication(str, Enum):
    """Publication-era preference."""

    RECENT = "recent"
    CLASSIC = "classic"
    POPULAR = "popular"
    ANY = "any"


class Complexity(str, Enum):
    """Reading complexity preference."""

    EASY = "easy"
    LITERARY = "literary"


def _coerce_enum(enum_cls: type[Enum], value):
    value = none_if_null(value)
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        return None


class Preferences(CamelModel):
    """Secondary preferences gathered after genre, mood and topic."""

    publication: Publication | None = None
    complexity: Complexity | None = None
    dealbreakers: list[str] = Field(default_factory=list)

    @field_validator("publication", mode="before")
    @classmethod
    def _publication(cls, value):
        return _coerce_enum(Publication, value)

    @field_validator("complexity", mode="before")
    @classmethod
    def _complexity(cls, value):
        return _coerce_enum(Complexity, value)

    @field_validator("dealbreakers", mode="before")
    @classmethod
    def _dealbreakers(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if none_if_null(value) else []
        return value


class Analysis(CamelModel):
    """Structured preferences extracted from the transcript.

    Older prompt versions omit some fields, so everything has a default.
    """

    has_basic_info: bool = False
    genre: str | None = None
    mood: str | None = None
    topic: str | None = None
    needs_investigation: bool = False
    investigation_category: str | None = None
    investigation_question: str | None = None
    preferences: Preferences = Field(default_factory=Preferences)
    ready_to_recommend: bool = False
    missing_basic_info: list[str] = Field(default_factory=list)
    question: str | None = None
    search_query: str | None = None

    @field_validator(
        "genre",
        "mood",
        "topic",
        "investigation_category",
        "investigation_question",
        "question",
        "search_query",
        mode="before",
    )
    @classmethod
    def _nullable_text(cls, value):
        return none_if_null(value)

    @field_validator("preferences", mode="before")
    @classmethod
    def _preferences(cls, value):
        return value if value is not None else {}

    @field_validator("missing_basic_info", mode="before")
    @classmethod
    def _missing(cls, value):
        if isinstance(value, str):
            return [value] if none_if_null(value) else []
        return value or []

    @field_validator("has_basic_info", "needs_investigation", "ready_to_recommend", mode="before")
    @classmethod
    def _flag(cls, value):
        return False if value is None else value


class Recommendation(CamelModel):
    """The single book picked for the user, plus catalog enrichment."""

    title: str = Field(min_length=1)
    author: str | None = None
    description: str | None = None
    reasoning: str | None = None
    page_count: int | None = None
    published_date: str | None = None
    rating: float | None = None
    image_url: str | None = None
    preview_link: str | None = None
    buy_link: str | None = None

    @field_validator("author", "description", "reasoning", "page_count", "rating", mode="before")
    @classmethod
    def _nullable(cls, value):
        return none_if_null(value)

    @field_validator("published_date", mode="before")
    @classmethod
    def _published_date(cls, value):
        value = none_if_null(value)
        if isinstance(value, int):
            return str(value)
        return value

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "The Seven Husbands of Evelyn Hugo",
                "author": "Taylor Jenkins Reid",
                "description": "An aging Hollywood icon tells the story of her seven marriages.",
                "reasoning": "A bittersweet romance about love and loss...",
                "pageCount": 400,
                "publishedDate": "2021",
                "rating": 4.5,
                "imageUrl": "https://books.google.com/books/content?id=abc&printsec=frontcover",
                "previewLink": "https://books.google.com/books?id=abc",
                "buyLink": None,
            }
        }
    )


class ConversationTurn(CamelModel):
    """A prior message in the conversation, supplied by the client."""

    is_user: bool = False
    text: str = ""
    recommendation: Recommendation | None = None
    analysis: Analysis | None = None

    @field_validator("text", mode="before")
    @classmethod
    def _text(cls, value):
        return value or ""


# Request Schemas


class ChatRequest(CamelModel):
    """A new user message with the conversation so far."""

    message: str | None = None
    conversation_history: list[ConversationTurn] = Field(default_factory=list)

    @field_validator("conversation_history", mode="before")
    @classmethod
    def _history(cls, value):
        return value or []

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "I want a sad romance about heartbreak",
                "conversationHistory": [],
            }
        }
    )


# Response Schemas


class QuestionResponse(CamelModel):
    """The readiness gate is closed; ask the user for more detail."""

    type: Literal["question"] = "question"
    message: str
    analysis: Analysis


class RecommendationResponse(CamelModel):
    """A book was picked."""

    type: Literal["recommendation"] = "recommendation"
    recommendation: Recommendation
    analysis: Analysis


class MessageResponse(CamelModel):
    """Informational reply, e.g. no candidates survived the search."""

    type: Literal["message"] = "message"
    message: str


ChatReply = Annotated[
    QuestionResponse | RecommendationResponse | MessageResponse,
    Field(discriminator="type"),
]

"""Recommendation selection: ask the model to pick one book from the candidates."""

import structlog

from app.ai import AIProvider, AIProviderError, ChatMessage
from app.ai.prompts import PromptVersion
from app.config import Settings
from app.core.exceptions import UpstreamError
from app.schemas.catalog import CatalogRecord
from app.schemas.chat import Analysis, Publication, Recommendation
from app.services.json_parsing import parse_model_json

logger = structlog.get_logger(__name__)

MAX_CANDIDATES = 15
DESCRIPTION_LIMIT = 600

PUBLICATION_LABELS = {
    Publication.RECENT: "recent (2020+)",
    Publication.CLASSIC: "older classics (pre-2010)",
    Publication.POPULAR: "popular/highly rated (any era)",
}


def format_candidates(records: list[CatalogRecord]) -> str:
    """Render the top candidates as numbered text blocks for the prompt."""
    blocks = []
    for index, record in enumerate(records[:MAX_CANDIDATES], start=1):
        info = record.volume_info
        if info.average_rating:
            rating = f"{info.average_rating}/5 ({info.ratings_count or 0} reviews)"
        else:
            rating = "Not rated"
        description = (info.description or "")[:DESCRIPTION_LIMIT] or "No description"
        blocks.append(
            f"Book {index}:\n"
            f"Title: {info.title or 'Unknown'}\n"
            f"Author(s): {record.author_names or 'Unknown'}\n"
            f"Avg Rating: {rating}\n"
            f"Published: {info.published_date or 'Unknown'}\n"
            f"Description: {description}\n"
            f"Categories: {', '.join(info.categories) or 'Fiction'}"
        )
    return "\n\n---\n\n".join(blocks)


def format_preferences(analysis: Analysis) -> str:
    prefs = analysis.preferences
    publication = PUBLICATION_LABELS.get(prefs.publication, "any era")
    complexity = prefs.complexity.value if prefs.complexity else "any"
    avoid = ", ".join(prefs.dealbreakers) if prefs.dealbreakers else "none"
    return (
        f"Genre: {analysis.genre or 'any'}\n"
        f"Mood: {analysis.mood or 'any'}\n"
        f"Topic: {analysis.topic or 'any'}\n"
        f"Publication: {publication}\n"
        f"Complexity: {complexity}\n"
        f"Avoid: {avoid}"
    )


class RecommendationSelector:
    """Pick the single best candidate for the reader."""

    def __init__(self, provider: AIProvider, settings: Settings, prompts: PromptVersion):
        self.provider = provider
        self.settings = settings
        self.prompts = prompts

    async def select(
        self,
        analysis: Analysis,
        candidates: list[CatalogRecord],
        exclude_title: str | None = None,
    ) -> Recommendation:
        """Ask the model to choose one book.

        The returned title is not checked against the candidates; the assembler
        matches it back to a record on a best-effort basis.

        Raises:
            UpstreamError: If the model call fails
            ParseError: If the reply is not a valid Recommendation document
        """
        exclusion = ""
        if exclude_title:
            exclusion = f'\nDo NOT pick "{exclude_title}"; the reader has already seen it.\n'

        prompt = self.prompts.render_selection(
            preferences=format_preferences(analysis),
            books=format_candidates(candidates),
            exclusion=exclusion,
        )
        try:
            response = await self.provider.chat(
                [ChatMessage(role="user", content=prompt)],
                model=self.settings.ai_model,
                max_tokens=self.settings.ai_max_tokens,
                temperature=self.settings.ai_temperature,
                json_mode=True,
            )
        except AIProviderError as e:
            raise UpstreamError(str(e), source="recommendation_selector") from e

        recommendation = parse_model_json(
            response.content, Recommendation, source="recommendation_selector"
        )
        logger.info(
            "Book selected",
            title=recommendation.title,
            candidates=min(len(candidates), MAX_CANDIDATES),
            tokens=response.total_tokens,
        )
        return recommendation

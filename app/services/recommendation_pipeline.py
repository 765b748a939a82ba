"""Conversation-to-recommendation pipeline.

One request walks a small state machine:

    START -> EXTRACTING -> NEEDS_INPUT
                        -> SEARCHING -> FILTERING -> NO_RESULTS
                                                  -> SELECTING -> ASSEMBLING -> DONE

Nothing is kept between requests. The previous recommendation and the accumulated
preferences come back in the client's conversation history.
"""

from enum import Enum

import httpx
import structlog

from app.ai import AIProvider, get_provider_for_model
from app.ai.prompts import GENRE_QUESTION, PUBLICATION_QUESTION, PromptVersion, get_prompt_version
from app.config import Settings
from app.schemas.chat import (
    Analysis,
    ChatRequest,
    ConversationTurn,
    MessageResponse,
    QuestionResponse,
    RecommendationResponse,
)
from app.services.catalog_client import CatalogSearchClient
from app.services.preference_extractor import PreferenceExtractor, build_transcript
from app.services.recommendation_selector import RecommendationSelector
from app.services.relevance_filter import filter_novels
from app.services.response_assembler import assemble_recommendation

logger = structlog.get_logger(__name__)


class Stage(str, Enum):
    """Pipeline states."""

    START = "start"
    EXTRACTING = "extracting"
    NEEDS_INPUT = "needs_input"
    SEARCHING = "searching"
    FILTERING = "filtering"
    NO_RESULTS = "no_results"
    SELECTING = "selecting"
    ASSEMBLING = "assembling"
    DONE = "done"


def previous_recommendation_title(history: list[ConversationTurn]) -> str | None:
    """Title recommended in the most recent assistant turn, if that turn had one."""
    for turn in reversed(history):
        if turn.is_user:
            continue
        if turn.recommendation is not None:
            return turn.recommendation.title
        return None
    return None


def question_for(analysis: Analysis, asks_publication: bool = False) -> str:
    if analysis.question or analysis.investigation_question:
        return analysis.question or analysis.investigation_question
    if asks_publication and analysis.has_basic_info and analysis.preferences.publication is None:
        return PUBLICATION_QUESTION
    return GENRE_QUESTION


def fallback_search_query(analysis: Analysis, message: str) -> str:
    terms = [analysis.mood, analysis.genre, analysis.topic]
    query = " ".join(term for term in terms if term)
    return query or message


def no_results_message(analysis: Analysis) -> str:
    publication = analysis.preferences.publication
    descriptor = " ".join(
        part for part in (publication.value if publication else None, analysis.genre) if part
    )
    subject = f"No {descriptor} books found" if descriptor else "No books found"
    if analysis.topic:
        subject = f'{subject} for "{analysis.topic}"'
    return f'{subject}. Try "popular" books instead, or a different genre/mood?'


class RecommendationPipeline:
    """Turn a chat request into a question, a recommendation or a message."""

    def __init__(
        self,
        extractor: PreferenceExtractor,
        catalog: CatalogSearchClient,
        selector: RecommendationSelector,
        prompts: PromptVersion,
    ):
        self.extractor = extractor
        self.catalog = catalog
        self.selector = selector
        self.prompts = prompts

    def _enter(self, stage: Stage, **context) -> None:
        logger.debug("Pipeline stage", stage=stage.value, **context)

    async def run(
        self,
        request: ChatRequest,
    ) -> QuestionResponse | RecommendationResponse | MessageResponse:
        """Run one request through the pipeline.

        Raises:
            UpstreamError: If the model or the catalog fails at any stage
            ParseError: If a model reply cannot be parsed
        """
        message = request.message or ""
        history = request.conversation_history

        self._enter(Stage.START, turns=len(history))
        transcript = build_transcript(history, message)

        self._enter(Stage.EXTRACTING)
        analysis = await self.extractor.analyze(transcript)

        if not analysis.ready_to_recommend:
            self._enter(Stage.NEEDS_INPUT, missing=analysis.missing_basic_info)
            return QuestionResponse(
                message=question_for(analysis, self.prompts.asks_publication),
                analysis=analysis,
            )

        query = analysis.search_query or fallback_search_query(analysis, message)
        publication = analysis.preferences.publication

        self._enter(Stage.SEARCHING, query=query)
        records = await self.catalog.search(query, publication)

        exclude_title = previous_recommendation_title(history)
        self._enter(Stage.FILTERING, found=len(records), exclude_title=exclude_title)
        novels = filter_novels(
            records,
            popularity_override=self.prompts.popularity_override,
            exclude_title=exclude_title,
        )

        if not novels:
            self._enter(Stage.NO_RESULTS)
            logger.info("No candidates after filtering", query=query, found=len(records))
            return MessageResponse(message=no_results_message(analysis))

        self._enter(Stage.SELECTING, candidates=len(novels))
        selection = await self.selector.select(analysis, novels, exclude_title=exclude_title)

        self._enter(Stage.ASSEMBLING, title=selection.title)
        recommendation = assemble_recommendation(selection, novels)

        self._enter(Stage.DONE)
        return RecommendationResponse(recommendation=recommendation, analysis=analysis)


def build_pipeline(
    settings: Settings,
    provider: AIProvider | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RecommendationPipeline:
    """Wire the pipeline from settings.

    Args:
        settings: Application settings
        provider: Model provider override (defaults to the provider of ``settings.ai_model``)
        transport: Optional httpx transport for the catalog client

    Raises:
        ValueError: If the model, its API key, or the prompt version is not configured
    """
    prompts = get_prompt_version(settings.prompt_version)
    provider = provider or get_provider_for_model(settings.ai_model, settings)
    return RecommendationPipeline(
        extractor=PreferenceExtractor(provider, settings, prompts),
        catalog=CatalogSearchClient(settings, transport=transport),
        selector=RecommendationSelector(provider, settings, prompts),
        prompts=prompts,
    )

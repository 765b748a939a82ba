"""Unit tests for the recommendation pipeline."""

import httpx
import pytest

from app.ai.prompts import GENRE_QUESTION, PUBLICATION_QUESTION
from app.config import Settings
from app.schemas.chat import (
    Analysis,
    ChatRequest,
    ConversationTurn,
    MessageResponse,
    QuestionResponse,
    Recommendation,
    RecommendationResponse,
)
from app.services.recommendation_pipeline import (
    build_pipeline,
    fallback_search_query,
    no_results_message,
    previous_recommendation_title,
    question_for,
)
from conftest import (
    NOT_READY_ANALYSIS,
    READY_ANALYSIS,
    SELECTION,
    ScriptedProvider,
    catalog_transport,
    make_volume,
)


class TestHelpers:
    """Test the pipeline's pure helpers."""

    def test_previous_title_from_last_assistant_turn(self):
        history = [
            ConversationTurn(is_user=False, text="a", recommendation=Recommendation(title="Old")),
            ConversationTurn(is_user=True, text="b"),
            ConversationTurn(is_user=False, text="c", recommendation=Recommendation(title="Latest")),
            ConversationTurn(is_user=True, text="another"),
        ]

        assert previous_recommendation_title(history) == "Latest"

    def test_previous_title_only_from_most_recent_assistant_turn(self):
        history = [
            ConversationTurn(is_user=False, text="a", recommendation=Recommendation(title="Old")),
            ConversationTurn(is_user=False, text="Which era?"),
        ]

        assert previous_recommendation_title(history) is None
        assert previous_recommendation_title([]) is None

    def test_question_fallbacks(self):
        assert question_for(Analysis(question="Q?")) == "Q?"
        assert question_for(Analysis(investigation_question="IQ?")) == "IQ?"
        assert question_for(Analysis()) == GENRE_QUESTION

    def test_publication_question_fallback(self):
        analysis = Analysis(has_basic_info=True, genre="romance", mood="sad", topic="loss")

        assert question_for(analysis, asks_publication=True) == PUBLICATION_QUESTION
        assert question_for(analysis) == GENRE_QUESTION

    def test_fallback_search_query(self):
        analysis = Analysis(genre="fantasy", mood="dark", topic="revenge")
        assert fallback_search_query(analysis, "msg") == "dark fantasy revenge"
        assert fallback_search_query(Analysis(), "a cozy mystery") == "a cozy mystery"

    def test_no_results_message(self):
        analysis = Analysis.model_validate(READY_ANALYSIS)
        assert no_results_message(analysis) == (
            'No recent romance books found for "heartbreak". '
            'Try "popular" books instead, or a different genre/mood?'
        )
        assert no_results_message(Analysis()).startswith("No books found.")


class TestPipeline:
    """Test outcomes of a full run."""

    @pytest.mark.asyncio
    async def test_question_outcome(self, make_pipeline):
        pipeline = make_pipeline(ScriptedProvider([NOT_READY_ANALYSIS]))

        reply = await pipeline.run(ChatRequest(message="I want a sad romance about heartbreak"))

        assert isinstance(reply, QuestionResponse)
        assert reply.message == PUBLICATION_QUESTION

    @pytest.mark.asyncio
    async def test_recommendation_outcome(self, make_pipeline):
        transport = catalog_transport([make_volume("It Ends with Us", pageCount=384)])
        pipeline = make_pipeline(ScriptedProvider([READY_ANALYSIS, SELECTION]), transport)

        reply = await pipeline.run(ChatRequest(message="recent please"))

        assert isinstance(reply, RecommendationResponse)
        assert reply.recommendation.title == "It Ends with Us"
        assert reply.recommendation.page_count == 384
        assert reply.analysis.genre == "romance"

    @pytest.mark.asyncio
    async def test_no_results_outcome(self, make_pipeline):
        pipeline = make_pipeline(ScriptedProvider([READY_ANALYSIS]), catalog_transport([]))

        reply = await pipeline.run(ChatRequest(message="recent please"))

        assert isinstance(reply, MessageResponse)

    @pytest.mark.asyncio
    async def test_missing_search_query_uses_preferences(self, make_pipeline):
        requests: list[httpx.Request] = []
        analysis = {**READY_ANALYSIS, "searchQuery": None}
        pipeline = make_pipeline(
            ScriptedProvider([analysis]), catalog_transport([], requests=requests)
        )

        await pipeline.run(ChatRequest(message="recent please"))

        assert requests[0].url.params["q"] == "sad romance heartbreak 2020..2026 subject:fiction"

    @pytest.mark.asyncio
    async def test_older_prompt_version_skips_popularity_override(self, settings: Settings):
        """Test v1 drops highly rated non-fiction that v3 would keep."""
        settings = settings.model_copy(update={"prompt_version": "v1"})
        transport = catalog_transport([make_volume("Sapiens", categories=["History"], average_rating=4.6)])
        provider = ScriptedProvider([READY_ANALYSIS])
        pipeline = build_pipeline(settings, provider=provider, transport=transport)

        reply = await pipeline.run(ChatRequest(message="recent please"))

        assert isinstance(reply, MessageResponse)
        assert len(provider.prompts) == 1

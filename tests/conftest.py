"""Pytest configuration and fixtures."""

import json
from collections.abc import AsyncGenerator, Callable, Generator
from typing import Any

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.ai import AIProvider, ChatMessage, ChatResponse, get_model_config
from app.ai.prompts import PUBLICATION_QUESTION
from app.api.v1.deps import get_pipeline
from app.config import Settings, get_settings
from app.main import app
from app.services.recommendation_pipeline import RecommendationPipeline, build_pipeline


class ScriptedProvider(AIProvider):
    """AI provider that replays canned replies and records every prompt."""

    vendor = "scripted"
    default_model = "gemini-2.0-flash"

    def __init__(self, replies: list[Any]):
        self.replies = list(replies)
        self.prompts: list[str] = []
        self.json_modes: list[bool] = []

    async def chat(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        max_tokens: int = 2048,
        temperature: float = 0.7,
        system_prompt: str | None = None,
        json_mode: bool = False,
    ) -> ChatResponse:
        self.prompts.append(messages[-1].content)
        self.json_modes.append(json_mode)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        content = reply if isinstance(reply, str) else json.dumps(reply)
        return ChatResponse.from_tokens(
            content=content,
            model=model or self.default_model,
            prompt_tokens=100,
            completion_tokens=50,
            model_config=get_model_config(self.default_model),
        )


def make_volume(
    title: str,
    categories: list[str] | None = None,
    authors: list[str] | None = None,
    average_rating: float | None = None,
    ratings_count: int | None = None,
    **volume_info: Any,
) -> dict[str, Any]:
    """Build a Google Books volume item."""
    info: dict[str, Any] = {
        "title": title,
        "authors": authors or ["Jane Author"],
        "categories": categories if categories is not None else ["Fiction"],
    }
    if average_rating is not None:
        info["averageRating"] = average_rating
    if ratings_count is not None:
        info["ratingsCount"] = ratings_count
    info.update(volume_info)
    return {"id": title.lower().replace(" ", "-"), "volumeInfo": info}


def catalog_transport(
    items: list[dict[str, Any]] | None = None,
    status_code: int = 200,
    requests: list[httpx.Request] | None = None,
) -> httpx.MockTransport:
    """Mock Google Books transport returning ``items`` and recording requests."""

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        if not 200 <= status_code < 300:
            return httpx.Response(status_code, json={"error": {"message": "unavailable"}})
        body: dict[str, Any] = {"kind": "books#volumes", "totalItems": len(items or [])}
        if items:
            body["items"] = items
        return httpx.Response(status_code, json=body)

    return httpx.MockTransport(handler)


NOT_READY_ANALYSIS = {
    "hasBasicInfo": True,
    "genre": "romance",
    "mood": "sad",
    "topic": "heartbreak",
    "needsInvestigation": True,
    "investigationCategory": "publication",
    "investigationQuestion": PUBLICATION_QUESTION,
    "preferences": {"publication": None, "complexity": None, "dealbreakers": []},
    "readyToRecommend": False,
    "missingBasicInfo": [],
    "question": PUBLICATION_QUESTION,
    "searchQuery": None,
}

READY_ANALYSIS = {
    "hasBasicInfo": True,
    "genre": "romance",
    "mood": "sad",
    "topic": "heartbreak",
    "needsInvestigation": False,
    "investigationCategory": None,
    "investigationQuestion": None,
    "preferences": {"publication": "recent", "complexity": None, "dealbreakers": []},
    "readyToRecommend": True,
    "missingBasicInfo": [],
    "question": None,
    "searchQuery": "sad romance heartbreak emotional 2020..2026",
}

SELECTION = {
    "title": "It Ends with Us",
    "author": "Colleen Hoover",
    "description": "A young woman falls for a neurosurgeon whose love turns harmful.",
    "reasoning": "A sad romance centred on heartbreak. Published in the 2020s. Widely loved.",
    "pageCount": None,
    "publishedDate": None,
    "rating": None,
}


@pytest.fixture
def settings() -> Settings:
    """Settings with test credentials, independent of the environment."""
    return Settings(
        google_api_key="test-gemini-key",
        google_books_api_key=None,
        books_api_base_url="https://books.test/books/v1",
        ai_model="gemini-2.0-flash",
        prompt_version="v3",
    )


@pytest.fixture
def make_pipeline(settings: Settings) -> Callable[..., RecommendationPipeline]:
    """Factory for pipelines backed by a scripted provider and a mock catalog."""

    def factory(
        provider: ScriptedProvider,
        transport: httpx.MockTransport | None = None,
    ) -> RecommendationPipeline:
        return build_pipeline(
            settings,
            provider=provider,
            transport=transport or catalog_transport([]),
        )

    return factory


@pytest_asyncio.fixture(scope="function")
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client; tests install a pipeline with ``use_pipeline``."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def use_pipeline() -> Callable[[RecommendationPipeline], None]:
    """Route API requests to the given pipeline."""

    def install(pipeline: RecommendationPipeline) -> None:
        app.dependency_overrides[get_pipeline] = lambda: pipeline

    return install


@pytest.fixture
def without_model_key(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Run with a Gemini model configured but no Google API key."""
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    monkeypatch.setenv("AI_MODEL", "gemini-2.0-flash")
    get_settings.cache_clear()
    get_pipeline.cache_clear()

    yield

    get_settings.cache_clear()
    get_pipeline.cache_clear()

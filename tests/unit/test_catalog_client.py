"""Unit tests for the catalog search client."""

import httpx
import pytest

from app.config import Settings
from app.core.exceptions import UpstreamError
from app.schemas.chat import Publication
from app.services.catalog_client import CatalogSearchClient, build_search_query
from conftest import catalog_transport, make_volume


class TestBuildSearchQuery:
    """Test qualifier construction."""

    def test_recent_appends_year_range(self, settings: Settings):
        """Test recent books get the configured year range."""
        query = build_search_query("sad romance", Publication.RECENT, settings)
        assert query == "sad romance 2020..2026 subject:fiction"

    def test_classic_appends_before_cutoff(self, settings: Settings):
        """Test classics get a before: qualifier."""
        query = build_search_query("gothic horror", Publication.CLASSIC, settings)
        assert query == "gothic horror before:2010 subject:fiction"

    def test_popular_and_unknown_have_no_date_filter(self, settings: Settings):
        """Test popular, any and missing preferences add only the subject."""
        for publication in (Publication.POPULAR, Publication.ANY, None):
            query = build_search_query("cozy mystery", publication, settings)
            assert query == "cozy mystery subject:fiction"

    def test_existing_qualifiers_are_not_repeated(self, settings: Settings):
        """Test qualifiers the model already wrote are kept once."""
        query = build_search_query(
            "sad romance  2020..2026 subject:fiction", Publication.RECENT, settings
        )
        assert query == "sad romance 2020..2026 subject:fiction"

    def test_custom_year_settings(self):
        """Test the qualifiers follow configuration."""
        settings = Settings(recent_year_range="2023..2027", classic_cutoff_year=1950)
        assert build_search_query("x", Publication.RECENT, settings) == "x 2023..2027 subject:fiction"
        assert build_search_query("x", Publication.CLASSIC, settings) == "x before:1950 subject:fiction"


class TestCatalogSearch:
    """Test the HTTP behaviour of the client."""

    @pytest.mark.asyncio
    async def test_search_sends_expected_parameters(self, settings: Settings):
        """Test query parameters and endpoint."""
        requests: list[httpx.Request] = []
        client = CatalogSearchClient(settings, transport=catalog_transport([], requests=requests))

        await client.search("sad romance", Publication.RECENT)

        request = requests[0]
        assert request.method == "GET"
        assert str(request.url).startswith("https://books.test/books/v1/volumes?")
        assert request.url.params["q"] == "sad romance 2020..2026 subject:fiction"
        assert request.url.params["maxResults"] == "25"
        assert request.url.params["orderBy"] == "relevance"
        assert "key" not in request.url.params

    @pytest.mark.asyncio
    async def test_api_key_is_sent_when_configured(self, settings: Settings):
        """Test the catalog key is passed as a query parameter."""
        settings = settings.model_copy(update={"google_books_api_key": "books-key"})
        requests: list[httpx.Request] = []
        client = CatalogSearchClient(settings, transport=catalog_transport([], requests=requests))

        await client.search("romance")

        assert requests[0].url.params["key"] == "books-key"

    @pytest.mark.asyncio
    async def test_records_are_parsed_in_order(self, settings: Settings):
        """Test items become CatalogRecords in relevance order."""
        items = [
            make_volume("Beach Read", average_rating=4.1, pageCount=361),
            make_volume("People We Meet on Vacation"),
        ]
        client = CatalogSearchClient(settings, transport=catalog_transport(items))

        records = await client.search("summer romance")

        assert [r.title for r in records] == ["Beach Read", "People We Meet on Vacation"]
        assert records[0].volume_info.average_rating == 4.1
        assert records[0].volume_info.page_count == 361

    @pytest.mark.asyncio
    async def test_no_items_is_empty_not_error(self, settings: Settings):
        """Test a response without items yields an empty list."""
        client = CatalogSearchClient(settings, transport=catalog_transport([]))

        assert await client.search("nothing matches this") == []

    @pytest.mark.asyncio
    async def test_error_status_raises_upstream_error(self, settings: Settings):
        """Test non-2xx responses raise UpstreamError."""
        client = CatalogSearchClient(settings, transport=catalog_transport(status_code=429))

        with pytest.raises(UpstreamError) as exc_info:
            await client.search("romance")

        assert exc_info.value.status_code == 500
        assert exc_info.value.source == "catalog"

    @pytest.mark.asyncio
    async def test_transport_error_raises_upstream_error(self, settings: Settings):
        """Test connection failures raise UpstreamError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = CatalogSearchClient(settings, transport=httpx.MockTransport(handler))

        with pytest.raises(UpstreamError):
            await client.search("romance")

    @pytest.mark.asyncio
    async def test_any_success_status_is_accepted(self, settings: Settings):
        """Test a 2xx status other than 200 still yields records."""
        transport = catalog_transport([make_volume("Circe")], status_code=203)
        client = CatalogSearchClient(settings, transport=transport)

        records = await client.search("mythology retelling")

        assert [record.title for record in records] == ["Circe"]

"""Google Books catalog search client.

API Documentation: https://developers.google.com/books/docs/v1/using
"""

import httpx
import structlog

from app.config import Settings
from app.core.exceptions import UpstreamError
from app.schemas.catalog import CatalogRecord
from app.schemas.chat import Publication

logger = structlog.get_logger(__name__)

SUBJECT_QUALIFIER = "subject:fiction"


def date_qualifier(publication: Publication | None, settings: Settings) -> str | None:
    """Return the date filter for a publication preference, if any."""
    if publication == Publication.RECENT:
        return settings.recent_year_range
    if publication == Publication.CLASSIC:
        return f"before:{settings.classic_cutoff_year}"
    return None


def build_search_query(query: str, publication: Publication | None, settings: Settings) -> str:
    """Append the date and subject qualifiers to a free-text query.

    Qualifiers the model already wrote into the query are not repeated.
    """
    terms = query.split()
    lowered = {term.lower() for term in terms}

    date_filter = date_qualifier(publication, settings)
    if date_filter and date_filter.lower() not in lowered:
        terms.append(date_filter)
    if SUBJECT_QUALIFIER not in lowered:
        terms.append(SUBJECT_QUALIFIER)

    return " ".join(terms)


class CatalogSearchClient:
    """Search the book catalog for candidate novels."""

    VOLUMES_ENDPOINT = "/volumes"

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        """Initialize the client.

        Args:
            settings: Application settings (base URL, API key, limits)
            transport: Optional httpx transport, used to stub the API in tests
        """
        self.settings = settings
        self.transport = transport

    async def search(
        self,
        query: str,
        publication: Publication | None = None,
    ) -> list[CatalogRecord]:
        """Run one relevance-ordered search.

        Returns:
            Matching records in the catalog's relevance order; empty when nothing matched

        Raises:
            UpstreamError: If the catalog is unreachable or answers with an error
        """
        search_query = build_search_query(query, publication, self.settings)
        params = {
            "q": search_query,
            "maxResults": self.settings.catalog_max_results,
            "orderBy": "relevance",
        }
        if self.settings.google_books_api_key:
            params["key"] = self.settings.google_books_api_key

        logger.info("Searching catalog", query=search_query, publication=publication)

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.catalog_timeout_seconds,
                transport=self.transport,
            ) as client:
                response = await client.get(
                    f"{self.settings.books_api_base_url}{self.VOLUMES_ENDPOINT}",
                    params=params,
                )
        except httpx.HTTPError as e:
            logger.error("Catalog request failed", error=str(e))
            raise UpstreamError(str(e), source="catalog") from e

        if not response.is_success:
            logger.error(
                "Catalog returned an error",
                status_code=response.status_code,
                body=response.text[:200],
            )
            raise UpstreamError(f"HTTP {response.status_code}", source="catalog")

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError("response is not JSON", source="catalog") from e

        items = data.get("items") or []
        records = [CatalogRecord.model_validate(item) for item in items]
        logger.info("Catalog search complete", count=len(records))
        return records

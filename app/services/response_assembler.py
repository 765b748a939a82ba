"""Enrich the selected book with metadata from its catalog record."""

import re

import structlog

from app.schemas.catalog import CatalogRecord
from app.schemas.chat import Recommendation

logger = structlog.get_logger(__name__)

_PUNCTUATION_RE = re.compile(r"[^\w\s]")


def normalize_title(title: str) -> str:
    """Case-fold, drop punctuation and collapse whitespace."""
    return " ".join(_PUNCTUATION_RE.sub(" ", title.casefold()).split())


def find_matching_record(title: str, records: list[CatalogRecord]) -> CatalogRecord | None:
    """Return the first record whose normalized title contains ``title``."""
    wanted = normalize_title(title)
    if not wanted:
        return None
    for record in records:
        if wanted in normalize_title(record.title):
            return record
    return None


def secure_url(url: str | None) -> str | None:
    if url and url.startswith("http://"):
        return "https://" + url[len("http://"):]
    return url


def assemble_recommendation(
    recommendation: Recommendation,
    records: list[CatalogRecord],
) -> Recommendation:
    """Copy cover, links and missing details from the matching record.

    Returns a new Recommendation; when no record matches, the selection is returned
    as-is with its enrichment fields left empty.
    """
    match = find_matching_record(recommendation.title, records)
    if match is None:
        logger.info("No catalog match for selected title", title=recommendation.title)
        return recommendation

    info = match.volume_info
    image_url = info.image_links.largest() if info.image_links else None

    updates = {
        "image_url": secure_url(image_url),
        "preview_link": info.preview_link,
        "buy_link": match.sale_info.buy_link if match.sale_info else None,
    }
    if recommendation.page_count is None:
        updates["page_count"] = info.page_count
    if recommendation.published_date is None:
        updates["published_date"] = info.published_date
    if recommendation.rating is None:
        updates["rating"] = info.average_rating
    if recommendation.author is None:
        updates["author"] = match.author_names

    return recommendation.model_copy(update=updates)

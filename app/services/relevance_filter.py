"""Keyword heuristic that keeps novels and drops non-fiction."""

from app.schemas.catalog import CatalogRecord

FICTION_KEYWORDS = (
    "fiction",
    "novel",
    "romance",
    "mystery",
    "thriller",
    "fantasy",
    "science fiction",
    "horror",
)
NON_FICTION_KEYWORDS = (
    "non-fiction",
    "biography",
    "self-help",
    "textbook",
    "history",
    "guide",
)

POPULAR_MIN_RATING = 4.0
POPULAR_MIN_RATINGS_COUNT = 1000


def is_fiction(record: CatalogRecord) -> bool:
    categories = " ".join(record.volume_info.categories).lower()
    has_fiction = any(keyword in categories for keyword in FICTION_KEYWORDS)
    has_non_fiction = any(keyword in categories for keyword in NON_FICTION_KEYWORDS)
    return has_fiction and not has_non_fiction


def is_popular(record: CatalogRecord) -> bool:
    info = record.volume_info
    return (info.average_rating or 0) >= POPULAR_MIN_RATING or (
        info.ratings_count or 0
    ) > POPULAR_MIN_RATINGS_COUNT


def title_contains(record: CatalogRecord, title: str) -> bool:
    """Case-insensitive containment of ``title`` in the record's title."""
    return title.casefold() in record.title.casefold()


def filter_novels(
    records: list[CatalogRecord],
    popularity_override: bool = False,
    exclude_title: str | None = None,
) -> list[CatalogRecord]:
    """Keep fiction records, preserving the catalog's order.

    Args:
        records: Catalog hits in relevance order
        popularity_override: Also keep highly rated or widely reviewed records
        exclude_title: Drop records whose title contains this (already shown) title

    Returns:
        The records that pass, in their original order
    """
    kept = []
    for record in records:
        if exclude_title and title_contains(record, exclude_title):
            continue
        if is_fiction(record) or (popularity_override and is_popular(record)):
            kept.append(record)
    return kept

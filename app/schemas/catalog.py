"""Book catalog schemas (subset of a Google Books volume resource)."""

from pydantic import Field, field_validator

from app.schemas.common import CamelModel


class ImageLinks(CamelModel):
    """Cover image URLs, smallest to largest."""

    small_thumbnail: str | None = None
    thumbnail: str | None = None
    small: str | None = None
    medium: str | None = None
    large: str | None = None
    extra_large: str | None = None

    def largest(self) -> str | None:
        """Return the highest-resolution link available."""
        for link in (
            self.extra_large,
            self.large,
            self.medium,
            self.small,
            self.thumbnail,
            self.small_thumbnail,
        ):
            if link:
                return link
        return None


class VolumeInfo(CamelModel):
    """Bibliographic metadata of a volume."""

    title: str = ""
    subtitle: str | None = None
    authors: list[str] = Field(default_factory=list)
    description: str | None = None
    categories: list[str] = Field(default_factory=list)
    average_rating: float | None = None
    ratings_count: int | None = None
    published_date: str | None = None
    page_count: int | None = None
    image_links: ImageLinks | None = None
    preview_link: str | None = None

    @field_validator("title", mode="before")
    @classmethod
    def _title_or_empty(cls, value):
        return value or ""

    @field_validator("authors", "categories", mode="before")
    @classmethod
    def _list_or_empty(cls, value):
        return value or []


class SaleInfo(CamelModel):
    """Retail information of a volume."""

    buy_link: str | None = None


class CatalogRecord(CamelModel):
    """A single search hit returned by the catalog."""

    id: str | None = None
    volume_info: VolumeInfo = Field(default_factory=VolumeInfo)
    sale_info: SaleInfo | None = None

    @property
    def title(self) -> str:
        return self.volume_info.title

    @property
    def author_names(self) -> str | None:
        if not self.volume_info.authors:
            return None
        return ", ".join(self.volume_info.authors)

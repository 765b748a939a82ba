"""Services package for business logic."""

from app.services.catalog_client import CatalogSearchClient
from app.services.preference_extractor import PreferenceExtractor
from app.services.recommendation_pipeline import RecommendationPipeline, build_pipeline
from app.services.recommendation_selector import RecommendationSelector

__all__ = [
    "CatalogSearchClient",
    "PreferenceExtractor",
    "RecommendationPipeline",
    "RecommendationSelector",
    "build_pipeline",
]

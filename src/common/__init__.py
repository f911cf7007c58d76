# ABOUTME: Makes the shared common package importable across the engine and CLI.
# ABOUTME: Re-exports schema types, catalog loaders, and config for convenience.

from .schemas import CatalogItem, InteractionEvent, LearningInsights, LearningProfile
from .catalog import catalog_from_frame, load_catalog
from .config import RecommenderConfig, load_recommender_config

__all__ = [
    "CatalogItem",
    "InteractionEvent",
    "LearningInsights",
    "LearningProfile",
    "catalog_from_frame",
    "load_catalog",
    "RecommenderConfig",
    "load_recommender_config",
]

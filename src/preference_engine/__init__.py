# ABOUTME: Exposes the preference engine entrypoints.
# ABOUTME: Groups the recommender, scoring helpers, insights, and profile stores.

from .recommender import PreferenceRecommender, ScoredRecommendation
from .store import InMemoryProfileStore, JsonFileProfileStore, ProfileStore

__all__ = [
    "PreferenceRecommender",
    "ScoredRecommendation",
    "InMemoryProfileStore",
    "JsonFileProfileStore",
    "ProfileStore",
]

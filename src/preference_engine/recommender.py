# ABOUTME: Learns a student's subject, difficulty, and topic preferences from interactions.
# ABOUTME: Ranks the past-paper catalog and summarizes insights for one user session.

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence

import pandas as pd

from src.common.config import RecommenderConfig
from src.common.schemas import (
    EXCLUDING_KINDS,
    INTERACTION_KINDS,
    CatalogItem,
    InteractionEvent,
    LearningInsights,
    LearningProfile,
)

from .insights import learning_streak, top_key
from .scoring import SCORE_COMPONENTS, current_level, generate_reason, score_components, total_score
from .store import ProfileStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ScoredRecommendation:
    """Recommendation with its score breakdown."""

    item: CatalogItem
    score: float
    components: Dict[str, float]
    reason: str


class PreferenceRecommender:
    """
    Per-user preference model over a fixed catalog.

    The profile is loaded from `store` once, at construction, and written
    back after every recorded interaction. One instance per user session;
    the instance is not safe for concurrent mutation.
    """

    def __init__(
        self,
        catalog: Sequence[CatalogItem],
        store: ProfileStore,
        config: Optional[RecommenderConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.catalog: List[CatalogItem] = list(catalog)
        self.store = store
        self.config = config or RecommenderConfig()
        self.clock = clock or _utcnow

        self._items_by_id: Dict[str, CatalogItem] = {}
        for item in self.catalog:
            self._items_by_id.setdefault(item.item_id, item)

        self.profile: LearningProfile = store.load()

    def record_interaction(self, item_id: str, kind: str) -> None:
        """Fold one interaction into the profile and persist it."""
        if kind not in INTERACTION_KINDS:
            raise ValueError(f"Unknown interaction kind '{kind}'. Expected one of: {', '.join(INTERACTION_KINDS)}.")

        item = self._items_by_id.get(item_id)
        if item is None:
            logger.debug("Ignoring %s interaction for unknown item %s", kind, item_id)
            return

        profile = self.profile
        profile.history.append(InteractionEvent(item_id=item_id, kind=kind, timestamp=self.clock()))

        weight = self.config.interaction_weights[kind]
        profile.subject_weights[item.subject] = profile.subject_weights.get(item.subject, 0.0) + weight
        profile.difficulty_weights[item.difficulty] = profile.difficulty_weights.get(item.difficulty, 0.0) + weight
        topic_weight = weight * self.config.topic_interaction_factor
        for tag in item.tags:
            profile.topic_weights[tag] = profile.topic_weights.get(tag, 0.0) + topic_weight

        self.store.save(profile)

    def current_level(self) -> str:
        return current_level(self.profile.history, self._items_by_id, self.config.recent_window)

    def score_breakdown(self, item: CatalogItem) -> Dict[str, float]:
        return score_components(
            item,
            self.profile,
            self.current_level(),
            self.clock().year,
            self.config,
        )

    def score(self, item: CatalogItem) -> float:
        return total_score(self.score_breakdown(item))

    def excluded_item_ids(self) -> set:
        """Items already completed or favorited."""
        return {event.item_id for event in self.profile.history if event.kind in EXCLUDING_KINDS}

    def score_catalog(self) -> pd.DataFrame:
        """
        Score every catalog item.

        Returns one row per item in catalog order with columns item_id,
        position, excluded, score, and one column per score component.
        """
        level = self.current_level()
        year = self.clock().year
        excluded = self.excluded_item_ids()

        rows = []
        for position, item in enumerate(self.catalog):
            components = score_components(item, self.profile, level, year, self.config)
            rows.append(
                {
                    "item_id": item.item_id,
                    "position": position,
                    "excluded": item.item_id in excluded,
                    "score": total_score(components),
                    **components,
                }
            )
        columns = ["item_id", "position", "excluded", "score", *SCORE_COMPONENTS]
        return pd.DataFrame(rows, columns=columns)

    def get_scored_recommendations(self, count: Optional[int] = None) -> List[ScoredRecommendation]:
        """Ranked, non-excluded items with score breakdown and reason."""
        if count is None:
            count = self.config.default_count
        count = max(int(count), 0)
        if count == 0 or not self.catalog:
            return []

        scored = self.score_catalog()
        candidates = scored[~scored["excluded"].astype(bool)]
        # Explicit position key so equal scores keep catalog order.
        ranked = candidates.sort_values(["score", "position"], ascending=[False, True], kind="mergesort")

        level = self.current_level()
        recs: List[ScoredRecommendation] = []
        for _, row in ranked.head(count).iterrows():
            item = self.catalog[int(row["position"])]
            components = {name: float(row[name]) for name in SCORE_COMPONENTS}
            recs.append(
                ScoredRecommendation(
                    item=item,
                    score=float(row["score"]),
                    components=components,
                    reason=generate_reason(item, components, level),
                )
            )
        return recs

    def get_recommendations(self, count: Optional[int] = None) -> List[CatalogItem]:
        """Top `count` catalog items the student has not completed or favorited."""
        return [rec.item for rec in self.get_scored_recommendations(count)]

    def get_insights(self) -> LearningInsights:
        config = self.config
        return LearningInsights(
            favorite_subject=top_key(self.profile.subject_weights, config.default_subject),
            strongest_topic=top_key(self.profile.topic_weights, config.default_topic),
            recommended_difficulty=self.current_level(),
            learning_streak=learning_streak(
                self.profile.history,
                self.clock().date(),
                days=config.streak_days,
                mode=config.streak_mode,
            ),
        )

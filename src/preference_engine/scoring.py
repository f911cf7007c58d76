# ABOUTME: Pure scoring functions for ranking catalog items against a learning profile.
# ABOUTME: Combines subject, difficulty progression, topic, popularity, recency, and tutor terms.

from __future__ import annotations

from collections import Counter
from typing import Dict, Mapping, Sequence

import numpy as np

from src.common.config import RecommenderConfig
from src.common.schemas import DIFFICULTY_LEVELS, CatalogItem, InteractionEvent, LearningProfile

DEFAULT_LEVEL = DIFFICULTY_LEVELS[0]
SCORE_COMPONENTS = ("subject", "difficulty", "topic", "popularity", "recency", "ai_tutor")


def current_level(
    history: Sequence[InteractionEvent],
    items_by_id: Mapping[str, CatalogItem],
    window: int = 10,
) -> str:
    """
    Most frequent difficulty among the last `window` interactions.

    Entries whose item is gone from the catalog are skipped. On a count tie
    the tier seen first in the window wins.
    """
    recent = history[-window:] if window > 0 else []
    counts: Counter = Counter()
    for event in recent:
        item = items_by_id.get(event.item_id)
        if item is not None:
            counts[item.difficulty] += 1

    if not counts:
        return DEFAULT_LEVEL
    # Counter keeps insertion order and max() returns the first maximum.
    return max(counts, key=counts.get)


def is_next_level(difficulty: str, level: str) -> bool:
    if difficulty not in DIFFICULTY_LEVELS:
        return False
    level_index = DIFFICULTY_LEVELS.index(level) if level in DIFFICULTY_LEVELS else -1
    return DIFFICULTY_LEVELS.index(difficulty) == level_index + 1


def difficulty_bonus(difficulty: str, level: str, config: RecommenderConfig) -> float:
    # The next tier up outranks the current tier on purpose.
    if difficulty == level:
        return config.current_level_bonus
    if is_next_level(difficulty, level):
        return config.next_level_bonus
    return 0.0


def score_components(
    item: CatalogItem,
    profile: LearningProfile,
    level: str,
    current_year: int,
    config: RecommenderConfig,
) -> Dict[str, float]:
    """Per-term contributions to an item's score, keyed by SCORE_COMPONENTS."""
    topic_total = sum(profile.topic_weights.get(tag, 0.0) for tag in item.tags)
    downloads = max(item.download_count, 1)
    return {
        "subject": profile.subject_weights.get(item.subject, 0.0) * config.subject_weight,
        "difficulty": difficulty_bonus(item.difficulty, level, config),
        "topic": topic_total * config.topic_weight,
        "popularity": float(np.log(downloads)) * config.popularity_weight,
        "recency": (item.year - current_year + config.recency_window_years) * config.recency_weight,
        "ai_tutor": config.ai_tutor_bonus if item.has_ai_tutor else 0.0,
    }


def total_score(components: Mapping[str, float]) -> float:
    return float(sum(components[name] for name in SCORE_COMPONENTS))


def generate_reason(item: CatalogItem, components: Mapping[str, float], level: str) -> str:
    """Short human-readable explanation of why an item ranks where it does."""
    parts = []

    if item.difficulty == level:
        parts.append(f"matches your {level} level")
    elif is_next_level(item.difficulty, level):
        parts.append(f"next step up from {level}")

    if components.get("subject", 0.0) > 0:
        parts.append(f"you study a lot of {item.subject}")
    if components.get("topic", 0.0) > 0:
        parts.append("covers topics you engage with")
    if item.has_ai_tutor:
        parts.append("AI tutor available")

    if not parts:
        parts.append("popular with other students")
    return "; ".join(parts)

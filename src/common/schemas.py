# ABOUTME: Defines canonical data structures shared by the catalog and preference engine.
# ABOUTME: Centralizes catalog item, interaction event, profile, and insight schemas.

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple

DIFFICULTY_LEVELS: Tuple[str, ...] = ("easy", "medium", "hard")

INTERACTION_VIEW = "view"
INTERACTION_COMPLETE = "complete"
INTERACTION_FAVORITE = "favorite"
INTERACTION_DOWNLOAD = "download"
INTERACTION_KINDS = (
    INTERACTION_VIEW,
    INTERACTION_COMPLETE,
    INTERACTION_FAVORITE,
    INTERACTION_DOWNLOAD,
)
# Interactions that mean the student is done with an item.
EXCLUDING_KINDS = frozenset({INTERACTION_COMPLETE, INTERACTION_FAVORITE})


@dataclass(frozen=True)
class CatalogItem:
    """Read-only past paper record supplied by the catalog."""

    item_id: str
    subject: str
    difficulty: str
    tags: Tuple[str, ...] = ()
    download_count: int = 0
    year: int = 0
    has_ai_tutor: bool = False
    title: str = ""


@dataclass(frozen=True)
class InteractionEvent:
    """One user action against a catalog item; history order is chronological."""

    item_id: str
    kind: str
    timestamp: Optional[datetime] = None


@dataclass
class LearningProfile:
    """Accumulated preference state for a single user."""

    history: List[InteractionEvent] = field(default_factory=list)
    subject_weights: Dict[str, float] = field(default_factory=dict)
    difficulty_weights: Dict[str, float] = field(default_factory=dict)
    topic_weights: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class LearningInsights:
    """Snapshot summary shown next to the recommendation list."""

    favorite_subject: str
    strongest_topic: str
    recommended_difficulty: str
    learning_streak: int

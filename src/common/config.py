# ABOUTME: Loads recommender tunables from YAML into an immutable config object.
# ABOUTME: Defaults reproduce the production weighting so a missing file is harmless.

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .schemas import INTERACTION_KINDS

STREAK_MODES = ("legacy", "daily")


def _default_interaction_weights() -> Dict[str, float]:
    return {"complete": 3.0, "favorite": 2.0, "download": 1.5, "view": 1.0}


@dataclass(frozen=True)
class RecommenderConfig:
    """Weights and defaults for the preference model."""

    interaction_weights: Mapping[str, float] = field(default_factory=_default_interaction_weights)
    topic_interaction_factor: float = 0.5

    subject_weight: float = 0.4
    topic_weight: float = 0.2
    popularity_weight: float = 0.1
    recency_weight: float = 0.1
    recency_window_years: int = 5
    ai_tutor_bonus: float = 1.0
    current_level_bonus: float = 2.0
    next_level_bonus: float = 3.0

    recent_window: int = 10
    default_count: int = 5

    default_subject: str = "Chemistry"
    default_topic: str = "basic-concepts"
    streak_days: int = 7
    streak_mode: str = "legacy"

    profile_dir: Path = Path("data/profiles")
    profile_key: str = "userLearningHistory"


def load_recommender_config(config_path: Optional[Path]) -> RecommenderConfig:
    """
    Load a RecommenderConfig from YAML.

    Sections mirror configs/recommender.yaml; any key left out keeps its default.
    """
    config = RecommenderConfig()
    if config_path is None or not Path(config_path).exists():
        return config

    with open(config_path) as f:
        cfg = yaml.safe_load(f) or {}

    overrides: Dict[str, Any] = {}

    weights = cfg.get("interaction_weights")
    if weights:
        unknown = set(weights) - set(INTERACTION_KINDS)
        if unknown:
            raise ValueError(f"Unknown interaction kinds in config: {sorted(unknown)}")
        merged = dict(config.interaction_weights)
        merged.update({k: _non_negative(v, f"interaction_weights.{k}") for k, v in weights.items()})
        overrides["interaction_weights"] = merged
    if "topic_interaction_factor" in cfg:
        overrides["topic_interaction_factor"] = _non_negative(cfg["topic_interaction_factor"], "topic_interaction_factor")

    scoring_cfg = cfg.get("scoring", {}) or {}
    for key in (
        "subject_weight",
        "topic_weight",
        "popularity_weight",
        "recency_weight",
        "ai_tutor_bonus",
        "current_level_bonus",
        "next_level_bonus",
    ):
        if key in scoring_cfg:
            overrides[key] = float(scoring_cfg[key])
    if "recency_window_years" in scoring_cfg:
        overrides["recency_window_years"] = int(scoring_cfg["recency_window_years"])

    for key in ("recent_window", "default_count"):
        if key in cfg:
            overrides[key] = int(cfg[key])

    insights_cfg = cfg.get("insights", {}) or {}
    if "default_subject" in insights_cfg:
        overrides["default_subject"] = str(insights_cfg["default_subject"])
    if "default_topic" in insights_cfg:
        overrides["default_topic"] = str(insights_cfg["default_topic"])
    if "streak_days" in insights_cfg:
        overrides["streak_days"] = int(insights_cfg["streak_days"])
    if "streak_mode" in insights_cfg:
        mode = str(insights_cfg["streak_mode"]).strip().lower()
        if mode not in STREAK_MODES:
            raise ValueError(f"Unsupported streak_mode '{mode}'. Expected one of: {', '.join(STREAK_MODES)}.")
        overrides["streak_mode"] = mode

    storage_cfg = cfg.get("storage", {}) or {}
    if "profile_dir" in storage_cfg:
        overrides["profile_dir"] = Path(storage_cfg["profile_dir"])
    if "profile_key" in storage_cfg:
        overrides["profile_key"] = str(storage_cfg["profile_key"])

    return replace(config, **overrides)


def _non_negative(value: Any, name: str) -> float:
    # profile weights only ever grow
    number = float(value)
    if not math.isfinite(number) or number < 0:
        raise ValueError(f"'{name}' must be a finite non-negative number, got {value!r}")
    return number

# ABOUTME: Persists learning profiles behind a small load/save storage port.
# ABOUTME: Encodes the profile blob and degrades malformed state to an empty profile.

from __future__ import annotations

import json
import logging
import math
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Protocol

from src.common.schemas import INTERACTION_KINDS, InteractionEvent, LearningProfile

logger = logging.getLogger(__name__)

PROFILE_KEY = "userLearningHistory"


class ProfileStore(Protocol):
    def load(self) -> LearningProfile:
        ...

    def save(self, profile: LearningProfile) -> None:
        ...


def profile_to_blob(profile: LearningProfile) -> Dict[str, Any]:
    """Serialize a profile; all four fields are always written."""
    return {
        "history": [_event_to_record(event) for event in profile.history],
        "subjectWeights": dict(profile.subject_weights),
        "difficultyWeights": dict(profile.difficulty_weights),
        "topicWeights": dict(profile.topic_weights),
    }


def profile_from_blob(data: Any) -> LearningProfile:
    """
    Rebuild a profile from a decoded blob.

    Every field is optional. History entries may be records or the legacy
    "<itemId>:<kind>" strings. Raises ValueError on anything malformed.
    """
    if not isinstance(data, Mapping):
        raise ValueError(f"Profile blob must be an object, got {type(data).__name__}")

    history = [_event_from_entry(entry) for entry in _as_list(data.get("history"), "history")]
    return LearningProfile(
        history=history,
        subject_weights=_weights(data.get("subjectWeights"), "subjectWeights"),
        difficulty_weights=_weights(data.get("difficultyWeights"), "difficultyWeights"),
        topic_weights=_weights(data.get("topicWeights"), "topicWeights"),
    )


def decode_profile(raw: Optional[str], source: str = PROFILE_KEY) -> LearningProfile:
    """Decode a serialized blob, falling back to an empty profile."""
    if not raw:
        return LearningProfile()
    try:
        return profile_from_blob(json.loads(raw))
    except (ValueError, TypeError) as exc:
        logger.warning("Discarding malformed learning profile from %s: %s", source, exc)
        return LearningProfile()


def encode_profile(profile: LearningProfile) -> str:
    return json.dumps(profile_to_blob(profile))


class InMemoryProfileStore:
    """Key-value store kept in process memory; holds raw serialized blobs."""

    def __init__(self, key: str = PROFILE_KEY, initial: Optional[str] = None):
        self.key = key
        self.blobs: Dict[str, str] = {}
        if initial is not None:
            self.blobs[key] = initial
        self.writes = 0

    def load(self) -> LearningProfile:
        return decode_profile(self.blobs.get(self.key), source=f"memory:{self.key}")

    def save(self, profile: LearningProfile) -> None:
        self.blobs[self.key] = encode_profile(profile)
        self.writes += 1


class JsonFileProfileStore:
    """One JSON document per user on local disk."""

    def __init__(self, path: Path):
        self.path = Path(path)

    @classmethod
    def for_user(cls, profile_dir: Path, user_id: str, key: str = PROFILE_KEY) -> "JsonFileProfileStore":
        return cls(Path(profile_dir) / user_id / f"{key}.json")

    def load(self) -> LearningProfile:
        if not self.path.exists():
            logger.debug("No saved learning profile at %s; starting empty", self.path)
            return LearningProfile()
        try:
            raw = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read learning profile %s: %s", self.path, exc)
            return LearningProfile()
        return decode_profile(raw, source=str(self.path))

    def save(self, profile: LearningProfile) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(".tmp")
            tmp_path.write_text(encode_profile(profile), encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as exc:
            logger.warning("Failed to persist learning profile to %s: %s", self.path, exc)


def _event_to_record(event: InteractionEvent) -> Dict[str, Any]:
    return {
        "itemId": event.item_id,
        "kind": event.kind,
        "timestamp": event.timestamp.isoformat() if event.timestamp else None,
    }


def _event_from_entry(entry: Any) -> InteractionEvent:
    if isinstance(entry, str):
        # item ids may contain ":", kinds never do
        item_id, sep, kind = entry.rpartition(":")
        if not sep:
            raise ValueError(f"History entry '{entry}' is not '<itemId>:<kind>'")
        timestamp = None
    elif isinstance(entry, Mapping):
        item_id = entry.get("itemId")
        kind = entry.get("kind")
        raw_ts = entry.get("timestamp")
        timestamp = _parse_timestamp(raw_ts) if raw_ts else None
    else:
        raise ValueError(f"Unsupported history entry type {type(entry).__name__}")

    if not isinstance(item_id, str) or kind not in INTERACTION_KINDS:
        raise ValueError(f"Invalid history entry {entry!r}")
    return InteractionEvent(item_id=item_id, kind=kind, timestamp=timestamp)


def _as_list(value: Any, name: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"'{name}' must be a list")
    return value


def _weights(value: Any, name: str) -> Dict[str, float]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"'{name}' must be an object")
    weights: Dict[str, float] = {}
    for key, weight in value.items():
        if isinstance(weight, bool) or not isinstance(weight, (int, float)):
            raise ValueError(f"'{name}.{key}' must be a number")
        if not math.isfinite(weight) or weight < 0:
            raise ValueError(f"'{name}.{key}' must be finite and non-negative")
        weights[str(key)] = float(weight)
    return weights


def _parse_timestamp(value: Any) -> datetime:
    if not isinstance(value, str):
        raise ValueError(f"Timestamp must be an ISO 8601 string, got {value!r}")
    # fromisoformat only accepts a trailing "Z" from Python 3.11 on
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)

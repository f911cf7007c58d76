# ABOUTME: Summarizes a learning profile into favorite subject, strongest topic, level, and streak.
# ABOUTME: Keeps the historical streak rule by default with an opt-in calendar-day variant.

from __future__ import annotations

from datetime import date, timedelta
from typing import Mapping, Sequence

from src.common.schemas import INTERACTION_COMPLETE, InteractionEvent


def top_key(weights: Mapping[str, float], default: str) -> str:
    """Key with the largest weight; the earliest inserted key wins ties."""
    if not weights:
        return default
    return max(weights, key=weights.get)


def learning_streak(
    history: Sequence[InteractionEvent],
    today: date,
    days: int = 7,
    mode: str = "legacy",
) -> int:
    """
    Count consecutive days, walking back from today, with completed work.

    In "legacy" mode a day counts whenever any completion exists anywhere in
    history, so the result is either 0 or `days`. "daily" mode requires a
    completion timestamped on that calendar day.
    """
    if mode == "daily":
        completed_days = {
            event.timestamp.date()
            for event in history
            if event.kind == INTERACTION_COMPLETE and event.timestamp is not None
        }
    else:
        has_completion = any(event.kind == INTERACTION_COMPLETE for event in history)

    streak = 0
    for offset in range(days):
        day = today - timedelta(days=offset)
        if mode == "daily":
            active = day in completed_days
        else:
            active = has_completion
        if not active:
            break
        streak += 1
    return streak

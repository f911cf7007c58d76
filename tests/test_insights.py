# ABOUTME: Unit tests for the learning insights snapshot.
# ABOUTME: Verifies defaults, argmax tie-breaking, and both streak modes.

import unittest
from dataclasses import replace
from datetime import datetime, timedelta, timezone

from src.common.config import RecommenderConfig
from src.common.schemas import CatalogItem, InteractionEvent
from src.preference_engine import InMemoryProfileStore, PreferenceRecommender
from src.preference_engine.insights import learning_streak, top_key

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)
TODAY = NOW.date()


def _completed(day_offset: int) -> InteractionEvent:
    return InteractionEvent("p", "complete", NOW - timedelta(days=day_offset))


class TestInsightsSnapshot(unittest.TestCase):
    def setUp(self):
        self.catalog = [
            CatalogItem("c1", "Chemistry", "easy", ("organic",), 100, 2024, False),
            CatalogItem("p1", "Physics", "medium", ("mechanics", "waves"), 100, 2024, True),
            CatalogItem("b1", "Biology", "hard", ("genetics",), 100, 2024, False),
        ]

    def _recommender(self, config=None):
        return PreferenceRecommender(self.catalog, InMemoryProfileStore(), config=config, clock=lambda: NOW)

    def test_empty_profile_defaults(self):
        insights = self._recommender().get_insights()
        self.assertEqual(insights.favorite_subject, "Chemistry")
        self.assertEqual(insights.strongest_topic, "basic-concepts")
        self.assertEqual(insights.recommended_difficulty, "easy")
        self.assertEqual(insights.learning_streak, 0)

    def test_insights_follow_weights(self):
        rec = self._recommender()
        rec.record_interaction("c1", "view")
        rec.record_interaction("p1", "complete")
        rec.record_interaction("p1", "view")

        insights = rec.get_insights()
        self.assertEqual(insights.favorite_subject, "Physics")
        self.assertEqual(insights.strongest_topic, "mechanics")
        self.assertEqual(insights.recommended_difficulty, "medium")
        self.assertEqual(insights.learning_streak, 7)

    def test_configured_defaults(self):
        config = replace(RecommenderConfig(), default_subject="Physics", default_topic="algebra")
        insights = self._recommender(config).get_insights()
        self.assertEqual(insights.favorite_subject, "Physics")
        self.assertEqual(insights.strongest_topic, "algebra")


class TestTopKey(unittest.TestCase):
    def test_default_when_empty(self):
        self.assertEqual(top_key({}, "fallback"), "fallback")

    def test_first_inserted_wins_ties(self):
        self.assertEqual(top_key({"b": 2.0, "a": 2.0, "c": 1.0}, "x"), "b")
        self.assertEqual(top_key({"c": 1.0, "a": 3.0}, "x"), "a")


class TestLearningStreak(unittest.TestCase):
    def test_legacy_counts_any_completion(self):
        history = [_completed(400)]
        self.assertEqual(learning_streak(history, TODAY), 7)

    def test_legacy_ignores_other_kinds(self):
        history = [InteractionEvent("p", "view", NOW), InteractionEvent("p", "favorite", NOW)]
        self.assertEqual(learning_streak(history, TODAY), 0)

    def test_legacy_accepts_untimestamped_entries(self):
        self.assertEqual(learning_streak([InteractionEvent("p", "complete")], TODAY), 7)

    def test_legacy_respects_day_limit(self):
        self.assertEqual(learning_streak([_completed(0)], TODAY, days=3), 3)

    def test_daily_counts_consecutive_days(self):
        history = [_completed(0), _completed(1), _completed(1), _completed(3)]
        self.assertEqual(learning_streak(history, TODAY, mode="daily"), 2)

    def test_daily_breaks_without_completion_today(self):
        history = [_completed(1), _completed(2)]
        self.assertEqual(learning_streak(history, TODAY, mode="daily"), 0)

    def test_daily_caps_at_window(self):
        history = [_completed(offset) for offset in range(10)]
        self.assertEqual(learning_streak(history, TODAY, days=7, mode="daily"), 7)

    def test_daily_mode_via_config(self):
        catalog = [CatalogItem("c1", "Chemistry", "easy", (), 10, 2024, False)]
        config = replace(RecommenderConfig(), streak_mode="daily")
        rec = PreferenceRecommender(catalog, InMemoryProfileStore(), config=config, clock=lambda: NOW)
        rec.record_interaction("c1", "complete")
        self.assertEqual(rec.get_insights().learning_streak, 1)


if __name__ == "__main__":
    unittest.main()

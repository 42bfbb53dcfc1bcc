"""
Tests for the achievement engine.
"""

import pytest

from ..catalog.catalog import ResourceCatalog
from ..catalog.definitions import AchievementCondition, AchievementDefinition, AchievementType
from ..engine_core.presentation import EventKind, EventQueue, RecordingPresentation
from ..progress.achievements import AchievementEngine


@pytest.fixture
def achievements(catalog, progress, save_manager):
    return AchievementEngine(catalog, progress, save_manager)


class TestUnlock:
    """Tests for unlocking achievements."""

    def test_unlock_once(self, achievements, progress):
        """The first unlock succeeds, the second reports False."""
        assert achievements.unlock_achievement("first_victory")
        assert not achievements.unlock_achievement("first_victory")
        assert progress.achievements == ["first_victory"]

    def test_unlock_records_date(self, achievements):
        """Every unlock is timestamped."""
        assert achievements.get_unlock_date("first_victory") is None

        achievements.unlock_achievement("first_victory")

        assert achievements.get_unlock_date("first_victory") is not None

    def test_unknown_achievement(self, achievements, progress):
        """Ids missing from the catalog are never unlocked."""
        assert not achievements.unlock_achievement("world_domination")
        assert progress.achievements == []

    def test_unlock_saves(self, achievements, save_manager):
        """Unlocking persists progress."""
        achievements.unlock_achievement("first_victory")

        assert save_manager.load_game().achievements == ["first_victory"]

    def test_unlock_emits_event(self, catalog, progress):
        """An event announces the unlock."""
        recorder = RecordingPresentation()
        engine = AchievementEngine(catalog, progress, events=EventQueue(recorder))

        engine.unlock_achievement("boss_slayer")

        assert recorder.kinds() == [EventKind.ACHIEVEMENT_UNLOCKED]
        assert recorder.events[0].data["achievement_id"] == "boss_slayer"

    def test_unlock_emits_after_drain(self, catalog, progress):
        """A queue that was just drained still receives the unlock."""
        recorder = RecordingPresentation()
        events = EventQueue(recorder)
        events.emit(EventKind.NOTICE, "before")
        events.drain()
        engine = AchievementEngine(catalog, progress, events=events)

        engine.unlock_achievement("first_victory")

        assert [e.kind for e in events.drain()] == [EventKind.ACHIEVEMENT_UNLOCKED]
        assert recorder.kinds()[-1] == EventKind.ACHIEVEMENT_UNLOCKED


class TestProgressChecks:
    """Tests for the percentage calculators."""

    def test_partial_progress(self, achievements):
        """Progress is a floored percentage."""
        assert achievements.check_achievement_progress("max_level", 5, 10) == 50
        assert achievements.check_achievement_progress("max_level", 3, 7) == 42
        assert not achievements.is_unlocked("max_level")

    def test_complete_progress_unlocks(self, achievements):
        """Reaching the target unlocks the achievement."""
        assert achievements.check_achievement_progress("max_level", 10, 10) == 100
        assert achievements.is_unlocked("max_level")

    def test_unlocked_stays_complete(self, achievements):
        """An unlocked achievement reports 100 whatever the numbers."""
        achievements.unlock_achievement("max_level")

        assert achievements.check_achievement_progress("max_level", 1, 10) == 100

    def test_zero_target(self, achievements):
        """A non-positive target reports 0."""
        assert achievements.check_achievement_progress("max_level", 5, 0) == 0

    def test_collection_counts_distinct_items(self, achievements):
        """Duplicates in a collection count once."""
        assert achievements.check_collection_achievement("card_collector", ["a", "a", "b"], 4) == 50
        assert achievements.check_collection_achievement("card_collector", ["a", "a", "b"], 2) == 100
        assert achievements.is_unlocked("card_collector")

    def test_challenge(self, achievements):
        """Challenges unlock only when completed."""
        assert not achievements.check_challenge_achievement("perfect_battle", False)
        assert achievements.check_challenge_achievement("perfect_battle", True)
        assert achievements.check_challenge_achievement("perfect_battle", False)


class TestConditions:
    """Tests for catalog conditions."""

    def test_evaluate_conditions(self, achievements, progress):
        """Conditions met by the stats unlock their achievements once."""
        progress.stats.total_battles_won = 1

        assert achievements.evaluate_conditions() == ["first_victory"]
        assert achievements.evaluate_conditions() == []

    def test_player_level_condition(self, achievements, progress):
        """The level condition reads the profile."""
        progress.player.level = 10

        assert "max_level" in achievements.evaluate_conditions()


class TestListing:
    """Tests for counts and listings."""

    def test_counts(self, achievements):
        """Counts report a rounded percentage."""
        achievements.unlock_achievement("first_victory")

        assert achievements.get_achievement_counts() == {"unlocked": 1, "total": 5, "percentage": 20}

    def test_list(self, achievements):
        """The listing carries unlock status."""
        achievements.unlock_achievement("first_victory")

        listed = {a["id"]: a for a in achievements.list_achievements()}

        assert listed["first_victory"]["unlocked"]
        assert listed["first_victory"]["unlocked_at"] is not None
        assert not listed["boss_slayer"]["unlocked"]
        assert listed["boss_slayer"]["type"] == "challenge"

    def test_hidden_achievements(self, progress):
        """Hidden achievements stay out of the listing until unlocked."""
        secret = AchievementDefinition(
            achievement_id="secret_door",
            name="Secret Door",
            description="Find the door.",
            condition=AchievementCondition("battles_won", 99),
            achievement_type=AchievementType.SECRET,
            hidden=True,
        )
        engine = AchievementEngine(
            ResourceCatalog(catalog_id="t", name="Test", achievements=[secret]), progress
        )

        assert engine.list_achievements() == []
        assert len(engine.list_achievements(include_hidden=True)) == 1

        engine.unlock_achievement("secret_door")

        assert [a["id"] for a in engine.list_achievements()] == ["secret_door"]

    def test_reset(self, achievements, progress):
        """A reset clears unlocks and dates."""
        achievements.unlock_achievement("first_victory")

        achievements.reset_achievements()

        assert progress.achievements == []
        assert progress.achievement_dates == {}

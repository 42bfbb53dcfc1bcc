"""
Achievement Engine - Unlocks achievements against cumulative progress.

Unlocking is monotonic: once an id is in the unlocked list it stays
there until an explicit reset. Every unlock is timestamped and saved.

The progress calculators return a percentage (0-100) and unlock the
achievement when it reaches 100.
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Iterable
import logging
import math

from ..catalog.catalog import ResourceCatalog
from ..engine_core.presentation import EventKind, EventQueue
from .models import Progress
from .save_manager import SaveManager

logger = logging.getLogger(__name__)


class AchievementEngine:
    """
    Achievement bookkeeping for one player's progress.

    Usage:
        achievements = AchievementEngine(catalog, progress, save_manager)
        achievements.unlock_achievement("first_victory")    # True
        achievements.unlock_achievement("first_victory")    # False
    """

    def __init__(
        self,
        catalog: ResourceCatalog,
        progress: Progress,
        save_manager: SaveManager | None = None,
        events: EventQueue | None = None,
    ):
        self.catalog = catalog
        self.progress = progress
        self.save_manager = save_manager
        self.events = events

    def unlock_achievement(self, achievement_id: str) -> bool:
        """Unlock once; False if unknown or already unlocked."""
        if self.is_unlocked(achievement_id):
            return False

        achievement = self.catalog.get_achievement(achievement_id)
        if not achievement:
            logger.warning("Unknown achievement %s", achievement_id)
            return False

        self.progress.achievements.append(achievement_id)
        self.progress.achievement_dates[achievement_id] = datetime.now(timezone.utc).isoformat()
        logger.info("Achievement unlocked: %s", achievement_id)

        if self.events is not None:
            self.events.emit(
                EventKind.ACHIEVEMENT_UNLOCKED,
                f"Achievement unlocked: {achievement.name}",
                achievement_id=achievement_id,
            )
        if self.save_manager:
            self.save_manager.save_game(self.progress)
        return True

    def is_unlocked(self, achievement_id: str) -> bool:
        return achievement_id in self.progress.achievements

    def get_unlock_date(self, achievement_id: str) -> str | None:
        return self.progress.achievement_dates.get(achievement_id)

    def check_achievement_progress(self, achievement_id: str, current: float, target: float) -> int:
        """Percentage of current towards target; unlocks at 100."""
        if self.is_unlocked(achievement_id):
            return 100
        if target <= 0:
            return 0

        if current >= target:
            self.unlock_achievement(achievement_id)
            return 100
        return min(100, math.floor(current / target * 100))

    def check_collection_achievement(
        self,
        achievement_id: str,
        collection: Iterable[Any],
        target_items: int,
    ) -> int:
        """Progress of a collection: distinct members against target_items."""
        return self.check_achievement_progress(achievement_id, len(set(collection)), target_items)

    def check_challenge_achievement(self, achievement_id: str, completed: bool) -> bool:
        """A pass/fail achievement; unlocks when completed."""
        if self.is_unlocked(achievement_id):
            return True
        if completed:
            self.unlock_achievement(achievement_id)
            return True
        return False

    def evaluate_conditions(self) -> list[str]:
        """Unlock every catalog achievement whose condition holds. Returns new ids."""
        stats = self.progress.achievement_stats()
        unlocked = []
        for achievement in self.catalog.get_all_achievements():
            if self.is_unlocked(achievement.achievement_id):
                continue
            if achievement.condition.is_met(stats) and self.unlock_achievement(achievement.achievement_id):
                unlocked.append(achievement.achievement_id)
        return unlocked

    def get_achievement_counts(self) -> dict[str, int]:
        total = len(self.catalog.get_all_achievements())
        unlocked = sum(
            1 for a in self.catalog.get_all_achievements() if self.is_unlocked(a.achievement_id)
        )
        percentage = round(unlocked / total * 100) if total else 0
        return {"unlocked": unlocked, "total": total, "percentage": percentage}

    def list_achievements(self, include_hidden: bool = False) -> list[dict[str, Any]]:
        """Achievements with unlock status; hidden ones only once unlocked."""
        listed = []
        for achievement in self.catalog.get_all_achievements():
            unlocked = self.is_unlocked(achievement.achievement_id)
            if achievement.hidden and not unlocked and not include_hidden:
                continue
            listed.append({
                "id": achievement.achievement_id,
                "name": achievement.name,
                "description": achievement.description,
                "type": achievement.achievement_type.value,
                "unlocked": unlocked,
                "unlocked_at": self.get_unlock_date(achievement.achievement_id),
            })
        return listed

    def reset_achievements(self):
        self.progress.achievements.clear()
        self.progress.achievement_dates.clear()
        if self.save_manager:
            self.save_manager.save_game(self.progress)
        logger.info("Achievements reset")

"""
Resource Catalog - Read-only lookup tables for cards, enemies, levels,
items and achievements.

Every lookup returns None (or an empty list) for unknown ids and never
raises; the battle engine treats the catalog as static data.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
import logging
import random

from .definitions import (
    AchievementDefinition,
    CardDefinition,
    CardType,
    EnemyDefinition,
    EnemyType,
    ItemDefinition,
    ItemType,
    LevelDefinition,
    Rarity,
)

logger = logging.getLogger(__name__)


@dataclass
class ResourceCatalog:
    """
    All static game content.

    Usage:
        catalog = create_default_catalog()
        card = catalog.get_card("attack_basic")
        level = catalog.get_level(1)
        enemy = catalog.get_enemy(level.enemy_id)
    """
    catalog_id: str
    name: str
    cards: list[CardDefinition] = field(default_factory=list)
    enemies: list[EnemyDefinition] = field(default_factory=list)
    levels: list[LevelDefinition] = field(default_factory=list)
    items: list[ItemDefinition] = field(default_factory=list)
    achievements: list[AchievementDefinition] = field(default_factory=list)

    def __post_init__(self):
        self._cards = {card.card_id: card for card in self.cards}
        self._enemies = {enemy.enemy_id: enemy for enemy in self.enemies}
        self._levels = {level.level_id: level for level in self.levels}
        self._items = {item.item_id: item for item in self.items}
        self._achievements = {a.achievement_id: a for a in self.achievements}

    # ------------------------------------------------------------------
    # Cards
    # ------------------------------------------------------------------

    def get_card(self, card_id: str) -> CardDefinition | None:
        return self._cards.get(card_id)

    def get_all_cards(self) -> list[CardDefinition]:
        return list(self.cards)

    def get_cards_by_type(self, card_type: CardType) -> list[CardDefinition]:
        return [card for card in self.cards if card.card_type == card_type]

    def get_cards_by_rarity(self, rarity: Rarity) -> list[CardDefinition]:
        return [card for card in self.cards if card.rarity == rarity]

    # ------------------------------------------------------------------
    # Levels
    # ------------------------------------------------------------------

    def get_level(self, level_id: int) -> LevelDefinition | None:
        return self._levels.get(level_id)

    def get_all_levels(self) -> list[LevelDefinition]:
        return list(self.levels)

    @property
    def levels_count(self) -> int:
        return len(self.levels)

    def next_level_id(self, level_id: int) -> int | None:
        """Id of the level after `level_id`, if the catalog has one."""
        later = sorted(lid for lid in self._levels if lid > level_id)
        return later[0] if later else None

    # ------------------------------------------------------------------
    # Enemies
    # ------------------------------------------------------------------

    def get_enemy(self, enemy_id: str) -> EnemyDefinition | None:
        return self._enemies.get(enemy_id)

    def get_all_enemies(self) -> list[EnemyDefinition]:
        return list(self.enemies)

    def get_enemies_by_type(self, enemy_type: EnemyType) -> list[EnemyDefinition]:
        return [enemy for enemy in self.enemies if enemy.enemy_type == enemy_type]

    def get_random_enemy(
        self,
        enemy_type: EnemyType = EnemyType.NORMAL,
        rng: random.Random | None = None,
    ) -> EnemyDefinition | None:
        """Pick a random enemy of the given type."""
        candidates = self.get_enemies_by_type(enemy_type)
        if not candidates:
            logger.warning("No enemies of type %s", enemy_type.value)
            return None
        return (rng or random).choice(candidates)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def get_item(self, item_id: str) -> ItemDefinition | None:
        return self._items.get(item_id)

    def get_all_items(self) -> list[ItemDefinition]:
        return list(self.items)

    def get_items_by_type(self, item_type: ItemType) -> list[ItemDefinition]:
        return [item for item in self.items if item.item_type == item_type]

    # ------------------------------------------------------------------
    # Achievements
    # ------------------------------------------------------------------

    def get_achievement(self, achievement_id: str) -> AchievementDefinition | None:
        return self._achievements.get(achievement_id)

    def get_all_achievements(self) -> list[AchievementDefinition]:
        return list(self.achievements)

    def check_achievement(self, achievement_id: str, stats: dict[str, Any]) -> bool:
        """Whether the achievement's condition holds for `stats`."""
        achievement = self.get_achievement(achievement_id)
        if not achievement:
            return False
        return achievement.condition.is_met(stats)

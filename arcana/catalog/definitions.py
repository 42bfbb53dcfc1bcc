"""
Catalog Definitions - Immutable entries of the resource catalog.

Definitions are referenced by id everywhere else; runtime objects
(hands, combatants, progress) only ever store the id.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .effect_dsl import EffectSpec, EffectType, Side


class CardType(Enum):
    """Card categories; the category decides the default target."""
    ATTACK = "attack"
    DEFENSE = "defense"
    SKILL = "skill"
    POWER = "power"
    CURSE = "curse"


class Rarity(Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class EnemyType(Enum):
    NORMAL = "normal"
    ELITE = "elite"
    BOSS = "boss"


class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class IntentType(Enum):
    """Enemy action kinds. STUNNED only ever appears as an adjusted intent."""
    ATTACK = "attack"
    ATTACK_MULTI = "attack_multi"
    DEFEND = "defend"
    BUFF = "buff"
    DEBUFF = "debuff"
    STUNNED = "stunned"

    @property
    def is_attack(self) -> bool:
        return self in (IntentType.ATTACK, IntentType.ATTACK_MULTI)


class ItemType(Enum):
    HEAL = "heal"
    MANA = "mana"
    BUFF = "buff"
    MAX_HEALTH_UP = "maxHealthUp"
    MAX_MANA_UP = "maxManaUp"


class AchievementType(Enum):
    PROGRESS = "progress"
    COLLECTION = "collection"
    CHALLENGE = "challenge"
    SECRET = "secret"


@dataclass(frozen=True)
class CardDefinition:
    """A card in the catalog."""
    card_id: str
    name: str
    card_type: CardType
    rarity: Rarity
    cost: int
    effect: EffectSpec
    description: str = ""
    price: int = 0

    @property
    def target(self) -> Side:
        """
        Side the card's effect lands on.

        Attacks hit the enemy; defense, power and curse cards affect the
        player; skills use the effect's own target, defaulting to the player.
        """
        if self.card_type == CardType.ATTACK:
            return Side.ENEMY
        if self.card_type == CardType.SKILL:
            return self.effect.target or Side.PLAYER
        return Side.PLAYER


@dataclass(frozen=True)
class EnemyAction:
    """One row of an enemy's weighted action table."""
    action_type: IntentType
    weight: int
    value: float = 0
    times: int = 1
    effect: EffectType | None = None
    duration: int | None = None


@dataclass(frozen=True)
class EnemyDefinition:
    enemy_id: str
    name: str
    enemy_type: EnemyType
    health: int
    attack: int
    actions: tuple[EnemyAction, ...]
    description: str = ""

    @property
    def total_weight(self) -> int:
        return sum(action.weight for action in self.actions)


@dataclass(frozen=True)
class LevelRewards:
    gold: int = 0
    experience: int = 0
    cards: tuple[str, ...] = ()


@dataclass(frozen=True)
class LevelDefinition:
    level_id: int
    name: str
    enemy_id: str
    difficulty: Difficulty
    rewards: LevelRewards = field(default_factory=LevelRewards)
    description: str = ""


@dataclass(frozen=True)
class ItemDefinition:
    """A consumable. `effect` names the attribute a BUFF item raises."""
    item_id: str
    name: str
    item_type: ItemType
    value: int
    price: int = 0
    effect: EffectType | None = None
    duration: int | None = None
    description: str = ""


@dataclass(frozen=True)
class AchievementCondition:
    """Unlocked when stats[condition_type] >= value."""
    condition_type: str
    value: int

    def is_met(self, stats: dict[str, Any]) -> bool:
        return (stats.get(self.condition_type) or 0) >= self.value


@dataclass(frozen=True)
class AchievementDefinition:
    achievement_id: str
    name: str
    description: str
    condition: AchievementCondition
    achievement_type: AchievementType = AchievementType.PROGRESS
    hidden: bool = False

"""Resource catalog - static definitions and the effect descriptor DSL."""

from .effect_dsl import EffectSpec, EffectType, Side, TriggerTiming
from .definitions import (
    AchievementCondition,
    AchievementDefinition,
    AchievementType,
    CardDefinition,
    CardType,
    Difficulty,
    EnemyAction,
    EnemyDefinition,
    EnemyType,
    IntentType,
    ItemDefinition,
    ItemType,
    LevelDefinition,
    LevelRewards,
    Rarity,
)
from .catalog import ResourceCatalog
from .validation import validate_catalog, CatalogValidationError, ValidationResult

__all__ = [
    "EffectSpec",
    "EffectType",
    "Side",
    "TriggerTiming",
    "AchievementCondition",
    "AchievementDefinition",
    "AchievementType",
    "CardDefinition",
    "CardType",
    "Difficulty",
    "EnemyAction",
    "EnemyDefinition",
    "EnemyType",
    "IntentType",
    "ItemDefinition",
    "ItemType",
    "LevelDefinition",
    "LevelRewards",
    "Rarity",
    "ResourceCatalog",
    "validate_catalog",
    "CatalogValidationError",
    "ValidationResult",
]

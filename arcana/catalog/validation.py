"""
Catalog Validation - Consistency checks for resource catalogs.

Validates that:
1. Ids are present and unique per table
2. References resolve (level -> enemy, rewards -> cards, basic deck -> cards)
3. Numbers are sane (costs, health, action weights)
4. Enemy buff/debuff actions and buff items name an effect
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable

from .catalog import ResourceCatalog
from .definitions import (
    CardDefinition,
    EnemyDefinition,
    IntentType,
    ItemDefinition,
    ItemType,
    LevelDefinition,
)
from .effect_dsl import EffectType


class CatalogValidationError(Exception):
    """Raised when catalog validation fails."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Catalog validation failed with {len(errors)} error(s)")


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str]
    warnings: list[str]


def validate_catalog(
    catalog: ResourceCatalog,
    basic_deck: Iterable[str] = (),
    raise_on_error: bool = False,
) -> ValidationResult:
    """
    Validate a complete catalog.

    Returns ValidationResult with errors and warnings.
    Raises CatalogValidationError if raise_on_error=True and errors exist.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not catalog.catalog_id:
        errors.append("catalog_id is required")

    errors.extend(_duplicates("card", [c.card_id for c in catalog.cards]))
    errors.extend(_duplicates("enemy", [e.enemy_id for e in catalog.enemies]))
    errors.extend(_duplicates("level", [str(lvl.level_id) for lvl in catalog.levels]))
    errors.extend(_duplicates("item", [i.item_id for i in catalog.items]))
    errors.extend(_duplicates("achievement", [a.achievement_id for a in catalog.achievements]))

    for card in catalog.cards:
        errors.extend(_validate_card(card))

    for enemy in catalog.enemies:
        errors.extend(_validate_enemy(enemy))

    for level in catalog.levels:
        errors.extend(_validate_level(level, catalog))

    for item in catalog.items:
        errors.extend(_validate_item(item))

    for card_id in basic_deck:
        if not catalog.get_card(card_id):
            errors.append(f"Basic deck references unknown card '{card_id}'")

    # Warnings for incomplete catalogs
    if not catalog.cards:
        warnings.append("No cards defined")
    if not catalog.levels:
        warnings.append("No levels defined")
    if not catalog.achievements:
        warnings.append("No achievements defined")

    result = ValidationResult(valid=len(errors) == 0, errors=errors, warnings=warnings)
    if raise_on_error and errors:
        raise CatalogValidationError(errors)
    return result


def _duplicates(kind: str, ids: list[str]) -> list[str]:
    errors = []
    seen: set[str] = set()
    for entry_id in ids:
        if not entry_id:
            errors.append(f"A {kind} has an empty id")
        elif entry_id in seen:
            errors.append(f"Duplicate {kind} id '{entry_id}'")
        seen.add(entry_id)
    return errors


def _validate_card(card: CardDefinition) -> list[str]:
    """Validate a single card definition."""
    errors = []
    if not card.name:
        errors.append(f"Card '{card.card_id}' has empty name")
    if card.cost < 0:
        errors.append(f"Card '{card.card_id}' has negative cost")
    if card.effect.times < 1:
        errors.append(f"Card '{card.card_id}' effect must hit at least once")
    return errors


def _validate_enemy(enemy: EnemyDefinition) -> list[str]:
    """Validate an enemy and its action table."""
    errors = []
    if enemy.health <= 0:
        errors.append(f"Enemy '{enemy.enemy_id}' must have positive health")
    if not enemy.actions:
        errors.append(f"Enemy '{enemy.enemy_id}' has no actions")
    elif enemy.total_weight <= 0:
        errors.append(f"Enemy '{enemy.enemy_id}' action weights sum to zero")

    for action in enemy.actions:
        if action.weight < 0:
            errors.append(f"Enemy '{enemy.enemy_id}' has a negative action weight")
        if action.action_type == IntentType.STUNNED:
            errors.append(f"Enemy '{enemy.enemy_id}' lists 'stunned' as an action")
        if action.action_type in (IntentType.BUFF, IntentType.DEBUFF) and not action.effect:
            errors.append(
                f"Enemy '{enemy.enemy_id}' {action.action_type.value} action names no effect"
            )
    return errors


def _validate_level(level: LevelDefinition, catalog: ResourceCatalog) -> list[str]:
    """Validate level references."""
    errors = []
    if not catalog.get_enemy(level.enemy_id):
        errors.append(f"Level {level.level_id} references unknown enemy '{level.enemy_id}'")
    for card_id in level.rewards.cards:
        if not catalog.get_card(card_id):
            errors.append(f"Level {level.level_id} rewards unknown card '{card_id}'")
    return errors


def _validate_item(item: ItemDefinition) -> list[str]:
    errors = []
    if item.item_type == ItemType.BUFF and item.effect not in (
        EffectType.STRENGTH,
        EffectType.DEXTERITY,
        EffectType.VITALITY,
        EffectType.INTELLIGENCE,
    ):
        errors.append(f"Buff item '{item.item_id}' must name an attribute effect")
    return errors

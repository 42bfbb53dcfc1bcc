"""
Action Generator - Generates all legal player actions from a battle state.

The action generator is used by:
1. Autoplay policies to enumerate possible moves
2. The API to show which cards are playable

Design: Generates Action objects, not just action types.
"""

from __future__ import annotations
from dataclasses import dataclass

from ..catalog.catalog import ResourceCatalog
from ..catalog.effect_dsl import EffectType
from .action import Action
from .state import BattleState


@dataclass
class ActionGenerator:
    """Generates legal actions for the player in the current battle."""
    catalog: ResourceCatalog

    def generate(self, battle: BattleState, items: dict[str, int] | None = None) -> list[Action]:
        """
        Generate all legal player actions.

        Nothing is legal once the battle is over or while the enemy acts;
        ending the turn is always legal during the player's turn.
        """
        if battle.is_game_over or not battle.is_player_turn:
            return []

        actions = []
        if not battle.player.has_effect(EffectType.STUN):
            actions.extend(Action.play_card(i) for i in self.playable_indices(battle))

        for item_id, count in sorted((items or {}).items()):
            if count > 0 and self.catalog.get_item(item_id):
                actions.append(Action.use_item(item_id))

        actions.append(Action.end_turn())
        return actions

    def playable_indices(self, battle: BattleState) -> list[int]:
        """Hand positions of cards the player can currently afford."""
        indices = []
        for index, card_id in enumerate(battle.deck.hand):
            card = self.catalog.get_card(card_id)
            if card and card.cost <= battle.player.mana:
                indices.append(index)
        return indices


def legal_actions(
    catalog: ResourceCatalog,
    battle: BattleState,
    items: dict[str, int] | None = None,
) -> list[Action]:
    """Convenience function to get legal actions."""
    return ActionGenerator(catalog).generate(battle, items)

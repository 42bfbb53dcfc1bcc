"""
Player Policy - Interface for autoplaying the player's side.

A PlayerPolicy takes a battle state and the legal actions and returns a
decision. Policies drive simulations (BattleLoop, the `simulate` command)
and never mutate the battle themselves.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
import random

from ..catalog.definitions import CardDefinition, ItemType
from ..catalog.effect_dsl import EffectType, Side
from ..engine_core.action import Action, ActionType

if TYPE_CHECKING:
    from ..catalog.catalog import ResourceCatalog
    from ..engine_core.state import BattleState


@dataclass
class PolicyDecision:
    """
    A decision made by a policy.

    Contains:
    - The action to take
    - Explanation (for logs and the simulate command)
    - The scores considered
    """
    action: Action
    explanation: str = ""
    confidence: float = 1.0

    evaluated_actions: int = 0
    best_score: float = 0.0
    evaluation_details: dict[str, Any] = field(default_factory=dict)


class PlayerPolicy(ABC):
    """
    Abstract base class for player policies.

    Implementations range from random play to simple heuristics.
    """

    @abstractmethod
    def select_action(
        self,
        battle: BattleState,
        catalog: ResourceCatalog,
        legal_actions: list[Action],
    ) -> PolicyDecision:
        """
        Select an action from the legal actions.

        Args:
            battle: Current battle state
            catalog: Card and item definitions
            legal_actions: List of legal actions to choose from

        Returns:
            PolicyDecision with the selected action
        """

    def get_name(self) -> str:
        """Get the policy's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(PlayerPolicy):
    """
    Random policy - selects actions uniformly at random.

    Used for:
    - Testing
    - Baseline comparison
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_action(
        self,
        battle: BattleState,
        catalog: ResourceCatalog,
        legal_actions: list[Action],
    ) -> PolicyDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        action = self.rng.choice(legal_actions)
        return PolicyDecision(
            action=action,
            explanation="Selected randomly",
            confidence=1.0 / len(legal_actions),
            evaluated_actions=len(legal_actions),
        )


class GreedyPolicy(PlayerPolicy):
    """
    Greedy policy - plays the best-scoring card, otherwise ends the turn.

    Scores are rough estimates of each card's immediate worth. A heal
    potion is drunk when health falls below `heal_threshold`.
    """

    def __init__(self, heal_threshold: float = 0.4):
        self.heal_threshold = heal_threshold

    def select_action(
        self,
        battle: BattleState,
        catalog: ResourceCatalog,
        legal_actions: list[Action],
    ) -> PolicyDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        scores: dict[int, float] = {}
        best: Action | None = None
        best_score = 0.0

        for i, action in enumerate(legal_actions):
            score = self._score_action(battle, catalog, action)
            scores[i] = score
            if score > best_score:
                best, best_score = action, score

        if best is None:
            best = next(
                (a for a in legal_actions if a.action_type == ActionType.END_TURN),
                legal_actions[-1],
            )
            explanation = "Nothing worth doing, ending the turn"
        else:
            explanation = f"Best score {best_score:.1f}"

        return PolicyDecision(
            action=best,
            explanation=explanation,
            evaluated_actions=len(legal_actions),
            best_score=best_score,
            evaluation_details={"scores": scores},
        )

    def _score_action(self, battle: BattleState, catalog: ResourceCatalog, action: Action) -> float:
        if action.action_type == ActionType.PLAY_CARD:
            card_id = battle.deck.hand[action.payload.hand_index]
            card = catalog.get_card(card_id)
            return self.score_card(battle, card) if card else 0.0

        if action.action_type == ActionType.USE_ITEM:
            item = catalog.get_item(action.payload.item_id)
            player = battle.player
            if item and item.item_type == ItemType.HEAL:
                if player.health < player.max_health * self.heal_threshold:
                    return 50.0
        return 0.0

    def score_card(self, battle: BattleState, card: CardDefinition) -> float:
        """Estimated immediate worth of playing a card."""
        effect = card.effect
        value = effect.value_or_default(0)
        player = battle.player
        enemy = battle.enemy
        intent = enemy.current_intent
        enemy_attacks = intent is not None and intent.intent_type.is_attack

        if effect.effect_type == EffectType.DAMAGE:
            hit = value + player.effect_total(EffectType.STRENGTH)
            total = max(0, hit - enemy.shield_total) * max(1, effect.times)
            if total >= enemy.health:
                return 100.0
            return float(total)
        if effect.effect_type == EffectType.SHIELD:
            return value if enemy_attacks else value / 4
        if effect.effect_type == EffectType.HEALING:
            return float(min(value, player.max_health - player.health))
        if effect.effect_type in (EffectType.STRENGTH, EffectType.DEXTERITY):
            return 10.0 if effect.permanent else 4.0
        if effect.effect_type == EffectType.WEAKNESS:
            if card.target is Side.ENEMY and enemy.has_effect(EffectType.WEAKNESS):
                return 1.0
            return 5.0 if enemy_attacks else 3.0
        if effect.effect_type in (EffectType.POISON, EffectType.BURN):
            return value * effect.duration_or_default()
        if effect.effect_type in (EffectType.DRAW, EffectType.ENERGY):
            return 3.0
        return 1.0

"""
Combatant State - Health, mana, attributes and status effects of one side.

Invariants held at every mutation site:
- 0 <= health <= max_health
- 0 <= mana <= max_mana
- attributes equal the sum of the matching active attribute effects

Combatants never touch the battle state; the EffectEngine reads
is_dead after each mutation and ends the battle.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import logging

from ..catalog.definitions import EnemyAction, EnemyDefinition, EnemyType
from ..catalog.effect_dsl import ATTRIBUTE_EFFECTS, EffectType, Side, TriggerTiming
from .state import ActiveEffect, EnemyIntent

logger = logging.getLogger(__name__)

# Effect kinds that do something when their trigger timing comes round
TICKING_EFFECTS = {EffectType.POISON, EffectType.BURN, EffectType.REGENERATION}


@dataclass
class Attributes:
    """Transient attribute bonuses, zeroed for every battle."""
    strength: int = 0
    dexterity: int = 0
    intelligence: int = 0
    vitality: int = 0

    def adjust(self, name: str, delta: int):
        setattr(self, name, getattr(self, name) + delta)

    def reset(self):
        self.strength = 0
        self.dexterity = 0
        self.intelligence = 0
        self.vitality = 0


@dataclass
class TurnUpkeep:
    """What a combatant's turn-start or turn-end processing did."""
    ticks: list[tuple[ActiveEffect, int]] = field(default_factory=list)
    expired: list[ActiveEffect] = field(default_factory=list)


@dataclass
class Combatant(ABC):
    """
    Shared state and operations of both sides.

    Subclasses say which side they are.
    """
    name: str
    health: int
    max_health: int
    mana: int = 0
    max_mana: int = 0
    attributes: Attributes = field(default_factory=Attributes)
    status_effects: list[ActiveEffect] = field(default_factory=list)

    @property
    @abstractmethod
    def side(self) -> Side:
        """Which side of the battle this combatant is."""

    @property
    def is_dead(self) -> bool:
        return self.health <= 0

    # ------------------------------------------------------------------
    # Effect queries
    # ------------------------------------------------------------------

    def effects_of(self, effect_type: EffectType) -> list[ActiveEffect]:
        return [e for e in self.status_effects if e.effect_type == effect_type]

    def has_effect(self, effect_type: EffectType) -> bool:
        return any(e.effect_type == effect_type for e in self.status_effects)

    def effect_total(self, effect_type: EffectType) -> float:
        return sum(e.value for e in self.status_effects if e.effect_type == effect_type)

    @property
    def shield_total(self) -> int:
        return int(self.effect_total(EffectType.SHIELD))

    # ------------------------------------------------------------------
    # Health and mana
    # ------------------------------------------------------------------

    def take_damage(self, amount: int, source: str | None = None) -> int:
        """
        Apply incoming damage after shields.

        Every active shield subtracts its full value; shields are not used up.
        Returns the health actually lost.
        """
        if amount <= 0 or self.is_dead:
            return 0
        reduced = max(0, int(amount) - self.shield_total)
        actual = min(reduced, self.health)
        self.health -= actual
        logger.debug(
            "%s takes %d damage (%d before shields) from %s",
            self.name, actual, amount, source or "unknown",
        )
        return actual

    def lose_health(self, amount: int) -> int:
        """Lose health directly, ignoring shields."""
        if amount <= 0 or self.is_dead:
            return 0
        actual = min(int(amount), self.health)
        self.health -= actual
        return actual

    def heal(self, amount: int) -> int:
        if amount <= 0 or self.is_dead:
            return 0
        actual = min(int(amount), self.max_health - self.health)
        self.health += actual
        return actual

    def use_mana(self, amount: int) -> bool:
        """Spend mana; nothing is spent if there is not enough."""
        if amount < 0 or self.mana < amount:
            return False
        self.mana -= amount
        return True

    def restore_mana(self, amount: int) -> int:
        if amount <= 0:
            return 0
        actual = min(int(amount), self.max_mana - self.mana)
        self.mana += actual
        return actual

    # ------------------------------------------------------------------
    # Status effects
    # ------------------------------------------------------------------

    def add_status_effect(self, effect: ActiveEffect) -> ActiveEffect:
        self.status_effects.append(effect)
        self._apply_impact(effect)
        return effect

    def remove_status_effect(self, effect_id: str) -> ActiveEffect | None:
        for effect in self.status_effects:
            if effect.effect_id == effect_id:
                self.status_effects.remove(effect)
                self._revert_impact(effect)
                return effect
        return None

    def _apply_impact(self, effect: ActiveEffect):
        attribute = ATTRIBUTE_EFFECTS.get(effect.effect_type)
        if not attribute:
            return
        delta = int(effect.value)
        self.attributes.adjust(attribute, delta)
        if effect.effect_type == EffectType.VITALITY:
            self.max_health += delta
            self.health = max(0, min(self.health + delta, self.max_health))

    def _revert_impact(self, effect: ActiveEffect):
        attribute = ATTRIBUTE_EFFECTS.get(effect.effect_type)
        if not attribute:
            return
        delta = int(effect.value)
        self.attributes.adjust(attribute, -delta)
        if effect.effect_type == EffectType.VITALITY:
            self.max_health = max(1, self.max_health - delta)
            self.health = min(self.health, self.max_health)

    def tick_effects(self, timing: TriggerTiming) -> list[tuple[ActiveEffect, int]]:
        """
        Fire every effect with the given trigger timing.

        Poison and burn hurt the holder through shields; regeneration heals.
        Returns (effect, amount) for each effect that fired.
        """
        ticks = []
        for effect in list(self.status_effects):
            if self.is_dead:
                break
            if effect.trigger_timing != timing or effect.effect_type not in TICKING_EFFECTS:
                continue
            if effect.effect_type == EffectType.REGENERATION:
                amount = self.heal(int(effect.value))
            else:
                amount = self.lose_health(int(effect.value))
            ticks.append((effect, amount))
        return ticks

    def on_turn_start(self) -> TurnUpkeep:
        return TurnUpkeep(ticks=self.tick_effects(TriggerTiming.TURN_START))

    def on_turn_end(self) -> TurnUpkeep:
        """Fire turn-end effects, then count down and drop expired effects."""
        upkeep = TurnUpkeep(ticks=self.tick_effects(TriggerTiming.TURN_END))
        for effect in list(self.status_effects):
            if effect.fresh:
                effect.fresh = False
                continue
            if effect.is_permanent:
                continue
            effect.duration = effect.duration.tick()
            if effect.expired:
                self.remove_status_effect(effect.effect_id)
                upkeep.expired.append(effect)
        return upkeep

    def reset_for_battle(self):
        """Full health and mana, no effects, zeroed attributes."""
        for effect in list(self.status_effects):
            self.remove_status_effect(effect.effect_id)
        self.attributes.reset()
        self.health = self.max_health
        self.mana = self.max_mana


@dataclass
class PlayerState(Combatant):
    """The player's side, built from the saved profile at battle start."""
    level: int = 1
    experience: int = 0
    gold: int = 0

    @property
    def side(self) -> Side:
        return Side.PLAYER

    @property
    def attack_power(self) -> int:
        return 5 + self.level // 2 + self.attributes.strength

    @property
    def defense_power(self) -> int:
        return 2 + self.level // 3 + self.attributes.dexterity

    def gain_experience(
        self,
        amount: int,
        per_level: int = 100,
        health_step: int = 10,
        mana_step: int = 1,
    ) -> int:
        """
        Add experience; each level needs level * per_level.

        Returns the number of levels gained.
        """
        if amount <= 0:
            return 0
        self.experience += amount
        gained = 0
        while self.experience >= self.level * per_level:
            self.experience -= self.level * per_level
            self.level += 1
            self.max_health += health_step
            self.health += health_step
            self.max_mana += mana_step
            self.mana += mana_step
            gained += 1
        if gained:
            logger.info("%s reached level %d", self.name, self.level)
        return gained

    def gain_gold(self, amount: int) -> int:
        if amount <= 0:
            return 0
        self.gold += amount
        return amount


@dataclass
class EnemyState(Combatant):
    """An enemy instance created from its catalog definition."""
    enemy_id: str = ""
    enemy_type: EnemyType = EnemyType.NORMAL
    base_attack: int = 0
    actions: tuple[EnemyAction, ...] = ()
    planned_action: EnemyAction | None = None
    current_intent: EnemyIntent | None = None

    @property
    def side(self) -> Side:
        return Side.ENEMY

    @property
    def attack(self) -> int:
        return self.base_attack + self.attributes.strength

    @property
    def is_boss(self) -> bool:
        return self.enemy_type == EnemyType.BOSS

    @classmethod
    def from_definition(cls, definition: EnemyDefinition) -> EnemyState:
        return cls(
            name=definition.name,
            health=definition.health,
            max_health=definition.health,
            enemy_id=definition.enemy_id,
            enemy_type=definition.enemy_type,
            base_attack=definition.attack,
            actions=definition.actions,
        )

    def reset_for_battle(self):
        super().reset_for_battle()
        self.planned_action = None
        self.current_intent = None

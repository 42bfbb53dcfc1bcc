"""
Battle State - The explicit battle context every engine component works on.

Design principles:
- Single owner: the TurnEngine holds one BattleState and passes it to the
  EffectEngine, DeckEngine and EnemyAI; nothing is global
- Mutable in place: a battle is one continuous session, mutated until
  is_game_over becomes true and frozen afterwards
- Durations are explicit: Turns(n) or PERMANENT, never a -1 sentinel
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TYPE_CHECKING, Union
import uuid

from ..catalog.definitions import EnemyAction, IntentType
from ..catalog.effect_dsl import EffectType, Side, TriggerTiming

if TYPE_CHECKING:
    from .combatant import Combatant, EnemyState, PlayerState


class BattlePhase(Enum):
    """States of the turn state machine."""
    BATTLE_START = "battle_start"
    PLAYER_TURN_START = "player_turn_start"
    PLAYER_ACTIVE = "player_active"
    PLAYER_TURN_END = "player_turn_end"
    ENEMY_TURN_START = "enemy_turn_start"
    ENEMY_ACTIVE = "enemy_active"
    ENEMY_TURN_END = "enemy_turn_end"
    BATTLE_END = "battle_end"


# ============================================================================
# Duration
# ============================================================================

@dataclass(frozen=True)
class Turns:
    """A duration counted in the holder's turn-ends."""
    remaining: int

    is_permanent = False

    @property
    def expired(self) -> bool:
        return self.remaining <= 0

    def tick(self) -> Turns:
        return Turns(self.remaining - 1)

    def to_raw(self) -> int:
        return self.remaining


@dataclass(frozen=True)
class Permanent:
    """A duration that never runs out."""

    is_permanent = True

    @property
    def expired(self) -> bool:
        return False

    def tick(self) -> Permanent:
        return self

    def to_raw(self) -> int:
        return -1


PERMANENT = Permanent()

Duration = Union[Turns, Permanent]


def make_duration(turns: int | None, permanent: bool = False) -> Duration:
    """Build a Duration from catalog-style values (-1 also means permanent)."""
    if permanent or turns == -1:
        return PERMANENT
    return Turns(turns if turns is not None else 1)


# ============================================================================
# Active effects
# ============================================================================

def new_effect_id(effect_type: EffectType) -> str:
    return f"{effect_type.value}_{uuid.uuid4().hex[:8]}"


@dataclass
class ActiveEffect:
    """
    A timed or permanent modifier attached to one combatant.

    `fresh` marks an effect placed on a side during that side's own turn;
    its first turn-end clears the flag instead of counting down.
    """
    effect_id: str
    effect_type: EffectType
    value: float
    duration: Duration
    target: Side
    trigger_timing: TriggerTiming = TriggerTiming.TURN_END
    source: str | None = None
    fresh: bool = False

    @property
    def is_permanent(self) -> bool:
        return self.duration.is_permanent

    @property
    def expired(self) -> bool:
        return self.duration.expired

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.effect_id,
            "type": self.effect_type.value,
            "value": self.value,
            "duration": self.duration.to_raw(),
            "permanent": self.is_permanent,
            "targetType": self.target.value,
            "triggerTiming": self.trigger_timing.value,
            "source": self.source,
        }


# ============================================================================
# Deck
# ============================================================================

@dataclass
class DeckState:
    """
    The three card piles of a battle, holding card ids.

    The draw pile is a stack: its top is the end of the list.
    """
    draw_pile: list[str] = field(default_factory=list)
    hand: list[str] = field(default_factory=list)
    discard_pile: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.draw_pile) + len(self.hand) + len(self.discard_pile)

    def all_cards(self) -> list[str]:
        return self.draw_pile + self.hand + self.discard_pile

    def counts(self) -> dict[str, int]:
        return {
            "deck": len(self.draw_pile),
            "hand": len(self.hand),
            "discard": len(self.discard_pile),
            "total": self.total,
        }


# ============================================================================
# Enemy intent
# ============================================================================

@dataclass
class EnemyIntent:
    """The enemy's declared next action, after status adjustments."""
    intent_type: IntentType
    value: float = 0
    times: int = 1
    effect: EffectType | None = None
    duration: int | None = None

    @classmethod
    def from_action(cls, action: EnemyAction) -> EnemyIntent:
        return cls(
            intent_type=action.action_type,
            value=action.value,
            times=action.times,
            effect=action.effect,
            duration=action.duration,
        )

    @classmethod
    def stunned(cls) -> EnemyIntent:
        return cls(intent_type=IntentType.STUNNED, value=0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.intent_type.value,
            "value": self.value,
            "times": self.times,
            "effect": self.effect.value if self.effect else None,
            "duration": self.duration,
        }


# ============================================================================
# Battle
# ============================================================================

@dataclass
class BattleStats:
    """Counters for one battle, folded into progress on victory."""
    damage_dealt: int = 0
    damage_taken: int = 0
    cards_played: int = 0
    healing: int = 0


@dataclass
class BattleState:
    """
    Complete state of one battle.

    Active effects live on the combatant they are attached to;
    `active_effects` is the combined view.
    """
    battle_id: str
    level_id: int
    player: PlayerState
    enemy: EnemyState
    deck: DeckState = field(default_factory=DeckState)

    phase: BattlePhase = BattlePhase.BATTLE_START
    is_player_turn: bool = False
    is_game_over: bool = False
    is_victory: bool = False
    turn_count: int = 0

    stats: BattleStats = field(default_factory=BattleStats)
    action_history: list[Any] = field(default_factory=list)

    @classmethod
    def create(cls, level_id: int, player: PlayerState, enemy: EnemyState) -> BattleState:
        return cls(
            battle_id=f"battle_{uuid.uuid4().hex[:12]}",
            level_id=level_id,
            player=player,
            enemy=enemy,
        )

    @property
    def active_effects(self) -> list[ActiveEffect]:
        return self.player.status_effects + self.enemy.status_effects

    @property
    def turn_owner(self) -> Side:
        return Side.PLAYER if self.is_player_turn else Side.ENEMY

    def combatant(self, side: Side) -> Combatant:
        return self.player if side is Side.PLAYER else self.enemy

    def declare_defeat(self, side: Side) -> bool:
        """
        Mark the battle over because `side` died.

        Returns False if the battle had already ended.
        """
        if self.is_game_over:
            return False
        self.is_game_over = True
        self.is_victory = side is Side.ENEMY
        return True

    def clone(self) -> BattleState:
        """Create a deep copy of this state."""
        return deepcopy(self)

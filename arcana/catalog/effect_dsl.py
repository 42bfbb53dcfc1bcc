"""
Effect DSL - Declarative effect descriptors for cards, enemy actions and items.

An effect descriptor is a one-shot application request:
- What kind of effect (closed set, see EffectType)
- How strong (value), how often (times), how long (duration/permanent)
- Optionally which side it targets

Key design decisions:
- EffectType is a closed enum; the engine keeps an exhaustive handler map over it
- Descriptors are immutable catalog data, never mutated during a battle
- Defaults for omitted value/duration live here, next to the kinds they belong to
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any


class EffectType(Enum):
    """Kinds of effects the engine can apply."""
    # One-shot
    DAMAGE = "damage"
    SHIELD = "shield"
    HEALING = "healing"
    DRAW = "draw"
    ENERGY = "energy"
    DISCARD = "discard"

    # Attribute modifiers
    STRENGTH = "strength"
    DEXTERITY = "dexterity"
    VITALITY = "vitality"
    INTELLIGENCE = "intelligence"

    # Debuffs
    WEAKNESS = "weakness"
    POISON = "poison"
    BURN = "burn"
    STUN = "stun"

    # Timed buffs
    THORNS = "thorns"
    REGENERATION = "regeneration"


class Side(Enum):
    """The two combatants of a battle."""
    PLAYER = "player"
    ENEMY = "enemy"

    @property
    def opponent(self) -> Side:
        return Side.ENEMY if self is Side.PLAYER else Side.PLAYER


class TriggerTiming(Enum):
    """When an active effect fires."""
    INSTANT = "instant"
    TURN_START = "turnStart"
    TURN_END = "turnEnd"
    PERMANENT = "permanent"


# Effect kinds whose value is mirrored onto a combatant attribute while active
ATTRIBUTE_EFFECTS: dict[EffectType, str] = {
    EffectType.STRENGTH: "strength",
    EffectType.DEXTERITY: "dexterity",
    EffectType.VITALITY: "vitality",
    EffectType.INTELLIGENCE: "intelligence",
}

# (default value, default duration) for timed kinds
TIMED_DEFAULTS: dict[EffectType, tuple[float, int]] = {
    EffectType.STRENGTH: (1, 3),
    EffectType.DEXTERITY: (1, 3),
    EffectType.VITALITY: (5, 3),
    EffectType.INTELLIGENCE: (1, 3),
    EffectType.WEAKNESS: (0.25, 2),
    EffectType.POISON: (1, 3),
    EffectType.BURN: (2, 2),
    EffectType.STUN: (1, 1),
    EffectType.THORNS: (1, 3),
    EffectType.REGENERATION: (2, 3),
}

DEFAULT_TIMINGS: dict[EffectType, TriggerTiming] = {
    EffectType.POISON: TriggerTiming.TURN_START,
    EffectType.BURN: TriggerTiming.TURN_START,
    EffectType.STUN: TriggerTiming.TURN_START,
    EffectType.REGENERATION: TriggerTiming.TURN_START,
    EffectType.THORNS: TriggerTiming.INSTANT,
}


def default_timing(effect_type: EffectType, permanent: bool = False) -> TriggerTiming:
    """Trigger timing an active effect of this kind gets when none is given."""
    if permanent:
        return TriggerTiming.PERMANENT
    return DEFAULT_TIMINGS.get(effect_type, TriggerTiming.TURN_END)


@dataclass(frozen=True)
class EffectSpec:
    """
    A single effect application request.

    value/duration left as None fall back to the per-kind defaults
    when the engine applies the effect.
    """
    effect_type: EffectType
    value: float | None = None
    times: int = 1
    duration: int | None = None
    permanent: bool = False
    target: Side | None = None

    def value_or_default(self, fallback: float = 0) -> float:
        if self.value is not None:
            return self.value
        if self.effect_type in TIMED_DEFAULTS:
            return TIMED_DEFAULTS[self.effect_type][0]
        return fallback

    def duration_or_default(self, fallback: int = 1) -> int:
        if self.duration is not None:
            return self.duration
        if self.effect_type in TIMED_DEFAULTS:
            return TIMED_DEFAULTS[self.effect_type][1]
        return fallback

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.effect_type.value}
        if self.value is not None:
            data["value"] = self.value
        if self.times != 1:
            data["times"] = self.times
        if self.duration is not None:
            data["duration"] = self.duration
        if self.permanent:
            data["permanent"] = True
        if self.target is not None:
            data["targetType"] = self.target.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EffectSpec:
        """
        Build a descriptor from its JSON shape.

        Raises ValueError for a missing or unknown type and TypeError
        for a non-numeric hit count.
        """
        raw_type = data.get("type")
        if not raw_type:
            raise ValueError("Effect descriptor has no type")
        effect_type = EffectType(raw_type)
        target = data.get("targetType")
        return cls(
            effect_type=effect_type,
            value=data.get("value"),
            times=int(data.get("times", 1)),
            duration=data.get("duration"),
            permanent=bool(data.get("permanent", False)),
            target=Side(target) if target else None,
        )


# ============================================================================
# Factory functions for common effects
# ============================================================================

def damage(value: int, times: int = 1) -> EffectSpec:
    """Deal damage, optionally several hits."""
    return EffectSpec(EffectType.DAMAGE, value=value, times=times)


def shield(value: int) -> EffectSpec:
    return EffectSpec(EffectType.SHIELD, value=value)


def healing(value: int) -> EffectSpec:
    return EffectSpec(EffectType.HEALING, value=value)


def draw(count: int) -> EffectSpec:
    return EffectSpec(EffectType.DRAW, value=count)


def energy(value: int) -> EffectSpec:
    return EffectSpec(EffectType.ENERGY, value=value)


def discard(count: int = 1) -> EffectSpec:
    return EffectSpec(EffectType.DISCARD, value=count)


def strength(value: int, duration: int | None = None, permanent: bool = False) -> EffectSpec:
    """Raise strength, for `duration` turns or permanently."""
    return EffectSpec(EffectType.STRENGTH, value=value, duration=duration, permanent=permanent)


def dexterity(value: int, duration: int | None = None, permanent: bool = False) -> EffectSpec:
    return EffectSpec(EffectType.DEXTERITY, value=value, duration=duration, permanent=permanent)


def weakness(value: float = 0.25, duration: int = 2, target: Side | None = None) -> EffectSpec:
    """Reduce the holder's outgoing damage by a fraction."""
    return EffectSpec(EffectType.WEAKNESS, value=value, duration=duration, target=target)


def poison(value: int = 1, duration: int = 3) -> EffectSpec:
    return EffectSpec(EffectType.POISON, value=value, duration=duration)


def burn(value: int = 2, duration: int = 2) -> EffectSpec:
    return EffectSpec(EffectType.BURN, value=value, duration=duration)


def stun(duration: int = 1) -> EffectSpec:
    return EffectSpec(EffectType.STUN, value=1, duration=duration)


def regeneration(value: int = 2, duration: int = 3) -> EffectSpec:
    return EffectSpec(EffectType.REGENERATION, value=value, duration=duration)

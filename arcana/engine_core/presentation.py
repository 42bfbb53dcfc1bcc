"""
Presentation - Event queue and hooks between the engine and any front end.

The engine resolves everything synchronously and records what happened
as an ordered list of BattleEvents. Each event carries a pacing hint
(delay_ms) so a front end can replay the sequence at a readable speed;
the engine never waits on it.

Hooks are fire-and-forget: the engine calls them on every event and
never branches on their outcome.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import logging

logger = logging.getLogger(__name__)


class EventKind(Enum):
    """Kinds of battle events."""
    BATTLE_STARTED = "battle_started"
    TURN_STARTED = "turn_started"
    TURN_ENDED = "turn_ended"

    # Cards
    CARDS_DRAWN = "cards_drawn"
    DECK_RESHUFFLED = "deck_reshuffled"
    CARD_PLAYED = "card_played"
    CARDS_DISCARDED = "cards_discarded"

    # Effects
    DAMAGE_DEALT = "damage_dealt"
    HEALED = "healed"
    MANA_RESTORED = "mana_restored"
    EFFECT_APPLIED = "effect_applied"
    EFFECT_TRIGGERED = "effect_triggered"
    EFFECT_EXPIRED = "effect_expired"

    # Enemy
    INTENT_DECLARED = "intent_declared"
    ENEMY_ACTION = "enemy_action"

    # Player extras
    ITEM_USED = "item_used"
    NOTICE = "notice"

    # End of battle
    BATTLE_ENDED = "battle_ended"
    REWARDS_GRANTED = "rewards_granted"
    LEVEL_UP = "level_up"
    ACHIEVEMENT_UNLOCKED = "achievement_unlocked"
    GAME_OVER = "game_over"


@dataclass
class BattleEvent:
    """One thing that happened, in order."""
    kind: EventKind
    message: str = ""
    data: dict[str, Any] = field(default_factory=dict)
    delay_ms: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "data": self.data,
            "delay_ms": self.delay_ms,
        }


class PresentationHooks:
    """
    Base class for front ends.

    Override on_event; the default does nothing.
    """

    def on_event(self, event: BattleEvent):
        pass


class RecordingPresentation(PresentationHooks):
    """Keeps every event it sees. Used by sessions and tests."""

    def __init__(self):
        self.events: list[BattleEvent] = []

    def on_event(self, event: BattleEvent):
        self.events.append(event)

    def kinds(self) -> list[EventKind]:
        return [event.kind for event in self.events]

    def of_kind(self, kind: EventKind) -> list[BattleEvent]:
        return [event for event in self.events if event.kind == kind]

    def clear(self):
        self.events.clear()


class EventQueue:
    """
    Ordered event log of the engine.

    Usage:
        events = EventQueue(hooks)
        events.emit(EventKind.CARD_PLAYED, "Strike", card_id="attack_basic")
        pending = events.drain()
    """

    def __init__(self, hooks: PresentationHooks | None = None):
        self.hooks = hooks if hooks is not None else PresentationHooks()
        self._pending: list[BattleEvent] = []
        self.emitted = 0

    def emit(
        self,
        kind: EventKind,
        message: str = "",
        delay_ms: int = 0,
        **data: Any,
    ) -> BattleEvent:
        event = BattleEvent(kind=kind, message=message, data=data, delay_ms=delay_ms)
        self._pending.append(event)
        self.emitted += 1
        try:
            self.hooks.on_event(event)
        except Exception:
            logger.exception("Presentation hook failed on %s", kind.value)
        return event

    def drain(self) -> list[BattleEvent]:
        """Return and forget all queued events."""
        events, self._pending = self._pending, []
        return events

    def peek(self) -> list[BattleEvent]:
        return list(self._pending)

    def since(self, mark: int) -> list[BattleEvent]:
        """Queued events emitted after `mark`, a previous value of `emitted`."""
        count = self.emitted - mark
        return self._pending[-count:] if count > 0 else []

    def __len__(self) -> int:
        return len(self._pending)

"""
Action System - Player actions, payloads, and results.

Actions represent:
1. Battle lifecycle (start a battle on a level)
2. Player turn actions (play a card, use an item, end the turn)

The enemy never submits actions; its turn runs inside END_TURN.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Types of actions in the system."""
    START_BATTLE = "start_battle"
    PLAY_CARD = "play_card"
    USE_ITEM = "use_item"
    END_TURN = "end_turn"


class ErrorCode:
    """Failure codes carried by ActionResult.error_code."""
    NO_BATTLE = "NO_BATTLE"
    BATTLE_OVER = "BATTLE_OVER"
    NOT_PLAYER_TURN = "NOT_PLAYER_TURN"
    INVALID_CARD_INDEX = "INVALID_CARD_INDEX"
    INSUFFICIENT_MANA = "INSUFFICIENT_MANA"
    PLAYER_STUNNED = "PLAYER_STUNNED"
    UNKNOWN_CARD = "UNKNOWN_CARD"
    UNKNOWN_LEVEL = "UNKNOWN_LEVEL"
    UNKNOWN_ENEMY = "UNKNOWN_ENEMY"
    UNKNOWN_ITEM = "UNKNOWN_ITEM"
    ITEM_NOT_OWNED = "ITEM_NOT_OWNED"
    MALFORMED_EFFECT = "MALFORMED_EFFECT"
    NO_HANDLER = "NO_HANDLER"
    HANDLER_ERROR = "HANDLER_ERROR"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields; validation happens
    in the turn engine.
    """
    level_id: int | None = None
    hand_index: int | None = None
    item_id: str | None = None
    params: dict[str, Any] = field(default_factory=dict)


@dataclass
class Action:
    """A complete action to be applied to a battle."""
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)
    timestamp: float | None = None

    @classmethod
    def start_battle(cls, level_id: int) -> Action:
        """Factory for starting a battle."""
        return cls(ActionType.START_BATTLE, ActionPayload(level_id=level_id))

    @classmethod
    def play_card(cls, hand_index: int) -> Action:
        """Factory for playing the card at a hand position."""
        return cls(ActionType.PLAY_CARD, ActionPayload(hand_index=hand_index))

    @classmethod
    def use_item(cls, item_id: str) -> Action:
        """Factory for using a consumable."""
        return cls(ActionType.USE_ITEM, ActionPayload(item_id=item_id))

    @classmethod
    def end_turn(cls) -> Action:
        """Factory for ending the player's turn."""
        return cls(ActionType.END_TURN)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether the action succeeded
    - The battle state (if any)
    - Errors (if failed)
    - Events for the presentation layer
    """
    success: bool
    new_state: Any | None = None  # BattleState
    error: str | None = None
    error_code: str | None = None

    # For UI/presentation
    state_changes: list[str] = field(default_factory=list)  # Human-readable changes
    events: list[Any] = field(default_factory=list)  # BattleEvents

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
    ) -> ActionResult:
        """Create a success result with the battle state."""
        return cls(success=True, new_state=state, state_changes=changes or [])

"""
Engine Core - Battle state management and effect resolution.

The engine is the runtime that:
1. Holds the explicit BattleState
2. Resolves card and enemy effects (EffectEngine)
3. Moves cards between piles (DeckEngine)
4. Generates legal player actions
5. Runs the turn state machine (turn_engine.TurnEngine)

TurnEngine lives in arcana.engine_core.turn_engine; it depends on the
enemy AI and progress packages, which themselves build on this one.
"""

from .state import (
    PERMANENT,
    ActiveEffect,
    BattlePhase,
    BattleState,
    BattleStats,
    DeckState,
    Duration,
    EnemyIntent,
    Permanent,
    Turns,
)
from .action import Action, ActionType, ActionPayload, ActionResult, ErrorCode
from .combatant import Combatant, EnemyState, PlayerState
from .presentation import BattleEvent, EventKind, EventQueue, PresentationHooks, RecordingPresentation
from .deck import DeckEngine
from .effect_engine import EffectEngine, EffectResult, compute_hit_damage
from .action_generator import ActionGenerator, legal_actions

__all__ = [
    "PERMANENT",
    "ActiveEffect",
    "BattlePhase",
    "BattleState",
    "BattleStats",
    "DeckState",
    "Duration",
    "EnemyIntent",
    "Permanent",
    "Turns",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "ErrorCode",
    "Combatant",
    "EnemyState",
    "PlayerState",
    "BattleEvent",
    "EventKind",
    "EventQueue",
    "PresentationHooks",
    "RecordingPresentation",
    "DeckEngine",
    "EffectEngine",
    "EffectResult",
    "compute_hit_damage",
    "ActionGenerator",
    "legal_actions",
]

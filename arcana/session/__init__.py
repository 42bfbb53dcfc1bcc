"""
Session Module - Manages in-memory battle sessions.

A session represents one battle:
- Created when a client starts a battle
- Holds the TurnEngine and its event recorder
- Removed when the client ends it or it goes stale

Sessions are EPHEMERAL: only the player's Progress is saved.
"""

from .manager import SessionManager, BattleSession, SessionState
from .game_loop import BattleLoop, LoopState, TurnResult

__all__ = [
    "SessionManager",
    "BattleSession",
    "SessionState",
    "BattleLoop",
    "LoopState",
    "TurnResult",
]

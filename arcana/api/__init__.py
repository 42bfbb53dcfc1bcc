"""
API Module - HTTP interface for game clients.

Exposes the engine via a REST API. A client:
1. Reads the catalog and its progress
2. Starts a battle on an unlocked level
3. Plays cards, uses items and ends turns
4. Replays the returned events at their pacing hints

Battles are session-scoped; only progress is saved.
"""

from .schemas import (
    # Requests
    StartBattleRequest,
    PlayCardRequest,
    UseItemRequest,
    SetDeckRequest,
    # Responses
    ActionResponse,
    BattleStateResponse,
    EventsResponse,
    ProgressResponse,
    AchievementsResponse,
    ErrorResponse,
    # Enums
    BattleStatus,
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "StartBattleRequest",
    "PlayCardRequest",
    "UseItemRequest",
    "SetDeckRequest",
    # Responses
    "ActionResponse",
    "BattleStateResponse",
    "EventsResponse",
    "ProgressResponse",
    "AchievementsResponse",
    "ErrorResponse",
    # Enums
    "BattleStatus",
    "ErrorCode",
    # Service
    "APIService",
    "create_app",
]

"""
Session Manager - Creates and manages battle sessions.

LIFECYCLE:
1. A client starts a battle -> a session is created around a new TurnEngine
2. During the battle:
   - The client plays cards, uses items and ends turns
   - The enemy turn runs inside end-turn
   - Presentation events queue up until the client drains them
3. Battle ends -> the session stays readable until ended or cleaned up

PERSISTENCE RULES:
- Sessions are in-memory only
- The player's Progress is shared with the save manager and saved by
  the engine on victory; the battle itself is never persisted
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import logging
import random
import time
import uuid

from ..catalog.catalog import ResourceCatalog
from ..config import BattleRules
from ..engine_core.presentation import RecordingPresentation
from ..engine_core.turn_engine import TurnEngine
from ..progress.models import Progress
from ..progress.save_manager import SaveManager

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a battle session."""
    CREATED = "created"  # Engine built, no battle yet
    ACTIVE = "active"  # Battle in progress
    GAME_OVER = "game_over"  # Battle finished
    ABANDONED = "abandoned"  # Ended before the battle finished


@dataclass
class BattleSession:
    """
    One battle and the engine that runs it.

    Contains:
    - The TurnEngine (which owns the BattleState)
    - A recorder that keeps every presentation event
    - Session metadata
    """
    session_id: str
    engine: TurnEngine
    created_at: float
    recorder: RecordingPresentation = field(default_factory=RecordingPresentation)

    state: SessionState = SessionState.CREATED
    seed: int | None = None
    last_active_at: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict)

    def is_active(self) -> bool:
        """Check if the session still has a battle to play."""
        return self.state in {SessionState.CREATED, SessionState.ACTIVE}

    def touch(self):
        """Record activity and follow the battle's outcome."""
        self.last_active_at = time.time()
        battle = self.engine.battle
        if battle is None:
            return
        if battle.is_game_over:
            self.state = SessionState.GAME_OVER
        elif self.state == SessionState.CREATED:
            self.state = SessionState.ACTIVE


class SessionManager:
    """
    Manages battle sessions.

    Responsibilities:
    - Create sessions with their own engine and event recorder
    - Track active sessions
    - Clean up finished and stale sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self):
        self._sessions: dict[str, BattleSession] = {}

    def create_session(
        self,
        catalog: ResourceCatalog,
        progress: Progress | None = None,
        save_manager: SaveManager | None = None,
        seed: int | None = None,
        rules: BattleRules | None = None,
    ) -> BattleSession:
        """
        Create a new battle session.

        Args:
            catalog: Static game content
            progress: The player's progress (a fresh game if omitted)
            save_manager: Where the engine saves progress on victory
            seed: Seed for shuffles and enemy choices (random if omitted)
            rules: Rule constants

        Returns:
            New BattleSession with no battle started yet
        """
        session_id = str(uuid.uuid4())
        recorder = RecordingPresentation()
        engine = TurnEngine(
            catalog=catalog,
            progress=progress,
            save_manager=save_manager,
            rules=rules or BattleRules(),
            rng=random.Random(seed),
            hooks=recorder,
        )
        now = time.time()
        session = BattleSession(
            session_id=session_id,
            engine=engine,
            created_at=now,
            recorder=recorder,
            seed=seed,
            last_active_at=now,
        )
        self._sessions[session_id] = session
        logger.info("Session %s created", session_id)
        return session

    def get_session(self, session_id: str) -> BattleSession | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and remove it from memory.

        A session whose battle is still running counts as abandoned.
        """
        session = self._sessions.pop(session_id, None)
        if not session:
            return False

        battle = session.engine.battle
        if reason == "completed" and (battle is None or battle.is_game_over):
            session.state = SessionState.GAME_OVER
        else:
            session.state = SessionState.ABANDONED
        session.recorder.clear()
        logger.info("Session %s ended (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions with a battle still to play."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def list_sessions(self) -> list[BattleSession]:
        return list(self._sessions.values())

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        Remove sessions idle for longer than max_age_seconds.

        Returns the number removed.
        """
        current_time = time.time()
        stale = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.last_active_at > max_age_seconds
        ]
        for session_id in stale:
            self.end_session(session_id, reason="stale")
        return len(stale)

"""
Save Manager - Persists progress and settings as JSON documents.

The store:
- Keeps one JSON document per key (save data, settings, player id)
- Uses a pluggable backend: files on local disk, or memory for tests
- Validates loaded progress against a pydantic model before use
- Never raises to callers: failures are logged and reported as False/None

Design decisions:
- Simple file-based storage, no database
- A player id is created once and survives resets
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional
import json
import logging
import uuid

from pydantic import BaseModel, Field, ValidationError

from .models import Progress, Settings

logger = logging.getLogger(__name__)


class SaveRecord(BaseModel):
    """Shape of the persisted progress document."""
    unlocked_levels: list[int] = Field(alias="unlockedLevels")
    owned_cards: list[str] = Field(alias="ownedCards")
    equipped_cards: list[str] = Field(alias="equippedCards")
    achievements: list[str]
    stats: dict[str, int]
    achievement_dates: dict[str, str] = Field(default_factory=dict, alias="achievementDates")
    player: Optional[dict[str, int]] = None
    items: dict[str, int] = Field(default_factory=dict)
    player_id: Optional[str] = Field(default=None, alias="playerId")
    last_saved: Optional[str] = Field(default=None, alias="lastSaved")

    model_config = {"populate_by_name": True}


# =============================================================================
# Backends
# =============================================================================

class SaveBackend(ABC):
    """Key -> text storage."""

    @abstractmethod
    def read(self, key: str) -> str | None:
        """Return the stored text, or None if absent."""

    @abstractmethod
    def write(self, key: str, text: str):
        """Store text under key."""

    @abstractmethod
    def delete(self, key: str):
        """Remove key if present."""

    def exists(self, key: str) -> bool:
        return self.read(key) is not None


class MemoryBackend(SaveBackend):
    """Keeps documents in a dict. Used by tests and throwaway sessions."""

    def __init__(self):
        self.documents: dict[str, str] = {}

    def read(self, key: str) -> str | None:
        return self.documents.get(key)

    def write(self, key: str, text: str):
        self.documents[key] = text

    def delete(self, key: str):
        self.documents.pop(key, None)


class FileBackend(SaveBackend):
    """
    Stores each key as <save_dir>/<key>.json.

    Usage:
        backend = FileBackend("~/.arcana/saves")
    """

    def __init__(self, save_dir: str | Path):
        self.save_dir = Path(save_dir).expanduser()

    def _path(self, key: str) -> Path:
        return self.save_dir / f"{key}.json"

    def read(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, text: str):
        self.save_dir.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(text, encoding="utf-8")
        tmp_path.replace(path)

    def delete(self, key: str):
        self._path(key).unlink(missing_ok=True)

    def exists(self, key: str) -> bool:
        return self._path(key).exists()


# =============================================================================
# Save manager
# =============================================================================

class SaveManager:
    """
    Persistence for progress and settings.

    Usage:
        saves = SaveManager(FileBackend("~/.arcana/saves"))
        saves.save_game(progress)
        progress = saves.load_game() or Progress.new_game(BASIC_DECK)
    """

    SAVE_KEY = "save_data"
    SETTINGS_KEY = "settings"
    PLAYER_ID_KEY = "player_id"

    def __init__(self, backend: SaveBackend | None = None):
        self.backend = backend or MemoryBackend()

    @classmethod
    def in_directory(cls, save_dir: str | Path) -> SaveManager:
        return cls(FileBackend(save_dir))

    def save_game(self, progress: Progress | dict[str, Any] | None) -> bool:
        """Store progress with the player id and a timestamp."""
        if not progress:
            logger.warning("Refusing to save empty progress")
            return False

        data = progress.to_dict() if isinstance(progress, Progress) else dict(progress)
        try:
            data["playerId"] = self.get_player_id()
            data["lastSaved"] = datetime.now(timezone.utc).isoformat()
            self.backend.write(self.SAVE_KEY, json.dumps(data, indent=2))
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to save progress: %s", e)
            return False

        logger.info("Progress saved")
        return True

    def load_game(self) -> Progress | None:
        """Load progress; None if nothing is saved or the save is invalid."""
        try:
            text = self.backend.read(self.SAVE_KEY)
        except OSError as e:
            logger.error("Failed to read save data: %s", e)
            return None

        if text is None:
            logger.info("No save data found")
            return None

        try:
            record = SaveRecord.model_validate(json.loads(text))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Save data is invalid: %s", e)
            return None

        logger.info("Progress loaded")
        return Progress.from_dict(record.model_dump(by_alias=True))

    def save_settings(self, settings: Settings | None) -> bool:
        if settings is None:
            logger.warning("Refusing to save empty settings")
            return False
        try:
            self.backend.write(self.SETTINGS_KEY, json.dumps(settings.to_dict()))
        except OSError as e:
            logger.error("Failed to save settings: %s", e)
            return False
        return True

    def load_settings(self) -> Settings:
        """Stored settings, or the defaults."""
        try:
            text = self.backend.read(self.SETTINGS_KEY)
            if text is None:
                return Settings()
            return Settings.from_dict(json.loads(text))
        except (OSError, json.JSONDecodeError, TypeError, ValueError) as e:
            logger.error("Failed to load settings, using defaults: %s", e)
            return Settings()

    def delete_save(self) -> bool:
        try:
            self.backend.delete(self.SAVE_KEY)
        except OSError as e:
            logger.error("Failed to delete save: %s", e)
            return False
        logger.info("Save deleted")
        return True

    def reset_all_data(self) -> bool:
        """Delete progress and settings; the player id is kept."""
        try:
            player_id = self.get_player_id()
            self.backend.delete(self.SAVE_KEY)
            self.backend.delete(self.SETTINGS_KEY)
            self.backend.write(self.PLAYER_ID_KEY, player_id)
        except OSError as e:
            logger.error("Failed to reset data: %s", e)
            return False
        logger.info("All data reset")
        return True

    def has_save_data(self) -> bool:
        try:
            return self.backend.exists(self.SAVE_KEY)
        except OSError as e:
            logger.error("Failed to check for save data: %s", e)
            return False

    def get_save_time(self) -> str | None:
        """ISO timestamp of the last save, if any."""
        try:
            text = self.backend.read(self.SAVE_KEY)
            if text is None:
                return None
            return json.loads(text).get("lastSaved")
        except (OSError, json.JSONDecodeError, AttributeError) as e:
            logger.error("Failed to read save time: %s", e)
            return None

    def get_player_id(self) -> str:
        """The stable player id, created on first use."""
        player_id = self.backend.read(self.PLAYER_ID_KEY)
        if not player_id:
            player_id = f"player_{uuid.uuid4().hex[:12]}"
            self.backend.write(self.PLAYER_ID_KEY, player_id)
            logger.info("Created player id %s", player_id)
        return player_id

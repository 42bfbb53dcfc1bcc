"""Player progress - the persisted record, achievements and save storage."""

from .models import PlayerProfile, Progress, ProgressStats, Settings
from .save_manager import FileBackend, MemoryBackend, SaveBackend, SaveManager, SaveRecord
from .achievements import AchievementEngine

__all__ = [
    "PlayerProfile",
    "Progress",
    "ProgressStats",
    "Settings",
    "FileBackend",
    "MemoryBackend",
    "SaveBackend",
    "SaveManager",
    "SaveRecord",
    "AchievementEngine",
]

"""
Progress Models - The persisted record of a player's campaign.

Progress survives between battles and sessions. It is the only state
the save layer stores; battles read the player profile and equipped
cards from it and write rewards and statistics back on victory.

Serialized keys are camelCase to match the save file contract.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ProgressStats:
    """Cumulative counters across all battles."""
    total_damage_dealt: int = 0
    total_damage_taken: int = 0
    total_healing: int = 0
    total_cards_played: int = 0
    total_battles_won: int = 0
    total_gold_earned: int = 0
    bosses_defeated: int = 0
    perfect_battles: int = 0

    _KEYS = {
        "total_damage_dealt": "totalDamageDealt",
        "total_damage_taken": "totalDamageTaken",
        "total_healing": "totalHealing",
        "total_cards_played": "totalCardsPlayed",
        "total_battles_won": "totalBattlesWon",
        "total_gold_earned": "totalGoldEarned",
        "bosses_defeated": "bossesDefeated",
        "perfect_battles": "perfectBattles",
    }

    def to_dict(self) -> dict[str, int]:
        return {key: getattr(self, attr) for attr, key in self._KEYS.items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProgressStats:
        return cls(**{attr: int(data.get(key, 0)) for attr, key in cls._KEYS.items()})


@dataclass
class PlayerProfile:
    """Persistent player numbers; a battle's PlayerState is built from these."""
    level: int = 1
    experience: int = 0
    gold: int = 0
    max_health: int = 50
    max_mana: int = 3

    def to_dict(self) -> dict[str, int]:
        return {
            "level": self.level,
            "experience": self.experience,
            "gold": self.gold,
            "maxHealth": self.max_health,
            "maxMana": self.max_mana,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> PlayerProfile:
        data = data or {}
        defaults = cls()
        return cls(
            level=int(data.get("level", defaults.level)),
            experience=int(data.get("experience", defaults.experience)),
            gold=int(data.get("gold", defaults.gold)),
            max_health=int(data.get("maxHealth", defaults.max_health)),
            max_mana=int(data.get("maxMana", defaults.max_mana)),
        )


@dataclass
class Settings:
    """Player preferences, stored apart from progress."""
    music_volume: float = 0.5
    sound_volume: float = 0.5
    difficulty: str = "normal"

    def to_dict(self) -> dict[str, Any]:
        return {
            "musicVolume": self.music_volume,
            "soundVolume": self.sound_volume,
            "difficulty": self.difficulty,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Settings:
        data = data or {}
        return cls(
            music_volume=float(data.get("musicVolume", 0.5)),
            sound_volume=float(data.get("soundVolume", 0.5)),
            difficulty=str(data.get("difficulty", "normal")),
        )


@dataclass
class Progress:
    """
    A player's campaign progress.

    Never reset except by an explicit reset.
    """
    unlocked_levels: list[int] = field(default_factory=lambda: [1])
    owned_cards: list[str] = field(default_factory=list)
    equipped_cards: list[str] = field(default_factory=list)
    achievements: list[str] = field(default_factory=list)
    achievement_dates: dict[str, str] = field(default_factory=dict)
    stats: ProgressStats = field(default_factory=ProgressStats)
    player: PlayerProfile = field(default_factory=PlayerProfile)
    items: dict[str, int] = field(default_factory=dict)

    @classmethod
    def new_game(
        cls,
        starter_deck: list[str],
        max_health: int = 50,
        max_mana: int = 3,
    ) -> Progress:
        """Fresh progress: level 1 unlocked, the starter deck owned and equipped."""
        return cls(
            owned_cards=list(dict.fromkeys(starter_deck)),
            equipped_cards=list(starter_deck),
            player=PlayerProfile(max_health=max_health, max_mana=max_mana),
        )

    def add_cards(self, card_ids: list[str] | tuple[str, ...]) -> list[str]:
        """Add cards to the collection; returns the ones that were new."""
        added = []
        for card_id in card_ids:
            if card_id not in self.owned_cards:
                self.owned_cards.append(card_id)
                added.append(card_id)
        return added

    def unlock_level(self, level_id: int) -> bool:
        if level_id in self.unlocked_levels:
            return False
        self.unlocked_levels.append(level_id)
        return True

    def add_item(self, item_id: str, count: int = 1):
        self.items[item_id] = self.items.get(item_id, 0) + count

    def take_item(self, item_id: str) -> bool:
        """Remove one item from the inventory."""
        if self.items.get(item_id, 0) <= 0:
            return False
        self.items[item_id] -= 1
        if not self.items[item_id]:
            del self.items[item_id]
        return True

    def achievement_stats(self) -> dict[str, int]:
        """Stat view used by catalog achievement conditions."""
        return {
            "battles_won": self.stats.total_battles_won,
            "cards_owned": len(set(self.owned_cards)),
            "boss_defeated": self.stats.bosses_defeated,
            "perfect_battle": self.stats.perfect_battles,
            "player_level": self.player.level,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "unlockedLevels": list(self.unlocked_levels),
            "ownedCards": list(self.owned_cards),
            "equippedCards": list(self.equipped_cards),
            "achievements": list(self.achievements),
            "achievementDates": dict(self.achievement_dates),
            "stats": self.stats.to_dict(),
            "player": self.player.to_dict(),
            "items": dict(self.items),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Progress:
        return cls(
            unlocked_levels=[int(level) for level in data.get("unlockedLevels", [1])],
            owned_cards=list(data.get("ownedCards", [])),
            equipped_cards=list(data.get("equippedCards", [])),
            achievements=list(data.get("achievements", [])),
            achievement_dates=dict(data.get("achievementDates") or {}),
            stats=ProgressStats.from_dict(data.get("stats") or {}),
            player=PlayerProfile.from_dict(data.get("player")),
            items={k: int(v) for k, v in (data.get("items") or {}).items()},
        )

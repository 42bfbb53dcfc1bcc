"""
Goblin Wars - The default campaign

A short campaign of five levels:
- Goblin Camp, Bone Graveyard, Spider Cave (normal enemies)
- Shaman's Hut (elite)
- Throne of the Goblin King (boss)

This module contains:
- The starter card pool and the fallback basic deck
- Enemy action tables
- Levels, items and achievements
"""

from .catalog import create_goblin_wars_catalog
from .cards import GOBLIN_WARS_CARDS, BASIC_DECK
from .enemies import GOBLIN_WARS_ENEMIES
from .levels import GOBLIN_WARS_LEVELS, GOBLIN_WARS_ITEMS, GOBLIN_WARS_ACHIEVEMENTS

__all__ = [
    "create_goblin_wars_catalog",
    "GOBLIN_WARS_CARDS",
    "BASIC_DECK",
    "GOBLIN_WARS_ENEMIES",
    "GOBLIN_WARS_LEVELS",
    "GOBLIN_WARS_ITEMS",
    "GOBLIN_WARS_ACHIEVEMENTS",
]

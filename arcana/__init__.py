"""
Arcana - Turn-based Card Battle Engine

A deterministic, seedable engine for deck-building card battles.
Players build a deck, fight scripted enemies turn by turn and progress
through a campaign. The engine provides:
- Battle state and the turn state machine
- Effect resolution (damage, shields, buffs, debuffs, damage over time)
- Deck handling and weighted enemy AI
- Progress, rewards, achievements and JSON saves
"""

__version__ = "0.1.0"

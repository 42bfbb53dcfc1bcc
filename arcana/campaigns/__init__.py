"""
Campaigns module - Built-in game content.

Each campaign has its own subpackage with:
- Card definitions
- Enemies and their action tables
- Levels, items and achievements
- A factory that assembles the ResourceCatalog
"""

from .goblin_wars import create_goblin_wars_catalog

DEFAULT_CAMPAIGN = "goblin_wars"


def create_default_catalog():
    """The catalog used when nothing else is configured."""
    return create_goblin_wars_catalog()


__all__ = ["create_default_catalog", "create_goblin_wars_catalog", "DEFAULT_CAMPAIGN"]

"""
Goblin Wars Catalog

Hand-authored content for the default campaign: five levels against
goblins and their allies, ending with the Goblin King.
"""

from ...catalog.catalog import ResourceCatalog
from .cards import get_all_card_definitions
from .enemies import GOBLIN_WARS_ENEMIES
from .levels import GOBLIN_WARS_ACHIEVEMENTS, GOBLIN_WARS_ITEMS, GOBLIN_WARS_LEVELS


def create_goblin_wars_catalog() -> ResourceCatalog:
    """Create the Goblin Wars resource catalog."""
    return ResourceCatalog(
        catalog_id="goblin_wars",
        name="Goblin Wars",
        cards=get_all_card_definitions(),
        enemies=list(GOBLIN_WARS_ENEMIES),
        levels=list(GOBLIN_WARS_LEVELS),
        items=list(GOBLIN_WARS_ITEMS),
        achievements=list(GOBLIN_WARS_ACHIEVEMENTS),
    )

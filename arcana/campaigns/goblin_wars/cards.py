"""
Goblin Wars Cards - The starter card pool.

Card structure:
- Type (attack, defense, skill, power) decides the default target
- Cost in mana
- One effect descriptor
- Shop price
"""

from ...catalog.definitions import CardDefinition, CardType, Rarity
from ...catalog.effect_dsl import (
    Side,
    damage,
    draw,
    energy,
    healing,
    shield,
    strength,
    weakness,
)


GOBLIN_WARS_CARDS: list[CardDefinition] = [
    CardDefinition(
        card_id="attack_basic",
        name="Strike",
        card_type=CardType.ATTACK,
        rarity=Rarity.COMMON,
        cost=1,
        effect=damage(6),
        description="Deal 6 damage.",
        price=50,
    ),
    CardDefinition(
        card_id="attack_heavy",
        name="Heavy Blow",
        card_type=CardType.ATTACK,
        rarity=Rarity.UNCOMMON,
        cost=2,
        effect=damage(12),
        description="Deal 12 damage.",
        price=100,
    ),
    CardDefinition(
        card_id="attack_multi",
        name="Flurry",
        card_type=CardType.ATTACK,
        rarity=Rarity.RARE,
        cost=2,
        effect=damage(4, times=3),
        description="Deal 4 damage 3 times.",
        price=150,
    ),
    CardDefinition(
        card_id="defense_basic",
        name="Guard",
        card_type=CardType.DEFENSE,
        rarity=Rarity.COMMON,
        cost=1,
        effect=shield(8),
        description="Gain 8 shield.",
        price=50,
    ),
    CardDefinition(
        card_id="defense_strong",
        name="Iron Wall",
        card_type=CardType.DEFENSE,
        rarity=Rarity.UNCOMMON,
        cost=2,
        effect=shield(15),
        description="Gain 15 shield.",
        price=100,
    ),
    CardDefinition(
        card_id="skill_draw",
        name="Insight",
        card_type=CardType.SKILL,
        rarity=Rarity.COMMON,
        cost=1,
        effect=draw(2),
        description="Draw 2 cards.",
        price=75,
    ),
    CardDefinition(
        card_id="skill_energy",
        name="Focus",
        card_type=CardType.SKILL,
        rarity=Rarity.UNCOMMON,
        cost=0,
        effect=energy(1),
        description="Gain 1 mana.",
        price=120,
    ),
    CardDefinition(
        card_id="skill_weaken",
        name="Hex",
        card_type=CardType.SKILL,
        rarity=Rarity.UNCOMMON,
        cost=1,
        effect=weakness(0.25, duration=2, target=Side.ENEMY),
        description="The enemy deals 25% less damage for 2 turns.",
        price=100,
    ),
    CardDefinition(
        card_id="power_strength",
        name="Battle Trance",
        card_type=CardType.POWER,
        rarity=Rarity.RARE,
        cost=2,
        effect=strength(3, permanent=True),
        description="Permanently gain 3 strength.",
        price=200,
    ),
    CardDefinition(
        card_id="defense_heal",
        name="Mend",
        card_type=CardType.DEFENSE,
        rarity=Rarity.UNCOMMON,
        cost=1,
        effect=healing(8),
        description="Heal 8 health.",
        price=100,
    ),
]

# Deck used when the player has nothing equipped
BASIC_DECK: list[str] = ["attack_basic"] * 5 + ["defense_basic"] * 5


def get_all_card_definitions() -> list[CardDefinition]:
    return list(GOBLIN_WARS_CARDS)

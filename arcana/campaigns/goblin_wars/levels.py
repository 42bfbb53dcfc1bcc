"""
Goblin Wars Levels - Level progression, shop items and achievements.
"""

from ...catalog.definitions import (
    AchievementCondition,
    AchievementDefinition,
    AchievementType,
    Difficulty,
    ItemDefinition,
    ItemType,
    LevelDefinition,
    LevelRewards,
)
from ...catalog.effect_dsl import EffectType


GOBLIN_WARS_LEVELS: list[LevelDefinition] = [
    LevelDefinition(
        level_id=1,
        name="Goblin Camp",
        enemy_id="goblin",
        difficulty=Difficulty.EASY,
        rewards=LevelRewards(gold=50, experience=100, cards=("attack_basic", "defense_basic")),
        description="A band of goblins is camped here, planning a raid on the village.",
    ),
    LevelDefinition(
        level_id=2,
        name="Bone Graveyard",
        enemy_id="skeleton",
        difficulty=Difficulty.EASY,
        rewards=LevelRewards(gold=75, experience=150, cards=("skill_draw",)),
        description="An ancient graveyard full of the restless dead.",
    ),
    LevelDefinition(
        level_id=3,
        name="Spider Cave",
        enemy_id="spider",
        difficulty=Difficulty.MEDIUM,
        rewards=LevelRewards(gold=100, experience=200, cards=("attack_heavy",)),
        description="Webs cover every wall of this dark cave.",
    ),
    LevelDefinition(
        level_id=4,
        name="Shaman's Hut",
        enemy_id="goblin_shaman",
        difficulty=Difficulty.MEDIUM,
        rewards=LevelRewards(gold=125, experience=250, cards=("skill_weaken",)),
        description="A goblin shaman channels primitive magic.",
    ),
    LevelDefinition(
        level_id=5,
        name="Throne of the Goblin King",
        enemy_id="goblin_king",
        difficulty=Difficulty.HARD,
        rewards=LevelRewards(gold=200, experience=400, cards=("power_strength",)),
        description="The chieftain of the goblin tribes awaits.",
    ),
]


GOBLIN_WARS_ITEMS: list[ItemDefinition] = [
    ItemDefinition(
        item_id="health_potion",
        name="Health Potion",
        item_type=ItemType.HEAL,
        value=20,
        price=50,
        description="Restore 20 health.",
    ),
    ItemDefinition(
        item_id="mana_potion",
        name="Mana Potion",
        item_type=ItemType.MANA,
        value=3,
        price=75,
        description="Restore 3 mana.",
    ),
    ItemDefinition(
        item_id="strength_potion",
        name="Strength Potion",
        item_type=ItemType.BUFF,
        value=2,
        price=100,
        effect=EffectType.STRENGTH,
        duration=3,
        description="Gain 2 strength for 3 turns.",
    ),
    ItemDefinition(
        item_id="max_health_potion",
        name="Elixir of Life",
        item_type=ItemType.MAX_HEALTH_UP,
        value=10,
        price=200,
        description="Permanently raise max health by 10.",
    ),
    ItemDefinition(
        item_id="max_mana_potion",
        name="Elixir of Mind",
        item_type=ItemType.MAX_MANA_UP,
        value=1,
        price=300,
        description="Permanently raise max mana by 1.",
    ),
]


GOBLIN_WARS_ACHIEVEMENTS: list[AchievementDefinition] = [
    AchievementDefinition(
        achievement_id="first_victory",
        name="First Victory",
        description="Win your first battle.",
        condition=AchievementCondition("battles_won", 1),
    ),
    AchievementDefinition(
        achievement_id="card_collector",
        name="Card Collector",
        description="Collect 10 different cards.",
        condition=AchievementCondition("cards_owned", 10),
        achievement_type=AchievementType.COLLECTION,
    ),
    AchievementDefinition(
        achievement_id="boss_slayer",
        name="Boss Slayer",
        description="Defeat a boss.",
        condition=AchievementCondition("boss_defeated", 1),
        achievement_type=AchievementType.CHALLENGE,
    ),
    AchievementDefinition(
        achievement_id="perfect_battle",
        name="Flawless",
        description="Win a battle without losing any health.",
        condition=AchievementCondition("perfect_battle", 1),
        achievement_type=AchievementType.CHALLENGE,
    ),
    AchievementDefinition(
        achievement_id="max_level",
        name="Veteran",
        description="Reach level 10.",
        condition=AchievementCondition("player_level", 10),
    ),
]

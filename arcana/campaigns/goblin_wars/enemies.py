"""
Goblin Wars Enemies - Enemies and their weighted action tables.

Weights are relative within one enemy; the AI draws an action with
probability weight / total_weight.
"""

from ...catalog.definitions import EnemyAction, EnemyDefinition, EnemyType, IntentType
from ...catalog.effect_dsl import EffectType


GOBLIN_WARS_ENEMIES: list[EnemyDefinition] = [
    EnemyDefinition(
        enemy_id="goblin",
        name="Goblin",
        enemy_type=EnemyType.NORMAL,
        health=30,
        attack=5,
        actions=(
            EnemyAction(IntentType.ATTACK, weight=70, value=5),
            EnemyAction(IntentType.DEFEND, weight=30, value=5),
        ),
        description="A sneaky raider from the goblin camp.",
    ),
    EnemyDefinition(
        enemy_id="skeleton",
        name="Skeleton",
        enemy_type=EnemyType.NORMAL,
        health=25,
        attack=7,
        actions=(
            EnemyAction(IntentType.ATTACK, weight=80, value=7),
            EnemyAction(IntentType.DEFEND, weight=20, value=4),
        ),
        description="Restless bones animated by an old curse.",
    ),
    EnemyDefinition(
        enemy_id="spider",
        name="Giant Spider",
        enemy_type=EnemyType.NORMAL,
        health=40,
        attack=6,
        actions=(
            EnemyAction(IntentType.ATTACK, weight=60, value=6),
            EnemyAction(
                IntentType.DEBUFF, weight=40, value=3, effect=EffectType.POISON, duration=3
            ),
        ),
        description="Its bite leaves a lingering poison.",
    ),
    EnemyDefinition(
        enemy_id="goblin_shaman",
        name="Goblin Shaman",
        enemy_type=EnemyType.ELITE,
        health=60,
        attack=8,
        actions=(
            EnemyAction(IntentType.ATTACK, weight=40, value=8),
            EnemyAction(
                IntentType.BUFF, weight=30, value=2, effect=EffectType.STRENGTH, duration=2
            ),
            EnemyAction(
                IntentType.DEBUFF, weight=30, value=0.25, effect=EffectType.WEAKNESS, duration=2
            ),
        ),
        description="Wields crude but dangerous magic.",
    ),
    EnemyDefinition(
        enemy_id="goblin_king",
        name="Goblin King",
        enemy_type=EnemyType.BOSS,
        health=120,
        attack=12,
        actions=(
            EnemyAction(IntentType.ATTACK, weight=50, value=12),
            EnemyAction(IntentType.ATTACK_MULTI, weight=20, value=4, times=3),
            EnemyAction(
                IntentType.BUFF, weight=15, value=3, effect=EffectType.STRENGTH, duration=3
            ),
            EnemyAction(IntentType.DEFEND, weight=15, value=15),
        ),
        description="Leader of the goblin tribes.",
    ),
]

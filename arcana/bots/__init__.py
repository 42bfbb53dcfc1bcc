"""
Bots module - Decision making for both sides of a battle.

Provides:
- EnemyAI: weighted action choice and intent resolution for enemies
- PlayerPolicy: interface for autoplaying the player's side
- RandomPolicy, GreedyPolicy: simple player policies
"""

from .enemy_ai import EnemyAI, pick_weighted_action
from .policy import PlayerPolicy, PolicyDecision, RandomPolicy, GreedyPolicy

__all__ = [
    "EnemyAI",
    "pick_weighted_action",
    "PlayerPolicy",
    "PolicyDecision",
    "RandomPolicy",
    "GreedyPolicy",
]

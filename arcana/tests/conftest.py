"""
Pytest fixtures for Arcana tests.
"""

import random

import pytest

from ..campaigns import create_default_catalog
from ..campaigns.goblin_wars.cards import BASIC_DECK
from ..catalog.catalog import ResourceCatalog
from ..engine_core.combatant import EnemyState, PlayerState
from ..engine_core.deck import DeckEngine
from ..engine_core.effect_engine import EffectEngine
from ..engine_core.presentation import EventQueue, RecordingPresentation
from ..engine_core.state import BattleState
from ..engine_core.turn_engine import TurnEngine
from ..progress.models import Progress
from ..progress.save_manager import SaveManager


def make_battle(
    catalog: ResourceCatalog,
    enemy_id: str = "goblin",
    enemy_health: int = 30,
    player_health: int = 50,
    mana: int = 3,
    player_turn: bool = False,
) -> BattleState:
    """Build a bare battle without going through the turn engine."""
    player = PlayerState(
        name="Hero",
        health=player_health,
        max_health=50,
        mana=mana,
        max_mana=3,
    )
    enemy = EnemyState.from_definition(catalog.get_enemy(enemy_id))
    enemy.health = enemy_health
    enemy.max_health = max(enemy.max_health, enemy_health)
    battle = BattleState.create(1, player, enemy)
    battle.is_player_turn = player_turn
    return battle


@pytest.fixture
def catalog() -> ResourceCatalog:
    """The built-in Goblin Wars catalog."""
    return create_default_catalog()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def save_manager() -> SaveManager:
    """Save manager on the in-memory backend."""
    return SaveManager()


@pytest.fixture
def progress() -> Progress:
    """A fresh game."""
    return Progress.new_game(BASIC_DECK)


@pytest.fixture
def events() -> EventQueue:
    return EventQueue(RecordingPresentation())


@pytest.fixture
def deck_engine(catalog, rng, events) -> DeckEngine:
    return DeckEngine(catalog, rng=rng, events=events)


@pytest.fixture
def effect_engine(deck_engine, events) -> EffectEngine:
    return EffectEngine(deck_engine, events=events)


@pytest.fixture
def battle(catalog) -> BattleState:
    """A bare battle against a 30 health goblin, on the enemy's turn."""
    return make_battle(catalog)


@pytest.fixture
def engine(catalog, progress, save_manager) -> TurnEngine:
    """A turn engine with a recorder attached and no battle yet."""
    return TurnEngine(
        catalog,
        progress,
        save_manager,
        rng=random.Random(1),
        hooks=RecordingPresentation(),
    )


@pytest.fixture
def started_engine(engine) -> TurnEngine:
    """A turn engine with level 1 started."""
    result = engine.start_battle(1)
    assert result.success
    return engine

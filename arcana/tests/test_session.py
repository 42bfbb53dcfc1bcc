"""
Tests for battle sessions and the autoplay loop.
"""

import time

import pytest

from ..bots.policy import GreedyPolicy, RandomPolicy
from ..engine_core.presentation import EventKind
from ..session import BattleLoop, LoopState, SessionManager, SessionState


@pytest.fixture
def manager():
    return SessionManager()


class TestSessionManager:
    """Tests for the session lifecycle."""

    def test_create_session(self, manager, catalog):
        """A new session has an engine and no battle."""
        session = manager.create_session(catalog, seed=7)

        assert session.state == SessionState.CREATED
        assert session.is_active()
        assert session.engine.battle is None
        assert manager.get_session(session.session_id) is session

    def test_touch_follows_battle(self, manager, catalog):
        """Touching a session tracks its battle's progress."""
        session = manager.create_session(catalog, seed=7)
        session.engine.start_battle(1)

        session.touch()

        assert session.state == SessionState.ACTIVE

    def test_recorder_sees_events(self, manager, catalog):
        """The session recorder keeps every engine event."""
        session = manager.create_session(catalog, seed=7)
        session.engine.start_battle(1)

        assert session.recorder.of_kind(EventKind.BATTLE_STARTED)

    def test_same_seed_same_battle(self, manager, catalog):
        """Two sessions with one seed deal the same hand and intent."""
        first = manager.create_session(catalog, seed=21)
        second = manager.create_session(catalog, seed=21)
        first.engine.start_battle(1)
        second.engine.start_battle(1)

        assert first.engine.battle.deck.hand == second.engine.battle.deck.hand
        assert first.engine.battle.enemy.current_intent == second.engine.battle.enemy.current_intent

    def test_end_running_session_is_abandoned(self, manager, catalog):
        """Ending a session mid-battle abandons it."""
        session = manager.create_session(catalog, seed=7)
        session.engine.start_battle(1)

        assert manager.end_session(session.session_id)

        assert session.state == SessionState.ABANDONED
        assert manager.get_session(session.session_id) is None

    def test_end_finished_session(self, manager, catalog):
        """A finished battle ends as game over."""
        session = manager.create_session(catalog, seed=7)
        session.engine.start_battle(1)
        session.engine.battle.is_game_over = True

        manager.end_session(session.session_id)

        assert session.state == SessionState.GAME_OVER

    def test_end_unknown_session(self, manager):
        assert not manager.end_session("missing")

    def test_list_active_sessions(self, manager, catalog):
        first = manager.create_session(catalog)
        second = manager.create_session(catalog)
        second.state = SessionState.GAME_OVER

        assert manager.list_active_sessions() == [first.session_id]
        assert len(manager.list_sessions()) == 2

    def test_cleanup_stale_sessions(self, manager, catalog):
        """Idle sessions are removed."""
        stale = manager.create_session(catalog)
        fresh = manager.create_session(catalog)
        stale.last_active_at = time.time() - 7200

        assert manager.cleanup_stale_sessions(max_age_seconds=3600) == 1

        assert manager.get_session(stale.session_id) is None
        assert manager.get_session(fresh.session_id) is fresh


class TestBattleLoop:
    """Tests for autoplay."""

    def test_no_battle(self, engine):
        """The loop needs a started battle."""
        result = BattleLoop(engine).run_player_turn(GreedyPolicy())

        assert not result.success
        assert result.errors == ["No battle in progress"]

    def test_one_turn(self, started_engine):
        """A turn plays cards, ends, and reports the enemy's reply."""
        loop = BattleLoop(started_engine)

        result = loop.run_player_turn(GreedyPolicy())

        assert result.success
        assert result.turn == 1
        assert result.player_actions
        if not started_engine.battle.is_game_over:
            assert result.enemy_actions
            assert loop.state == LoopState.WAITING_PLAYER
            assert started_engine.battle.turn_count == 3

    def test_greedy_plays_to_the_end(self, started_engine):
        """Autoplay runs until one side falls."""
        loop = BattleLoop(started_engine)

        results = loop.run_to_completion(GreedyPolicy(), max_turns=100)

        assert started_engine.battle.is_game_over
        assert loop.state == LoopState.GAME_OVER
        assert results[-1].victory == started_engine.battle.is_victory

    def test_random_policy_never_breaks_rules(self, started_engine):
        """Random play only ever submits legal actions."""
        results = BattleLoop(started_engine).run_to_completion(RandomPolicy(seed=3), max_turns=100)

        assert all(not r.errors for r in results)

    def test_turn_limit(self, started_engine):
        """Stopping early leaves the loop at the turn limit."""
        loop = BattleLoop(started_engine)
        started_engine.battle.enemy.health = 10_000
        started_engine.battle.enemy.max_health = 10_000
        started_engine.battle.player.health = 10_000
        started_engine.battle.player.max_health = 10_000

        results = loop.run_to_completion(GreedyPolicy(), max_turns=3)

        assert len(results) == 3
        assert loop.state == LoopState.TURN_LIMIT
        assert not started_engine.battle.is_game_over

    def test_finished_battle(self, started_engine):
        """A finished battle is reported as game over."""
        started_engine.battle.is_game_over = True

        result = BattleLoop(started_engine).run_player_turn(GreedyPolicy())

        assert result.loop_state == LoopState.GAME_OVER

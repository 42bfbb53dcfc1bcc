"""
Integration tests - full battles, saves on disk and the command line.
"""

import random

import pytest

from ..bots.policy import GreedyPolicy
from ..campaigns.goblin_wars.cards import BASIC_DECK
from ..cli import main
from ..engine_core.presentation import EventKind, RecordingPresentation
from ..engine_core.turn_engine import TurnEngine
from ..progress.models import Progress
from ..progress.save_manager import SaveManager
from ..session import BattleLoop


class TestFullBattle:
    """Autoplayed battles from start to finish."""

    def test_battle_with_saves_on_disk(self, tmp_path, catalog):
        """A finished battle leaves consistent progress on disk."""
        save_manager = SaveManager.in_directory(tmp_path)
        progress = Progress.new_game(BASIC_DECK)
        recorder = RecordingPresentation()
        engine = TurnEngine(catalog, progress, save_manager, rng=random.Random(8), hooks=recorder)

        engine.start_battle(1)
        BattleLoop(engine).run_to_completion(GreedyPolicy(), max_turns=100)
        battle = engine.battle

        assert battle.is_game_over
        assert recorder.kinds()[-1] == EventKind.GAME_OVER
        assert recorder.kinds().count(EventKind.GAME_OVER) == 1
        if battle.is_victory:
            loaded = SaveManager.in_directory(tmp_path).load_game()
            assert loaded == progress
            assert loaded.stats.total_battles_won == 1
            assert loaded.stats.total_damage_dealt == battle.stats.damage_dealt
            assert 2 in loaded.unlocked_levels

    def test_health_stays_in_bounds(self, catalog):
        """Health and mana never leave their ranges during a battle."""
        engine = TurnEngine(catalog, rng=random.Random(5))
        engine.start_battle(3)
        loop = BattleLoop(engine)

        for _ in range(30):
            loop.run_player_turn(GreedyPolicy())
            battle = engine.battle
            for combatant in (battle.player, battle.enemy):
                assert 0 <= combatant.health <= combatant.max_health
                assert 0 <= combatant.mana <= combatant.max_mana
            assert battle.deck.total == 10
            if battle.is_game_over:
                break

    def test_campaign_progression(self, catalog, save_manager):
        """Winning each level unlocks the next one."""
        progress = Progress.new_game(BASIC_DECK)
        engine = TurnEngine(catalog, progress, save_manager, rng=random.Random(2))

        for level_id in range(1, 6):
            assert level_id in progress.unlocked_levels
            engine.start_battle(level_id)
            engine.battle.enemy.health = 1
            engine.battle.deck.hand[0] = "attack_basic"
            engine.play_card(0)
            assert engine.battle.is_victory

        assert progress.unlocked_levels == [1, 2, 3, 4, 5]
        assert progress.stats.total_battles_won == 5
        assert progress.stats.bosses_defeated == 1
        assert {"first_victory", "boss_slayer", "perfect_battle"} <= set(progress.achievements)
        assert "power_strength" in progress.owned_cards


class TestCLI:
    """Tests for the command line."""

    def test_validate(self, tmp_path, capsys):
        main(["--save-dir", str(tmp_path), "validate"])

        assert "Catalog is valid" in capsys.readouterr().out

    def test_levels(self, tmp_path, capsys):
        """Levels show which are unlocked."""
        main(["--save-dir", str(tmp_path), "levels"])

        out = capsys.readouterr().out
        assert "[ ] 1. Goblin Camp" in out
        assert "[x] 2. Bone Graveyard" in out

    def test_cards(self, tmp_path, capsys):
        main(["--save-dir", str(tmp_path), "cards"])

        assert "attack_basic" in capsys.readouterr().out

    def test_simulate_does_not_save(self, tmp_path, capsys):
        """Simulations leave saved progress alone unless asked."""
        main(["--save-dir", str(tmp_path), "simulate", "1", "--seed", "4"])

        out = capsys.readouterr().out
        assert "Goblin Camp" in out
        assert "Victory" in out or "Defeat" in out
        assert not SaveManager.in_directory(tmp_path).has_save_data()

    def test_simulate_unknown_level(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--save-dir", str(tmp_path), "simulate", "99"])

        assert exc_info.value.code == 1
        assert "Unknown level" in capsys.readouterr().out

    def test_progress_without_save(self, tmp_path, capsys):
        main(["--save-dir", str(tmp_path), "progress"])

        assert "No saved progress" in capsys.readouterr().out

    def test_achievements(self, tmp_path, capsys):
        main(["--save-dir", str(tmp_path), "achievements"])

        out = capsys.readouterr().out
        assert "First Victory" in out
        assert "0/5 (0%)" in out

    def test_reset(self, tmp_path, capsys):
        manager = SaveManager.in_directory(tmp_path)
        manager.save_game(Progress.new_game(BASIC_DECK))

        main(["--save-dir", str(tmp_path), "reset"])

        assert "All data reset" in capsys.readouterr().out
        assert not manager.has_save_data()

    def test_no_command(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 1

"""
Arcana CLI - Command-line interface for the engine.

Usage:
    arcana levels                      List the campaign levels
    arcana cards                       List the cards
    arcana simulate <level>            Autoplay a battle and print the log
    arcana progress                    Show saved progress
    arcana achievements                List achievements
    arcana reset                       Reset all saved data
    arcana validate                    Validate the built-in catalog
"""

import argparse
import copy
import random
import sys

from .config import BattleRules, configure_logging, default_save_dir


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Arcana - Turn-based card battle engine",
        prog="arcana",
    )
    parser.add_argument("--save-dir", help="Directory of the save files (default: ARCANA_SAVE_DIR or ~/.arcana/saves)")
    parser.add_argument("--log-level", default=None, help="Logging level (default: ARCANA_LOG_LEVEL or INFO)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("levels", help="List the campaign levels")
    subparsers.add_parser("cards", help="List the cards")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Autoplay a battle")
    simulate_parser.add_argument("level", type=int, help="Level id")
    simulate_parser.add_argument("--policy", choices=["greedy", "random"], default="greedy", help="Player policy")
    simulate_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    simulate_parser.add_argument("--max-turns", type=int, default=100, help="Player turn limit")
    simulate_parser.add_argument("--save", action="store_true", help="Keep the rewards in the saved progress")

    subparsers.add_parser("progress", help="Show saved progress")
    subparsers.add_parser("achievements", help="List achievements")
    subparsers.add_parser("reset", help="Reset all saved data")
    subparsers.add_parser("validate", help="Validate the built-in catalog")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    commands = {
        "levels": cmd_levels,
        "cards": cmd_cards,
        "simulate": cmd_simulate,
        "progress": cmd_progress,
        "achievements": cmd_achievements,
        "reset": cmd_reset,
        "validate": cmd_validate,
    }
    command = commands.get(args.command)
    if not command:
        parser.print_help()
        sys.exit(1)
    command(args)


def _save_manager(args):
    from .progress import SaveManager
    return SaveManager.in_directory(args.save_dir or default_save_dir())


def _load_progress(save_manager):
    from .progress import Progress
    rules = BattleRules()
    return save_manager.load_game() or Progress.new_game(
        rules.basic_deck,
        max_health=rules.starting_max_health,
        max_mana=rules.starting_max_mana,
    )


def cmd_levels(args):
    """List the campaign levels."""
    from .campaigns import create_default_catalog

    catalog = create_default_catalog()
    progress = _load_progress(_save_manager(args))
    for level in catalog.get_all_levels():
        enemy = catalog.get_enemy(level.enemy_id)
        lock = " " if level.level_id in progress.unlocked_levels else "x"
        print(
            f"[{lock}] {level.level_id}. {level.name} ({level.difficulty.value}) - "
            f"{enemy.name if enemy else level.enemy_id}, "
            f"{level.rewards.gold} gold, {level.rewards.experience} xp"
        )


def cmd_cards(args):
    """List the cards."""
    from .campaigns import create_default_catalog

    catalog = create_default_catalog()
    for card in catalog.get_all_cards():
        print(f"{card.card_id:<16} {card.name:<14} {card.card_type.value:<8} cost {card.cost}  {card.description}")


def cmd_simulate(args):
    """Autoplay a battle and print the turn log."""
    from .bots import GreedyPolicy, RandomPolicy
    from .campaigns import create_default_catalog
    from .engine_core.turn_engine import TurnEngine
    from .session import BattleLoop

    catalog = create_default_catalog()
    save_manager = _save_manager(args)
    progress = _load_progress(save_manager)
    if not args.save:
        progress = copy.deepcopy(progress)

    engine = TurnEngine(
        catalog=catalog,
        progress=progress,
        save_manager=save_manager if args.save else None,
        rng=random.Random(args.seed),
    )
    result = engine.start_battle(args.level)
    if not result.success:
        print(f"Error: {result.error}")
        sys.exit(1)

    policy = GreedyPolicy() if args.policy == "greedy" else RandomPolicy(args.seed)
    battle = engine.battle
    print(f"{catalog.get_level(args.level).name}: Player vs {battle.enemy.name} ({battle.enemy.health} hp)")

    loop = BattleLoop(engine)
    for turn in loop.run_to_completion(policy, max_turns=args.max_turns):
        print(f"\nTurn {turn.turn}")
        for line in turn.player_actions:
            print(f"  > {line}")
        for line in turn.enemy_actions:
            print(f"  < {line}")
        for line in turn.errors:
            print(f"  ! {line}")
        print(f"  Player {battle.player.health}/{battle.player.max_health}, "
              f"{battle.enemy.name} {battle.enemy.health}/{battle.enemy.max_health}")

    if not battle.is_game_over:
        print(f"\nStopped after {args.max_turns} turns")
        sys.exit(2)
    print(f"\n{'Victory' if battle.is_victory else 'Defeat'} after {battle.turn_count} turns")
    print(f"Damage dealt {battle.stats.damage_dealt}, taken {battle.stats.damage_taken}, "
          f"cards played {battle.stats.cards_played}")


def cmd_progress(args):
    """Show saved progress."""
    save_manager = _save_manager(args)
    if not save_manager.has_save_data():
        print("No saved progress")
        return

    progress = _load_progress(save_manager)
    player = progress.player
    print(f"Level {player.level} ({player.experience} xp), {player.gold} gold")
    print(f"Health {player.max_health}, mana {player.max_mana}")
    print(f"Unlocked levels: {', '.join(str(level) for level in progress.unlocked_levels)}")
    print(f"Owned cards: {', '.join(progress.owned_cards)}")
    print(f"Deck: {len(progress.equipped_cards)} cards")
    for key, value in progress.stats.to_dict().items():
        print(f"  {key}: {value}")
    print(f"Last saved: {save_manager.get_save_time()}")


def cmd_achievements(args):
    """List achievements."""
    from .campaigns import create_default_catalog
    from .progress import AchievementEngine

    save_manager = _save_manager(args)
    engine = AchievementEngine(create_default_catalog(), _load_progress(save_manager), save_manager)
    for achievement in engine.list_achievements():
        mark = "*" if achievement["unlocked"] else " "
        print(f"[{mark}] {achievement['name']} - {achievement['description']}")
    counts = engine.get_achievement_counts()
    print(f"\n{counts['unlocked']}/{counts['total']} ({counts['percentage']}%)")


def cmd_reset(args):
    """Reset all saved data."""
    if not _save_manager(args).reset_all_data():
        print("Error: reset failed")
        sys.exit(1)
    print("All data reset")


def cmd_validate(args):
    """Validate the built-in catalog."""
    from .campaigns import create_default_catalog
    from .catalog import validate_catalog

    result = validate_catalog(create_default_catalog(), basic_deck=BattleRules().basic_deck)
    for warning in result.warnings:
        print(f"Warning: {warning}")
    for error in result.errors:
        print(f"Error: {error}")

    if not result.valid:
        sys.exit(1)
    print("Catalog is valid")


if __name__ == "__main__":
    main()

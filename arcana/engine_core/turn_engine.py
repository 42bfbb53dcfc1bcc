"""
Turn Engine - The battle state machine (BattleManager).

The turn engine is the single owner of a battle. It:
1. Builds the battle from a level and the player's progress
2. Cycles player turn <-> enemy turn until one side dies
3. Routes player actions (play card, use item, end turn)
4. Finalizes the battle: stats, rewards, achievements and saving

Design principles:
- Public operations route through apply(), which turns internal faults
  into HANDLER_ERROR results
- The enemy turn runs to completion inside end_turn()
- The game-over transition always happens, even if finalizing fails
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable
import logging
import random

from ..catalog.catalog import ResourceCatalog
from ..catalog.definitions import ItemDefinition, ItemType
from ..catalog.effect_dsl import ATTRIBUTE_EFFECTS, EffectSpec, EffectType, Side
from ..config import BattleRules
from ..progress.achievements import AchievementEngine
from ..progress.models import Progress
from ..progress.save_manager import SaveManager
from ..bots.enemy_ai import EnemyAI
from .action import Action, ActionResult, ActionType, ErrorCode
from .combatant import EnemyState, PlayerState
from .deck import DeckEngine
from .effect_engine import EffectEngine
from .presentation import EventKind, EventQueue, PresentationHooks
from .state import BattlePhase, BattleState

logger = logging.getLogger(__name__)

# Thresholds of the built-in progress achievements
CARD_COLLECTOR_TARGET = 10
MAX_LEVEL_TARGET = 10


@dataclass
class TurnEngine:
    """
    Runs battles for one player's progress.

    Usage:
        engine = TurnEngine(catalog, progress, save_manager, rng=random.Random(1))
        engine.start_battle(1)
        engine.play_card(0)
        engine.end_turn()          # enemy acts, next player turn starts
        engine.battle.is_game_over
    """
    catalog: ResourceCatalog
    progress: Progress | None = None
    save_manager: SaveManager | None = None
    rules: BattleRules = field(default_factory=BattleRules)
    rng: random.Random = field(default_factory=random.Random)
    hooks: PresentationHooks | None = None

    battle: BattleState | None = field(default=None, init=False)

    def __post_init__(self):
        if self.progress is None:
            self.progress = Progress.new_game(
                self.rules.basic_deck,
                max_health=self.rules.starting_max_health,
                max_mana=self.rules.starting_max_mana,
            )
        self.events = EventQueue(self.hooks)
        self.deck_engine = DeckEngine(self.catalog, self.rules, self.rng, self.events)
        self.effect_engine = EffectEngine(self.deck_engine, self.rules, self.events)
        self.enemy_ai = EnemyAI(self.effect_engine, self.rules, self.rng, self.events)
        self.achievements = AchievementEngine(self.catalog, self.progress, self.save_manager, self.events)

    # =========================================================================
    # Action dispatch
    # =========================================================================

    def apply(self, action: Action) -> ActionResult:
        """
        Apply a player action.

        Returns ActionResult with the battle state or an error; internal
        faults come back as HANDLER_ERROR.
        """
        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code=ErrorCode.NO_HANDLER,
            )

        mark = self.events.emitted
        try:
            result = handler(action)
        except Exception as e:
            logger.exception("Action %s failed", action.action_type.value)
            return ActionResult.failure(str(e), error_code=ErrorCode.HANDLER_ERROR)

        if result.success and self.battle:
            self.battle.action_history.append(action)
        result.events = self.events.since(mark)
        return result

    def _get_handler(self, action_type: ActionType) -> Callable[[Action], ActionResult] | None:
        handlers = {
            ActionType.START_BATTLE: lambda a: self._start_battle(a.payload.level_id),
            ActionType.PLAY_CARD: lambda a: self._play_card(a.payload.hand_index),
            ActionType.USE_ITEM: lambda a: self._use_item(a.payload.item_id),
            ActionType.END_TURN: lambda a: self._end_turn(),
        }
        return handlers.get(action_type)

    def _check_player_action(self) -> ActionResult | None:
        """Failure result if the player cannot act right now."""
        if self.battle is None:
            return ActionResult.failure("No battle in progress", error_code=ErrorCode.NO_BATTLE)
        if self.battle.is_game_over:
            return ActionResult.failure("Battle is over", error_code=ErrorCode.BATTLE_OVER)
        if not self.battle.is_player_turn:
            return ActionResult.failure("Not the player's turn", error_code=ErrorCode.NOT_PLAYER_TURN)
        return None

    # =========================================================================
    # Battle lifecycle
    # =========================================================================

    def start_battle(self, level_id: int | None) -> ActionResult:
        """Build the battle for a level and start the player's first turn."""
        return self.apply(Action.start_battle(level_id))

    def _start_battle(self, level_id: int | None) -> ActionResult:
        level = self.catalog.get_level(level_id) if level_id is not None else None
        if not level:
            logger.warning("Unknown level %s", level_id)
            return ActionResult.failure(f"Unknown level: {level_id}", error_code=ErrorCode.UNKNOWN_LEVEL)

        enemy_definition = self.catalog.get_enemy(level.enemy_id)
        if not enemy_definition:
            logger.warning("Level %s names unknown enemy %s", level_id, level.enemy_id)
            return ActionResult.failure(
                f"Unknown enemy: {level.enemy_id}",
                error_code=ErrorCode.UNKNOWN_ENEMY,
            )

        profile = self.progress.player
        player = PlayerState(
            name="Player",
            health=profile.max_health,
            max_health=profile.max_health,
            mana=profile.max_mana,
            max_mana=profile.max_mana,
            level=profile.level,
            experience=profile.experience,
            gold=profile.gold,
        )
        enemy = EnemyState.from_definition(enemy_definition)
        player.reset_for_battle()
        enemy.reset_for_battle()

        self.battle = BattleState.create(level.level_id, player, enemy)
        self.events.drain()
        self.deck_engine.create_deck(self.battle.deck, self.progress.equipped_cards)

        logger.info("Battle %s started: level %s vs %s", self.battle.battle_id, level.level_id, enemy.name)
        self.events.emit(
            EventKind.BATTLE_STARTED,
            f"{level.name}: {enemy.name} appears",
            battle_id=self.battle.battle_id,
            level_id=level.level_id,
            enemy_id=enemy.enemy_id,
        )
        self.enemy_ai.decide_next_action(self.battle)
        self._start_turn(True)
        return ActionResult.success_with_state(self.battle, [f"Battle against {enemy.name} started"])

    def start_turn(self, is_player_turn: bool) -> ActionResult:
        """
        Start a turn for one side.

        Turn-start effects fire first; if the turn owner survives, the
        player draws and refills mana, or the enemy acts and ends its turn.
        """
        if self.battle is None:
            return ActionResult.failure("No battle in progress", error_code=ErrorCode.NO_BATTLE)
        if self.battle.is_game_over:
            return ActionResult.failure("Battle is over", error_code=ErrorCode.BATTLE_OVER)
        try:
            self._start_turn(is_player_turn)
        except Exception as e:
            logger.exception("Turn start failed in battle %s", self.battle.battle_id)
            return ActionResult.failure(str(e), error_code=ErrorCode.HANDLER_ERROR)
        return ActionResult.success_with_state(self.battle, [f"Turn {self.battle.turn_count} started"])

    def _start_turn(self, is_player_turn: bool):
        battle = self.battle
        battle.is_player_turn = is_player_turn
        battle.turn_count += 1
        battle.phase = BattlePhase.PLAYER_TURN_START if is_player_turn else BattlePhase.ENEMY_TURN_START
        logger.info("Turn %d: %s", battle.turn_count, battle.turn_owner.value)
        self.events.emit(
            EventKind.TURN_STARTED,
            "Your turn" if is_player_turn else f"{battle.enemy.name}'s turn",
            turn=battle.turn_count,
            side=battle.turn_owner.value,
        )

        self.effect_engine.process_turn_start_effects(battle)
        if battle.is_game_over:
            self._end_battle(battle.is_victory)
            return

        if is_player_turn:
            self.deck_engine.draw_for_turn(battle.deck)
            battle.player.restore_mana(battle.player.max_mana)
            battle.phase = BattlePhase.PLAYER_ACTIVE
            return

        battle.phase = BattlePhase.ENEMY_ACTIVE
        self.enemy_ai.execute_action(battle)
        if battle.is_game_over:
            self._end_battle(battle.is_victory)
            return
        self._finish_turn()

    def end_turn(self) -> ActionResult:
        """End the player's turn; the enemy turn runs before this returns."""
        return self.apply(Action.end_turn())

    def _end_turn(self) -> ActionResult:
        rejected = self._check_player_action()
        if rejected:
            return rejected
        self._finish_turn()
        return ActionResult.success_with_state(self.battle, ["Turn ended"])

    def _finish_turn(self):
        battle = self.battle
        is_player_turn = battle.is_player_turn
        battle.phase = BattlePhase.PLAYER_TURN_END if is_player_turn else BattlePhase.ENEMY_TURN_END

        self.effect_engine.process_turn_end_effects(battle)
        if is_player_turn:
            self.deck_engine.discard_hand(battle.deck)
        self.events.emit(EventKind.TURN_ENDED, "", turn=battle.turn_count, side=battle.turn_owner.value)

        if battle.is_game_over:
            self._end_battle(battle.is_victory)
            return
        self._start_turn(not is_player_turn)

    # =========================================================================
    # Player actions
    # =========================================================================

    def play_card(self, hand_index: int | None) -> ActionResult:
        """Play a card from the hand; ends the battle if someone died."""
        return self.apply(Action.play_card(hand_index))

    def _play_card(self, hand_index: int | None) -> ActionResult:
        rejected = self._check_player_action()
        if rejected:
            return rejected
        if self.battle.player.has_effect(EffectType.STUN):
            self.events.emit(EventKind.NOTICE, "You are stunned")
            return ActionResult.failure("Player is stunned", error_code=ErrorCode.PLAYER_STUNNED)
        if hand_index is None:
            return ActionResult.failure("No hand index given", error_code=ErrorCode.INVALID_CARD_INDEX)

        result = self.deck_engine.play_card(self.battle, hand_index, self.effect_engine)
        if self.battle.is_game_over:
            self._end_battle(self.battle.is_victory)
        return result

    def use_item(self, item_id: str | None) -> ActionResult:
        """Consume one owned item during the player's turn."""
        return self.apply(Action.use_item(item_id))

    def _use_item(self, item_id: str | None) -> ActionResult:
        rejected = self._check_player_action()
        if rejected:
            return rejected

        item = self.catalog.get_item(item_id) if item_id else None
        if not item:
            logger.warning("Unknown item %s", item_id)
            return ActionResult.failure(f"Unknown item: {item_id}", error_code=ErrorCode.UNKNOWN_ITEM)
        if self.progress.items.get(item.item_id, 0) <= 0:
            return ActionResult.failure(f"No {item.name} left", error_code=ErrorCode.ITEM_NOT_OWNED)
        if item.item_type == ItemType.BUFF and item.effect not in ATTRIBUTE_EFFECTS:
            return ActionResult.failure(
                f"{item.name} names no attribute to raise",
                error_code=ErrorCode.MALFORMED_EFFECT,
            )

        message = self._apply_item(item)
        self.progress.take_item(item.item_id)
        self.events.emit(EventKind.ITEM_USED, message, item_id=item.item_id)
        logger.info("Used item %s: %s", item.item_id, message)
        if self.save_manager:
            self.save_manager.save_game(self.progress)

        if self.battle.is_game_over:
            self._end_battle(self.battle.is_victory)
        return ActionResult.success_with_state(self.battle, [message])

    def _apply_item(self, item: ItemDefinition) -> str:
        player = self.battle.player
        profile = self.progress.player

        if item.item_type == ItemType.HEAL:
            return self.effect_engine.apply_effect(
                self.battle, EffectSpec(EffectType.HEALING, value=item.value), Side.PLAYER,
                Side.PLAYER, item.item_id,
            ).message
        if item.item_type == ItemType.MANA:
            return self.effect_engine.apply_effect(
                self.battle, EffectSpec(EffectType.ENERGY, value=item.value), Side.PLAYER,
                Side.PLAYER, item.item_id,
            ).message
        if item.item_type == ItemType.BUFF:
            return self.effect_engine.apply_effect(
                self.battle,
                EffectSpec(item.effect, value=item.value, duration=item.duration),
                Side.PLAYER,
                Side.PLAYER,
                item.item_id,
            ).message
        if item.item_type == ItemType.MAX_HEALTH_UP:
            player.max_health += item.value
            player.health += item.value
            profile.max_health += item.value
            return f"Max health +{item.value}"

        player.max_mana += item.value
        player.mana += item.value
        profile.max_mana += item.value
        return f"Max mana +{item.value}"

    # =========================================================================
    # Battle end
    # =========================================================================

    def _end_battle(self, victory: bool):
        """
        Freeze the battle and settle the outcome.

        Stats, rewards and achievements only change on victory. The
        GAME_OVER event is emitted even if settling fails.
        """
        battle = self.battle
        if battle.phase == BattlePhase.BATTLE_END:
            return

        try:
            battle.is_game_over = True
            battle.is_victory = victory
            battle.phase = BattlePhase.BATTLE_END
            logger.info(
                "Battle %s ended after %d turns: %s",
                battle.battle_id, battle.turn_count, "victory" if victory else "defeat",
            )
            self.events.emit(EventKind.BATTLE_ENDED, "Victory!" if victory else "Defeat", victory=victory)
            if victory:
                self._settle_victory()
        except Exception:
            logger.exception("Failed to settle battle %s", battle.battle_id)
        finally:
            self.events.emit(
                EventKind.GAME_OVER,
                "Victory" if victory else "Game over",
                delay_ms=self.rules.game_over_delay_ms,
                victory=victory,
            )

    def _settle_victory(self):
        battle = self.battle
        progress = self.progress
        stats = progress.stats

        stats.total_damage_dealt += battle.stats.damage_dealt
        stats.total_damage_taken += battle.stats.damage_taken
        stats.total_healing += battle.stats.healing
        stats.total_cards_played += battle.stats.cards_played
        stats.total_battles_won += 1
        if battle.enemy.is_boss:
            stats.bosses_defeated += 1
        perfect = battle.stats.damage_taken == 0
        if perfect:
            stats.perfect_battles += 1

        rewards = self.grant_rewards(battle.level_id)
        self.events.emit(EventKind.REWARDS_GRANTED, "Rewards", **rewards)

        self.achievements.check_challenge_achievement("first_victory", stats.total_battles_won == 1)
        self.achievements.check_challenge_achievement("perfect_battle", perfect)
        self.achievements.check_challenge_achievement("boss_slayer", battle.enemy.is_boss)
        self.achievements.check_collection_achievement(
            "card_collector", progress.owned_cards, CARD_COLLECTOR_TARGET
        )
        self.achievements.check_achievement_progress("max_level", progress.player.level, MAX_LEVEL_TARGET)
        self.achievements.evaluate_conditions()

        if self.save_manager:
            self.save_manager.save_game(progress)

    def grant_rewards(self, level_id: int) -> dict[str, Any]:
        """Give a level's rewards to the battle player and the saved profile."""
        level = self.catalog.get_level(level_id)
        granted: dict[str, Any] = {"gold": 0, "experience": 0, "levels_gained": 0, "cards": [], "unlocked_level": None}
        if not level:
            return granted

        player = self.battle.player
        profile = self.progress.player
        rewards = level.rewards

        gold = player.gain_gold(rewards.gold)
        profile.gold = player.gold
        self.progress.stats.total_gold_earned += gold

        levels_gained = player.gain_experience(
            rewards.experience,
            per_level=self.rules.experience_per_level,
            health_step=self.rules.level_up_health,
            mana_step=self.rules.level_up_mana,
        )
        profile.level = player.level
        profile.experience = player.experience
        profile.max_health += levels_gained * self.rules.level_up_health
        profile.max_mana += levels_gained * self.rules.level_up_mana
        if levels_gained:
            self.events.emit(EventKind.LEVEL_UP, f"Reached level {player.level}", level=player.level)

        new_cards = self.progress.add_cards(rewards.cards)

        next_level = self.catalog.next_level_id(level_id)
        unlocked = next_level if next_level and self.progress.unlock_level(next_level) else None

        granted.update(
            gold=gold,
            experience=rewards.experience,
            levels_gained=levels_gained,
            cards=new_cards,
            unlocked_level=unlocked,
        )
        return granted

    def get_card_counts(self) -> dict[str, int]:
        if self.battle is None:
            return {"deck": 0, "hand": 0, "discard": 0, "total": 0}
        return self.deck_engine.get_card_counts(self.battle.deck)


# The name the game front end uses for the same component
BattleManager = TurnEngine

"""
Battle Loop - Autoplays the player's side with a policy.

The loop:
1. Generates the legal player actions
2. Asks the policy for a decision
3. Applies it through the TurnEngine
4. Repeats until the policy ends the turn (the enemy turn then runs)
5. Stops when the battle is over or the turn limit is reached

Used by the `simulate` command and by tests; it only calls public
TurnEngine operations.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING
import logging

from ..engine_core.action import ActionType
from ..engine_core.action_generator import legal_actions
from ..engine_core.presentation import EventKind

if TYPE_CHECKING:
    from ..bots.policy import PlayerPolicy
    from ..engine_core.turn_engine import TurnEngine

logger = logging.getLogger(__name__)

# Actions a policy may take in one turn before the loop ends the turn itself
MAX_ACTIONS_PER_TURN = 50


class LoopState(Enum):
    """State of the battle loop."""
    WAITING_PLAYER = "waiting_player"
    RUNNING_PLAYER = "running_player"
    GAME_OVER = "game_over"
    TURN_LIMIT = "turn_limit"


@dataclass
class TurnResult:
    """
    Result of autoplaying one player turn and the enemy reply.
    """
    success: bool
    loop_state: LoopState
    turn: int = 0

    # Player actions taken, as readable lines
    player_actions: list[str] = field(default_factory=list)

    # What the enemy did in reply
    enemy_actions: list[str] = field(default_factory=list)

    errors: list[str] = field(default_factory=list)

    # Game over info
    victory: bool | None = None


class BattleLoop:
    """
    Drives a started battle with a player policy.

    Usage:
        engine.start_battle(1)
        loop = BattleLoop(engine)
        results = loop.run_to_completion(GreedyPolicy(), max_turns=50)
        engine.battle.is_victory
    """

    def __init__(self, engine: TurnEngine):
        self.engine = engine
        self.state = LoopState.WAITING_PLAYER

    def run_player_turn(self, policy: PlayerPolicy) -> TurnResult:
        """Let the policy act until it ends the turn or the battle ends."""
        battle = self.engine.battle
        if battle is None:
            return TurnResult(success=False, loop_state=self.state, errors=["No battle in progress"])
        if battle.is_game_over:
            self.state = LoopState.GAME_OVER
            return TurnResult(success=True, loop_state=self.state, victory=battle.is_victory)

        self.state = LoopState.RUNNING_PLAYER
        result = TurnResult(success=True, loop_state=self.state, turn=battle.turn_count)

        for _ in range(MAX_ACTIONS_PER_TURN):
            legal = legal_actions(self.engine.catalog, battle, self.engine.progress.items)
            if not legal:
                break

            decision = policy.select_action(battle, self.engine.catalog, legal)
            action_result = self.engine.apply(decision.action)
            if not action_result.success:
                result.errors.append(action_result.error or "Action failed")
                logger.warning("Policy %s chose a failing action: %s", policy.get_name(), action_result.error)
                self.engine.end_turn()
                break

            result.player_actions.extend(action_result.state_changes)
            if decision.action.action_type == ActionType.END_TURN:
                result.enemy_actions.extend(
                    event.message for event in action_result.events
                    if event.kind == EventKind.ENEMY_ACTION
                )
                break
        else:
            logger.warning("Turn %d hit the action limit, ending it", battle.turn_count)
            self.engine.end_turn()

        if battle.is_game_over:
            self.state = LoopState.GAME_OVER
            result.victory = battle.is_victory
        else:
            self.state = LoopState.WAITING_PLAYER
        result.loop_state = self.state
        return result

    def run_to_completion(self, policy: PlayerPolicy, max_turns: int = 100) -> list[TurnResult]:
        """Autoplay player turns until the battle ends or max_turns pass."""
        results = []
        for _ in range(max_turns):
            result = self.run_player_turn(policy)
            results.append(result)
            if not result.success or self.state == LoopState.GAME_OVER:
                return results

        battle = self.engine.battle
        if battle is not None and not battle.is_game_over:
            self.state = LoopState.TURN_LIMIT
            logger.info("Battle %s stopped after %d player turns", battle.battle_id, max_turns)
        return results

"""
API Service - Business logic layer between the API and the engine.

The service:
1. Translates API requests to TurnEngine calls
2. Manages battle sessions
3. Owns the player's Progress and its save manager
4. Formats responses as pydantic models

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
import logging

from .schemas import (
    # Requests
    StartBattleRequest,
    PlayCardRequest,
    UseItemRequest,
    SetDeckRequest,
    # Responses
    ActionResponse,
    BattleStateResponse,
    EventsResponse,
    ProgressResponse,
    AchievementsResponse,
    ResetResponse,
    ErrorResponse,
    # Shared
    AchievementInfo,
    ActiveEffectInfo,
    BattleStatsInfo,
    CardInfo,
    CombatantInfo,
    EnemyInfo,
    EventInfo,
    HandCardInfo,
    IntentInfo,
    ItemInfo,
    LevelInfo,
    PileCounts,
    # Enums
    BattleStatus,
    ErrorCode,
)
from ..campaigns import create_default_catalog
from ..catalog.catalog import ResourceCatalog
from ..config import BattleRules
from ..engine_core.action import ActionResult
from ..engine_core.action_generator import ActionGenerator
from ..engine_core.combatant import Combatant
from ..engine_core.presentation import BattleEvent
from ..progress.achievements import AchievementEngine
from ..progress.models import Progress
from ..progress.save_manager import SaveManager
from ..session import BattleSession, SessionManager

logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Start a battle on level 1
        response = service.start_battle(StartBattleRequest(level_id=1, seed=7))

        # Play the first card of the hand
        service.play_card(response.battle.session_id, PlayCardRequest(hand_index=0))
    """
    catalog: ResourceCatalog = field(default_factory=create_default_catalog)
    save_manager: SaveManager = field(default_factory=SaveManager)
    session_manager: SessionManager = field(default_factory=SessionManager)
    rules: BattleRules = field(default_factory=BattleRules)

    _progress: Progress | None = None

    @property
    def progress(self) -> Progress:
        """The saved progress, or a new game if nothing is saved."""
        if self._progress is None:
            self._progress = self.save_manager.load_game() or self._new_game()
        return self._progress

    def _new_game(self) -> Progress:
        return Progress.new_game(
            self.rules.basic_deck,
            max_health=self.rules.starting_max_health,
            max_mana=self.rules.starting_max_mana,
        )

    # =========================================================================
    # Catalog
    # =========================================================================

    def list_cards(self) -> list[CardInfo]:
        return [
            CardInfo(
                card_id=card.card_id,
                name=card.name,
                card_type=card.card_type.value,
                rarity=card.rarity.value,
                cost=card.cost,
                target=card.target.value,
                effect=card.effect.to_dict(),
                description=card.description,
                price=card.price,
            )
            for card in self.catalog.get_all_cards()
        ]

    def list_levels(self) -> list[LevelInfo]:
        unlocked = set(self.progress.unlocked_levels)
        return [
            LevelInfo(
                level_id=level.level_id,
                name=level.name,
                enemy_id=level.enemy_id,
                difficulty=level.difficulty.value,
                reward_gold=level.rewards.gold,
                reward_experience=level.rewards.experience,
                reward_cards=list(level.rewards.cards),
                unlocked=level.level_id in unlocked,
                description=level.description,
            )
            for level in self.catalog.get_all_levels()
        ]

    def list_enemies(self) -> list[EnemyInfo]:
        return [
            EnemyInfo(
                enemy_id=enemy.enemy_id,
                name=enemy.name,
                enemy_type=enemy.enemy_type.value,
                health=enemy.health,
                attack=enemy.attack,
                description=enemy.description,
            )
            for enemy in self.catalog.get_all_enemies()
        ]

    def list_items(self) -> list[ItemInfo]:
        return [
            ItemInfo(
                item_id=item.item_id,
                name=item.name,
                item_type=item.item_type.value,
                value=item.value,
                price=item.price,
                owned=self.progress.items.get(item.item_id, 0),
                description=item.description,
            )
            for item in self.catalog.get_all_items()
        ]

    # =========================================================================
    # Battles
    # =========================================================================

    def start_battle(self, request: StartBattleRequest) -> ActionResponse | ErrorResponse:
        """
        Start a battle in a new session.

        The level must be unlocked; the session is discarded if the
        engine cannot start the battle.
        """
        if self.catalog.get_level(request.level_id) and request.level_id not in self.progress.unlocked_levels:
            return ErrorResponse(
                error=f"Level {request.level_id} is locked",
                error_code=ErrorCode.LEVEL_LOCKED,
            )

        session = self.session_manager.create_session(
            catalog=self.catalog,
            progress=self.progress,
            save_manager=self.save_manager,
            seed=request.seed,
            rules=self.rules,
        )
        result = session.engine.start_battle(request.level_id)
        if not result.success:
            self.session_manager.end_session(session.session_id, reason="failed")
            return self._result_error(result)

        session.touch()
        return self._action_response(session, result)

    def get_battle(self, session_id: str) -> BattleStateResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session or session.engine.battle is None:
            return self._not_found(session_id)
        return self._build_battle_state(session)

    def play_card(self, session_id: str, request: PlayCardRequest) -> ActionResponse | ErrorResponse:
        return self._run_action(session_id, lambda engine: engine.play_card(request.hand_index))

    def end_turn(self, session_id: str) -> ActionResponse | ErrorResponse:
        return self._run_action(session_id, lambda engine: engine.end_turn())

    def use_item(self, session_id: str, request: UseItemRequest) -> ActionResponse | ErrorResponse:
        return self._run_action(session_id, lambda engine: engine.use_item(request.item_id))

    def drain_events(self, session_id: str) -> EventsResponse | ErrorResponse:
        """Hand over and forget the session's queued events."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        events = [self._event_info(e) for e in session.engine.events.drain()]
        return EventsResponse(session_id=session_id, events=events, count=len(events))

    def end_battle(self, session_id: str, reason: str = "completed") -> bool:
        return self.session_manager.end_session(session_id, reason)

    def list_battles(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    def _run_action(self, session_id: str, operation) -> ActionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session or session.engine.battle is None:
            return self._not_found(session_id)

        try:
            result = operation(session.engine)
        except Exception as e:
            logger.exception("Battle action failed in session %s", session_id)
            return ErrorResponse(error=str(e), error_code=ErrorCode.INTERNAL_ERROR)

        session.touch()
        if not result.success:
            return self._result_error(result)
        return self._action_response(session, result)

    # =========================================================================
    # Progress and achievements
    # =========================================================================

    def get_progress(self) -> ProgressResponse:
        progress = self.progress
        return ProgressResponse(
            unlocked_levels=list(progress.unlocked_levels),
            owned_cards=list(progress.owned_cards),
            equipped_cards=list(progress.equipped_cards),
            achievements=list(progress.achievements),
            stats=progress.stats.to_dict(),
            player=progress.player.to_dict(),
            items=dict(progress.items),
            last_saved=self.save_manager.get_save_time(),
        )

    def set_deck(self, request: SetDeckRequest) -> ProgressResponse | ErrorResponse:
        """Equip a deck made only of owned cards."""
        unknown = [c for c in request.card_ids if not self.catalog.get_card(c)]
        if unknown:
            return ErrorResponse(
                error=f"Unknown cards: {', '.join(unknown)}",
                error_code=ErrorCode.UNKNOWN_CARD,
                details={"card_ids": unknown},
            )
        not_owned = [c for c in request.card_ids if c not in self.progress.owned_cards]
        if not_owned:
            return ErrorResponse(
                error=f"Cards not owned: {', '.join(not_owned)}",
                error_code=ErrorCode.CARD_NOT_OWNED,
                details={"card_ids": not_owned},
            )

        self.progress.equipped_cards = list(request.card_ids)
        self.save_manager.save_game(self.progress)
        return self.get_progress()

    def reset_progress(self) -> ResetResponse:
        """Reset all saved data; running battles are abandoned."""
        ended = 0
        for session in self.session_manager.list_sessions():
            if self.session_manager.end_session(session.session_id, reason="reset"):
                ended += 1
        success = self.save_manager.reset_all_data()
        self._progress = self._new_game()
        return ResetResponse(success=success, ended_battles=ended)

    def list_achievements(self) -> AchievementsResponse:
        engine = AchievementEngine(self.catalog, self.progress, self.save_manager)
        counts = engine.get_achievement_counts()
        return AchievementsResponse(
            achievements=[AchievementInfo(**a) for a in engine.list_achievements()],
            unlocked=counts["unlocked"],
            total=counts["total"],
            percentage=counts["percentage"],
        )

    # =========================================================================
    # Conversion helpers
    # =========================================================================

    def _not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Battle {session_id} not found",
            error_code=ErrorCode.BATTLE_NOT_FOUND,
        )

    def _result_error(self, result: ActionResult) -> ErrorResponse:
        try:
            code = ErrorCode(result.error_code)
        except ValueError:
            code = ErrorCode.INTERNAL_ERROR
        return ErrorResponse(error=result.error or "Action failed", error_code=code)

    def _action_response(
        self,
        session: BattleSession,
        result: ActionResult,
    ) -> ActionResponse:
        return ActionResponse(
            success=result.success,
            battle=self._build_battle_state(session),
            changes=list(result.state_changes),
            events=[self._event_info(e) for e in result.events],
        )

    def _event_info(self, event: BattleEvent) -> EventInfo:
        return EventInfo(**event.to_dict())

    def _build_battle_state(self, session: BattleSession) -> BattleStateResponse:
        engine = session.engine
        battle = engine.battle
        playable = set(ActionGenerator(self.catalog).playable_indices(battle))

        hand = []
        for index, card_id in enumerate(battle.deck.hand):
            card = self.catalog.get_card(card_id)
            hand.append(HandCardInfo(
                index=index,
                card_id=card_id,
                name=card.name if card else card_id,
                cost=card.cost if card else 0,
                playable=index in playable and battle.is_player_turn and not battle.is_game_over,
            ))

        intent = battle.enemy.current_intent
        return BattleStateResponse(
            battle_id=battle.battle_id,
            session_id=session.session_id,
            level_id=battle.level_id,
            status=BattleStatus(session.state.value),
            phase=battle.phase.value,
            turn=battle.turn_count,
            is_player_turn=battle.is_player_turn,
            is_game_over=battle.is_game_over,
            is_victory=battle.is_victory,
            player=self._combatant_info(battle.player),
            enemy=self._combatant_info(battle.enemy),
            intent=IntentInfo(**intent.to_dict()) if intent else None,
            hand=hand,
            piles=PileCounts(**battle.deck.counts()),
            stats=BattleStatsInfo(
                damage_dealt=battle.stats.damage_dealt,
                damage_taken=battle.stats.damage_taken,
                cards_played=battle.stats.cards_played,
                healing=battle.stats.healing,
            ),
        )

    def _combatant_info(self, combatant: Combatant) -> CombatantInfo:
        attributes: dict[str, Any] = {
            "strength": combatant.attributes.strength,
            "dexterity": combatant.attributes.dexterity,
            "intelligence": combatant.attributes.intelligence,
            "vitality": combatant.attributes.vitality,
        }
        return CombatantInfo(
            name=combatant.name,
            health=combatant.health,
            max_health=combatant.max_health,
            mana=combatant.mana,
            max_mana=combatant.max_mana,
            shield=combatant.shield_total,
            attributes=attributes,
            effects=[
                ActiveEffectInfo(
                    id=e.effect_id,
                    type=e.effect_type.value,
                    value=e.value,
                    duration=e.duration.to_raw(),
                    permanent=e.is_permanent,
                    target=e.target.value,
                    trigger_timing=e.trigger_timing.value,
                    source=e.source,
                )
                for e in combatant.status_effects
            ],
        )

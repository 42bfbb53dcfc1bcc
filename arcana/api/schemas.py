"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a game client and the engine.
All responses include explicit types for OpenAPI schema generation.

Error Codes:
- BATTLE_NOT_FOUND: Battle session does not exist or has been ended
- LEVEL_LOCKED: The level has not been unlocked yet
- NOT_PLAYER_TURN / BATTLE_OVER: The battle cannot take player input now
- INVALID_CARD_INDEX / INSUFFICIENT_MANA / PLAYER_STUNNED: A card cannot be played
- CARD_NOT_OWNED: A deck names a card the player does not own
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class BattleStatus(str, Enum):
    """Battle session status values."""
    CREATED = "created"
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class ErrorCode(str, Enum):
    """Structured error codes."""
    BATTLE_NOT_FOUND = "BATTLE_NOT_FOUND"
    LEVEL_LOCKED = "LEVEL_LOCKED"
    CARD_NOT_OWNED = "CARD_NOT_OWNED"
    # Engine failures
    NO_BATTLE = "NO_BATTLE"
    BATTLE_OVER = "BATTLE_OVER"
    NOT_PLAYER_TURN = "NOT_PLAYER_TURN"
    INVALID_CARD_INDEX = "INVALID_CARD_INDEX"
    INSUFFICIENT_MANA = "INSUFFICIENT_MANA"
    PLAYER_STUNNED = "PLAYER_STUNNED"
    UNKNOWN_CARD = "UNKNOWN_CARD"
    UNKNOWN_LEVEL = "UNKNOWN_LEVEL"
    UNKNOWN_ENEMY = "UNKNOWN_ENEMY"
    UNKNOWN_ITEM = "UNKNOWN_ITEM"
    ITEM_NOT_OWNED = "ITEM_NOT_OWNED"
    MALFORMED_EFFECT = "MALFORMED_EFFECT"
    NO_HANDLER = "NO_HANDLER"
    HANDLER_ERROR = "HANDLER_ERROR"
    # Generic
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Catalog Models
# =============================================================================

class CardInfo(BaseModel):
    """A catalog card."""
    card_id: str
    name: str
    card_type: str = Field(description="attack, defense, skill, power or curse")
    rarity: str
    cost: int
    target: str = Field(description="Side the effect lands on: player or enemy")
    effect: dict[str, Any] = Field(default_factory=dict, description="Effect descriptor")
    description: str = ""
    price: int = 0

    model_config = {"from_attributes": True}


class LevelInfo(BaseModel):
    """A campaign level and its rewards."""
    level_id: int
    name: str
    enemy_id: str
    difficulty: str
    reward_gold: int = 0
    reward_experience: int = 0
    reward_cards: list[str] = Field(default_factory=list)
    unlocked: bool = False
    description: str = ""


class EnemyInfo(BaseModel):
    """A catalog enemy."""
    enemy_id: str
    name: str
    enemy_type: str = Field(description="normal, elite or boss")
    health: int
    attack: int
    description: str = ""


class ItemInfo(BaseModel):
    """A consumable and how many the player owns."""
    item_id: str
    name: str
    item_type: str
    value: int
    price: int = 0
    owned: int = 0
    description: str = ""


# =============================================================================
# Battle Models
# =============================================================================

class ActiveEffectInfo(BaseModel):
    """An active effect on a combatant."""
    id: str
    type: str
    value: float
    duration: int = Field(description="Turns remaining, -1 when permanent")
    permanent: bool = False
    target: str
    trigger_timing: str
    source: Optional[str] = None


class CombatantInfo(BaseModel):
    """One side of the battle."""
    name: str
    health: int
    max_health: int
    mana: int = 0
    max_mana: int = 0
    shield: int = 0
    attributes: dict[str, int] = Field(default_factory=dict)
    effects: list[ActiveEffectInfo] = Field(default_factory=list)


class IntentInfo(BaseModel):
    """The enemy's declared next action."""
    type: str = Field(description="attack, attack_multi, defend, buff, debuff or stunned")
    value: float = 0
    times: int = 1
    effect: Optional[str] = None
    duration: Optional[int] = None


class HandCardInfo(BaseModel):
    """A card in the player's hand."""
    index: int
    card_id: str
    name: str
    cost: int
    playable: bool = False


class PileCounts(BaseModel):
    """Card counts of the three piles."""
    deck: int = 0
    hand: int = 0
    discard: int = 0
    total: int = 0


class BattleStatsInfo(BaseModel):
    """Counters of the current battle."""
    damage_dealt: int = 0
    damage_taken: int = 0
    cards_played: int = 0
    healing: int = 0


class EventInfo(BaseModel):
    """A presentation event with its pacing hint."""
    kind: str
    message: str = ""
    data: dict[str, Any] = Field(default_factory=dict)
    delay_ms: int = 0


class BattleStateResponse(BaseModel):
    """Full snapshot of a battle."""
    battle_id: str
    session_id: str
    level_id: int
    status: BattleStatus
    phase: str
    turn: int = 0
    is_player_turn: bool = False
    is_game_over: bool = False
    is_victory: bool = False

    player: CombatantInfo
    enemy: CombatantInfo
    intent: Optional[IntentInfo] = None

    hand: list[HandCardInfo] = Field(default_factory=list)
    piles: PileCounts = Field(default_factory=PileCounts)
    stats: BattleStatsInfo = Field(default_factory=BattleStatsInfo)

    api_version: str = "v1"


# =============================================================================
# Request Models
# =============================================================================

class StartBattleRequest(BaseModel):
    """Request to start a battle."""
    level_id: int = Field(..., ge=1, description="Level to fight")
    seed: Optional[int] = Field(None, description="Seed for shuffles and enemy choices")


class PlayCardRequest(BaseModel):
    """Request to play a card."""
    hand_index: int = Field(..., ge=0, description="Position of the card in the hand")


class UseItemRequest(BaseModel):
    """Request to use an item."""
    item_id: str


class SetDeckRequest(BaseModel):
    """Request to set the equipped cards."""
    card_ids: list[str] = Field(..., min_length=1, description="Owned card ids, duplicates allowed")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class ActionResponse(BaseModel):
    """Result of a battle action."""
    success: bool
    battle: Optional[BattleStateResponse] = None
    changes: list[str] = Field(default_factory=list, description="Readable state changes")
    events: list[EventInfo] = Field(default_factory=list, description="Events caused by the action")
    api_version: str = "v1"


class EventsResponse(BaseModel):
    """Queued presentation events, oldest first."""
    session_id: str
    events: list[EventInfo]
    count: int


class BattleListResponse(BaseModel):
    """Response listing active battles."""
    battles: list[str]
    count: int


class EndBattleResponse(BaseModel):
    """Response after ending a battle session."""
    success: bool
    session_id: str


class ProgressResponse(BaseModel):
    """The saved progress record."""
    unlocked_levels: list[int]
    owned_cards: list[str]
    equipped_cards: list[str]
    achievements: list[str]
    stats: dict[str, int]
    player: dict[str, int]
    items: dict[str, int] = Field(default_factory=dict)
    last_saved: Optional[str] = None


class AchievementInfo(BaseModel):
    """An achievement with its unlock status."""
    id: str
    name: str
    description: str
    type: str
    unlocked: bool = False
    unlocked_at: Optional[str] = None


class AchievementsResponse(BaseModel):
    """All achievements with counts."""
    achievements: list[AchievementInfo]
    unlocked: int
    total: int
    percentage: int


class ResetResponse(BaseModel):
    """Response after resetting all data."""
    success: bool
    ended_battles: int = 0


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str

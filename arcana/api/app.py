"""
FastAPI Application - REST API for game clients.

Endpoints:
    GET    /health                          Health check
    GET    /api/v1/catalog/cards            Card catalog
    GET    /api/v1/catalog/levels           Levels with unlock status
    GET    /api/v1/catalog/enemies          Enemy catalog
    GET    /api/v1/catalog/items            Items with owned counts
    POST   /api/v1/battles                  Start a battle
    GET    /api/v1/battles                  List active battles
    GET    /api/v1/battles/{id}             Battle snapshot
    DELETE /api/v1/battles/{id}             End a battle session
    POST   /api/v1/battles/{id}/play        Play a card
    POST   /api/v1/battles/{id}/end-turn    End the turn (the enemy acts)
    POST   /api/v1/battles/{id}/items       Use an item
    GET    /api/v1/battles/{id}/events      Drain presentation events
    GET    /api/v1/progress                 Saved progress
    PUT    /api/v1/progress/deck            Equip a deck
    POST   /api/v1/progress/reset           Reset all data
    GET    /api/v1/achievements             Achievements and counts

The engine resolves every action synchronously. Each response carries
the events it caused with pacing hints (delay_ms) for animation.
"""

from typing import Optional, Union

from ..config import ALLOWED_ORIGINS, ARCANA_ENV, default_save_dir

API_VERSION = "1.0.0"


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates one saving to
            ARCANA_SAVE_DIR if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import APIService
    from .schemas import (
        # Request models
        StartBattleRequest,
        PlayCardRequest,
        UseItemRequest,
        SetDeckRequest,
        # Response models
        ActionResponse,
        BattleStateResponse,
        BattleListResponse,
        EndBattleResponse,
        EventsResponse,
        ProgressResponse,
        AchievementsResponse,
        ResetResponse,
        ErrorResponse,
        HealthResponse,
        # Nested models
        CardInfo,
        LevelInfo,
        EnemyInfo,
        ItemInfo,
        # Enums
        ErrorCode,
    )
    from ..progress.save_manager import SaveManager

    app = FastAPI(
        title="Arcana Battle API",
        description="""
Turn-based card battle engine.

## Battle Flow

1. `POST /api/v1/battles` with a `level_id` starts a battle; the response
   holds the first hand and the enemy's intent.
2. `POST /play` plays a card by hand position.
3. `POST /end-turn` ends the turn. The enemy acts before the response is
   returned and the next player turn has already begun.
4. When `is_game_over` is true, rewards and achievements are saved.

## Error Codes

| Code | Description |
|------|-------------|
| `BATTLE_NOT_FOUND` | Battle session does not exist |
| `LEVEL_LOCKED` | Level not unlocked yet |
| `NOT_PLAYER_TURN` | The enemy is acting |
| `BATTLE_OVER` | The battle has ended |
| `INVALID_CARD_INDEX` | No card at that hand position |
| `INSUFFICIENT_MANA` | Not enough mana for the card |
| `PLAYER_STUNNED` | Stunned players cannot play cards |
        """,
        version=API_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Service instance
    api_service = service or APIService(save_manager=SaveManager.in_directory(default_save_dir()))

    # =========================================================================
    # Error helpers
    # =========================================================================

    status_codes = {
        ErrorCode.BATTLE_NOT_FOUND: 404,
        ErrorCode.NOT_PLAYER_TURN: 409,
        ErrorCode.BATTLE_OVER: 409,
        ErrorCode.LEVEL_LOCKED: 403,
        ErrorCode.HANDLER_ERROR: 500,
        ErrorCode.INTERNAL_ERROR: 500,
    }

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(),
        )

    def to_error(response: ErrorResponse) -> JSONResponse:
        return make_error_response(
            response.error_code,
            response.error,
            status_code=status_codes.get(response.error_code, 400),
            details=response.details,
        )

    # =========================================================================
    # Catalog Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/catalog/cards",
        response_model=list[CardInfo],
        tags=["Catalog"],
        summary="List all cards",
    )
    async def list_cards() -> list[CardInfo]:
        return api_service.list_cards()

    @app.get(
        "/api/v1/catalog/levels",
        response_model=list[LevelInfo],
        tags=["Catalog"],
        summary="List levels with unlock status",
    )
    async def list_levels() -> list[LevelInfo]:
        return api_service.list_levels()

    @app.get(
        "/api/v1/catalog/enemies",
        response_model=list[EnemyInfo],
        tags=["Catalog"],
        summary="List all enemies",
    )
    async def list_enemies() -> list[EnemyInfo]:
        return api_service.list_enemies()

    @app.get(
        "/api/v1/catalog/items",
        response_model=list[ItemInfo],
        tags=["Catalog"],
        summary="List items with owned counts",
    )
    async def list_items() -> list[ItemInfo]:
        return api_service.list_items()

    # =========================================================================
    # Battle Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/battles",
        response_model=ActionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Unknown level"},
            403: {"model": ErrorResponse, "description": "Level locked"},
        },
        tags=["Battles"],
        summary="Start a battle",
    )
    async def start_battle(body: StartBattleRequest) -> Union[ActionResponse, JSONResponse]:
        """
        Start a battle on an unlocked level.

        Pass a `seed` for a reproducible shuffle and enemy behaviour.
        """
        response = api_service.start_battle(body)
        if isinstance(response, ErrorResponse):
            return to_error(response)
        return response

    @app.get(
        "/api/v1/battles",
        response_model=BattleListResponse,
        tags=["Battles"],
        summary="List active battles",
    )
    async def list_battles() -> BattleListResponse:
        battles = api_service.list_battles()
        return BattleListResponse(battles=battles, count=len(battles))

    @app.get(
        "/api/v1/battles/{session_id}",
        response_model=BattleStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Battles"],
        summary="Get a battle snapshot",
    )
    async def get_battle(session_id: str) -> Union[BattleStateResponse, JSONResponse]:
        response = api_service.get_battle(session_id)
        if isinstance(response, ErrorResponse):
            return to_error(response)
        return response

    @app.delete(
        "/api/v1/battles/{session_id}",
        response_model=EndBattleResponse,
        tags=["Battles"],
        summary="End a battle session",
    )
    async def end_battle(session_id: str) -> EndBattleResponse:
        """End a battle session and release it. Unfinished battles count as abandoned."""
        success = api_service.end_battle(session_id)
        return EndBattleResponse(success=success, session_id=session_id)

    @app.post(
        "/api/v1/battles/{session_id}/play",
        response_model=ActionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Card cannot be played"},
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse, "description": "Not the player's turn"},
        },
        tags=["Battles"],
        summary="Play a card",
    )
    async def play_card(session_id: str, body: PlayCardRequest) -> Union[ActionResponse, JSONResponse]:
        response = api_service.play_card(session_id, body)
        if isinstance(response, ErrorResponse):
            return to_error(response)
        return response

    @app.post(
        "/api/v1/battles/{session_id}/end-turn",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Battles"],
        summary="End the player's turn",
    )
    async def end_turn(session_id: str) -> Union[ActionResponse, JSONResponse]:
        """End the turn. The enemy turn runs to completion before this returns."""
        response = api_service.end_turn(session_id)
        if isinstance(response, ErrorResponse):
            return to_error(response)
        return response

    @app.post(
        "/api/v1/battles/{session_id}/items",
        response_model=ActionResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Battles"],
        summary="Use an item",
    )
    async def use_item(session_id: str, body: UseItemRequest) -> Union[ActionResponse, JSONResponse]:
        response = api_service.use_item(session_id, body)
        if isinstance(response, ErrorResponse):
            return to_error(response)
        return response

    @app.get(
        "/api/v1/battles/{session_id}/events",
        response_model=EventsResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Battles"],
        summary="Drain queued presentation events",
    )
    async def drain_events(session_id: str) -> Union[EventsResponse, JSONResponse]:
        response = api_service.drain_events(session_id)
        if isinstance(response, ErrorResponse):
            return to_error(response)
        return response

    # =========================================================================
    # Progress Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/progress",
        response_model=ProgressResponse,
        tags=["Progress"],
        summary="Get saved progress",
    )
    async def get_progress() -> ProgressResponse:
        return api_service.get_progress()

    @app.put(
        "/api/v1/progress/deck",
        response_model=ProgressResponse,
        responses={400: {"model": ErrorResponse, "description": "Unknown or unowned card"}},
        tags=["Progress"],
        summary="Equip a deck",
    )
    async def set_deck(body: SetDeckRequest) -> Union[ProgressResponse, JSONResponse]:
        response = api_service.set_deck(body)
        if isinstance(response, ErrorResponse):
            return to_error(response)
        return response

    @app.post(
        "/api/v1/progress/reset",
        response_model=ResetResponse,
        tags=["Progress"],
        summary="Reset all data",
    )
    async def reset_progress() -> ResetResponse:
        """Delete progress and settings. The player id is kept; running battles end."""
        return api_service.reset_progress()

    @app.get(
        "/api/v1/achievements",
        response_model=AchievementsResponse,
        tags=["Progress"],
        summary="List achievements",
    )
    async def list_achievements() -> AchievementsResponse:
        return api_service.list_achievements()

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="arcana-engine",
            version=API_VERSION,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Arcana Battle API",
            "version": API_VERSION,
            "environment": ARCANA_ENV,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn arcana.api.app:app
app = None
try:
    app = create_app()
except ImportError:
    # FastAPI not installed
    pass

"""
FastAPI Application - REST API for hosted hot potato games.

Endpoints:
    GET    /api/v1/health                        Health check
    GET    /api/v1/clock                         Current host tick
    POST   /api/v1/clock/advance                 Advance a manual clock
    POST   /api/v1/games                         Create game
    GET    /api/v1/games                         List games
    GET    /api/v1/games/{id}                    Get game state
    DELETE /api/v1/games/{id}                    Remove game
    POST   /api/v1/games/{id}/start              Start (caller becomes starter)
    POST   /api/v1/games/{id}/pass               Pass the token (caller must hold it)
    POST   /api/v1/games/{id}/check-deadline     Resolve an expired deadline (anyone)
    POST   /api/v1/games/{id}/end                End the game (starter only)
    GET    /api/v1/games/{id}/events             Event log

The caller identity is the X-Caller-Identity header. This server trusts
it as given; authenticating callers is the deployment's job.

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional
import logging
import os

from .. import __version__

# Environment configuration
HOTPOTATO_ENV = os.getenv("HOTPOTATO_ENV", "development")
HOTPOTATO_DEADLINE_WINDOW = os.getenv("HOTPOTATO_DEADLINE_WINDOW", "10")
HOTPOTATO_BLOCK_TIME = os.getenv("HOTPOTATO_BLOCK_TIME")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

CALLER_HEADER = "X-Caller-Identity"

logger = logging.getLogger(__name__)


def create_service_from_env():
    """Build an APIService from the environment configuration."""
    from ..engine_core import IntervalClock, ManualClock
    from ..session import GameSessionManager
    from .service import APIService

    try:
        deadline_window = int(HOTPOTATO_DEADLINE_WINDOW)
    except ValueError:
        raise ValueError(
            f"HOTPOTATO_DEADLINE_WINDOW must be an integer, got {HOTPOTATO_DEADLINE_WINDOW!r}"
        ) from None
    if deadline_window < 0:
        raise ValueError(f"HOTPOTATO_DEADLINE_WINDOW must be non-negative, got {deadline_window}")

    if HOTPOTATO_BLOCK_TIME:
        try:
            block_time = float(HOTPOTATO_BLOCK_TIME)
        except ValueError:
            raise ValueError(
                f"HOTPOTATO_BLOCK_TIME must be a number of seconds, got {HOTPOTATO_BLOCK_TIME!r}"
            ) from None
        clock = IntervalClock(block_time=block_time)
    else:
        clock = ManualClock()
    manager = GameSessionManager(clock=clock, default_deadline_window=deadline_window)
    return APIService(session_manager=manager)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (built from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Header, Request
        from fastapi.exceptions import RequestValidationError
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import APIError
    from .schemas import (
        # Request models
        CreateGameRequest,
        TransferRequest,
        AdvanceClockRequest,
        # Response models
        GameStateResponse,
        DeadlineCheckResponse,
        EventsResponse,
        GameListResponse,
        RemoveGameResponse,
        ClockResponse,
        ErrorResponse,
        HealthResponse,
        # Enums
        ErrorCode,
    )

    app = FastAPI(
        title="Hot Potato Engine API",
        description="""
Deadline-bound token passing.

## Flow

1. `POST /games` creates an inactive game with a deadline window.
2. `POST /games/{id}/start` hands the token to a first holder.
3. The holder calls `POST /games/{id}/pass` before the deadline tick.
4. Anyone may call `POST /games/{id}/check-deadline`; once the deadline
   has passed the holder forfeits and the game resets.

## Error Codes

| Code | Status | Description |
|------|--------|-------------|
| `GAME_NOT_ACTIVE` | 409 | No game in progress |
| `GAME_ALREADY_ACTIVE` | 409 | Game already started |
| `DEADLINE_PASSED` | 409 | Holder waited too long |
| `NOT_CURRENT_HOLDER` | 403 | Caller does not hold the token |
| `NOT_GAME_STARTER` | 403 | Only the starter may end the game |
| `LEDGER_ERROR` | 409 | Token ledger refused the operation |
| `GAME_NOT_FOUND` | 404 | Game does not exist |
| `MISSING_CALLER` | 401 | No caller identity header |
        """,
        version=__version__,
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

    api_service = service or create_service_from_env()
    app.state.service = api_service

    # =========================================================================
    # Error handlers
    # =========================================================================

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
            ).model_dump(mode="json"),
        )

    @app.exception_handler(APIError)
    async def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
        logger.debug("%s %s -> %s", request.method, request.url.path, exc.error_code.value)
        return make_error_response(exc.error_code, exc.message, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Request validation failed",
            status_code=422,
            details={"errors": [
                {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
                for err in exc.errors()
            ]},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return make_error_response(ErrorCode.INTERNAL_ERROR, "Internal server error", status_code=500)

    Caller =Annotated[Optional[str], Header(alias=CALLER_HEADER, description="Identity issuing the call")]
    error_responses = {
        401: {"model": ErrorResponse, "description": "Missing caller identity"},
        403: {"model": ErrorResponse, "description": "Caller not authorized"},
        404: {"model": ErrorResponse, "description": "Game not found"},
        409: {"model": ErrorResponse, "description": "Game state conflict"},
    }

    # =========================================================================
    # Health & Clock
    # =========================================================================

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["Health"])
    async def health() -> HealthResponse:
        return HealthResponse(
            version=__version__,
            environment=HOTPOTATO_ENV,
            games=len(api_service.session_manager.list_games()),
        )

    @app.get("/api/v1/clock", response_model=ClockResponse, tags=["Clock"], summary="Current host tick")
    async def get_clock() -> ClockResponse:
        return api_service.get_clock()

    @app.post(
        "/api/v1/clock/advance",
        response_model=ClockResponse,
        responses={409: {"model": ErrorResponse}},
        tags=["Clock"],
        summary="Advance a manual host clock",
    )
    async def advance_clock(request: AdvanceClockRequest) -> ClockResponse:
        return api_service.advance_clock(request)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games",
        response_model=GameStateResponse,
        status_code=201,
        tags=["Games"],
        summary="Create a new game",
    )
    async def create_game(request: CreateGameRequest) -> GameStateResponse:
        return api_service.create_game(request)

    @app.get("/api/v1/games", response_model=GameListResponse, tags=["Games"], summary="List games")
    async def list_games() -> GameListResponse:
        return api_service.list_games()

    @app.get(
        "/api/v1/games/{game_id}",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Get game state",
    )
    async def get_game(game_id: str) -> GameStateResponse:
        return api_service.get_game(game_id)

    @app.delete(
        "/api/v1/games/{game_id}",
        response_model=RemoveGameResponse,
        tags=["Games"],
        summary="Remove a game",
    )
    async def remove_game(game_id: str) -> RemoveGameResponse:
        return api_service.remove_game(game_id)

    @app.get(
        "/api/v1/games/{game_id}/events",
        response_model=EventsResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Get the event log",
    )
    async def get_events(game_id: str) -> EventsResponse:
        return api_service.get_events(game_id)

    # =========================================================================
    # Transition Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games/{game_id}/start",
        response_model=GameStateResponse,
        responses=error_responses,
        tags=["Play"],
        summary="Start the game",
    )
    async def start_game(game_id: str, request: TransferRequest, caller: Caller = None) -> GameStateResponse:
        return api_service.start_game(game_id, caller, request)

    @app.post(
        "/api/v1/games/{game_id}/pass",
        response_model=GameStateResponse,
        responses=error_responses,
        tags=["Play"],
        summary="Pass the token",
    )
    async def pass_token(game_id: str, request: TransferRequest, caller: Caller = None) -> GameStateResponse:
        return api_service.pass_token(game_id, caller, request)

    @app.post(
        "/api/v1/games/{game_id}/check-deadline",
        response_model=DeadlineCheckResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Play"],
        summary="Resolve an expired deadline",
    )
    async def check_deadline(game_id: str, caller: Caller = None) -> DeadlineCheckResponse:
        return api_service.check_deadline(game_id, caller)

    @app.post(
        "/api/v1/games/{game_id}/end",
        response_model=GameStateResponse,
        responses=error_responses,
        tags=["Play"],
        summary="End the game (starter only)",
    )
    async def end_game(game_id: str, caller: Caller = None) -> GameStateResponse:
        return api_service.end_game(game_id, caller)

    return app

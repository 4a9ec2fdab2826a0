"""
API Service - Business logic layer between the HTTP app and the engine.

The service:
1. Translates requests to engine calls
2. Serializes operations per game
3. Converts engine failures into APIError with a structured code
4. Formats responses

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from ..engine_core import ActionResult, GameErrorCode, ManualClock
from ..session import GameSession, GameSessionManager
from .schemas import (
    AdvanceClockRequest,
    ClockResponse,
    CreateGameRequest,
    DeadlineCheckResponse,
    ErrorCode,
    EventInfo,
    EventKindName,
    EventsResponse,
    GameListResponse,
    GameStateResponse,
    GameStatus,
    RemoveGameResponse,
    TransferRequest,
)

logger = logging.getLogger(__name__)

# HTTP status for each engine error code
STATUS_BY_CODE: dict[GameErrorCode, int] = {
    GameErrorCode.GAME_NOT_ACTIVE: 409,
    GameErrorCode.GAME_ALREADY_ACTIVE: 409,
    GameErrorCode.DEADLINE_PASSED: 409,
    GameErrorCode.NOT_CURRENT_HOLDER: 403,
    GameErrorCode.NOT_GAME_STARTER: 403,
    GameErrorCode.LEDGER_ERROR: 409,
}


class APIError(Exception):
    """A failure the HTTP layer reports as an ErrorResponse."""

    def __init__(self, error_code: ErrorCode, message: str, status_code: int = 400):
        super().__init__(message)
        self.error_code = error_code
        self.message = message
        self.status_code = status_code

    @classmethod
    def from_result(cls, result: ActionResult) -> APIError:
        return cls(
            ErrorCode(result.error_code.value),
            result.error,
            STATUS_BY_CODE.get(result.error_code, 400),
        )


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()
        game = service.create_game(CreateGameRequest(deadline_window=10))
        service.start_game(game.game_id, "alice", TransferRequest(recipient="bob"))
    """
    session_manager: GameSessionManager = field(default_factory=GameSessionManager)

    # =========================================================================
    # Games
    # =========================================================================

    def create_game(self, request: CreateGameRequest) -> GameStateResponse:
        session = self.session_manager.create_game(
            deadline_window=request.deadline_window,
            token_backed=request.token_backed,
        )
        return self._state_response(session)

    def get_game(self, game_id: str) -> GameStateResponse:
        session = self._get_session(game_id)
        with session.lock:
            return self._state_response(session)

    def list_games(self) -> GameListResponse:
        games = self.session_manager.list_games()
        return GameListResponse(games=games, count=len(games))

    def remove_game(self, game_id: str) -> RemoveGameResponse:
        success = self.session_manager.remove_game(game_id)
        return RemoveGameResponse(success=success, game_id=game_id)

    def get_events(self, game_id: str) -> EventsResponse:
        session = self._get_session(game_id)
        with session.lock:
            events = [
                EventInfo(
                    kind=EventKindName(event.kind.value),
                    tick=event.tick,
                    actor=event.actor,
                    holder=event.holder,
                    token_id=event.token_id,
                )
                for event in session.engine.events
            ]
        return EventsResponse(game_id=game_id, events=events, count=len(events))

    # =========================================================================
    # Transitions
    # =========================================================================

    def start_game(self, game_id: str, caller: str | None, request: TransferRequest) -> GameStateResponse:
        caller = self._require_caller(caller)
        session = self._get_session(game_id)
        with session.lock:
            self._check(session.engine.start(caller, request.recipient))
            return self._state_response(session)

    def pass_token(self, game_id: str, caller: str | None, request: TransferRequest) -> GameStateResponse:
        caller = self._require_caller(caller)
        session = self._get_session(game_id)
        with session.lock:
            self._check(session.engine.pass_token(caller, request.recipient))
            return self._state_response(session)

    def check_deadline(self, game_id: str, caller: str | None = None) -> DeadlineCheckResponse:
        session = self._get_session(game_id)
        with session.lock:
            result = self._check(session.engine.check_deadline(caller))
            return DeadlineCheckResponse(
                game_id=game_id,
                expired=bool(result.value),
                state=self._state_response(session),
            )

    def end_game(self, game_id: str, caller: str | None) -> GameStateResponse:
        caller = self._require_caller(caller)
        session = self._get_session(game_id)
        with session.lock:
            self._check(session.engine.end(caller))
            return self._state_response(session)

    # =========================================================================
    # Clock
    # =========================================================================

    def get_clock(self) -> ClockResponse:
        clock = self.session_manager.clock
        return ClockResponse(tick=clock.now(), manual=isinstance(clock, ManualClock))

    def advance_clock(self, request: AdvanceClockRequest) -> ClockResponse:
        clock = self.session_manager.clock
        if not isinstance(clock, ManualClock):
            raise APIError(
                ErrorCode.VALIDATION_ERROR,
                "The host clock follows wall time and cannot be advanced",
                status_code=409,
            )
        clock.advance(request.ticks)
        logger.debug("clock advanced by %s to %s", request.ticks, clock.now())
        return ClockResponse(tick=clock.now(), manual=True)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _get_session(self, game_id: str) -> GameSession:
        session = self.session_manager.get_game(game_id)
        if session is None:
            raise APIError(ErrorCode.GAME_NOT_FOUND, f"Game {game_id} not found", status_code=404)
        return session

    def _require_caller(self, caller: str | None) -> str:
        if not caller:
            raise APIError(
                ErrorCode.MISSING_CALLER,
                "X-Caller-Identity header is required",
                status_code=401,
            )
        return caller

    def _check(self, result: ActionResult) -> ActionResult:
        if not result.success:
            raise APIError.from_result(result)
        return result

    def _state_response(self, session: GameSession) -> GameStateResponse:
        engine = session.engine
        state = engine.get_state()
        return GameStateResponse(
            game_id=session.game_id,
            status=GameStatus.PLAYING if state.active else GameStatus.WAITING,
            active=state.active,
            holder=state.holder,
            starter=state.starter,
            deadline_window=state.deadline_window,
            last_transfer_tick=state.last_transfer_tick,
            remaining_ticks=engine.get_remaining_ticks(),
            current_tick=engine.clock.now(),
            token_backed=session.token_backed,
            token_id=state.token_id,
        )

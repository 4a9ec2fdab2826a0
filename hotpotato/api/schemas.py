"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between HTTP callers and the
engine.

Error Codes:
- GAME_NOT_ACTIVE / GAME_ALREADY_ACTIVE / DEADLINE_PASSED: state conflicts
- NOT_CURRENT_HOLDER / NOT_GAME_STARTER: caller is not authorized
- LEDGER_ERROR: the token ledger refused the operation
- GAME_NOT_FOUND: game does not exist or was removed
- MISSING_CALLER: no X-Caller-Identity header on a signed operation
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    GAME_NOT_ACTIVE = "GAME_NOT_ACTIVE"
    GAME_ALREADY_ACTIVE = "GAME_ALREADY_ACTIVE"
    NOT_CURRENT_HOLDER = "NOT_CURRENT_HOLDER"
    DEADLINE_PASSED = "DEADLINE_PASSED"
    NOT_GAME_STARTER = "NOT_GAME_STARTER"
    LEDGER_ERROR = "LEDGER_ERROR"
    GAME_NOT_FOUND = "GAME_NOT_FOUND"
    MISSING_CALLER = "MISSING_CALLER"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class GameStatus(str, Enum):
    """Game status values."""
    WAITING = "waiting"
    PLAYING = "playing"


class EventKindName(str, Enum):
    """Event kinds as exposed over HTTP."""
    STARTED = "started"
    PASSED = "passed"
    FORFEITED = "forfeited"
    ENDED = "ended"


# =============================================================================
# Requests
# =============================================================================

class CreateGameRequest(BaseModel):
    """Create a new game."""
    deadline_window: Optional[int] = Field(
        default=None, ge=0, description="Ticks a holder may keep the token (server default if omitted)"
    )
    token_backed: bool = Field(default=False, description="Materialize the token on a ledger")


class TransferRequest(BaseModel):
    """Start a game or pass the token to a recipient."""
    recipient: str = Field(min_length=1, description="Identity receiving the token")


class AdvanceClockRequest(BaseModel):
    """Advance the host clock."""
    ticks: int = Field(default=1, ge=1, description="Number of ticks to advance")


# =============================================================================
# Responses
# =============================================================================

class GameStateResponse(BaseModel):
    """Full state of one game."""
    game_id: str
    status: GameStatus
    active: bool
    holder: Optional[str] = None
    starter: Optional[str] = None
    deadline_window: int
    last_transfer_tick: int
    remaining_ticks: int
    current_tick: int
    token_backed: bool = False
    token_id: Optional[int] = None


class DeadlineCheckResponse(BaseModel):
    """Result of a deadline check."""
    game_id: str
    expired: bool = Field(description="True if this call forfeited the token")
    state: GameStateResponse


class EventInfo(BaseModel):
    """One game event."""
    kind: EventKindName
    tick: int
    actor: Optional[str] = None
    holder: Optional[str] = None
    token_id: Optional[int] = None


class EventsResponse(BaseModel):
    """Event log of a game."""
    game_id: str
    events: list[EventInfo] = Field(default_factory=list)
    count: int = 0


class GameListResponse(BaseModel):
    """IDs of hosted games."""
    games: list[str] = Field(default_factory=list)
    count: int = 0


class RemoveGameResponse(BaseModel):
    """Response when removing a game."""
    success: bool
    game_id: str


class ClockResponse(BaseModel):
    """Current host tick."""
    tick: int
    manual: bool = Field(description="True if the clock only moves when advanced")


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    error_code: ErrorCode
    details: Optional[dict] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "ok"
    version: str
    environment: str
    games: int = 0

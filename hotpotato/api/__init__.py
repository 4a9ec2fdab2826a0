"""
API Module - HTTP interface.

Exposes hosted games via a REST API:
1. Create games
2. Start, pass, check deadlines and end
3. Advance the host clock (manual clocks only)
4. Read state and event logs
"""

from .schemas import (
    # Requests
    CreateGameRequest,
    TransferRequest,
    AdvanceClockRequest,
    # Responses
    GameStateResponse,
    DeadlineCheckResponse,
    EventsResponse,
    GameListResponse,
    RemoveGameResponse,
    ClockResponse,
    ErrorResponse,
    HealthResponse,
    # Shared
    ErrorCode,
    GameStatus,
    EventInfo,
)
from .service import APIService, APIError
from .app import create_app

__all__ = [
    # Requests
    "CreateGameRequest",
    "TransferRequest",
    "AdvanceClockRequest",
    # Responses
    "GameStateResponse",
    "DeadlineCheckResponse",
    "EventsResponse",
    "GameListResponse",
    "RemoveGameResponse",
    "ClockResponse",
    "ErrorResponse",
    "HealthResponse",
    # Shared
    "ErrorCode",
    "GameStatus",
    "EventInfo",
    # Service
    "APIService",
    "APIError",
    "create_app",
]

"""
Engine Core - Deterministic hot potato state machine.

The engine is the runtime that:
1. Owns a GameState
2. Reads the tick from a host Clock
3. Applies actions via the reducer
4. Materializes possession through a PossessionBackend
5. Emits events for committed transitions
"""

from .state import GameState, Identity
from .action import Action, ActionType, ActionPayload, ActionResult, EventKind, GameEvent
from .errors import (
    GameErrorCode,
    GameError,
    GameNotActive,
    GameAlreadyActive,
    NotCurrentHolder,
    DeadlinePassed,
    NotGameStarter,
    LedgerError,
    TokenAlreadyExists,
    TokenNotFound,
    NotTokenOwner,
)
from .ports import Clock, ManualClock, IntervalClock, IdentityProvider, FixedIdentity, CallerContext
from .ledger import TokenLedger, InMemoryTokenLedger
from .possession import PossessionBackend, LogicalPossession, LedgerPossession
from .reducer import Reducer, apply_action
from .engine import GameEngine
from .host import ContractHost

__all__ = [
    "GameState",
    "Identity",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "EventKind",
    "GameEvent",
    "GameErrorCode",
    "GameError",
    "GameNotActive",
    "GameAlreadyActive",
    "NotCurrentHolder",
    "DeadlinePassed",
    "NotGameStarter",
    "LedgerError",
    "TokenAlreadyExists",
    "TokenNotFound",
    "NotTokenOwner",
    "Clock",
    "ManualClock",
    "IntervalClock",
    "IdentityProvider",
    "FixedIdentity",
    "CallerContext",
    "TokenLedger",
    "InMemoryTokenLedger",
    "PossessionBackend",
    "LogicalPossession",
    "LedgerPossession",
    "Reducer",
    "apply_action",
    "GameEngine",
    "ContractHost",
]

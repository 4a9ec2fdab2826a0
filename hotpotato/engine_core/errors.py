"""
Errors - The game's error taxonomy.

Every failure the engine can report has one GameErrorCode. The engine
itself reports failures as ActionResult values; hosts that prefer
exceptions convert them with ActionResult.raise_for_error(), which
raises the matching GameError subclass below.
"""

from __future__ import annotations
from enum import Enum


class GameErrorCode(str, Enum):
    """Structured error codes."""
    GAME_NOT_ACTIVE = "GAME_NOT_ACTIVE"
    GAME_ALREADY_ACTIVE = "GAME_ALREADY_ACTIVE"
    NOT_CURRENT_HOLDER = "NOT_CURRENT_HOLDER"
    DEADLINE_PASSED = "DEADLINE_PASSED"
    NOT_GAME_STARTER = "NOT_GAME_STARTER"
    LEDGER_ERROR = "LEDGER_ERROR"


class GameError(Exception):
    """Base class for every failure reported by the engine."""
    code: GameErrorCode

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    default_message = "Game error"

    @property
    def message(self) -> str:
        return str(self)


class GameNotActive(GameError):
    code = GameErrorCode.GAME_NOT_ACTIVE
    default_message = "Game not active"


class GameAlreadyActive(GameError):
    code = GameErrorCode.GAME_ALREADY_ACTIVE
    default_message = "Game already active"


class NotCurrentHolder(GameError):
    code = GameErrorCode.NOT_CURRENT_HOLDER
    default_message = "Not current holder"


class DeadlinePassed(GameError):
    code = GameErrorCode.DEADLINE_PASSED
    default_message = "Deadline passed"


class NotGameStarter(GameError):
    code = GameErrorCode.NOT_GAME_STARTER
    default_message = "Only starter can end"


class LedgerError(GameError):
    """Any failure raised by a TokenLedger."""
    code = GameErrorCode.LEDGER_ERROR
    default_message = "Token ledger operation failed"


class TokenAlreadyExists(LedgerError):
    default_message = "Token already minted"


class TokenNotFound(LedgerError):
    default_message = "Token does not exist"


class NotTokenOwner(LedgerError):
    default_message = "Account does not own the token"


ERRORS_BY_CODE: dict[GameErrorCode, type[GameError]] = {
    GameErrorCode.GAME_NOT_ACTIVE: GameNotActive,
    GameErrorCode.GAME_ALREADY_ACTIVE: GameAlreadyActive,
    GameErrorCode.NOT_CURRENT_HOLDER: NotCurrentHolder,
    GameErrorCode.DEADLINE_PASSED: DeadlinePassed,
    GameErrorCode.NOT_GAME_STARTER: NotGameStarter,
    GameErrorCode.LEDGER_ERROR: LedgerError,
}


def error_for_code(code: GameErrorCode, message: str | None = None) -> GameError:
    """Build the exception matching an error code."""
    return ERRORS_BY_CODE[code](message)

"""
Action System - Actions, events, and results.

Actions represent the four transitions a game supports:
1. START: begin a game and hand the token to a first holder
2. PASS: the holder hands the token on
3. CHECK_DEADLINE: anyone resolves an expired deadline
4. END: the starter terminates the game

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import GameErrorCode, error_for_code
from .state import GameState, Identity


class ActionType(Enum):
    """Types of actions in the system."""
    START = "start"
    PASS = "pass"
    CHECK_DEADLINE = "check_deadline"
    END = "end"


@dataclass(frozen=True)
class ActionPayload:
    """
    Payload for an action.

    caller is the identity issuing the operation; recipient is only
    used by START and PASS. Validation happens in the reducer.
    """
    caller: Identity | None = None
    recipient: Identity | None = None


@dataclass(frozen=True)
class Action:
    """A complete action to be applied to the game state."""
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def start(cls, initiator: Identity, recipient: Identity) -> Action:
        """Factory for start action."""
        return cls(ActionType.START, ActionPayload(caller=initiator, recipient=recipient))

    @classmethod
    def pass_to(cls, caller: Identity, recipient: Identity) -> Action:
        """Factory for pass action."""
        return cls(ActionType.PASS, ActionPayload(caller=caller, recipient=recipient))

    @classmethod
    def check_deadline(cls, caller: Identity | None = None) -> Action:
        """Factory for deadline check. The caller is informational only."""
        return cls(ActionType.CHECK_DEADLINE, ActionPayload(caller=caller))

    @classmethod
    def end(cls, caller: Identity) -> Action:
        """Factory for end action."""
        return cls(ActionType.END, ActionPayload(caller=caller))


class EventKind(Enum):
    """Kinds of game events."""
    STARTED = "started"
    PASSED = "passed"
    FORFEITED = "forfeited"
    ENDED = "ended"


@dataclass(frozen=True)
class GameEvent:
    """
    Record of a successful transition.

    actor is whoever issued the operation (None for a deadline check
    nobody signed). holder is the holder after START/PASS, or the holder
    that lost the token for FORFEITED/ENDED.
    """
    kind: EventKind
    tick: int
    actor: Identity | None = None
    holder: Identity | None = None
    token_id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "tick": self.tick,
            "actor": self.actor,
            "holder": self.holder,
            "token_id": self.token_id,
        }


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether the action succeeded
    - New state (if succeeded)
    - Operation value (check_deadline's expiry flag)
    - Error message and code (if failed)
    - Events emitted by the transition
    """
    success: bool
    new_state: GameState | None = None
    value: Any = None
    error: str | None = None
    error_code: GameErrorCode | None = None
    events: list[GameEvent] = field(default_factory=list)

    @classmethod
    def failure(cls, error_code: GameErrorCode, error: str | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error or str(error_for_code(error_code)), error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: GameState,
        value: Any = None,
        events: list[GameEvent] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, value=value, events=events or [])

    def raise_for_error(self) -> Any:
        """Raise the GameError matching a failure, or return the value."""
        if not self.success:
            raise error_for_code(self.error_code, self.error)
        return self.value

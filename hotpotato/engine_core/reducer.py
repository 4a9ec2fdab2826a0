"""
Reducer - Applies actions to game state.

The reducer is the single point of state transition.
All state changes must go through apply_action().

Design principles:
- (state, action, now) -> ActionResult; the input state is never touched
- Validates every precondition before any side effect; a missing
  identity raises ValueError before the backend is called
- Calls the possession backend last, right before building the new
  state, so a backend failure commits nothing
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .action import Action, ActionResult, ActionType, EventKind, GameEvent
from .errors import GameErrorCode, LedgerError
from .possession import LogicalPossession, PossessionBackend
from .state import GameState

logger = logging.getLogger(__name__)


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState.
    The possession backend decides what holding the token means.
    """
    possession: PossessionBackend = field(default_factory=LogicalPossession)

    def apply(self, state: GameState, action: Action, now: int) -> ActionResult:
        """
        Apply an action to the game state at tick `now`.

        Returns ActionResult with new state or error.
        """
        handler = self._get_handler(action.action_type)
        result = handler(state, action, now)
        if not result.success:
            logger.debug(
                "rejected %s by %s at tick %s: %s",
                action.action_type.value, action.payload.caller, now, result.error_code.value,
            )
        return result

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.START: self._handle_start,
            ActionType.PASS: self._handle_pass,
            ActionType.CHECK_DEADLINE: self._handle_check_deadline,
            ActionType.END: self._handle_end,
        }
        return handlers[action_type]

    def _handle_start(self, state: GameState, action: Action, now: int) -> ActionResult:
        """Handle start action."""
        if state.active:
            return ActionResult.failure(GameErrorCode.GAME_ALREADY_ACTIVE)

        initiator = action.payload.caller
        recipient = action.payload.recipient
        _require_identity(initiator, "initiator")
        _require_identity(recipient, "recipient")

        token_id = None
        next_sequence = state.next_token_sequence
        if self.possession.uses_tokens:
            token_id = state.next_token_sequence
            next_sequence += 1

        try:
            self.possession.issue(recipient, token_id)
        except LedgerError as e:
            return self._ledger_failure("start", e)

        new_state = state._copy_with(
            holder=recipient,
            last_transfer_tick=now,
            active=True,
            starter=initiator,
            token_id=token_id,
            next_token_sequence=next_sequence,
        )
        event = GameEvent(EventKind.STARTED, tick=now, actor=initiator, holder=recipient, token_id=token_id)
        return ActionResult.success_with_state(new_state, events=[event])

    def _handle_pass(self, state: GameState, action: Action, now: int) -> ActionResult:
        """Handle pass action. Passing to oneself is allowed."""
        caller = action.payload.caller
        recipient = action.payload.recipient

        if not state.active:
            return ActionResult.failure(GameErrorCode.GAME_NOT_ACTIVE)
        if caller != state.holder:
            return ActionResult.failure(GameErrorCode.NOT_CURRENT_HOLDER)
        if now > state.deadline_tick:
            return ActionResult.failure(GameErrorCode.DEADLINE_PASSED)
        _require_identity(recipient, "recipient")

        try:
            self.possession.hand_over(caller, recipient, state.token_id)
        except LedgerError as e:
            return self._ledger_failure("pass", e)

        new_state = state.with_holder(recipient, now)
        event = GameEvent(EventKind.PASSED, tick=now, actor=caller, holder=recipient, token_id=state.token_id)
        return ActionResult.success_with_state(new_state, events=[event])

    def _handle_check_deadline(self, state: GameState, action: Action, now: int) -> ActionResult:
        """
        Handle deadline check.

        Anyone may call it. Value is True only when this call resolved
        an expired deadline.
        """
        if not state.is_expired(now):
            return ActionResult.success_with_state(state, value=False)

        try:
            self.possession.revoke(state.holder, state.token_id)
        except LedgerError as e:
            return self._ledger_failure("check_deadline", e)

        event = GameEvent(
            EventKind.FORFEITED,
            tick=now,
            actor=action.payload.caller,
            holder=state.holder,
            token_id=state.token_id,
        )
        return ActionResult.success_with_state(state.reset(), value=True, events=[event])

    def _handle_end(self, state: GameState, action: Action, now: int) -> ActionResult:
        """Handle end action. Only the starter may end, at any time."""
        caller = action.payload.caller

        if not state.active:
            return ActionResult.failure(GameErrorCode.GAME_NOT_ACTIVE)
        if caller != state.starter:
            return ActionResult.failure(GameErrorCode.NOT_GAME_STARTER)

        try:
            self.possession.revoke(state.holder, state.token_id)
        except LedgerError as e:
            return self._ledger_failure("end", e)

        event = GameEvent(EventKind.ENDED, tick=now, actor=caller, holder=state.holder, token_id=state.token_id)
        return ActionResult.success_with_state(state.reset(), events=[event])

    def _ledger_failure(self, operation: str, error: LedgerError) -> ActionResult:
        logger.warning("ledger failure during %s: %s", operation, error)
        return ActionResult.failure(GameErrorCode.LEDGER_ERROR, str(error))


def _require_identity(identity, role: str) -> None:
    """Reject a missing or blank identity before any side effect runs."""
    if not isinstance(identity, str) or not identity:
        raise ValueError(f"{role} must be a non-empty identity, got {identity!r}")


def apply_action(
    state: GameState,
    action: Action,
    now: int,
    possession: PossessionBackend | None = None,
) -> ActionResult:
    """Convenience function to apply an action."""
    reducer = Reducer(possession=possession or LogicalPossession())
    return reducer.apply(state, action, now)

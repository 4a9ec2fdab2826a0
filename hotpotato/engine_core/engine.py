"""
Game Engine - Owns one game's state and runs its transitions.

The engine is the only holder of its GameState. Each operation reads
the clock once, asks the reducer for a new state, and commits it only
if the reducer succeeded. Events from committed transitions are
appended to the engine's bounded log and handed to subscribers.
"""

from __future__ import annotations
from collections import deque
from typing import Callable
import logging

from .action import Action, ActionResult, GameEvent
from .possession import LogicalPossession, PossessionBackend
from .ports import Clock
from .reducer import Reducer
from .state import GameState, Identity

logger = logging.getLogger(__name__)

EventListener = Callable[[GameEvent], None]

# Events kept per engine; older ones are dropped
DEFAULT_EVENT_LOG_SIZE = 1000


class GameEngine:
    """
    A hot potato game.

    Usage:
        clock = ManualClock()
        engine = GameEngine(deadline_window=10, clock=clock)

        engine.start("alice", "bob")
        engine.pass_token("bob", "carol")

        clock.advance(11)
        engine.check_deadline().value  # True, carol forfeits
    """

    def __init__(
        self,
        deadline_window: int,
        clock: Clock,
        possession: PossessionBackend | None = None,
        game_id: str | None = None,
        event_log_size: int = DEFAULT_EVENT_LOG_SIZE,
    ):
        self._state = GameState.create(deadline_window)
        self.clock = clock
        self.reducer = Reducer(possession=possession or LogicalPossession())
        self.game_id = game_id
        self.events: deque[GameEvent] = deque(maxlen=event_log_size)
        self._listeners: list[EventListener] = []

    @property
    def possession(self) -> PossessionBackend:
        return self.reducer.possession

    @property
    def token_backed(self) -> bool:
        return self.reducer.possession.uses_tokens

    # =========================================================================
    # Transitions
    # =========================================================================

    def start(self, initiator: Identity, recipient: Identity) -> ActionResult:
        """Start a game, handing the token to `recipient`."""
        return self._dispatch(Action.start(initiator, recipient))

    def pass_token(self, caller: Identity, recipient: Identity) -> ActionResult:
        """Hand the token from its holder to `recipient`."""
        return self._dispatch(Action.pass_to(caller, recipient))

    def check_deadline(self, caller: Identity | None = None) -> ActionResult:
        """Resolve an expired deadline. `value` tells whether the game was reset."""
        return self._dispatch(Action.check_deadline(caller))

    def end(self, caller: Identity) -> ActionResult:
        """End the game early. Only the starter may do this."""
        return self._dispatch(Action.end(caller))

    def _dispatch(self, action: Action) -> ActionResult:
        now = self.clock.now()
        result = self.reducer.apply(self._state, action, now)
        if result.success:
            self._state = result.new_state
            for event in result.events:
                self._emit(event)
        return result

    # =========================================================================
    # Events
    # =========================================================================

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        """Register an event listener. Returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: GameEvent):
        self.events.append(event)
        logger.info(
            "game %s: %s at tick %s (actor=%s holder=%s token=%s)",
            self.game_id or "-", event.kind.value, event.tick, event.actor, event.holder, event.token_id,
        )
        for listener in list(self._listeners):
            listener(event)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_state(self) -> GameState:
        return self._state

    def get_holder(self) -> Identity | None:
        return self._state.holder

    def is_active(self) -> bool:
        return self._state.active

    def get_deadline_window(self) -> int:
        return self._state.deadline_window

    def get_last_transfer_tick(self) -> int:
        return self._state.last_transfer_tick

    def get_starter(self) -> Identity | None:
        return self._state.starter

    def get_token_id(self) -> int | None:
        return self._state.token_id

    def get_remaining_ticks(self) -> int:
        return self._state.remaining_ticks(self.clock.now())

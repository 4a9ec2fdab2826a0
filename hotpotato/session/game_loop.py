"""
Game Loop - Drives a hosted game tick by tick with automated players.

Each tick:
1. The holder's policy decides whether to pass
2. The pass is applied at the current tick
3. The clock advances one tick
4. Anyone checks the deadline
5. The loop stops once the token is forfeited or the tick limit is hit
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING
import logging
import random

from ..bots import HolderView, PassPolicy
from ..engine_core import GameEvent, ManualClock

if TYPE_CHECKING:
    from .manager import GameSession

logger = logging.getLogger(__name__)


class LoopState(Enum):
    """State of the game loop."""
    READY = "ready"
    RUNNING = "running"
    FORFEITED = "forfeited"
    TICK_LIMIT = "tick_limit"


@dataclass
class LoopResult:
    """Outcome of a simulated game."""
    loop_state: LoopState
    ticks: int = 0
    passes: int = 0
    forfeited_by: str | None = None
    events: list[GameEvent] = field(default_factory=list)


class GameLoop:
    """
    The simulation driver.

    Usage:
        loop = GameLoop(session, {"alice": LastMomentPolicy(), "bob": RandomPassPolicy()}, seed=7)
        result = loop.run(starter="alice", first_holder="bob", max_ticks=100)
    """

    def __init__(
        self,
        session: GameSession,
        players: dict[str, PassPolicy],
        seed: int | None = None,
    ):
        if not players:
            raise ValueError("at least one player is required")
        clock = session.engine.clock
        if not isinstance(clock, ManualClock):
            raise TypeError("GameLoop needs a ManualClock to advance ticks")
        self.session = session
        self.players = players
        self.clock = clock
        self.rng = random.Random(seed)
        self.loop_state = LoopState.READY

    def run(self, starter: str, first_holder: str, max_ticks: int = 1000) -> LoopResult:
        """Start a game and play it until forfeiture or `max_ticks`."""
        engine = self.session.engine
        result = LoopResult(loop_state=LoopState.RUNNING)
        self.loop_state = LoopState.RUNNING
        unsubscribe = engine.subscribe(result.events.append)
        try:
            self._play(result, starter, first_holder, max_ticks)
        finally:
            unsubscribe()

        self.loop_state = result.loop_state
        logger.info(
            "loop for game %s finished: %s after %s ticks, %s passes",
            self.session.game_id, result.loop_state.value, result.ticks, result.passes,
        )
        return result

    def _play(self, result: LoopResult, starter: str, first_holder: str, max_ticks: int):
        engine = self.session.engine
        with self.session.lock:
            engine.start(starter, first_holder).raise_for_error()

        while result.ticks < max_ticks:
            with self.session.lock:
                holder = engine.get_holder()
                policy = self.players.get(holder)
                if policy is not None:
                    view = HolderView(
                        holder=holder,
                        players=tuple(self.players),
                        tick=self.clock.now(),
                        remaining_ticks=engine.get_remaining_ticks(),
                    )
                    decision = policy.decide(view, self.rng)
                    if decision.passes:
                        engine.pass_token(holder, decision.recipient).raise_for_error()
                        result.passes += 1

                self.clock.advance(1)
                result.ticks += 1

                if engine.check_deadline().raise_for_error():
                    result.loop_state = LoopState.FORFEITED
                    result.forfeited_by = result.events[-1].holder
                    break
        else:
            result.loop_state = LoopState.TICK_LIMIT

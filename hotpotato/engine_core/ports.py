"""
Host Ports - The ambient context a host supplies to the engine.

Clock: the host's block height, a non-decreasing integer.
IdentityProvider: who is issuing the current operation.

Both are pure queries. The engine never advances the clock and never
decides who the caller is.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Callable, Iterator
import time

from .state import Identity


class Clock(ABC):
    """Source of the current tick."""

    @abstractmethod
    def now(self) -> int:
        """Current tick. Never smaller than a previously returned value."""
        pass


class ManualClock(Clock):
    """
    A clock the host advances explicitly.

    Usage:
        clock = ManualClock()
        clock.advance(5)
        clock.now()  # 5
    """

    def __init__(self, start: int = 0):
        if start < 0:
            raise ValueError(f"start tick must be non-negative, got {start}")
        self._tick = start

    def now(self) -> int:
        return self._tick

    def advance(self, ticks: int = 1) -> int:
        """Move the clock forward and return the new tick."""
        if ticks < 0:
            raise ValueError(f"cannot advance by a negative amount: {ticks}")
        self._tick += ticks
        return self._tick

    def set(self, tick: int) -> int:
        """Jump to an absolute tick, which may not be in the past."""
        if tick < self._tick:
            raise ValueError(f"clock cannot move backwards ({self._tick} -> {tick})")
        self._tick = tick
        return self._tick


class IntervalClock(Clock):
    """
    Derives a block height from elapsed time.

    One tick per `block_time` seconds since construction, offset by
    `start`. The time source defaults to time.monotonic so the
    height never decreases.
    """

    def __init__(
        self,
        block_time: float = 6.0,
        start: int = 0,
        time_source: Callable[[], float] = time.monotonic,
    ):
        if block_time <= 0:
            raise ValueError(f"block_time must be positive, got {block_time}")
        self.block_time = block_time
        self.start = start
        self._time_source = time_source
        self._genesis = time_source()
        self._last = start

    def now(self) -> int:
        elapsed = self._time_source() - self._genesis
        tick = self.start + int(elapsed // self.block_time)
        # Clamp in case a custom time source steps backwards
        self._last = max(self._last, tick)
        return self._last


class IdentityProvider(ABC):
    """Source of the caller identity for the current operation."""

    @abstractmethod
    def current(self) -> Identity:
        pass


class FixedIdentity(IdentityProvider):
    """Always reports the same caller."""

    def __init__(self, identity: Identity):
        self.identity = identity

    def current(self) -> Identity:
        return self.identity


class CallerContext(IdentityProvider):
    """
    Caller identity scoped to the running context.

    Usage:
        callers = CallerContext()
        with callers.as_caller("alice"):
            host.start_game("bob")
    """

    def __init__(self, default: Identity | None = None):
        self._caller: ContextVar[Identity | None] = ContextVar("hotpotato_caller", default=default)

    def current(self) -> Identity:
        caller = self._caller.get()
        if caller is None:
            raise LookupError("no caller identity is set for this context")
        return caller

    @contextmanager
    def as_caller(self, identity: Identity) -> Iterator[Identity]:
        token = self._caller.set(identity)
        try:
            yield identity
        finally:
            self._caller.reset(token)

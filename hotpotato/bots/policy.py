"""
Pass Policies - How an automated player handles the token.

A PassPolicy looks at what the holder can see (the other players and
the ticks left) and decides whether to pass this tick, and to whom.
Policies are used by the GameLoop to simulate games.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
import random

from ..engine_core.state import Identity


@dataclass(frozen=True)
class HolderView:
    """What a holder knows when deciding."""
    holder: Identity
    players: tuple[Identity, ...]
    tick: int
    remaining_ticks: int

    @property
    def others(self) -> list[Identity]:
        return [p for p in self.players if p != self.holder]


@dataclass(frozen=True)
class PassDecision:
    """
    A decision made by a policy.

    recipient is None when the holder keeps the token this tick.
    """
    recipient: Identity | None = None
    explanation: str = ""

    @property
    def passes(self) -> bool:
        return self.recipient is not None


class PassPolicy(ABC):
    """Base class for automated players."""
    name: str = "policy"

    @abstractmethod
    def decide(self, view: HolderView, rng: random.Random) -> PassDecision:
        pass

    def choose_recipient(self, view: HolderView, rng: random.Random) -> Identity:
        """Random other player; the holder itself if playing alone."""
        others = view.others
        if not others:
            return view.holder
        return rng.choice(others)


class RandomPassPolicy(PassPolicy):
    """Passes with a fixed probability each tick."""
    name = "random"

    def __init__(self, pass_probability: float = 0.5):
        if not 0.0 <= pass_probability <= 1.0:
            raise ValueError(f"pass_probability must be within [0, 1], got {pass_probability}")
        self.pass_probability = pass_probability

    def decide(self, view: HolderView, rng: random.Random) -> PassDecision:
        if rng.random() < self.pass_probability:
            recipient = self.choose_recipient(view, rng)
            return PassDecision(recipient, f"coin flip at tick {view.tick}")
        return PassDecision(explanation="holding")


class LastMomentPolicy(PassPolicy):
    """Holds until the deadline tick itself, then passes."""
    name = "last_moment"

    def decide(self, view: HolderView, rng: random.Random) -> PassDecision:
        if view.remaining_ticks == 0:
            return PassDecision(self.choose_recipient(view, rng), "deadline tick reached")
        return PassDecision(explanation=f"{view.remaining_ticks} ticks left")


class HoardingPolicy(PassPolicy):
    """Never passes."""
    name = "hoarding"

    def decide(self, view: HolderView, rng: random.Random) -> PassDecision:
        return PassDecision(explanation="never passes")


POLICIES: dict[str, type[PassPolicy]] = {
    RandomPassPolicy.name: RandomPassPolicy,
    LastMomentPolicy.name: LastMomentPolicy,
    HoardingPolicy.name: HoardingPolicy,
}

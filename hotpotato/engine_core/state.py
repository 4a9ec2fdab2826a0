"""
Game State - The single piece of state a hot potato game owns.

Design principles:
- Immutable: every transition returns a new GameState
- Serializable: hosts may persist it as a plain dict
- Small: nothing about a finished game survives a reset except the
  clock bookkeeping and the mint sequence
"""

from __future__ import annotations
from dataclasses import dataclass, replace, asdict
from typing import Any

# Identities are opaque account strings supplied by the host.
Identity = str


@dataclass(frozen=True)
class GameState:
    """
    Complete game state at a point in time.

    Invariants:
    - active is False iff holder is None iff starter is None
    - token_id is only set while a ledger-backed game is active
    - deadline_window never changes after construction
    """
    deadline_window: int
    holder: Identity | None = None
    last_transfer_tick: int = 0
    active: bool = False
    starter: Identity | None = None

    # Ledger-backed possession only
    token_id: int | None = None
    next_token_sequence: int = 0

    def __post_init__(self):
        if isinstance(self.deadline_window, bool) or not isinstance(self.deadline_window, int):
            raise ValueError(f"deadline_window must be an integer, got {self.deadline_window!r}")
        if self.deadline_window < 0:
            raise ValueError(f"deadline_window must be non-negative, got {self.deadline_window}")
        if self.active != (self.holder is not None) or self.active != (self.starter is not None):
            raise ValueError("active, holder and starter must agree")

    @classmethod
    def create(cls, deadline_window: int) -> GameState:
        """Create the initial, inactive state."""
        return cls(deadline_window=deadline_window)

    @property
    def deadline_tick(self) -> int:
        """Last tick at which the current holder may still pass."""
        return self.last_transfer_tick + self.deadline_window

    def is_expired(self, now: int) -> bool:
        """True once `now` is strictly past the deadline of an active game."""
        return self.active and now > self.deadline_tick

    def remaining_ticks(self, now: int) -> int:
        """Ticks left before expiry; never negative, 0 when inactive."""
        if not self.active:
            return 0
        return max(0, self.deadline_tick - now)

    def with_holder(self, holder: Identity, tick: int) -> GameState:
        """Return new state with the token handed to `holder` at `tick`."""
        return self._copy_with(holder=holder, last_transfer_tick=tick)

    def reset(self) -> GameState:
        """Return the inactive state, keeping window, tick and mint sequence."""
        return self._copy_with(holder=None, active=False, starter=None, token_id=None)

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameState:
        return cls(
            deadline_window=data["deadline_window"],
            holder=data.get("holder"),
            last_transfer_tick=data.get("last_transfer_tick", 0),
            active=data.get("active", False),
            starter=data.get("starter"),
            token_id=data.get("token_id"),
            next_token_sequence=data.get("next_token_sequence", 0),
        )

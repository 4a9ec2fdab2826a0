"""
Contract Host - Message-style surface over a GameEngine.

Reads the caller from an IdentityProvider instead of taking it as an
argument, and raises GameError subclasses instead of returning
results, the way a deployed contract call reverts on failure.
Query names follow the block-height vocabulary hosts expose.
"""

from __future__ import annotations

from .engine import GameEngine
from .ports import IdentityProvider
from .state import Identity


class ContractHost:
    """Binds a GameEngine to the identity of whoever is calling."""

    def __init__(self, engine: GameEngine, identity: IdentityProvider):
        self.engine = engine
        self.identity = identity

    def start_game(self, to: Identity) -> None:
        self.engine.start(self.identity.current(), to).raise_for_error()

    def pass_potato(self, to: Identity) -> None:
        self.engine.pass_token(self.identity.current(), to).raise_for_error()

    def check_deadline(self) -> bool:
        # Unsigned checks are allowed; the caller is only recorded on the event
        try:
            caller = self.identity.current()
        except LookupError:
            caller = None
        return self.engine.check_deadline(caller).raise_for_error()

    def end_game(self) -> None:
        self.engine.end(self.identity.current()).raise_for_error()

    def get_holder(self) -> Identity | None:
        return self.engine.get_holder()

    def is_active(self) -> bool:
        return self.engine.is_active()

    def get_deadline_blocks(self) -> int:
        return self.engine.get_deadline_window()

    def get_last_passed_block(self) -> int:
        return self.engine.get_last_transfer_tick()

    def get_game_starter(self) -> Identity | None:
        return self.engine.get_starter()

    def get_remaining_blocks(self) -> int:
        return self.engine.get_remaining_ticks()

"""
Possession Backends - How holding the token is materialized.

LogicalPossession: holding is just the `holder` field (no side effects).
LedgerPossession: holding is owning a minted token on a TokenLedger;
each game mints a fresh token, passes transfer it and forfeiture or a
manual end burns it.

Backend calls happen before the reducer builds the new state, so a
backend failure leaves the game untouched.
"""

from __future__ import annotations
from abc import ABC, abstractmethod

from .ledger import TokenLedger
from .state import Identity


class PossessionBackend(ABC):
    """Materializes possession of the token outside the game state."""

    # True if the backend needs a token id per game
    uses_tokens: bool = False

    @abstractmethod
    def issue(self, holder: Identity, token_id: int | None) -> None:
        """Give a new game's token to its first holder."""
        pass

    @abstractmethod
    def hand_over(self, sender: Identity, recipient: Identity, token_id: int | None) -> None:
        """Move the token between holders."""
        pass

    @abstractmethod
    def revoke(self, holder: Identity, token_id: int | None) -> None:
        """Take the token away when the game resets."""
        pass


class LogicalPossession(PossessionBackend):
    """Plain ownership flag. Nothing outside GameState changes."""

    def issue(self, holder: Identity, token_id: int | None) -> None:
        pass

    def hand_over(self, sender: Identity, recipient: Identity, token_id: int | None) -> None:
        pass

    def revoke(self, holder: Identity, token_id: int | None) -> None:
        pass


class LedgerPossession(PossessionBackend):
    """Possession backed by a mintable, burnable ledger token."""
    uses_tokens = True

    def __init__(self, ledger: TokenLedger):
        self.ledger = ledger

    def issue(self, holder: Identity, token_id: int | None) -> None:
        self.ledger.mint(holder, token_id)

    def hand_over(self, sender: Identity, recipient: Identity, token_id: int | None) -> None:
        self.ledger.transfer(sender, recipient, token_id)

    def revoke(self, holder: Identity, token_id: int | None) -> None:
        self.ledger.burn(holder, token_id)

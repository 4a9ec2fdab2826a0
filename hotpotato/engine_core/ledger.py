"""
Token Ledger - Registry of uniquely identified, transferable tokens.

The ledger is an external collaborator: the engine only relies on the
three operations of TokenLedger and on each failing loudly with a
LedgerError. InMemoryTokenLedger is the reference implementation used
by sessions and tests.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
import logging

from .errors import NotTokenOwner, TokenAlreadyExists, TokenNotFound
from .state import Identity

logger = logging.getLogger(__name__)


class TokenLedger(ABC):
    """Mint, transfer and burn a single-owner token."""

    @abstractmethod
    def mint(self, owner: Identity, token_id: int) -> None:
        pass

    @abstractmethod
    def transfer(self, sender: Identity, recipient: Identity, token_id: int) -> None:
        pass

    @abstractmethod
    def burn(self, owner: Identity, token_id: int) -> None:
        pass


class InMemoryTokenLedger(TokenLedger):
    """
    Dictionary-backed ledger.

    Errors:
    - TokenAlreadyExists: minting an id that is live
    - TokenNotFound: transfer or burn of an id that is not live
    - NotTokenOwner: transfer or burn by an account that does not own it
    """

    def __init__(self):
        self._owners: dict[int, Identity] = {}
        self.minted = 0
        self.burned = 0

    def owner_of(self, token_id: int) -> Identity | None:
        return self._owners.get(token_id)

    def balance_of(self, owner: Identity) -> int:
        return sum(1 for o in self._owners.values() if o == owner)

    def exists(self, token_id: int) -> bool:
        return token_id in self._owners

    @property
    def live_tokens(self) -> dict[int, Identity]:
        return dict(self._owners)

    def mint(self, owner: Identity, token_id: int) -> None:
        if token_id in self._owners:
            raise TokenAlreadyExists(f"Token {token_id} already minted")
        self._owners[token_id] = owner
        self.minted += 1
        logger.debug("minted token %s to %s", token_id, owner)

    def transfer(self, sender: Identity, recipient: Identity, token_id: int) -> None:
        self._check_owner(sender, token_id)
        self._owners[token_id] = recipient
        logger.debug("transferred token %s from %s to %s", token_id, sender, recipient)

    def burn(self, owner: Identity, token_id: int) -> None:
        self._check_owner(owner, token_id)
        del self._owners[token_id]
        self.burned += 1
        logger.debug("burned token %s held by %s", token_id, owner)

    def _check_owner(self, account: Identity, token_id: int) -> None:
        owner = self._owners.get(token_id)
        if owner is None:
            raise TokenNotFound(f"Token {token_id} does not exist")
        if owner != account:
            raise NotTokenOwner(f"{account} does not own token {token_id}")

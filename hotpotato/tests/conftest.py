"""
Pytest fixtures for Hot Potato tests.
"""

import pytest

from ..engine_core import (
    CallerContext,
    ContractHost,
    GameEngine,
    InMemoryTokenLedger,
    LedgerPossession,
    ManualClock,
)
from ..session import GameSessionManager
from ..api.service import APIService


@pytest.fixture
def clock() -> ManualClock:
    """A host clock at tick 0."""
    return ManualClock()


@pytest.fixture
def engine(clock) -> GameEngine:
    """A plain (logical possession) game with a 10-tick window."""
    return GameEngine(deadline_window=10, clock=clock, game_id="test_game")


@pytest.fixture
def ledger() -> InMemoryTokenLedger:
    return InMemoryTokenLedger()


@pytest.fixture
def token_engine(clock, ledger) -> GameEngine:
    """A token-backed game with a 10-tick window."""
    return GameEngine(
        deadline_window=10,
        clock=clock,
        possession=LedgerPossession(ledger),
        game_id="token_game",
    )


@pytest.fixture
def started_engine(engine) -> GameEngine:
    """Alice started at tick 0; Bob holds the token."""
    engine.start("alice", "bob").raise_for_error()
    return engine


@pytest.fixture
def callers() -> CallerContext:
    return CallerContext()


@pytest.fixture
def host(engine, callers) -> ContractHost:
    return ContractHost(engine, callers)


@pytest.fixture
def manager(clock) -> GameSessionManager:
    return GameSessionManager(clock=clock)


@pytest.fixture
def service(manager) -> APIService:
    """A fresh API service on a manual clock."""
    return APIService(session_manager=manager)

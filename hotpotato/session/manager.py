"""
Session Manager - Hosts many independent games on one clock.

LIFECYCLE:
1. Host creates a game (deadline window, plain or token-backed)
2. Callers start, pass, check deadlines and end it
3. A finished game stays inactive and can be started again
4. Host removes the game when it is no longer needed

Sessions are in-memory only. Persisting GameState is left to hosts
(see GameState.to_dict).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging
import threading
import time
import uuid

from ..engine_core import (
    Clock,
    GameEngine,
    InMemoryTokenLedger,
    LedgerPossession,
    LogicalPossession,
    ManualClock,
)

logger = logging.getLogger(__name__)

DEFAULT_DEADLINE_WINDOW = 10


class SessionState(Enum):
    """State of a game session."""
    WAITING = "waiting"  # No game in progress
    PLAYING = "playing"  # Token is being passed
    CLOSED = "closed"  # Removed from the manager


@dataclass
class GameSession:
    """
    One hosted game.

    Contains:
    - The engine (and its ledger when token-backed)
    - A lock serializing operations on the engine
    - Session metadata
    """
    game_id: str
    engine: GameEngine
    created_at: float
    ledger: InMemoryTokenLedger | None = None
    closed: bool = False
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    @property
    def token_backed(self) -> bool:
        return self.ledger is not None

    @property
    def state(self) -> SessionState:
        if self.closed:
            return SessionState.CLOSED
        return SessionState.PLAYING if self.engine.is_active() else SessionState.WAITING

    def is_active(self) -> bool:
        return self.state == SessionState.PLAYING


class GameSessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create games sharing the host clock
    - Track live games
    - Clean up idle games
    """

    def __init__(
        self,
        clock: Clock | None = None,
        default_deadline_window: int = DEFAULT_DEADLINE_WINDOW,
    ):
        if (
            isinstance(default_deadline_window, bool)
            or not isinstance(default_deadline_window, int)
            or default_deadline_window < 0
        ):
            raise ValueError(
                f"default_deadline_window must be a non-negative integer, got {default_deadline_window!r}"
            )
        self.clock = clock or ManualClock()
        self.default_deadline_window = default_deadline_window
        self._sessions: dict[str, GameSession] = {}

    def create_game(
        self,
        deadline_window: int | None = None,
        token_backed: bool = False,
        game_id: str | None = None,
    ) -> GameSession:
        """
        Create a new, inactive game.

        Args:
            deadline_window: Ticks a holder may keep the token (manager default if None)
            token_backed: Materialize the token on an in-memory ledger
            game_id: Explicit ID (random if None)

        Returns:
            New GameSession ready to start
        """
        if deadline_window is None:
            deadline_window = self.default_deadline_window
        game_id = game_id or str(uuid.uuid4())
        if game_id in self._sessions:
            raise ValueError(f"Game {game_id} already exists")

        ledger = InMemoryTokenLedger() if token_backed else None
        possession = LedgerPossession(ledger) if ledger is not None else LogicalPossession()
        engine = GameEngine(
            deadline_window=deadline_window,
            clock=self.clock,
            possession=possession,
            game_id=game_id,
        )

        session = GameSession(
            game_id=game_id,
            engine=engine,
            created_at=time.time(),
            ledger=ledger,
        )
        self._sessions[game_id] = session
        logger.info(
            "created game %s (window=%s token_backed=%s)", game_id, deadline_window, token_backed,
        )
        return session

    def get_game(self, game_id: str) -> GameSession | None:
        """Get a session by ID."""
        return self._sessions.get(game_id)

    def remove_game(self, game_id: str) -> bool:
        """Remove a game. Returns False if it did not exist."""
        session = self._sessions.pop(game_id, None)
        if session is None:
            return False
        session.closed = True
        logger.info("removed game %s", game_id)
        return True

    def list_games(self) -> list[str]:
        """List IDs of all hosted games."""
        return list(self._sessions)

    def list_active_games(self) -> list[str]:
        """List IDs of games with a token in play."""
        return [gid for gid, session in self._sessions.items() if session.is_active()]

    def cleanup_stale_games(self, max_age_seconds: int = 3600) -> list[str]:
        """
        Remove idle games older than max_age.

        Games with a token in play are kept regardless of age.
        """
        current_time = time.time()
        to_remove = [
            gid for gid, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds and not session.is_active()
        ]
        for gid in to_remove:
            self.remove_game(gid)
        return to_remove

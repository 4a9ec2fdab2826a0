"""
Session Module - Hosts hot potato games.

A session is one engine plus the bookkeeping a host needs around it:
- Created with a deadline window and a possession mode
- Shares the manager's clock with every other session
- Serializes operations on its engine

Sessions live in memory only.
"""

from .manager import GameSessionManager, GameSession, SessionState, DEFAULT_DEADLINE_WINDOW
from .game_loop import GameLoop, LoopState, LoopResult

__all__ = [
    "GameSessionManager",
    "GameSession",
    "SessionState",
    "DEFAULT_DEADLINE_WINDOW",
    "GameLoop",
    "LoopState",
    "LoopResult",
]

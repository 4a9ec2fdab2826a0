"""
Hot Potato - Deadline-bound token passing engine.

A deterministic engine for the "hot potato" game: one token, one holder,
and a fixed number of ticks to hand it on before it is forfeited.
The package provides:
- The authorization and deadline state machine
- Pluggable possession backends (logical flag or minted ledger token)
- Session hosting, an HTTP API and a simulation CLI
"""

__version__ = "0.1.0"

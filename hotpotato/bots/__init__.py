"""
Bots - Automated players for simulated games.
"""

from .policy import (
    HolderView,
    PassDecision,
    PassPolicy,
    RandomPassPolicy,
    LastMomentPolicy,
    HoardingPolicy,
    POLICIES,
)

__all__ = [
    "HolderView",
    "PassDecision",
    "PassPolicy",
    "RandomPassPolicy",
    "LastMomentPolicy",
    "HoardingPolicy",
    "POLICIES",
]

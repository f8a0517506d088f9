"""
Storage collaborators and their in-memory implementation.
"""

from .base import (
    RosterAccessor, RoundStateStore, ActionLedger, BallotBox, RoomDirectory, GameStore,
)
from .memory import InMemoryGameStore

__all__ = [
    'RosterAccessor',
    'RoundStateStore',
    'ActionLedger',
    'BallotBox',
    'RoomDirectory',
    'GameStore',
    'InMemoryGameStore',
]

"""Leaderboard storage: a MongoDB variant, an in-memory variant, and the
selector that reports whether MongoDB is currently reachable.
"""

from .memory import MemoryLeaderboardStore
from .mongo import MongoLeaderboardStore
from .selector import StorageSelector

__all__ = [
    'MemoryLeaderboardStore',
    'MongoLeaderboardStore',
    'StorageSelector',
]

"""Leaderboard domain service.

HTTP routes and CLI commands go through `LeaderboardService`, which keeps
the storage decision out of the transport layer.
"""

from .leaderboard import LeaderboardService, get_leaderboard

__all__ = ['LeaderboardService', 'get_leaderboard']

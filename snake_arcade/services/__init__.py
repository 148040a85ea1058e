"""
Clients for the collaborators around the engine.

None of these are required for a session to run: every one has a local or
no-op implementation, and failures are absorbed instead of reaching the tick
loop.
"""

from .obstacle_generator import ObstacleGenerator, HttpObstacleGenerator, StaticObstacleGenerator
from .narrator import Narrator, SilentNarrator, CannedNarrator, HttpNarrator, NARRATOR_EVENTS
from .storage import (
    HighScoreStore,
    MemoryHighScoreStore,
    JsonHighScoreStore,
    Leaderboard,
    LeaderboardEntry,
    JsonLeaderboard,
)

__all__ = [
    'ObstacleGenerator',
    'HttpObstacleGenerator',
    'StaticObstacleGenerator',
    'Narrator',
    'SilentNarrator',
    'CannedNarrator',
    'HttpNarrator',
    'NARRATOR_EVENTS',
    'HighScoreStore',
    'MemoryHighScoreStore',
    'JsonHighScoreStore',
    'Leaderboard',
    'LeaderboardEntry',
    'JsonLeaderboard',
]

"""
Core abstractions for Snake Arcade.

Provides the session lifecycle interface and the timers that drive ticks.
"""

from .game_interface import GameInterface, GameMetadata
from .scheduler import TickScheduler, ClockScheduler, ManualScheduler

__all__ = [
    'GameInterface',
    'GameMetadata',
    'TickScheduler',
    'ClockScheduler',
    'ManualScheduler',
]

"""
Snake game module for Snake Arcade.

The session factory lives in .factory and is imported from there directly,
since it depends on the configuration loader.
"""

from .engine import (
    GRID_SIZE,
    Direction,
    Point,
    FoodPlacementError,
    in_bounds,
    advance,
    is_colliding,
    place_food,
)
from .modes import GameMode, DifficultyLevel, GameStatus
from .rival import AIPersonality, next_rival_move, classify_personality
from .speed import calculate_game_speed, calculate_level
from .game import SnakeSession, SessionState
from .config import SnakeConfig

__all__ = [
    'GRID_SIZE',
    'Direction',
    'Point',
    'FoodPlacementError',
    'in_bounds',
    'advance',
    'is_colliding',
    'place_food',
    'GameMode',
    'DifficultyLevel',
    'GameStatus',
    'AIPersonality',
    'next_rival_move',
    'classify_personality',
    'calculate_game_speed',
    'calculate_level',
    'SnakeSession',
    'SessionState',
    'SnakeConfig',
]

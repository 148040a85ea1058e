"""
Game speed configuration.

All speed values are milliseconds per game tick; lower is faster.
"""
import math
from dataclasses import dataclass
from typing import Dict

from .modes import DifficultyLevel, GameMode


@dataclass(frozen=True)
class SpeedConfig:
    """Tick interval profile for one difficulty."""
    base_speed: int       # Interval at level 1
    min_speed: int        # Fastest it can get
    max_speed: int        # Slowest it can be
    speed_increment: int  # Interval reduction per level


DIFFICULTY_SPEED_MAP: Dict[DifficultyLevel, SpeedConfig] = {
    DifficultyLevel.EASY: SpeedConfig(base_speed=200, min_speed=150, max_speed=250, speed_increment=5),
    DifficultyLevel.MEDIUM: SpeedConfig(base_speed=140, min_speed=90, max_speed=180, speed_increment=7),
    DifficultyLevel.HARD: SpeedConfig(base_speed=90, min_speed=50, max_speed=120, speed_increment=10),
    DifficultyLevel.HARDCORE: SpeedConfig(base_speed=60, min_speed=30, max_speed=80, speed_increment=5),
}

MODE_SPEED_MODIFIERS: Dict[GameMode, float] = {
    GameMode.CLASSIC: 1.0,
    GameMode.AI_OBSTACLES: 1.1,   # Slightly slower (more obstacles)
    GameMode.AI_RIVAL: 1.15,      # Slower (competing with AI)
    GameMode.ENDLESS: 0.95,
    GameMode.SPEED_RUN: 0.8,
    GameMode.SURVIVAL: 1.2,       # Slower (obstacles spawn)
    GameMode.TIME_ATTACK: 1.0,
}

DEFAULT_DIFFICULTY = DifficultyLevel.EASY

LEVEL_SCORE_THRESHOLDS = [0, 50, 100, 200, 350, 500, 700, 1000]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_game_speed(difficulty: DifficultyLevel, mode: GameMode, level: int = 1) -> int:
    """
    Calculate the tick interval for a difficulty, mode and level.

    The level-adjusted interval is clamped to the difficulty's bounds first,
    then scaled by the mode modifier.

    Args:
        difficulty: Speed profile
        mode: Active game mode
        level: Current level (1-based)

    Returns:
        Interval in whole milliseconds
    """
    config = DIFFICULTY_SPEED_MAP[DifficultyLevel.parse(difficulty)]
    modifier = MODE_SPEED_MODIFIERS.get(GameMode.parse(mode), 1.0)

    level_adjusted = config.base_speed - (level - 1) * config.speed_increment
    clamped = max(config.min_speed, min(config.max_speed, level_adjusted))

    return _round_half_up(clamped * modifier)


def calculate_level(score: int) -> int:
    """Level is the highest 1-based index whose threshold the score reaches."""
    for i in range(len(LEVEL_SCORE_THRESHOLDS) - 1, -1, -1):
        if score >= LEVEL_SCORE_THRESHOLDS[i]:
            return i + 1
    return 1


def get_speed_description(speed: int) -> str:
    """Human-readable label for a tick interval."""
    if speed >= 200:
        return "SLOW"
    if speed >= 140:
        return "MODERATE"
    if speed >= 90:
        return "FAST"
    if speed >= 50:
        return "VERY FAST"
    return "EXTREME"

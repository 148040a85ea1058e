"""
Game modes, difficulty levels and session status values.
"""
from enum import Enum
from typing import Union


class _NamedEnum(Enum):
    """Enum whose members can be looked up by case-insensitive name."""

    @classmethod
    def parse(cls, value: Union[str, "_NamedEnum"]):
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper().replace("-", "_").replace(" ", "_")
        try:
            return cls[key]
        except KeyError:
            valid = ", ".join(m.name for m in cls)
            raise ValueError(f"Unknown {cls.__name__} '{value}'. Valid: {valid}") from None


class GameMode(_NamedEnum):
    """Rule variants selectable for a session."""
    CLASSIC = "CLASSIC"
    AI_OBSTACLES = "AI_OBSTACLES"
    AI_RIVAL = "AI_RIVAL"
    SPEED_RUN = "SPEED_RUN"
    SURVIVAL = "SURVIVAL"
    TIME_ATTACK = "TIME_ATTACK"
    ENDLESS = "ENDLESS"


class DifficultyLevel(_NamedEnum):
    """Speed profiles."""
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"
    HARDCORE = "HARDCORE"


class GameStatus(_NamedEnum):
    """Session lifecycle states."""
    IDLE = "IDLE"
    PLAYING = "PLAYING"
    PAUSED = "PAUSED"
    GAME_OVER = "GAME_OVER"

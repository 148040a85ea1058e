"""
Snake game configuration.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List, Tuple


@dataclass
class SnakeConfig:
    """Rule constants for a Snake session."""

    # Grid
    grid_size: int = 20
    initial_snake: List[Tuple[int, int]] = field(
        default_factory=lambda: [(10, 10), (10, 11), (10, 12)]
    )

    # Scoring
    points_per_food: int = 10
    speed_run_points_per_food: int = 20

    # Mode rules
    speed_run_step: int = 50       # SPEED_RUN: points per extra speed level
    survival_step: int = 30        # SURVIVAL: points per new obstacle
    time_attack_seconds: int = 60

    # Rival
    rival_spawn: List[Tuple[int, int]] = field(
        default_factory=lambda: [(15, 15), (15, 16), (15, 17)]
    )
    rival_move_every: int = 3      # Rival moves on every Nth tick
    rival_mistake_rate: float = 0.05
    rival_top_choices: int = 2

    # Obstacles
    max_generated_obstacles: int = 30
    obstacle_timeout: float = 3.0  # Seconds to wait for the generator service

    def get_rival_config(self) -> Dict[str, Any]:
        """Get rival tuning dictionary."""
        return {
            "move_every": self.rival_move_every,
            "mistake_rate": self.rival_mistake_rate,
            "top_choices": self.rival_top_choices,
            "spawn": [list(p) for p in self.rival_spawn],
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "grid_size": self.grid_size,
            "initial_snake": [list(p) for p in self.initial_snake],
            "points_per_food": self.points_per_food,
            "speed_run_points_per_food": self.speed_run_points_per_food,
            "speed_run_step": self.speed_run_step,
            "survival_step": self.survival_step,
            "time_attack_seconds": self.time_attack_seconds,
            "max_generated_obstacles": self.max_generated_obstacles,
            "obstacle_timeout": self.obstacle_timeout,
            "rival": self.get_rival_config(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SnakeConfig":
        """Create config from dictionary."""
        defaults = cls()
        rival = data.get("rival", {}) or {}
        return cls(
            grid_size=data.get("grid_size", defaults.grid_size),
            initial_snake=[tuple(p) for p in data.get("initial_snake", defaults.initial_snake)],
            points_per_food=data.get("points_per_food", defaults.points_per_food),
            speed_run_points_per_food=data.get(
                "speed_run_points_per_food", defaults.speed_run_points_per_food
            ),
            speed_run_step=data.get("speed_run_step", defaults.speed_run_step),
            survival_step=data.get("survival_step", defaults.survival_step),
            time_attack_seconds=data.get("time_attack_seconds", defaults.time_attack_seconds),
            rival_spawn=[tuple(p) for p in rival.get("spawn", defaults.rival_spawn)],
            rival_move_every=rival.get("move_every", defaults.rival_move_every),
            rival_mistake_rate=rival.get("mistake_rate", defaults.rival_mistake_rate),
            rival_top_choices=rival.get("top_choices", defaults.rival_top_choices),
            max_generated_obstacles=data.get(
                "max_generated_obstacles", defaults.max_generated_obstacles
            ),
            obstacle_timeout=data.get("obstacle_timeout", defaults.obstacle_timeout),
        )

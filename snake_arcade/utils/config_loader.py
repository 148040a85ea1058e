"""
Configuration Loader - Load and validate configuration from YAML.

Looks for config.yaml in the working directory, then the project root.
Sections:
- game: mode, difficulty and random seed of new sessions
- snake: rule constants (see games.snake.config.SnakeConfig)
- services: URLs of the optional obstacle generator and narrator
- storage: where the high score and leaderboard are kept
"""
import yaml
from pathlib import Path
from typing import Optional, Any
from dataclasses import dataclass, field, asdict

from ..games.snake.config import SnakeConfig
from ..games.snake.modes import DifficultyLevel, GameMode


@dataclass
class GameConfig:
    """Session selection."""
    mode: str = "CLASSIC"
    difficulty: str = "EASY"
    seed: Optional[int] = None

    def __post_init__(self):
        # Fail early on typos rather than at session start
        self.mode = GameMode.parse(self.mode).value
        self.difficulty = DifficultyLevel.parse(self.difficulty).value


@dataclass
class ServicesConfig:
    """External collaborators. Empty URLs mean local fallbacks."""
    obstacle_generator_url: Optional[str] = None
    narrator_url: Optional[str] = None
    timeout: float = 3.0


@dataclass
class StorageConfig:
    """Score persistence paths. An empty high score path keeps it in memory."""
    high_score_path: Optional[str] = "data/highscore.json"
    leaderboard_path: Optional[str] = "data/leaderboard.json"


@dataclass
class Config:
    """Complete application configuration."""
    game: GameConfig = field(default_factory=GameConfig)
    snake: SnakeConfig = field(default_factory=SnakeConfig)
    services: ServicesConfig = field(default_factory=ServicesConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)


def _dict_to_dataclass(data: dict, cls: type) -> Any:
    """Convert a dictionary to a dataclass instance."""
    if not data:
        return cls()

    # Get the fields that the dataclass expects
    field_names = {f.name for f in cls.__dataclass_fields__.values()}

    # Filter to only include valid fields
    filtered_data = {k: v for k, v in data.items() if k in field_names}

    return cls(**filtered_data)


def config_from_dict(data: Optional[dict]) -> Config:
    """Build a Config from parsed YAML data."""
    config = Config()
    if not data:
        return config

    if 'game' in data:
        config.game = _dict_to_dataclass(data['game'], GameConfig)

    if 'snake' in data:
        config.snake = SnakeConfig.from_dict(data['snake'] or {})

    if 'services' in data:
        config.services = _dict_to_dataclass(data['services'], ServicesConfig)

    if 'storage' in data:
        config.storage = _dict_to_dataclass(data['storage'], StorageConfig)

    return config


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to config file (defaults to project root config.yaml)

    Returns:
        Config object with all settings
    """
    # Find config file
    if config_path is None:
        possible_paths = [
            Path("config.yaml"),
            Path(__file__).parent.parent.parent / "config.yaml",
        ]

        for path in possible_paths:
            if path.exists():
                config_path = str(path)
                break

    if config_path is None or not Path(config_path).exists():
        print("[Config] No config file found, using defaults")
        return Config()

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f)

    return config_from_dict(data)


def save_config(config: Config, config_path: str):
    """
    Save configuration to a YAML file.

    Args:
        config: Config object to save
        config_path: Path to save to
    """
    data = {
        'game': asdict(config.game),
        'snake': config.snake.to_dict(),
        'services': asdict(config.services),
        'storage': asdict(config.storage),
    }

    with open(config_path, 'w') as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)

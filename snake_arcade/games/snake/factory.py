"""
Session factory - builds a SnakeSession and its collaborators from Config.
"""
import random
from typing import Callable, Optional

from ...core.scheduler import TickScheduler
from ...services.narrator import CannedNarrator, HttpNarrator, Narrator
from ...services.obstacle_generator import HttpObstacleGenerator
from ...services.storage import HighScoreStore, JsonHighScoreStore, MemoryHighScoreStore
from ...utils.config_loader import Config
from .engine import Point
from .game import SnakeSession
from .obstacles import ObstacleLoader


def create_narrator(config: Config, rng: Optional[random.Random] = None) -> Narrator:
    """HTTP narrator when a URL is configured, canned lines otherwise."""
    url = config.services.narrator_url
    if url:
        return HttpNarrator(url, timeout=config.services.timeout)
    return CannedNarrator(rng=rng)


def create_high_score_store(config: Config) -> HighScoreStore:
    path = config.storage.high_score_path
    if path:
        return JsonHighScoreStore(path)
    return MemoryHighScoreStore()


def create_obstacle_loader(config: Config, rng: Optional[random.Random] = None) -> ObstacleLoader:
    url = config.services.obstacle_generator_url
    generator = HttpObstacleGenerator(url, timeout=config.services.timeout) if url else None
    return ObstacleLoader(
        generator=generator,
        grid_size=config.snake.grid_size,
        spawn_cells=[Point(x, y) for x, y in config.snake.initial_snake],
        timeout=config.snake.obstacle_timeout,
        rng=rng,
        max_count=config.snake.max_generated_obstacles,
    )


def create_session(
    config: Config,
    scheduler: Optional[TickScheduler] = None,
    countdown_scheduler: Optional[TickScheduler] = None,
    rng: Optional[random.Random] = None,
    high_score_store: Optional[HighScoreStore] = None,
    narrator: Optional[Narrator] = None,
    on_game_over: Optional[Callable[[int], None]] = None,
) -> SnakeSession:
    """
    Build a session wired to the services named in the configuration.

    Explicit arguments take precedence over what the configuration implies.
    """
    rng = rng or random.Random(config.game.seed)
    return SnakeSession(
        config=config.snake,
        mode=config.game.mode,
        difficulty=config.game.difficulty,
        scheduler=scheduler,
        countdown_scheduler=countdown_scheduler,
        rng=rng,
        high_score_store=high_score_store or create_high_score_store(config),
        narrator=narrator or create_narrator(config),
        obstacle_loader=create_obstacle_loader(config, rng),
        on_game_over=on_game_over,
    )

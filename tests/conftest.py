"""
Pytest configuration and fixtures for Snake Arcade tests.

Sessions built here never touch the wall clock: both timers are
ManualSchedulers and every random source is seeded.
"""

import random
import sys
from pathlib import Path

import pytest


# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))
sys.path.insert(0, str(PROJECT_ROOT / "scripts"))


@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture
def schedulers():
    """A (tick, countdown) pair of manually fired schedulers."""
    from snake_arcade.core.scheduler import ManualScheduler

    return ManualScheduler(), ManualScheduler()


@pytest.fixture
def make_session(schedulers, rng):
    """
    Factory for sessions wired to manual timers.

    Keyword arguments are passed through to SnakeSession.
    """
    from snake_arcade.games.snake.game import SnakeSession

    created = []

    def _make(**kwargs):
        tick, countdown = schedulers
        kwargs.setdefault("scheduler", tick)
        kwargs.setdefault("countdown_scheduler", countdown)
        kwargs.setdefault("rng", rng)
        session = SnakeSession(**kwargs)
        created.append(session)
        return session

    yield _make

    for session in created:
        session.shutdown()


@pytest.fixture
def temp_data_dir(tmp_path):
    """Temporary directory for high score and leaderboard files."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def temp_config_file(tmp_path):
    """Write a small config.yaml and return its path."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "game:\n"
        "  mode: ai_rival\n"
        "  difficulty: Medium\n"
        "  seed: 42\n"
        "snake:\n"
        "  grid_size: 15\n"
        "  initial_snake: [[7, 7], [7, 8], [7, 9]]\n"
        "  rival:\n"
        "    move_every: 2\n"
        "services:\n"
        "  timeout: 1.5\n"
        "storage:\n"
        f"  high_score_path: {tmp_path / 'hs.json'}\n"
        "  leaderboard_path: null\n"
    )
    return config_path

"""
Autopilot - steers the player snake with the rival heuristic.

Used for headless simulations: the player is driven by the same scored move
selection the rival uses, treating the rival's body as an obstacle.
"""
import random
from typing import Any, Dict, Optional

from ...core.scheduler import ManualScheduler
from .engine import Direction
from .game import SnakeSession
from .modes import GameStatus
from .rival import AIPersonality, next_rival_move


def choose_player_move(
    session: SnakeSession,
    rng: Optional[random.Random] = None,
    personality: AIPersonality = AIPersonality.BALANCED,
) -> Direction:
    """Pick the player's next direction from the current session state."""
    s = session.state
    blocked = set(s.obstacles) | set(s.rival_snake or [])
    return next_rival_move(
        s.snake[0],
        s.food,
        blocked,
        s.snake,
        session.config.grid_size,
        personality,
        s.rival_snake,
        rng=rng,
        mistake_rate=0.0,
    )


def play_headless(
    session: SnakeSession,
    rng: Optional[random.Random] = None,
    max_ticks: int = 5000,
) -> Dict[str, Any]:
    """
    Play one round to completion without real time passing.

    The session must use ManualScheduler timers. The TIME_ATTACK countdown
    is fired whenever the accumulated tick intervals pass one second.

    Returns:
        Summary with score, level, ticks and the reason the round ended
    """
    if not isinstance(session.scheduler, ManualScheduler):
        raise ValueError("play_headless requires a ManualScheduler tick timer")

    countdown = session.countdown_scheduler
    rng = rng or random.Random()

    session.start(wait=True)

    elapsed_ms = 0
    while session.status is GameStatus.PLAYING and session.state.tick_count < max_ticks:
        session.set_direction(choose_player_move(session, rng))
        elapsed_ms += session.tick_interval
        session.scheduler.fire()

        while elapsed_ms >= 1000:
            elapsed_ms -= 1000
            if isinstance(countdown, ManualScheduler):
                countdown.fire()

    s = session.state
    return {
        "mode": s.mode.value,
        "difficulty": s.difficulty.value,
        "score": s.score,
        "level": s.level,
        "ticks": s.tick_count,
        "rival_score": s.rival_score,
        "obstacles": len(s.obstacles),
        "reason": s.game_over_reason or "max_ticks",
    }

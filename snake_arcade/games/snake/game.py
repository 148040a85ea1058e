"""
Snake Session - the tick-driven game state machine.

A SnakeSession is the single writer of its SessionState. Hosts drive it with
start / set_direction / pause / resume and either call tick() themselves or
let an armed TickScheduler call it.

Status flow:
    IDLE -> PLAYING <-> PAUSED
    PLAYING -> GAME_OVER (start() again to play another round)
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set, Tuple, Union
import random

from ...core.game_interface import GameInterface, GameMetadata
from ...core.scheduler import ClockScheduler, TickScheduler
from ...services.narrator import Narrator, SilentNarrator
from ...services.storage import HighScoreStore, MemoryHighScoreStore
from .config import SnakeConfig
from .engine import (
    INITIAL_DIRECTION,
    Direction,
    Point,
    advance,
    collision_reason,
    next_head,
    place_food,
)
from .modes import DifficultyLevel, GameMode, GameStatus
from .obstacles import ObstacleLoader, ObstacleRequest, skill_level_for
from .rival import AIPersonality, classify_personality, next_rival_move
from .speed import DEFAULT_DIFFICULTY, calculate_game_speed, calculate_level


COUNTDOWN_INTERVAL_MS = 1000


@dataclass
class SessionState:
    """Everything that describes a session at one instant."""
    mode: GameMode = GameMode.CLASSIC
    difficulty: DifficultyLevel = DEFAULT_DIFFICULTY
    snake: List[Point] = field(default_factory=list)
    food: Optional[Point] = None
    direction: Direction = INITIAL_DIRECTION
    obstacles: Set[Point] = field(default_factory=set)
    score: int = 0
    high_score: int = 0
    level: int = 1
    status: GameStatus = GameStatus.IDLE
    rival_snake: Optional[List[Point]] = None
    rival_score: int = 0
    time_remaining: Optional[int] = None
    tick_count: int = 0
    game_over_reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for rendering or serialization."""
        return {
            "mode": self.mode.value,
            "difficulty": self.difficulty.value,
            "snake": [p.to_dict() for p in self.snake],
            "food": self.food.to_dict() if self.food else None,
            "direction": self.direction.name,
            "obstacles": [p.to_dict() for p in sorted(self.obstacles, key=lambda p: (p.y, p.x))],
            "score": self.score,
            "high_score": self.high_score,
            "level": self.level,
            "status": self.status.value,
            "rival_snake": [p.to_dict() for p in self.rival_snake] if self.rival_snake else None,
            "rival_score": self.rival_score,
            "time_remaining": self.time_remaining,
            "tick": self.tick_count,
            "game_over_reason": self.game_over_reason,
        }


class SnakeSession(GameInterface):
    """
    One player's snake game across any number of rounds.

    Mode rules:
    - AI_OBSTACLES: obstacle map fetched from the generator on start
    - AI_RIVAL: a heuristic rival snake moves every few ticks
    - SPEED_RUN: double points, one extra speed level per 50 points
    - SURVIVAL: a new obstacle appears every 30 points
    - TIME_ATTACK: the round ends when a 60 second countdown runs out
    - CLASSIC / ENDLESS: no extra rules
    """

    def __init__(
        self,
        config: Optional[SnakeConfig] = None,
        mode: Union[GameMode, str] = GameMode.CLASSIC,
        difficulty: Union[DifficultyLevel, str] = DEFAULT_DIFFICULTY,
        scheduler: Optional[TickScheduler] = None,
        countdown_scheduler: Optional[TickScheduler] = None,
        rng: Optional[random.Random] = None,
        high_score_store: Optional[HighScoreStore] = None,
        narrator: Optional[Narrator] = None,
        obstacle_loader: Optional[ObstacleLoader] = None,
        on_game_over: Optional[Callable[[int], None]] = None,
    ):
        """
        Initialize the session.

        Args:
            config: Rule constants
            mode: Game mode for the next round
            difficulty: Speed profile for the next round
            scheduler: Timer driving tick()
            countdown_scheduler: Timer driving the TIME_ATTACK countdown
            rng: Random source for food, obstacles and the rival
            high_score_store: Where the high score is read from and saved to
            narrator: Receives start / game_over / score_milestone events
            obstacle_loader: Source of AI_OBSTACLES maps
            on_game_over: Called with the final score when a round ends
        """
        self.config = config or SnakeConfig()
        self.rng = rng or random.Random()
        self.scheduler = scheduler or ClockScheduler()
        self.countdown_scheduler = countdown_scheduler or ClockScheduler()
        self.high_score_store = high_score_store or MemoryHighScoreStore()
        self.narrator = narrator or SilentNarrator()
        self.on_game_over = on_game_over

        if obstacle_loader is None:
            obstacle_loader = ObstacleLoader(
                generator=None,
                grid_size=self.config.grid_size,
                spawn_cells=self._initial_snake(),
                timeout=self.config.obstacle_timeout,
                rng=self.rng,
                max_count=self.config.max_generated_obstacles,
            )
        self.obstacle_loader = obstacle_loader

        self.state = SessionState(
            mode=GameMode.parse(mode),
            difficulty=DifficultyLevel.parse(difficulty),
            snake=self._initial_snake(),
            high_score=int(self.high_score_store.load()),
        )

        self._pending_direction: Direction = INITIAL_DIRECTION
        self._pending_request: Optional[ObstacleRequest] = None
        self._speed_boost = 0
        self._survival_marks = 0
        self.last_personality: Optional[AIPersonality] = None

    @classmethod
    def get_metadata(cls) -> GameMetadata:
        return GameMetadata(
            name="Snake",
            id="snake",
            description="Eat food, grow longer, avoid walls, obstacles and the rival",
            modes=[m.value for m in GameMode],
            difficulties=[d.value for d in DifficultyLevel],
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def status(self) -> GameStatus:
        return self.state.status

    @property
    def mode(self) -> GameMode:
        return self.state.mode

    @property
    def difficulty(self) -> DifficultyLevel:
        return self.state.difficulty

    @property
    def pending_direction(self) -> Direction:
        return self._pending_direction

    @property
    def loading(self) -> bool:
        """True while an obstacle map request is outstanding."""
        return self._pending_request is not None

    @property
    def tick_interval(self) -> int:
        """Current milliseconds per tick."""
        return calculate_game_speed(
            self.state.difficulty,
            self.state.mode,
            self.state.level + self._speed_boost,
        )

    def get_state(self) -> Dict[str, Any]:
        state = self.state.to_dict()
        state["tick_interval"] = self.tick_interval
        state["loading"] = self.loading
        return state

    def get_score(self) -> int:
        return self.state.score

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def set_mode(self, mode: Union[GameMode, str]) -> None:
        """Select the mode used by the next start()."""
        self.state.mode = GameMode.parse(mode)

    def set_difficulty(self, difficulty: Union[DifficultyLevel, str]) -> None:
        """Select the difficulty; an armed tick timer picks up the new speed."""
        self.state.difficulty = DifficultyLevel.parse(difficulty)
        self._sync_interval()

    def _initial_snake(self) -> List[Point]:
        return [Point(x, y) for x, y in self.config.initial_snake]

    def start(self, wait: bool = False) -> None:
        """
        Begin a new round.

        AI_OBSTACLES rounds first request a map; the session stays IDLE until
        poll() (or wait=True) resolves the request.
        """
        self._stop_timers()
        self._pending_request = None
        self.state.status = GameStatus.IDLE

        if self.state.mode is GameMode.AI_OBSTACLES:
            request = self.obstacle_loader.request(skill_level_for(self.state.high_score))
            if wait:
                request.wait()
            if request.done():
                self._begin_play(request.result().obstacles)
            else:
                self._pending_request = request
            return

        self._begin_play([])

    def _begin_play(self, obstacles: List[Point]) -> None:
        s = self.state
        cfg = self.config

        s.snake = self._initial_snake()
        s.direction = INITIAL_DIRECTION
        self._pending_direction = INITIAL_DIRECTION
        s.obstacles = set(obstacles)
        s.score = 0
        s.level = 1
        s.tick_count = 0
        s.game_over_reason = None
        self._speed_boost = 0
        self._survival_marks = 0
        self.last_personality = None

        if s.mode is GameMode.AI_RIVAL:
            s.rival_snake = [Point(x, y) for x, y in cfg.rival_spawn]
        else:
            s.rival_snake = None
        s.rival_score = 0

        s.time_remaining = cfg.time_attack_seconds if s.mode is GameMode.TIME_ATTACK else None

        s.food = place_food(self._occupied(), s.obstacles, cfg.grid_size, self.rng)
        s.status = GameStatus.PLAYING

        self._arm_timers()
        print(f"[Session] Started {s.mode.value} on {s.difficulty.value} "
              f"({self.tick_interval} ms/tick, {len(s.obstacles)} obstacles)")
        self._narrate("start")

    def poll(self) -> int:
        """
        Let pending work progress. Call this from the host loop.

        Resolves an outstanding obstacle request and polls both timers.

        Returns:
            Number of timer callbacks fired
        """
        if self._pending_request is not None and self._pending_request.done():
            request = self._pending_request
            self._pending_request = None
            self._begin_play(request.result().obstacles)

        fired = self.scheduler.poll()
        fired += self.countdown_scheduler.poll()
        return fired

    # ------------------------------------------------------------------
    # Input and lifecycle
    # ------------------------------------------------------------------

    def set_direction(self, direction: Union[Direction, str]) -> bool:
        """
        Queue a direction for the next tick.

        A request for the exact opposite of the direction travelled on the
        last tick is ignored.

        Returns:
            True if the request was accepted
        """
        if isinstance(direction, str):
            direction = Direction[direction.strip().upper()]
        else:
            direction = Direction(direction)

        if direction == self.state.direction.opposite:
            return False

        self._pending_direction = direction
        return True

    def pause(self) -> bool:
        if self.state.status is not GameStatus.PLAYING:
            return False
        self.state.status = GameStatus.PAUSED
        self.scheduler.pause()
        self.countdown_scheduler.pause()
        return True

    def resume(self) -> bool:
        if self.state.status is not GameStatus.PAUSED:
            return False
        self.state.status = GameStatus.PLAYING
        # Pick up where the paused timers left off
        if not self.scheduler.resume():
            self.scheduler.arm(self.tick_interval, self._on_tick)
        self._sync_interval()
        if self.state.mode is GameMode.TIME_ATTACK and not self.countdown_scheduler.resume():
            self.countdown_scheduler.arm(COUNTDOWN_INTERVAL_MS, self.countdown)
        return True

    def toggle_pause(self) -> bool:
        """Pause when playing, resume when paused."""
        if self.state.status is GameStatus.PLAYING:
            return self.pause()
        return self.resume()

    def shutdown(self) -> None:
        """Stop timers and release worker threads."""
        self._stop_timers()
        self.obstacle_loader.shutdown()
        self.narrator.shutdown()

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def tick(self) -> Tuple[Dict[str, Any], bool, Dict[str, Any]]:
        """
        Execute one game step.

        Returns:
            Tuple of (state, done, info)
        """
        s = self.state
        cfg = self.config

        if s.status is not GameStatus.PLAYING:
            return self.get_state(), s.status is GameStatus.GAME_OVER, self._info()

        direction = self._pending_direction
        head = next_head(s.snake[0], direction)
        reason = collision_reason(head, s.snake, s.obstacles, cfg.grid_size)
        if reason is not None:
            self._end_game(reason)
            return self.get_state(), True, self._info()

        s.tick_count += 1
        s.direction = direction

        food = s.food
        player_ate = head == food
        s.snake = advance(s.snake, s.direction, grow=player_ate)

        rival_ate = False
        rival_reason = None
        if (s.mode is GameMode.AI_RIVAL and s.rival_snake
                and s.tick_count % cfg.rival_move_every == 0):
            rival_ate, rival_reason = self._move_rival(food)

        if player_ate or rival_ate:
            s.food = place_food(self._occupied(), s.obstacles, cfg.grid_size, self.rng)

        if player_ate:
            s.score += self._points_per_food()
            self._apply_mode_rules()
        if rival_ate:
            s.rival_score += cfg.points_per_food

        self._update_level()

        if rival_reason is not None:
            self._end_game(rival_reason)
            return self.get_state(), True, self._info(ate_food=player_ate, rival_ate=rival_ate)

        return self.get_state(), False, self._info(ate_food=player_ate, rival_ate=rival_ate)

    def countdown(self) -> None:
        """One second of TIME_ATTACK time passes."""
        s = self.state
        if s.status is not GameStatus.PLAYING or s.time_remaining is None:
            return

        s.time_remaining = max(0, s.time_remaining - 1)
        if s.time_remaining == 0:
            self._end_game("time")

    def _move_rival(self, food: Point) -> Tuple[bool, Optional[str]]:
        """Advance the rival one cell. Returns (ate_food, fatal_reason)."""
        s = self.state
        cfg = self.config
        rival = s.rival_snake

        personality = classify_personality(s.difficulty, s.score, s.rival_score)
        self.last_personality = personality

        # The rival treats the player's body as an obstacle
        blocked = set(s.obstacles) | set(s.snake)
        move = next_rival_move(
            rival[0], food, blocked, rival, cfg.grid_size, personality, s.snake,
            rng=self.rng,
            mistake_rate=cfg.rival_mistake_rate,
            top_choices=cfg.rival_top_choices,
        )

        rival_head = next_head(rival[0], move)
        if rival_head == s.snake[0]:
            return False, "head_on"
        if collision_reason(rival_head, rival, blocked, cfg.grid_size) is not None:
            return False, "rival"

        ate = rival_head == food
        s.rival_snake = advance(rival, move, grow=ate)
        return ate, None

    def _points_per_food(self) -> int:
        if self.state.mode is GameMode.SPEED_RUN:
            return self.config.speed_run_points_per_food
        return self.config.points_per_food

    def _apply_mode_rules(self) -> None:
        s = self.state
        cfg = self.config

        if s.mode is GameMode.SPEED_RUN:
            self._speed_boost = s.score // cfg.speed_run_step

        elif s.mode is GameMode.SURVIVAL:
            marks = s.score // cfg.survival_step
            while self._survival_marks < marks:
                occupied = self._occupied() + [s.food]
                s.obstacles.add(place_food(occupied, s.obstacles, cfg.grid_size, self.rng))
                self._survival_marks += 1

    def _update_level(self) -> None:
        s = self.state
        level = calculate_level(s.score)
        if level > s.level:
            self._narrate("score_milestone")
        s.level = level
        self._sync_interval()

    def _end_game(self, reason: str) -> None:
        s = self.state
        s.status = GameStatus.GAME_OVER
        s.game_over_reason = reason
        self._stop_timers()

        if s.score > s.high_score:
            print(f"[HIGH SCORE] New high: {s.score} (previous: {s.high_score})")
            s.high_score = s.score
            try:
                self.high_score_store.save(s.score)
            except OSError as exc:
                print(f"[HIGH SCORE] Could not save: {exc}")

        print(f"[Session] Game over ({reason}) - score {s.score}, level {s.level}")

        if self.on_game_over is not None:
            self.on_game_over(s.score)
        self._narrate("game_over")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _occupied(self) -> List[Point]:
        return list(self.state.snake) + list(self.state.rival_snake or [])

    def _arm_timers(self) -> None:
        self.scheduler.arm(self.tick_interval, self._on_tick)
        if self.state.mode is GameMode.TIME_ATTACK:
            self.countdown_scheduler.arm(COUNTDOWN_INTERVAL_MS, self.countdown)

    def _stop_timers(self) -> None:
        self.scheduler.disarm()
        self.countdown_scheduler.disarm()

    def _sync_interval(self) -> None:
        if self.scheduler.armed and self.scheduler.interval_ms != self.tick_interval:
            self.scheduler.rearm(self.tick_interval)

    def _on_tick(self) -> None:
        self.tick()

    def _narrate(self, event: str) -> None:
        try:
            self.narrator.notify(event, self.state.score)
        except Exception as exc:
            print(f"[Narrator] '{event}' failed: {exc}")

    def _info(self, ate_food: bool = False, rival_ate: bool = False) -> Dict[str, Any]:
        s = self.state
        return {
            "score": s.score,
            "level": s.level,
            "ate_food": ate_food,
            "rival_ate": rival_ate,
            "reason": s.game_over_reason,
        }

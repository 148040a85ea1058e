"""
Obstacle maps - procedural scatter and generator-service fetching.

A map request never fails from the caller's point of view: any exception,
malformed payload or timeout from the generator service turns into a locally
generated procedural map.
"""
from concurrent.futures import Executor, Future, ThreadPoolExecutor, wait as wait_futures
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional
import random
import time

from .engine import GRID_SIZE, INITIAL_SNAKE, Point, in_bounds


MAX_GENERATED_OBSTACLES = 30
MAX_PROCEDURAL_DENSITY = 20
MAX_SKILL_LEVEL = 10


class ObstacleGenerationError(Exception):
    """The generator service could not be used."""


class ObstacleValidationError(ValueError):
    """A generator payload did not describe a usable map."""


@dataclass
class ObstacleResult:
    """Outcome of a map request."""
    obstacles: List[Point] = field(default_factory=list)
    source: str = "procedural"     # "generator" or "procedural"
    error: Optional[str] = None

    @property
    def fallback(self) -> bool:
        return self.source != "generator"


def skill_level_for(high_score: int) -> int:
    """Map a high score to the generator's 1..10 skill scale."""
    return min(high_score // 50 + 1, MAX_SKILL_LEVEL)


def procedural_obstacles(
    skill_level: int,
    grid_size: int = GRID_SIZE,
    spawn_cells: Iterable[Point] = (INITIAL_SNAKE[0],),
    rng: Optional[random.Random] = None,
) -> List[Point]:
    """
    Scatter random obstacles.

    Makes min(skill_level * 2, 20) draws; draws landing on a spawn cell or an
    existing obstacle are discarded, not retried.
    """
    rng = rng or random
    spawn = set(spawn_cells)
    density = min(int(skill_level * 2), MAX_PROCEDURAL_DENSITY)

    obstacles: List[Point] = []
    seen = set()
    for _ in range(density):
        cell = Point(rng.randrange(grid_size), rng.randrange(grid_size))
        if cell in spawn or cell in seen:
            continue
        seen.add(cell)
        obstacles.append(cell)
    return obstacles


def validate_obstacles(
    raw: Any,
    grid_size: int = GRID_SIZE,
    spawn_cells: Iterable[Point] = (INITIAL_SNAKE[0],),
    max_count: int = MAX_GENERATED_OBSTACLES,
) -> List[Point]:
    """
    Parse a generator payload into obstacle cells.

    Accepts {"obstacles": [...]} or a bare list of {"x": int, "y": int}.

    Raises:
        ObstacleValidationError: If any entry is malformed, out of bounds or
            on a spawn cell, or there are more than max_count entries
    """
    if isinstance(raw, dict):
        raw = raw.get("obstacles")

    if not isinstance(raw, list):
        raise ObstacleValidationError(f"Expected a list of obstacles, got {type(raw).__name__}")

    if len(raw) > max_count:
        raise ObstacleValidationError(f"Too many obstacles: {len(raw)} > {max_count}")

    spawn = set(spawn_cells)
    obstacles: List[Point] = []
    seen = set()
    for entry in raw:
        if not isinstance(entry, dict):
            raise ObstacleValidationError(f"Malformed obstacle entry: {entry!r}")
        x, y = entry.get("x"), entry.get("y")
        if not isinstance(x, int) or not isinstance(y, int) or isinstance(x, bool) or isinstance(y, bool):
            raise ObstacleValidationError(f"Obstacle coordinates must be integers: {entry!r}")

        cell = Point(x, y)
        if not in_bounds(cell, grid_size):
            raise ObstacleValidationError(f"Obstacle out of bounds: {entry!r}")
        if cell in spawn:
            raise ObstacleValidationError(f"Obstacle on spawn cell: {entry!r}")
        if cell in seen:
            continue
        seen.add(cell)
        obstacles.append(cell)

    return obstacles


class ObstacleRequest:
    """
    A pending generator call with a deadline.

    Poll done() from the host loop; once it is true, result() returns
    immediately and never raises.
    """

    def __init__(
        self,
        future: Future,
        deadline: float,
        fallback: Callable[[str], ObstacleResult],
        validate: Callable[[Any], List[Point]],
        clock: Callable[[], float] = time.monotonic,
    ):
        self.future = future
        self.deadline = deadline
        self._fallback = fallback
        self._validate = validate
        self._clock = clock
        self._result: Optional[ObstacleResult] = None

    def done(self) -> bool:
        return self._result is not None or self.future.done() or self._clock() >= self.deadline

    def result(self) -> ObstacleResult:
        """Resolve the request, falling back to a procedural map on any failure."""
        if self._result is None:
            self._result = self._resolve()
        return self._result

    def wait(self) -> ObstacleResult:
        """Block until the call finishes or the deadline passes, then resolve."""
        remaining = self.deadline - self._clock()
        if remaining > 0 and not self.future.done():
            wait_futures([self.future], timeout=remaining)
        return self.result()

    def _resolve(self) -> ObstacleResult:
        if not self.future.done():
            self.future.cancel()
            return self._fallback("generator timed out")

        try:
            payload = self.future.result()
        except Exception as exc:
            return self._fallback(f"generator failed: {exc}")

        try:
            obstacles = self._validate(payload)
        except ObstacleValidationError as exc:
            return self._fallback(f"malformed map: {exc}")

        return ObstacleResult(obstacles=obstacles, source="generator")


class ObstacleLoader:
    """
    Fetches obstacle maps from a generator service with a bounded timeout.

    The generator is any object with a generate(skill_level) method returning
    a JSON-like payload. The call runs on a worker thread so the tick loop is
    never blocked on network I/O.
    """

    def __init__(
        self,
        generator=None,
        grid_size: int = GRID_SIZE,
        spawn_cells: Iterable[Point] = (INITIAL_SNAKE[0],),
        timeout: float = 3.0,
        rng: Optional[random.Random] = None,
        executor: Optional[Executor] = None,
        clock: Callable[[], float] = time.monotonic,
        max_count: int = MAX_GENERATED_OBSTACLES,
    ):
        """
        Initialize the loader.

        Args:
            generator: Obstacle generator client (None: always procedural)
            grid_size: Side length of the grid
            spawn_cells: Cells that must stay free
            timeout: Seconds to wait for the generator
            rng: Random source for the procedural fallback
            executor: Executor running generator calls
            clock: Monotonic time source in seconds
            max_count: Largest map accepted from the generator
        """
        self.generator = generator
        self.grid_size = grid_size
        self.spawn_cells = list(spawn_cells)
        self.timeout = timeout
        self.rng = rng or random.Random()
        self.clock = clock
        self.max_count = max_count
        self._executor = executor

    @property
    def executor(self) -> Executor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="obstacles")
        return self._executor

    def request(self, skill_level: int) -> ObstacleRequest:
        """Start fetching a map for the given skill level."""
        skill_level = max(1, min(int(skill_level), MAX_SKILL_LEVEL))

        if self.generator is None:
            future: Future = Future()
            future.set_exception(ObstacleGenerationError("no obstacle generator configured"))
        else:
            future = self.executor.submit(self.generator.generate, skill_level)

        def fallback(reason: str) -> ObstacleResult:
            if self.generator is not None:
                print(f"[Obstacles] {reason}, using procedural map")
            return ObstacleResult(
                obstacles=procedural_obstacles(skill_level, self.grid_size, self.spawn_cells, self.rng),
                source="procedural",
                error=reason,
            )

        def validate(payload: Any) -> List[Point]:
            return validate_obstacles(payload, self.grid_size, self.spawn_cells, self.max_count)

        return ObstacleRequest(
            future=future,
            deadline=self.clock() + self.timeout,
            fallback=fallback,
            validate=validate,
            clock=self.clock,
        )

    def load(self, skill_level: int) -> ObstacleResult:
        """Fetch a map, blocking for at most the timeout."""
        return self.request(skill_level).wait()

    def shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None

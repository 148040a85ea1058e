"""
Snake Engine - Pure grid geometry, movement, collision and food placement.

Nothing in this module keeps state or performs I/O. The session state machine
composes these functions once per tick.
"""
from dataclasses import dataclass
from typing import List, Iterable, Optional, Dict
from enum import IntEnum
import random


GRID_SIZE = 20


class Direction(IntEnum):
    """Snake movement directions."""
    RIGHT = 0
    DOWN = 1
    LEFT = 2
    UP = 3

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]

    @property
    def offset(self):
        return _OFFSETS[self]


_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

# Screen coordinates: y grows downward
_OFFSETS = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}

# Order in which the rival enumerates its candidate moves
MOVE_ORDER = [Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT]


@dataclass
class Point:
    """A point on the game grid."""
    x: int
    y: int

    def __eq__(self, other):
        if not isinstance(other, Point):
            return False
        return self.x == other.x and self.y == other.y

    def __hash__(self):
        return hash((self.x, self.y))

    def to_dict(self) -> Dict[str, int]:
        """Convert to dictionary for serialization."""
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Dict[str, int]) -> "Point":
        return cls(int(data["x"]), int(data["y"]))


INITIAL_SNAKE = [Point(10, 10), Point(10, 11), Point(10, 12)]
INITIAL_DIRECTION = Direction.UP
SPAWN_CELL = INITIAL_SNAKE[0]


class FoodPlacementError(RuntimeError):
    """Raised when no free cell could be found for food."""


def in_bounds(point: Point, grid_size: int = GRID_SIZE) -> bool:
    """Check whether a point lies inside the square grid."""
    return 0 <= point.x < grid_size and 0 <= point.y < grid_size


def manhattan_distance(a: Point, b: Point) -> int:
    return abs(a.x - b.x) + abs(a.y - b.y)


def next_head(head: Point, direction: Direction) -> Point:
    """Return the cell one step from head in the given direction."""
    dx, dy = direction.offset
    return Point(head.x + dx, head.y + dy)


def advance(snake: List[Point], direction: Direction, grow: bool = False) -> List[Point]:
    """
    Move a snake one cell.

    The new head is prepended. The tail is dropped unless `grow` is set, in
    which case the snake keeps its full length. Bounds and collisions are not
    checked here.

    Args:
        snake: Body, head first
        direction: Direction to move in
        grow: Keep the tail (the snake just ate)

    Returns:
        New body list; the input is not modified
    """
    head = next_head(snake[0], direction)
    if grow:
        return [head] + list(snake)
    return [head] + list(snake[:-1])


def collision_reason(
    head: Point,
    body: List[Point],
    obstacles: Iterable[Point] = (),
    grid_size: int = GRID_SIZE,
) -> Optional[str]:
    """
    Explain why a head position is fatal.

    Args:
        head: Candidate head position
        body: Snake body, head first; index 0 is never treated as a hit
        obstacles: Blocked cells
        grid_size: Side length of the grid

    Returns:
        "wall", "self" or "obstacle" for the first failing check, else None
    """
    if not in_bounds(head, grid_size):
        return "wall"

    if head in body[1:]:
        return "self"

    if head in obstacles:
        return "obstacle"

    return None


def is_colliding(
    head: Point,
    body: List[Point],
    obstacles: Iterable[Point] = (),
    grid_size: int = GRID_SIZE,
) -> bool:
    """True if head is out of bounds, on a non-head body cell, or on an obstacle."""
    return collision_reason(head, body, obstacles, grid_size) is not None


def place_food(
    snake: Iterable[Point],
    obstacles: Iterable[Point] = (),
    grid_size: int = GRID_SIZE,
    rng: Optional[random.Random] = None,
    max_attempts: Optional[int] = None,
) -> Point:
    """
    Pick a random free cell by rejection sampling.

    Args:
        snake: Cells occupied by snakes
        obstacles: Cells occupied by obstacles
        grid_size: Side length of the grid
        rng: Random source (defaults to the random module)
        max_attempts: Draw cap (defaults to 50 draws per cell)

    Returns:
        A cell that is neither a snake segment nor an obstacle

    Raises:
        FoodPlacementError: If the grid is full or the cap is exhausted
    """
    rng = rng or random
    occupied = set(snake) | set(obstacles)
    total_cells = grid_size * grid_size

    free_cells = total_cells - sum(1 for p in occupied if in_bounds(p, grid_size))
    if free_cells <= 0:
        raise FoodPlacementError(
            f"No free cell for food on a {grid_size}x{grid_size} grid "
            f"({len(occupied)} cells occupied)"
        )

    if max_attempts is None:
        max_attempts = 50 * total_cells

    for _ in range(max_attempts):
        food = Point(rng.randrange(grid_size), rng.randrange(grid_size))
        if food not in occupied:
            return food

    raise FoodPlacementError(
        f"Gave up placing food after {max_attempts} attempts on a "
        f"{grid_size}x{grid_size} grid with {free_cells} free cells"
    )

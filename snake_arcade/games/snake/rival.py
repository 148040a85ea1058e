"""
Rival AI - scored move selection for the opposing snake.

The rival is stateless: every decision is computed from the positions passed
in. Personalities reweight food seeking against keeping distance from the
player, a one-ply look-ahead prefers open cells, and a small random factor
keeps the rival from playing perfectly.
"""
from enum import Enum
from typing import Iterable, List, Optional, Tuple
import random

from .engine import (
    GRID_SIZE,
    MOVE_ORDER,
    Direction,
    Point,
    in_bounds,
    manhattan_distance,
    next_head,
)
from .modes import DifficultyLevel


class AIPersonality(Enum):
    """Weighting profiles for the rival's decisions."""
    AGGRESSIVE = "AGGRESSIVE"
    DEFENSIVE = "DEFENSIVE"
    ADAPTIVE = "ADAPTIVE"
    BALANCED = "BALANCED"


# Player length assumed by ADAPTIVE when no player snake is known
DEFAULT_PLAYER_LENGTH = 3

# Score gap at which a MEDIUM rival changes temperament
PERSONALITY_SCORE_MARGIN = 20


def classify_personality(
    difficulty: DifficultyLevel,
    player_score: int,
    rival_score: int,
) -> AIPersonality:
    """
    Pick the rival's personality for the current decision.

    EASY rivals play safe, HARD and HARDCORE rivals chase food. MEDIUM rivals
    react to the score gap: far behind makes them aggressive, far ahead makes
    them defensive.
    """
    difficulty = DifficultyLevel.parse(difficulty)
    if difficulty is DifficultyLevel.EASY:
        return AIPersonality.DEFENSIVE
    if difficulty in (DifficultyLevel.HARD, DifficultyLevel.HARDCORE):
        return AIPersonality.AGGRESSIVE

    if rival_score < player_score - PERSONALITY_SCORE_MARGIN:
        return AIPersonality.AGGRESSIVE
    if rival_score > player_score + PERSONALITY_SCORE_MARGIN:
        return AIPersonality.DEFENSIVE
    return AIPersonality.BALANCED


def safe_moves(
    head: Point,
    body: Iterable[Point],
    obstacles: Iterable[Point],
    grid_size: int = GRID_SIZE,
) -> List[Direction]:
    """Moves from head that stay in bounds and avoid the body and obstacles."""
    body = set(body)
    obstacles = set(obstacles)
    result = []
    for move in MOVE_ORDER:
        target = next_head(head, move)
        if not in_bounds(target, grid_size):
            continue
        if target in body or target in obstacles:
            continue
        result.append(move)
    return result


def _distance_to_player(point: Point, player_snake: Optional[List[Point]]) -> int:
    if not player_snake:
        return 0
    return min(manhattan_distance(point, p) for p in player_snake)


def _open_neighbours(point: Point, obstacles: set, grid_size: int) -> int:
    # Bodies are not considered here, only walls and obstacles
    count = 0
    for move in MOVE_ORDER:
        target = next_head(point, move)
        if in_bounds(target, grid_size) and target not in obstacles:
            count += 1
    return count


def score_move(
    target: Point,
    food_target: Point,
    obstacles: set,
    rival_length: int,
    grid_size: int,
    personality: AIPersonality,
    player_snake: Optional[List[Point]] = None,
) -> int:
    """
    Heuristic value of moving the rival head to `target`.

    Higher is better. Combines food distance, a personality adjustment, a
    bonus for staying away from walls and a bonus for open neighbouring cells.
    """
    food_dist = manhattan_distance(target, food_target)
    player_dist = _distance_to_player(target, player_snake)

    score = -10 * food_dist

    if personality is AIPersonality.AGGRESSIVE:
        score += -5 * food_dist + 2 * player_dist
    elif personality is AIPersonality.DEFENSIVE:
        score += 10 * player_dist - 3 * food_dist
    elif personality is AIPersonality.ADAPTIVE:
        player_length = len(player_snake) if player_snake else DEFAULT_PLAYER_LENGTH
        if rival_length < player_length:
            score += 8 * player_dist
        else:
            score += -7 * food_dist
    else:
        score += 5 * player_dist

    edge_distance = min(target.x, target.y, grid_size - 1 - target.x, grid_size - 1 - target.y)
    score += 2 * edge_distance

    score += 15 * _open_neighbours(target, obstacles, grid_size)

    return score


def rank_moves(
    rival_head: Point,
    food_target: Point,
    obstacles: Iterable[Point],
    rival_body: List[Point],
    grid_size: int = GRID_SIZE,
    personality: AIPersonality = AIPersonality.BALANCED,
    player_snake: Optional[List[Point]] = None,
) -> List[Tuple[Direction, int]]:
    """
    Score every safe move, best first.

    Ties keep the UP, DOWN, LEFT, RIGHT enumeration order.
    """
    obstacles = set(obstacles)
    scored = []
    for move in safe_moves(rival_head, rival_body, obstacles, grid_size):
        target = next_head(rival_head, move)
        scored.append((move, score_move(
            target, food_target, obstacles, len(rival_body),
            grid_size, personality, player_snake,
        )))
    scored.sort(key=lambda item: item[1], reverse=True)
    return scored


def next_rival_move(
    rival_head: Point,
    food_target: Point,
    obstacles: Iterable[Point],
    rival_body: List[Point],
    grid_size: int = GRID_SIZE,
    personality: AIPersonality = AIPersonality.BALANCED,
    player_snake: Optional[List[Point]] = None,
    rng: Optional[random.Random] = None,
    mistake_rate: float = 0.05,
    top_choices: int = 2,
) -> Direction:
    """
    Decide the rival's next direction.

    Args:
        rival_head: Current rival head
        food_target: Cell the rival is heading for
        obstacles: Cells to avoid (callers may include the player's body)
        rival_body: Rival body, head first
        grid_size: Side length of the grid
        personality: Weighting profile
        player_snake: Player body, used for distance terms
        rng: Random source (defaults to the random module)
        mistake_rate: Probability of ignoring the scores for one move
        top_choices: How many of the best moves to choose between

    Returns:
        Chosen direction. When no move is safe a random (fatal) one is returned.
    """
    rng = rng or random
    obstacles = set(obstacles)

    candidates = safe_moves(rival_head, rival_body, obstacles, grid_size)
    if not candidates:
        # Trapped
        return rng.choice(MOVE_ORDER)

    if rng.random() < mistake_rate:
        return rng.choice(candidates)

    ranked = rank_moves(
        rival_head, food_target, obstacles, rival_body,
        grid_size, personality, player_snake,
    )
    top = ranked[:max(1, min(top_choices, len(ranked)))]
    move, _ = rng.choice(top)
    return move

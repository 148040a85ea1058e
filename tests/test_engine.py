"""
Tests for the Snake engine: geometry, movement, collision and food placement.
"""

import random

import pytest


class TestDirection:
    """Tests for Direction helpers."""

    def test_opposites(self):
        """Test each direction's opposite is the reverse one."""
        from snake_arcade.games.snake.engine import Direction

        assert Direction.UP.opposite == Direction.DOWN
        assert Direction.DOWN.opposite == Direction.UP
        assert Direction.LEFT.opposite == Direction.RIGHT
        assert Direction.RIGHT.opposite == Direction.LEFT

    def test_up_decreases_y(self):
        """Test y grows downward (screen coordinates)."""
        from snake_arcade.games.snake.engine import Direction, Point, next_head

        assert next_head(Point(5, 5), Direction.UP) == Point(5, 4)
        assert next_head(Point(5, 5), Direction.DOWN) == Point(5, 6)
        assert next_head(Point(5, 5), Direction.LEFT) == Point(4, 5)
        assert next_head(Point(5, 5), Direction.RIGHT) == Point(6, 5)

    def test_move_order(self):
        """Test candidate moves are enumerated UP, DOWN, LEFT, RIGHT."""
        from snake_arcade.games.snake.engine import MOVE_ORDER, Direction

        assert MOVE_ORDER == [Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT]


class TestPoint:
    """Tests for Point."""

    def test_equality_and_hash(self):
        """Test points compare and hash by coordinates."""
        from snake_arcade.games.snake.engine import Point

        assert Point(3, 4) == Point(3, 4)
        assert Point(3, 4) != Point(4, 3)
        assert len({Point(1, 1), Point(1, 1), Point(2, 1)}) == 2

    def test_not_equal_to_tuple(self):
        """Test a Point never equals a plain tuple."""
        from snake_arcade.games.snake.engine import Point

        assert Point(1, 2) != (1, 2)

    def test_dict_conversion(self):
        """Test to_dict/from_dict use x and y keys."""
        from snake_arcade.games.snake.engine import Point

        assert Point(7, 9).to_dict() == {"x": 7, "y": 9}
        assert Point.from_dict({"x": 2, "y": 3}) == Point(2, 3)


class TestAdvance:
    """Tests for moving a snake."""

    def test_advance_each_direction(self):
        """Test the head moves one cell and length is kept."""
        from snake_arcade.games.snake.engine import Direction, Point, advance

        snake = [Point(10, 10), Point(10, 11), Point(10, 12)]
        expected_heads = {
            Direction.UP: Point(10, 9),
            Direction.LEFT: Point(9, 10),
            Direction.RIGHT: Point(11, 10),
        }
        for direction, head in expected_heads.items():
            moved = advance(snake, direction)
            assert moved[0] == head
            assert len(moved) == 3
            assert moved[1:] == snake[:-1]

    def test_advance_grow_keeps_tail(self):
        """Test growing prepends the head and keeps every old segment."""
        from snake_arcade.games.snake.engine import Direction, Point, advance

        snake = [Point(10, 10), Point(10, 11), Point(10, 12)]
        moved = advance(snake, Direction.UP, grow=True)

        assert len(moved) == 4
        assert moved[0] == Point(10, 9)
        assert moved[1:] == snake

    def test_advance_does_not_mutate_input(self):
        """Test the input body list is left untouched."""
        from snake_arcade.games.snake.engine import Direction, Point, advance

        snake = [Point(1, 1), Point(1, 2)]
        advance(snake, Direction.RIGHT)

        assert snake == [Point(1, 1), Point(1, 2)]

    def test_advance_does_not_check_bounds(self):
        """Test advancing off the grid is allowed; collision is checked elsewhere."""
        from snake_arcade.games.snake.engine import Direction, Point, advance

        moved = advance([Point(0, 0)], Direction.LEFT)

        assert moved == [Point(-1, 0)]


class TestCollision:
    """Tests for collision detection."""

    def test_wall_collision(self):
        """Test a head above the top row hits the wall."""
        from snake_arcade.games.snake.engine import Point, collision_reason, is_colliding

        body = [Point(10, 0), Point(10, 1)]
        assert is_colliding(Point(10, -1), body, [])
        assert collision_reason(Point(10, -1), body) == "wall"
        assert collision_reason(Point(20, 5), body) == "wall"
        assert collision_reason(Point(5, 20), body) == "wall"

    def test_obstacle_collision(self):
        """Test a head on an obstacle cell collides."""
        from snake_arcade.games.snake.engine import Point, collision_reason

        body = [Point(5, 6), Point(5, 7)]
        assert collision_reason(Point(5, 5), body, {Point(5, 5)}) == "obstacle"

    def test_self_collision(self):
        """Test a head on a non-head body segment collides."""
        from snake_arcade.games.snake.engine import Point, collision_reason

        body = [Point(5, 5), Point(5, 6), Point(6, 6), Point(6, 5)]
        assert collision_reason(Point(6, 5), body) == "self"

    def test_single_segment_snake_never_self_collides(self):
        """Test index 0 of the body is excluded from the self check."""
        from snake_arcade.games.snake.engine import Point, is_colliding

        assert not is_colliding(Point(3, 3), [Point(3, 3)], [])

    def test_free_cell(self):
        """Test an empty in-bounds cell is safe."""
        from snake_arcade.games.snake.engine import Point, is_colliding

        body = [Point(10, 10), Point(10, 11), Point(10, 12)]
        assert not is_colliding(Point(10, 9), body, {Point(0, 0)})

    def test_wall_checked_first(self):
        """Test out-of-bounds is reported before other reasons."""
        from snake_arcade.games.snake.engine import Point, collision_reason

        assert collision_reason(Point(-1, 0), [Point(0, 0)], {Point(-1, 0)}) == "wall"


class TestPlaceFood:
    """Tests for food placement."""

    def test_food_never_on_snake_or_obstacle(self):
        """Test 1000 placements all land on free in-bounds cells."""
        from snake_arcade.games.snake.engine import Point, in_bounds, place_food

        rng = random.Random(7)
        snake = [Point(10, 10), Point(10, 11), Point(10, 12)]
        obstacles = {Point(x, 5) for x in range(20)}

        for _ in range(1000):
            food = place_food(snake, obstacles, 20, rng)
            assert in_bounds(food)
            assert food not in snake
            assert food not in obstacles

    def test_finds_last_free_cell(self):
        """Test the only free cell of a nearly full grid is found."""
        from snake_arcade.games.snake.engine import Point, place_food

        cells = [Point(x, y) for x in range(3) for y in range(3)]
        free = cells.pop(4)

        assert place_food(cells, [], 3, random.Random(0)) == free

    def test_full_grid_raises(self):
        """Test a grid with no free cell raises FoodPlacementError."""
        from snake_arcade.games.snake.engine import FoodPlacementError, Point, place_food

        cells = [Point(x, y) for x in range(3) for y in range(3)]

        with pytest.raises(FoodPlacementError):
            place_food(cells[:5], cells[5:], 3, random.Random(0))

    def test_attempt_cap_raises(self):
        """Test exhausting the attempt cap raises instead of looping forever."""
        from snake_arcade.games.snake.engine import FoodPlacementError, Point, place_food

        class CornerRng:
            def randrange(self, n):
                return 0

        with pytest.raises(FoodPlacementError):
            place_food([Point(0, 0)], [], 20, CornerRng(), max_attempts=25)

    def test_out_of_bounds_cells_do_not_count_as_occupied(self):
        """Test off-grid entries do not make a free grid look full."""
        from snake_arcade.games.snake.engine import Point, place_food

        food = place_food([Point(-1, -1), Point(5, 5)], [], 2, random.Random(3))

        assert food in {Point(0, 0), Point(0, 1), Point(1, 0), Point(1, 1)}


class TestSingleCellScenario:
    """A one-segment snake on an empty 20x20 grid."""

    def test_moves_up(self):
        """Test heading UP from (10,10) gives (10,9)."""
        from snake_arcade.games.snake.engine import Direction, Point, advance

        assert advance([Point(10, 10)], Direction.UP) == [Point(10, 9)]

    def test_only_walls_collide(self):
        """Test every in-bounds cell is safe and every border neighbour is not."""
        from snake_arcade.games.snake.engine import Point, is_colliding

        body = [Point(10, 10)]
        for x in range(-1, 21):
            for y in range(-1, 21):
                inside = 0 <= x < 20 and 0 <= y < 20
                assert is_colliding(Point(x, y), body) is not inside

    def test_food_avoids_the_snake(self):
        """Test food is never placed on (10,10)."""
        from snake_arcade.games.snake.engine import Point, place_food

        rng = random.Random(10)
        for _ in range(1000):
            assert place_food([Point(10, 10)], [], 20, rng) != Point(10, 10)

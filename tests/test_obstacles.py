"""
Tests for obstacle maps: procedural scatter, payload validation and the
generator loader with its timeout and fallback.
"""

import random
import threading
from concurrent.futures import Executor, Future

import pytest


class SyncExecutor(Executor):
    """Runs submitted calls immediately on the calling thread."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:
            future.set_exception(exc)
        return future


class FailingGenerator:
    def generate(self, skill_level):
        raise ConnectionError("service unavailable")


class PayloadGenerator:
    def __init__(self, payload):
        self.payload = payload

    def generate(self, skill_level):
        return self.payload


class TestSkillLevel:
    """Tests for skill_level_for."""

    def test_scale(self):
        """Test one skill level per 50 points, capped at 10."""
        from snake_arcade.games.snake.obstacles import skill_level_for

        assert skill_level_for(0) == 1
        assert skill_level_for(49) == 1
        assert skill_level_for(50) == 2
        assert skill_level_for(450) == 10
        assert skill_level_for(100000) == 10


class TestProceduralObstacles:
    """Tests for procedural_obstacles."""

    def test_count_bounded_by_density(self):
        """Test at most skill * 2 obstacles, never more than 20."""
        from snake_arcade.games.snake.obstacles import procedural_obstacles

        rng = random.Random(4)
        for skill in range(1, 16):
            obstacles = procedural_obstacles(skill, rng=rng)
            assert len(obstacles) <= min(skill * 2, 20)

    def test_never_on_spawn_and_unique(self):
        """Test spawn cells stay free and cells are not repeated."""
        from snake_arcade.games.snake.engine import INITIAL_SNAKE, in_bounds
        from snake_arcade.games.snake.obstacles import procedural_obstacles

        rng = random.Random(21)
        for _ in range(200):
            obstacles = procedural_obstacles(10, 20, INITIAL_SNAKE, rng)
            assert len(set(obstacles)) == len(obstacles)
            assert not set(obstacles) & set(INITIAL_SNAKE)
            assert all(in_bounds(p) for p in obstacles)

    def test_rejected_draws_not_retried(self):
        """Test draws landing on spawn are dropped, shrinking the map."""
        from snake_arcade.games.snake.engine import Point
        from snake_arcade.games.snake.obstacles import procedural_obstacles

        spawn = [Point(0, 0), Point(0, 1), Point(1, 0)]
        obstacles = procedural_obstacles(5, 2, spawn, random.Random(8))

        assert set(obstacles) <= {Point(1, 1)}


class TestValidateObstacles:
    """Tests for validate_obstacles."""

    def test_accepts_wrapped_payload(self):
        """Test {"obstacles": [...]} parses to points."""
        from snake_arcade.games.snake.engine import Point
        from snake_arcade.games.snake.obstacles import validate_obstacles

        payload = {"obstacles": [{"x": 1, "y": 2}, {"x": 3, "y": 4}]}

        assert validate_obstacles(payload) == [Point(1, 2), Point(3, 4)]

    def test_accepts_bare_list_and_collapses_duplicates(self):
        """Test a bare list parses and duplicates are dropped."""
        from snake_arcade.games.snake.engine import Point
        from snake_arcade.games.snake.obstacles import validate_obstacles

        payload = [{"x": 1, "y": 2}, {"x": 1, "y": 2}]

        assert validate_obstacles(payload) == [Point(1, 2)]

    @pytest.mark.parametrize("payload", [
        None,
        "obstacles",
        {"walls": []},
        [{"x": 1}],
        [{"x": "1", "y": 2}],
        [{"x": True, "y": 2}],
        [[1, 2]],
        [{"x": 20, "y": 0}],
        [{"x": 0, "y": -1}],
        [{"x": 10, "y": 10}],
        [{"x": i % 20, "y": i // 20} for i in range(31)],
    ])
    def test_rejects_bad_payloads(self, payload):
        """Test malformed, out-of-bounds, spawn and oversized maps are rejected."""
        from snake_arcade.games.snake.obstacles import ObstacleValidationError, validate_obstacles

        with pytest.raises(ObstacleValidationError):
            validate_obstacles(payload)

    def test_empty_map_is_valid(self):
        """Test an empty obstacle list is accepted."""
        from snake_arcade.games.snake.obstacles import validate_obstacles

        assert validate_obstacles({"obstacles": []}) == []


class TestObstacleLoader:
    """Tests for ObstacleLoader and ObstacleRequest."""

    def test_no_generator_falls_back_immediately(self):
        """Test a loader without a generator resolves to a procedural map at once."""
        from snake_arcade.games.snake.obstacles import ObstacleLoader

        loader = ObstacleLoader(rng=random.Random(2))
        request = loader.request(3)

        assert request.done()
        result = request.result()
        assert result.fallback
        assert result.source == "procedural"
        assert "no obstacle generator" in result.error
        assert len(result.obstacles) <= 6

    def test_generator_map_used(self):
        """Test a valid generator payload is used as-is."""
        from snake_arcade.games.snake.engine import Point
        from snake_arcade.games.snake.obstacles import ObstacleLoader
        from snake_arcade.services.obstacle_generator import StaticObstacleGenerator

        generator = StaticObstacleGenerator([{"x": 2, "y": 2}, {"x": 3, "y": 2}])
        loader = ObstacleLoader(generator=generator, executor=SyncExecutor())

        result = loader.load(4)

        assert result.source == "generator"
        assert not result.fallback
        assert result.obstacles == [Point(2, 2), Point(3, 2)]
        assert generator.requests == [4]

    def test_skill_level_clamped(self):
        """Test requested skill levels are clamped to 1..10."""
        from snake_arcade.games.snake.obstacles import ObstacleLoader
        from snake_arcade.services.obstacle_generator import StaticObstacleGenerator

        generator = StaticObstacleGenerator([])
        loader = ObstacleLoader(generator=generator, executor=SyncExecutor())
        loader.load(0)
        loader.load(42)

        assert generator.requests == [1, 10]

    def test_generator_error_falls_back(self):
        """Test an exception from the generator yields a procedural map."""
        from snake_arcade.games.snake.obstacles import ObstacleLoader

        loader = ObstacleLoader(generator=FailingGenerator(), executor=SyncExecutor(),
                                rng=random.Random(1))
        result = loader.load(2)

        assert result.fallback
        assert "service unavailable" in result.error

    def test_malformed_payload_falls_back(self):
        """Test a payload that fails validation yields a procedural map."""
        from snake_arcade.games.snake.obstacles import ObstacleLoader

        loader = ObstacleLoader(generator=PayloadGenerator({"obstacles": [{"x": 99, "y": 0}]}),
                                executor=SyncExecutor(), rng=random.Random(1))
        result = loader.load(2)

        assert result.fallback
        assert result.error.startswith("malformed map")

    def test_timeout_falls_back(self):
        """Test a generator slower than the timeout yields a procedural map."""
        from snake_arcade.games.snake.obstacles import ObstacleLoader

        release = threading.Event()

        class SlowGenerator:
            def generate(self, skill_level):
                release.wait(5)
                return {"obstacles": []}

        loader = ObstacleLoader(generator=SlowGenerator(), timeout=0.05, rng=random.Random(1))
        try:
            result = loader.load(1)
        finally:
            release.set()
            loader.shutdown()

        assert result.fallback
        assert "timed out" in result.error

    def test_done_after_deadline(self):
        """Test a pending request reports done once its deadline passes."""
        from snake_arcade.games.snake.obstacles import ObstacleLoader

        now = [100.0]
        release = threading.Event()

        class SlowGenerator:
            def generate(self, skill_level):
                release.wait(5)
                return {"obstacles": []}

        loader = ObstacleLoader(generator=SlowGenerator(), timeout=3.0, clock=lambda: now[0])
        try:
            request = loader.request(1)
            assert not request.done()
            now[0] = 103.0
            assert request.done()
            assert request.result().fallback
        finally:
            release.set()
            loader.shutdown()

    def test_result_is_cached(self):
        """Test result() resolves once and returns the same object."""
        from snake_arcade.games.snake.obstacles import ObstacleLoader

        loader = ObstacleLoader(rng=random.Random(6))
        request = loader.request(2)

        assert request.result() is request.result()

"""
Obstacle generator clients.

A generator returns the raw service payload, {"obstacles": [{"x": .., "y": ..}]}.
Validation and fallback are the caller's job (see games.snake.obstacles).
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import requests


class ObstacleGenerator(ABC):
    """Produces an obstacle map for a skill level between 1 and 10."""

    @abstractmethod
    def generate(self, skill_level: int) -> Any:
        raise NotImplementedError


class HttpObstacleGenerator(ObstacleGenerator):
    """
    Calls a map generation endpoint over HTTP.

    The endpoint takes a POST with {"skillLevel": n} and answers with JSON.
    """

    def __init__(self, url: str, timeout: float = 3.0, session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def generate(self, skill_level: int) -> Any:
        response = self.session.post(
            self.url,
            json={"skillLevel": int(skill_level)},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()


class StaticObstacleGenerator(ObstacleGenerator):
    """Returns the same map every time. Useful for fixed layouts and tests."""

    def __init__(self, obstacles: List[Dict[str, int]]):
        self.obstacles = list(obstacles)
        self.requests: List[int] = []

    def generate(self, skill_level: int) -> Any:
        self.requests.append(skill_level)
        return {"obstacles": list(self.obstacles)}

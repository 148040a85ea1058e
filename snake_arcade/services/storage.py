"""
Score persistence - the high score and a local leaderboard.
"""
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


class HighScoreStore(ABC):
    """Key-value storage for a single integer high score."""

    @abstractmethod
    def load(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def save(self, score: int) -> None:
        raise NotImplementedError


class MemoryHighScoreStore(HighScoreStore):
    """Keeps the high score for the lifetime of the process."""

    def __init__(self, initial: int = 0):
        self.value = initial
        self.writes = 0

    def load(self) -> int:
        return self.value

    def save(self, score: int) -> None:
        self.value = int(score)
        self.writes += 1


class JsonHighScoreStore(HighScoreStore):
    """
    High score kept in a small JSON file: {"high_score": 120}.

    A missing or unreadable file counts as a high score of 0.
    """

    def __init__(self, path: str):
        self.path = Path(path)

    def load(self) -> int:
        if not self.path.exists():
            return 0
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
            return max(0, int(data.get("high_score", 0)))
        except (OSError, ValueError, TypeError, AttributeError) as exc:
            print(f"[HIGH SCORE] Could not read {self.path}: {exc}")
            return 0

    def save(self, score: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump({"high_score": int(score)}, f)


@dataclass
class LeaderboardEntry:
    """One row of the leaderboard."""
    name: str
    score: int
    mode: str = "CLASSIC"
    timestamp: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LeaderboardEntry":
        return cls(
            name=str(data.get("name", "anonymous")),
            score=int(data.get("score", 0)),
            mode=str(data.get("mode", "CLASSIC")),
            timestamp=str(data.get("timestamp", "")),
        )


class Leaderboard(ABC):
    """Read-only top-N query by descending score."""

    @abstractmethod
    def top(self, n: int = 10) -> List[LeaderboardEntry]:
        raise NotImplementedError


class JsonLeaderboard(Leaderboard):
    """Leaderboard stored as a JSON list of entries."""

    def __init__(self, path: str):
        self.path = Path(path)

    def _read(self) -> List[LeaderboardEntry]:
        if not self.path.exists():
            return []
        with open(self.path, "r") as f:
            data = json.load(f)
        return [LeaderboardEntry.from_dict(item) for item in data]

    def top(self, n: int = 10) -> List[LeaderboardEntry]:
        entries = self._read()
        entries.sort(key=lambda e: e.score, reverse=True)
        return entries[:n]

    def record(self, name: str, score: int, mode: str = "CLASSIC",
               timestamp: Optional[str] = None) -> LeaderboardEntry:
        """Append a result and return the stored entry."""
        entry = LeaderboardEntry(
            name=name,
            score=int(score),
            mode=mode,
            timestamp=timestamp or datetime.now().strftime("%Y%m%d_%H%M%S"),
        )
        entries = self._read()
        entries.append(entry)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump([e.to_dict() for e in entries], f, indent=2)
        return entry

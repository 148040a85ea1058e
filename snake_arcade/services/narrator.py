"""
Narrator clients - flavor text for game events.

Narration is advisory only. notify() never raises and never blocks the
caller on network I/O.
"""
import random
from abc import ABC, abstractmethod
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Dict, List, Optional

import requests


NARRATOR_EVENTS = ("start", "game_over", "score_milestone")

CANNED_LINES: Dict[str, List[str]] = {
    "start": [
        "Prove your worth, human.",
        "Let's see if you can handle this.",
        "Initiating Snake Protocol v2026.",
    ],
    "game_over": [
        "Pathetic.",
        "Is that all you've got?",
        "Better luck next timeline.",
    ],
    "score_milestone": [
        "Impressive... for a biological lifeform.",
        "Wait, you're actually good?",
        "Systems destabilizing... play slower!",
    ],
}


class Narrator(ABC):
    """Receives fire-and-forget event notifications."""

    def __init__(self):
        self.last_message: Optional[str] = None

    @abstractmethod
    def notify(self, event: str, score: int) -> None:
        """
        Report a game event.

        Args:
            event: One of NARRATOR_EVENTS
            score: Score at the time of the event
        """
        raise NotImplementedError

    def shutdown(self) -> None:
        """Release any worker resources."""
        pass


class SilentNarrator(Narrator):
    """Ignores every event."""

    def notify(self, event: str, score: int) -> None:
        pass


class CannedNarrator(Narrator):
    """Picks a local line per event; no network involved."""

    def __init__(self, rng: Optional[random.Random] = None):
        super().__init__()
        self.rng = rng or random.Random()
        self.history: List[str] = []

    def notify(self, event: str, score: int) -> None:
        options = CANNED_LINES.get(event, ["..."])
        self.last_message = self.rng.choice(options)
        self.history.append(self.last_message)


class HttpNarrator(Narrator):
    """
    Posts events to a narration endpoint on a worker thread.

    The endpoint takes {"event": str, "score": int} and answers with
    {"message": str}. Errors are printed and dropped.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 3.0,
        executor: Optional[Executor] = None,
        session: Optional[requests.Session] = None,
    ):
        super().__init__()
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="narrator")

    def notify(self, event: str, score: int) -> Optional[Future]:
        try:
            return self._executor.submit(self._send, event, score)
        except RuntimeError as exc:
            # Executor already shut down
            print(f"[Narrator] Dropped '{event}': {exc}")
            return None

    def _send(self, event: str, score: int) -> Optional[str]:
        try:
            response = self.session.post(
                self.url,
                json={"event": event, "score": int(score)},
                timeout=self.timeout,
            )
            response.raise_for_status()
            message = response.json().get("message")
        except (requests.RequestException, ValueError, AttributeError) as exc:
            print(f"[Narrator] '{event}' failed: {exc}")
            return None

        self.last_message = message
        return message

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False)

"""
Abstract game interface for Snake Arcade.

Every playable session implements GameInterface and provides GameMetadata.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Any, Tuple, List


@dataclass
class GameMetadata:
    """Metadata describing a game."""

    name: str                           # Display name (e.g., "Snake")
    id: str                             # Unique identifier (e.g., "snake")
    description: str                    # Brief description for UI
    version: str = "1.0.0"              # Game version
    supports_human: bool = True         # Can humans play?
    modes: List[str] = field(default_factory=list)
    difficulties: List[str] = field(default_factory=list)


class GameInterface(ABC):
    """
    Abstract base class for tick-driven game sessions.

    A session owns its state and is the only writer of it. Hosts call the
    lifecycle methods below and read state back through get_state().
    """

    @classmethod
    @abstractmethod
    def get_metadata(cls) -> GameMetadata:
        """
        Return metadata about this game.

        Returns:
            GameMetadata describing the game
        """
        pass

    @abstractmethod
    def start(self, wait: bool = False) -> None:
        """
        Reset the board and begin a new round.

        Args:
            wait: Block until any asynchronous setup has resolved
        """
        pass

    @abstractmethod
    def tick(self) -> Tuple[Dict[str, Any], bool, Dict[str, Any]]:
        """
        Advance the simulation by one step.

        Returns:
            Tuple of (state, done, info)
            - state: Current game state dictionary
            - done: Whether the game is over
            - info: Additional information dictionary
        """
        pass

    @abstractmethod
    def pause(self) -> bool:
        """Suspend ticking. Returns True if the status changed."""
        pass

    @abstractmethod
    def resume(self) -> bool:
        """Resume ticking. Returns True if the status changed."""
        pass

    @abstractmethod
    def get_state(self) -> Dict[str, Any]:
        """
        Get the current game state for rendering.

        Returns:
            Dictionary containing all state needed for rendering
        """
        pass

    def get_score(self) -> int:
        """
        Get the current score.

        Returns:
            Current game score
        """
        return 0

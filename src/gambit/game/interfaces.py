"""Abstract interface of the game layer.

UI and network collaborators depend on :class:`IGameManager`, not on the
concrete manager, so they can be exercised against fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gambit.core.move import Move
    from gambit.core.rules import GameResult
    from gambit.core.state import GameState


class IGameManager(ABC):
    """Owner of the authoritative game state."""

    @abstractmethod
    def get_game_state(self) -> GameState:
        """Immutable snapshot of the current game."""

    @abstractmethod
    def get_legal_moves(self) -> list[Move]:
        """Legal moves for the side to move."""

    @abstractmethod
    def make_move(self, move: Move) -> bool:
        """Apply *move* if legal. Returns True if it was applied."""

    @abstractmethod
    def is_game_over(self) -> GameResult | None:
        """Terminal result, or None while the game continues."""

    @abstractmethod
    def reset(self) -> None:
        """Return to the standard initial position with empty history."""

"""Shared engine search models, configuration and protocol."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from time import perf_counter
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from gambit.core.move import Move
    from gambit.core.state import GameState

CancelCheck = Callable[[], bool]

# Nodes visited between two polls of the clock and the cancel callback.
POLL_INTERVAL_NODES = 1024


class Difficulty(StrEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"


@dataclass(slots=True, frozen=True)
class SearchConfig:
    """Search constraints for a single move computation.

    ``use_opening_book`` and ``use_endgame_tablebase`` are carried for
    callers that configure difficulty, but the searcher does not consult
    either resource.
    """

    depth: int = 4
    time_limit_ms: int = 3000
    use_opening_book: bool = False
    use_endgame_tablebase: bool = False

    def __post_init__(self) -> None:
        if self.depth < 1:
            raise ValueError(f"Search depth must be >= 1, got {self.depth!r}")
        if self.time_limit_ms < 0:
            raise ValueError(f"Time limit must be >= 0 ms, got {self.time_limit_ms!r}")

    @classmethod
    def for_difficulty(cls, level: Difficulty | str) -> SearchConfig:
        """Preset for *level*; raises ``ValueError`` for unknown names."""
        try:
            key = Difficulty(level)
        except ValueError:
            raise ValueError(f"Unknown difficulty: {level!r}") from None
        return DIFFICULTY_PRESETS[key]


DIFFICULTY_PRESETS: dict[Difficulty, SearchConfig] = {
    Difficulty.EASY: SearchConfig(2, 1000, False, False),
    Difficulty.MEDIUM: SearchConfig(4, 3000, True, False),
    Difficulty.HARD: SearchConfig(6, 5000, True, True),
    Difficulty.EXPERT: SearchConfig(8, 10000, True, True),
}


@dataclass(slots=True, frozen=True)
class SearchResult:
    """Result produced by the engine search."""

    best_move: Move | None
    score: int
    depth: int
    nodes: int


def _never_cancelled() -> bool:
    return False


class SearchDeadline:
    """Stop token shared by every node of one search.

    The wall clock and the cancel callback are only consulted every
    :data:`POLL_INTERVAL_NODES` calls to :meth:`tick`; once expired the
    token stays expired.
    """

    __slots__ = ("_deadline", "_cancel_check", "_countdown", "_expired")

    def __init__(
        self,
        time_limit_ms: int | None = None,
        is_cancelled: CancelCheck | None = None,
    ) -> None:
        self._deadline: float | None = None
        if time_limit_ms is not None:
            self._deadline = perf_counter() + max(time_limit_ms, 1) / 1000.0
        self._cancel_check: CancelCheck = is_cancelled or _never_cancelled
        self._countdown = POLL_INTERVAL_NODES
        self._expired = False

    def tick(self) -> bool:
        """Count one node; True once the search must unwind."""
        if self._expired:
            return True
        self._countdown -= 1
        if self._countdown > 0:
            return False
        self._countdown = POLL_INTERVAL_NODES
        return self.check()

    def check(self) -> bool:
        """Poll the clock and the cancel callback immediately."""
        if not self._expired:
            self._expired = self._cancel_check() or (
                self._deadline is not None and perf_counter() >= self._deadline
            )
        return self._expired

    @property
    def expired(self) -> bool:
        return self._expired


class IEngine(Protocol):
    """Protocol for chess engines used by the game layer and the Qt worker."""

    def search(
        self,
        state: GameState,
        config: SearchConfig | None = None,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult: ...

    def get_best_move(
        self,
        state: GameState,
        config: SearchConfig | None = None,
        is_cancelled: CancelCheck | None = None,
    ) -> Move | None: ...

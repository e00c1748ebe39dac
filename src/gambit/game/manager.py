"""GameManager: owns the authoritative game state and enforces legality."""

from __future__ import annotations

import logging

from gambit.core.enums import PieceType
from gambit.core.fen import repetition_key
from gambit.core.move import Move
from gambit.core.move_generator import MoveGenerator
from gambit.core.rules import GameResult, Rules
from gambit.core.state import GameState
from gambit.core.types import Square
from gambit.game.interfaces import IGameManager

_LOGGER = logging.getLogger(__name__)


class GameManager(IGameManager):
    """Applies moves one ply at a time and reports terminal conditions.

    The current :class:`GameState` is replaced wholesale on every accepted
    move, so snapshots handed out by :meth:`get_game_state` stay valid.
    Moves arriving from a UI or a transport are never trusted: they are
    matched against the current legal-move set by origin, destination and
    promotion kind, and the generated move is what gets applied.
    """

    __slots__ = ("_state", "_position_keys")

    def __init__(self, state: GameState | None = None) -> None:
        self._state = state if state is not None else GameState.initial()
        self._position_keys: list[str] = [repetition_key(self._state)]

    # ── IGameManager impl ────────────────────────────────────────────────

    def get_game_state(self) -> GameState:
        return self._state

    def get_legal_moves(self) -> list[Move]:
        return MoveGenerator(self._state.to_position()).generate_legal_moves()

    def make_move(self, move: Move) -> bool:
        legal = self._match_legal(move.from_sq, move.to_sq, move.promotion)
        if legal is None:
            _LOGGER.debug("Rejected illegal move %s", move)
            return False

        self._state = self._state.apply_move(legal)
        self._position_keys.append(repetition_key(self._state))

        result = self.is_game_over()
        if result is not None:
            _LOGGER.info("Game over after %s: %s", legal, result)
        return True

    def is_game_over(self) -> GameResult | None:
        return Rules.game_result(self._state.to_position(), self._position_keys)

    def reset(self) -> None:
        self._state = GameState.initial()
        self._position_keys = [repetition_key(self._state)]

    # ── Helpers ──────────────────────────────────────────────────────────

    def find_move(
        self,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType | None = None,
    ) -> Move | None:
        """The legal move with these coordinates, for callers that only have squares."""
        return self._match_legal(from_sq, to_sq, promotion)

    @property
    def position_keys(self) -> tuple[str, ...]:
        """Repetition keys of every position reached, starting position first."""
        return tuple(self._position_keys)

    def _match_legal(
        self,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType | None,
    ) -> Move | None:
        for legal in self.get_legal_moves():
            if legal.matches(from_sq, to_sq, promotion):
                return legal
        return None

    def __repr__(self) -> str:
        last = self._state.last_move
        return (
            f"GameManager(ply={len(self._state.move_history)}, "
            f"to_move={self._state.active_color}, "
            f"last={last})"
        )

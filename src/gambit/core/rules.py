"""High-level chess rules: checkmate, stalemate, draw detection."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from gambit.core.enums import Color, GameEndReason, PieceType
from gambit.core.move_generator import MoveGenerator
from gambit.core.types import is_light_square

if TYPE_CHECKING:
    from gambit.core.position import Position

FIFTY_MOVE_HALFMOVES = 100
REPETITION_LIMIT = 3

_MINOR_PIECES = (PieceType.KNIGHT, PieceType.BISHOP)


@dataclass(frozen=True, slots=True)
class GameResult:
    """Terminal outcome: *winner* is ``None`` for a draw."""

    winner: Color | None
    reason: GameEndReason

    @property
    def is_draw(self) -> bool:
        return self.winner is None

    def __str__(self) -> str:
        if self.winner is None:
            return f"draw ({self.reason.value})"
        return f"{self.winner} wins ({self.reason.value})"


class Rules:
    """Static rule-checker that operates on a :class:`Position`."""

    @staticmethod
    def is_in_check(position: Position) -> bool:
        return MoveGenerator(position).is_in_check(position.side_to_move)

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        gen = MoveGenerator(position)
        return gen.is_in_check(position.side_to_move) and not gen.generate_legal_moves()

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        gen = MoveGenerator(position)
        return not gen.is_in_check(position.side_to_move) and not gen.generate_legal_moves()

    @staticmethod
    def is_insufficient_material(position: Position) -> bool:
        """K vs K, K+B vs K, K+N vs K, K+B vs K+B (same-colored bishops).

        The last case goes beyond bare kings and a lone minor piece: two
        bishops on squares of one color can never mate, so FIDE treats the
        position as dead and it is scored as a draw here as well.
        """
        board = position.board
        total = board.piece_count()

        if total == 2:
            return True

        if total == 3:
            return any(
                board.has_piece(color, ptype)
                for color in Color
                for ptype in _MINOR_PIECES
            )

        if total == 4:
            white_bishops = board.pieces(Color.WHITE, PieceType.BISHOP)
            black_bishops = board.pieces(Color.BLACK, PieceType.BISHOP)
            if len(white_bishops) == 1 and len(black_bishops) == 1:
                return is_light_square(white_bishops[0]) == is_light_square(
                    black_bishops[0]
                )

        return False

    @staticmethod
    def is_fifty_move_rule(position: Position) -> bool:
        return position.halfmove_clock >= FIFTY_MOVE_HALFMOVES

    @staticmethod
    def is_threefold_repetition(position_keys: Sequence[str]) -> bool:
        """Whether the latest key of *position_keys* occurs three or more times."""
        if not position_keys:
            return False
        return position_keys.count(position_keys[-1]) >= REPETITION_LIMIT

    @staticmethod
    def game_result(
        position: Position,
        position_keys: Sequence[str] = (),
    ) -> GameResult | None:
        """Terminal result of *position*, or ``None`` while play continues.

        Conditions are reported in priority order: checkmate, stalemate,
        fifty-move rule, threefold repetition, insufficient material.
        """
        gen = MoveGenerator(position)
        side = position.side_to_move
        if not gen.generate_legal_moves():
            if gen.is_in_check(side):
                return GameResult(side.opposite, GameEndReason.CHECKMATE)
            return GameResult(None, GameEndReason.STALEMATE)

        if Rules.is_fifty_move_rule(position):
            return GameResult(None, GameEndReason.FIFTY_MOVE)
        if Rules.is_threefold_repetition(position_keys):
            return GameResult(None, GameEndReason.THREEFOLD_REPETITION)
        if Rules.is_insufficient_material(position):
            return GameResult(None, GameEndReason.INSUFFICIENT_MATERIAL)
        return None

"""Static evaluation: material, piece-square tables, king safety, pawn structure."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gambit.core.enums import Color, PieceType
from gambit.core.types import Square, file_of, rank_of

if TYPE_CHECKING:
    from gambit.core.board import Board
    from gambit.core.position import Position

PIECE_VALUES: dict[PieceType, int] = {
    PieceType.PAWN: 100,
    PieceType.KNIGHT: 320,
    PieceType.BISHOP: 330,
    PieceType.ROOK: 500,
    PieceType.QUEEN: 900,
    PieceType.KING: 20000,
}

KING_CENTER_PENALTY = 20
DOUBLED_PAWN_PENALTY = 20
ISOLATED_PAWN_PENALTY = 15

# Tables are laid out as seen from white: first row is rank 8, last is rank 1.
# A white piece on square ``sq`` reads index ``sq ^ 56``; black reads ``sq``.
PIECE_SQUARE_TABLES: dict[PieceType, tuple[int, ...]] = {
    PieceType.PAWN: (
         0,   0,   0,   0,   0,   0,   0,   0,
        50,  50,  50,  50,  50,  50,  50,  50,
        10,  10,  20,  30,  30,  20,  10,  10,
         5,   5,  10,  25,  25,  10,   5,   5,
         0,   0,   0,  20,  20,   0,   0,   0,
         5,  -5, -10,   0,   0, -10,  -5,   5,
         5,  10,  10, -20, -20,  10,  10,   5,
         0,   0,   0,   0,   0,   0,   0,   0,
    ),
    PieceType.KNIGHT: (
        -50, -40, -30, -30, -30, -30, -40, -50,
        -40, -20,   0,   0,   0,   0, -20, -40,
        -30,   0,  10,  15,  15,  10,   0, -30,
        -30,   5,  15,  20,  20,  15,   5, -30,
        -30,   0,  15,  20,  20,  15,   0, -30,
        -30,   5,  10,  15,  15,  10,   5, -30,
        -40, -20,   0,   5,   5,   0, -20, -40,
        -50, -40, -30, -30, -30, -30, -40, -50,
    ),
    PieceType.BISHOP: (
        -20, -10, -10, -10, -10, -10, -10, -20,
        -10,   0,   0,   0,   0,   0,   0, -10,
        -10,   0,   5,  10,  10,   5,   0, -10,
        -10,   5,   5,  10,  10,   5,   5, -10,
        -10,   0,  10,  10,  10,  10,   0, -10,
        -10,  10,  10,  10,  10,  10,  10, -10,
        -10,   5,   0,   0,   0,   0,   5, -10,
        -20, -10, -10, -10, -10, -10, -10, -20,
    ),
    PieceType.ROOK: (
         0,   0,   0,   0,   0,   0,   0,   0,
         5,  10,  10,  10,  10,  10,  10,   5,
        -5,   0,   0,   0,   0,   0,   0,  -5,
        -5,   0,   0,   0,   0,   0,   0,  -5,
        -5,   0,   0,   0,   0,   0,   0,  -5,
        -5,   0,   0,   0,   0,   0,   0,  -5,
        -5,   0,   0,   0,   0,   0,   0,  -5,
         0,   0,   0,   5,   5,   0,   0,   0,
    ),
    PieceType.QUEEN: (
        -20, -10, -10,  -5,  -5, -10, -10, -20,
        -10,   0,   0,   0,   0,   0,   0, -10,
        -10,   0,   5,   5,   5,   5,   0, -10,
         -5,   0,   5,   5,   5,   5,   0,  -5,
          0,   0,   5,   5,   5,   5,   0,  -5,
        -10,   5,   5,   5,   5,   5,   0, -10,
        -10,   0,   5,   0,   0,   0,   0, -10,
        -20, -10, -10,  -5,  -5, -10, -10, -20,
    ),
    PieceType.KING: (
        -30, -40, -40, -50, -50, -40, -40, -30,
        -30, -40, -40, -50, -50, -40, -40, -30,
        -30, -40, -40, -50, -50, -40, -40, -30,
        -30, -40, -40, -50, -50, -40, -40, -30,
        -20, -30, -30, -40, -40, -30, -30, -20,
        -10, -20, -20, -20, -20, -20, -20, -10,
         20,  20,   0,   0,   0,   0,  20,  20,
         20,  30,  10,   0,   0,  10,  30,  20,
    ),
}  # fmt: skip


def piece_square_bonus(piece_type: PieceType, color: Color, sq: Square) -> int:
    """Positional bonus for a *color* piece of *piece_type* standing on *sq*."""
    index = sq ^ 56 if color == Color.WHITE else sq
    return PIECE_SQUARE_TABLES[piece_type][index]


def king_safety_penalty(king_sq: Square) -> int:
    """Penalty for a king standing on the central c3-f6 block."""
    if 2 <= file_of(king_sq) <= 5 and 2 <= rank_of(king_sq) <= 5:
        return KING_CENTER_PENALTY
    return 0


def pawn_structure_penalty(board: Board, color: Color) -> int:
    """Doubled and isolated pawn penalties for *color*'s pawns."""
    files = [0] * 8
    for sq in board.pieces(color, PieceType.PAWN):
        files[file_of(sq)] += 1

    penalty = 0
    for file_idx, count in enumerate(files):
        if not count:
            continue
        if count > 1:
            penalty += DOUBLED_PAWN_PENALTY * (count - 1)
        left = files[file_idx - 1] if file_idx > 0 else 0
        right = files[file_idx + 1] if file_idx < 7 else 0
        if not left and not right:
            penalty += ISOLATED_PAWN_PENALTY
    return penalty


def evaluate_white(board: Board) -> int:
    """Centipawn balance of *board* from white's point of view."""
    score = 0
    for sq, piece in board.occupied():
        value = PIECE_VALUES[piece.piece_type] + piece_square_bonus(
            piece.piece_type, piece.color, sq
        )
        score += value if piece.color == Color.WHITE else -value

    for color, sign in ((Color.WHITE, 1), (Color.BLACK, -1)):
        if board.has_piece(color, PieceType.KING):
            score -= sign * king_safety_penalty(board.king_square(color))
        score -= sign * pawn_structure_penalty(board, color)
    return score


def evaluate(position: Position) -> int:
    """Static score of *position* from the side to move's point of view."""
    score = evaluate_white(position.board)
    return score if position.side_to_move == Color.WHITE else -score

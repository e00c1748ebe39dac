"""Position: mutable board + metadata with make/unmake for the search hot path."""

from __future__ import annotations

from dataclasses import dataclass

from gambit.core import zobrist
from gambit.core.board import Board
from gambit.core.enums import CastlingRights, CastlingSide, Color, PieceType
from gambit.core.move import Move
from gambit.core.piece import Piece
from gambit.core.types import Square, file_of, make_square, rank_of

# rook home square -> right lost when that square is vacated or captured on
_ROOK_HOMES: dict[Square, CastlingRights] = {
    make_square(0, 0): CastlingRights.WHITE_QUEENSIDE,
    make_square(7, 0): CastlingRights.WHITE_KINGSIDE,
    make_square(0, 7): CastlingRights.BLACK_QUEENSIDE,
    make_square(7, 7): CastlingRights.BLACK_KINGSIDE,
}
_KING_RIGHTS: dict[Color, CastlingRights] = {
    Color.WHITE: CastlingRights.WHITE_BOTH,
    Color.BLACK: CastlingRights.BLACK_BOTH,
}


def rook_squares(color: Color, side: CastlingSide) -> tuple[Square, Square]:
    """``(rook_from, rook_to)`` for *color* castling on *side*."""
    rank = 0 if color == Color.WHITE else 7
    if side is CastlingSide.KINGSIDE:
        return make_square(7, rank), make_square(5, rank)
    return make_square(0, rank), make_square(3, rank)


def en_passant_victim_square(move: Move) -> Square:
    """Square of the pawn removed by an en-passant capture."""
    return make_square(file_of(move.to_sq), rank_of(move.from_sq))


@dataclass(slots=True)
class _UndoRecord:
    """Everything :meth:`Position.make_move` overwrites irreversibly."""

    castling: CastlingRights
    en_passant: Square | None
    halfmove_clock: int
    captured: Piece | None
    hash_key: int


class Position:
    """Full chess position: board + side to move + castling + en passant + clocks.

    Unlike :class:`~gambit.core.state.GameState` this object is mutable.
    :meth:`make_move` pushes an undo record and :meth:`unmake_move` pops it, so
    the search can walk the tree without allocating a new position per node.
    """

    __slots__ = (
        "board",
        "side_to_move",
        "castling",
        "en_passant",
        "halfmove_clock",
        "fullmove_number",
        "_hash",
        "_undo",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant = en_passant
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number
        self._hash = zobrist.hash_position(
            self.board, side_to_move, castling, en_passant
        )
        self._undo: list[_UndoRecord] = []

    # ── Core move operations ─────────────────────────────────────────────

    def make_move(self, move: Move) -> None:
        """Apply *move* (assumed pseudo-legal) and push an undo record."""
        board = self.board
        piece = board[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {move.from_sq}")

        capture_sq = en_passant_victim_square(move) if move.en_passant else move.to_sq
        captured = board[capture_sq]

        self._undo.append(
            _UndoRecord(
                castling=self.castling,
                en_passant=self.en_passant,
                halfmove_clock=self.halfmove_clock,
                captured=captured,
                hash_key=self._hash,
            )
        )

        key = self._hash ^ zobrist.piece_key(piece, move.from_sq)
        board[move.from_sq] = None
        if captured is not None:
            key ^= zobrist.piece_key(captured, capture_sq)
            board[capture_sq] = None

        placed = piece
        if move.promotion is not None:
            placed = Piece(piece.color, move.promotion)
        board[move.to_sq] = placed
        key ^= zobrist.piece_key(placed, move.to_sq)

        if move.castling is not None:
            rook_from, rook_to = rook_squares(piece.color, move.castling)
            rook = board[rook_from]
            assert rook is not None
            board[rook_from] = None
            board[rook_to] = rook
            key ^= zobrist.piece_key(rook, rook_from) ^ zobrist.piece_key(rook, rook_to)

        # En passant target lives for exactly one ply.
        if self.en_passant is not None:
            key ^= zobrist.en_passant_key(self.en_passant)
        self.en_passant = None
        if move.is_double_push:
            self.en_passant = (move.from_sq + move.to_sq) // 2
            key ^= zobrist.en_passant_key(self.en_passant)

        castling = self.castling
        if piece.piece_type == PieceType.KING:
            castling &= ~_KING_RIGHTS[piece.color]
        for sq in (move.from_sq, move.to_sq):
            right = _ROOK_HOMES.get(sq)
            if right is not None:
                castling &= ~right
        if castling != self.castling:
            key ^= zobrist.castling_key(self.castling) ^ zobrist.castling_key(castling)
            self.castling = castling

        if piece.piece_type == PieceType.PAWN or captured is not None:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1
        if self.side_to_move == Color.BLACK:
            self.fullmove_number += 1

        self.side_to_move = self.side_to_move.opposite
        self._hash = key ^ zobrist.side_key()

    def unmake_move(self, move: Move) -> None:
        """Undo the last :meth:`make_move`, which must have been *move*."""
        record = self._undo.pop()
        board = self.board

        self.side_to_move = self.side_to_move.opposite
        if self.side_to_move == Color.BLACK:
            self.fullmove_number -= 1

        piece = board[move.to_sq]
        assert piece is not None
        if move.promotion is not None:
            piece = Piece(piece.color, PieceType.PAWN)

        board[move.from_sq] = piece
        if move.en_passant:
            board[move.to_sq] = None
            board[en_passant_victim_square(move)] = record.captured
        else:
            board[move.to_sq] = record.captured

        if move.castling is not None:
            rook_from, rook_to = rook_squares(piece.color, move.castling)
            board[rook_from] = board[rook_to]
            board[rook_to] = None

        self.castling = record.castling
        self.en_passant = record.en_passant
        self.halfmove_clock = record.halfmove_clock
        self._hash = record.hash_key

    # ── Utilities ────────────────────────────────────────────────────────

    @property
    def hash_key(self) -> int:
        """Zobrist key of pieces, side to move, castling rights and en passant."""
        return self._hash

    @property
    def ply_depth(self) -> int:
        """Number of moves currently made on top of the root."""
        return len(self._undo)

    def copy(self) -> Position:
        """Independent copy without undo history."""
        return Position(
            board=self.board.copy(),
            side_to_move=self.side_to_move,
            castling=self.castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
        )

    def __repr__(self) -> str:
        return (
            f"Position(side_to_move={self.side_to_move}, castling={self.castling!r}, "
            f"en_passant={self.en_passant}, halfmove_clock={self.halfmove_clock}, "
            f"fullmove_number={self.fullmove_number})\n{self.board!r}"
        )

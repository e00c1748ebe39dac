"""Board - piece placement on an 8x8 board."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from gambit.core.enums import Color, PieceType
from gambit.core.piece import Piece
from gambit.core.types import Square, make_square

Placement = tuple[Piece | None, ...]

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


def iter_bits(bitboard: int) -> Iterator[Square]:
    """Yield the set squares of *bitboard*, lowest first."""
    while bitboard:
        lsb = bitboard & -bitboard
        yield lsb.bit_length() - 1
        bitboard ^= lsb


class Board:
    """Mutable 64-square mailbox with incremental per-piece bitboards.

    The mailbox answers "what is on this square", the bitboards answer
    "where are this side's knights" without scanning all 64 squares.
    """

    __slots__ = ("_squares", "_bitboards", "_occupancy", "_kings")

    def __init__(self) -> None:
        self._squares: list[Piece | None] = [None] * 64
        # [color][piece_type] -> bitboard; index 0 of the inner list is unused.
        self._bitboards: list[list[int]] = [[0] * 7, [0] * 7]
        self._occupancy: list[int] = [0, 0]
        self._kings: list[Square | None] = [None, None]

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        old = self._squares[sq]
        if old == piece:
            return

        mask = 1 << sq
        if old is not None:
            self._bitboards[old.color][old.piece_type] &= ~mask
            self._occupancy[old.color] &= ~mask
            if old.piece_type == PieceType.KING and self._kings[old.color] == sq:
                self._kings[old.color] = None

        self._squares[sq] = piece
        if piece is None:
            return

        self._bitboards[piece.color][piece.piece_type] |= mask
        self._occupancy[piece.color] |= mask
        if piece.piece_type == PieceType.KING:
            self._kings[piece.color] = sq

    def is_empty(self, sq: Square) -> bool:
        return self._squares[sq] is None

    # -- Query helpers ------------------------------------------------------

    def pieces_bitboard(self, color: Color, piece_type: PieceType) -> int:
        """Bitboard of squares occupied by *color*'s *piece_type*."""
        return self._bitboards[color][piece_type]

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        """Squares occupied by *color*'s *piece_type*."""
        return list(iter_bits(self._bitboards[color][piece_type]))

    def count(self, color: Color, piece_type: PieceType) -> int:
        return self._bitboards[color][piece_type].bit_count()

    def has_piece(self, color: Color, piece_type: PieceType) -> bool:
        return bool(self._bitboards[color][piece_type])

    def occupancy(self, color: Color) -> int:
        """Bitboard of all squares occupied by *color*."""
        return self._occupancy[color]

    def all_pieces(self, color: Color) -> list[Square]:
        return list(iter_bits(self._occupancy[color]))

    def piece_count(self) -> int:
        """Number of pieces of both colors on the board."""
        return (self._occupancy[0] | self._occupancy[1]).bit_count()

    def occupied(self) -> Iterator[tuple[Square, Piece]]:
        """``(square, piece)`` pairs for every occupied square, a1 first."""
        for sq in iter_bits(self._occupancy[0] | self._occupancy[1]):
            piece = self._squares[sq]
            assert piece is not None
            yield sq, piece

    def king_square(self, color: Color) -> Square:
        """Return the single king square for *color*."""
        sq = self._kings[color]
        if sq is None:
            raise ValueError(f"No {color.name} king on board")
        return sq

    # -- Copying / conversion -----------------------------------------------

    def copy(self) -> Board:
        b = Board()
        b._squares = self._squares.copy()
        b._bitboards = [row.copy() for row in self._bitboards]
        b._occupancy = self._occupancy.copy()
        b._kings = self._kings.copy()
        return b

    def placement(self) -> Placement:
        """Immutable 64-tuple snapshot of the mailbox."""
        return tuple(self._squares)

    @classmethod
    def from_placement(cls, placement: Iterable[Piece | None]) -> Board:
        board = cls()
        for sq, piece in enumerate(placement):
            if piece is not None:
                board[sq] = piece
        return board

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        b = cls()
        for file, ptype in enumerate(_BACK_RANK):
            b[make_square(file, 0)] = Piece(Color.WHITE, ptype)
            b[make_square(file, 1)] = Piece(Color.WHITE, PieceType.PAWN)
            b[make_square(file, 6)] = Piece(Color.BLACK, PieceType.PAWN)
            b[make_square(file, 7)] = Piece(Color.BLACK, ptype)
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._squares == other._squares

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            cells = (self._squares[make_square(f, rank)] for f in range(8))
            rows.append(f"{rank + 1} " + " ".join(str(p) if p else "." for p in cells))
        rows.append("  a b c d e f g h")
        return "\n".join(rows)

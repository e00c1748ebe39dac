"""Legal and pseudo-legal move generation + attack detection."""

from __future__ import annotations

from typing import TYPE_CHECKING, assert_never

from gambit.core.board import iter_bits
from gambit.core.enums import CastlingRights, CastlingSide, Color, PieceType
from gambit.core.move import Move
from gambit.core.piece import Piece
from gambit.core.position import rook_squares
from gambit.core.types import Square, make_square, squares_between

if TYPE_CHECKING:
    from gambit.core.position import Position
    from gambit.core.state import GameState


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1), (-2, 1), (-1, -2), (-1, 2),
    (1, -2), (1, 2), (2, -1), (2, 1),
)  # fmt: skip
KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1), (-1, 0), (-1, 1), (0, -1),
    (0, 1), (1, -1), (1, 0), (1, 1),
)  # fmt: skip
BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)

_KING_HOME: dict[Color, Square] = {
    Color.WHITE: make_square(4, 0),
    Color.BLACK: make_square(4, 7),
}


# -- Precomputed lookup tables ---------------------------------------------


def _on_board_targets(sq: Square, offsets: tuple[tuple[int, int], ...]) -> tuple[Square, ...]:
    file_idx, rank_idx = sq & 7, sq >> 3
    return tuple(
        make_square(file_idx + df, rank_idx + dr)
        for df, dr in offsets
        if 0 <= file_idx + df < 8 and 0 <= rank_idx + dr < 8
    )


def _ray(sq: Square, df: int, dr: int) -> tuple[Square, ...]:
    squares: list[Square] = []
    f, r = (sq & 7) + df, (sq >> 3) + dr
    while 0 <= f < 8 and 0 <= r < 8:
        squares.append(make_square(f, r))
        f += df
        r += dr
    return tuple(squares)


def _mask(squares: tuple[Square, ...]) -> int:
    bits = 0
    for sq in squares:
        bits |= 1 << sq
    return bits


_KNIGHT_TARGETS = tuple(_on_board_targets(sq, KNIGHT_OFFSETS) for sq in range(64))
_KING_TARGETS = tuple(_on_board_targets(sq, KING_OFFSETS) for sq in range(64))
_KNIGHT_MASKS = tuple(_mask(t) for t in _KNIGHT_TARGETS)
_KING_MASKS = tuple(_mask(t) for t in _KING_TARGETS)

# [attacker color][square] -> squares from which a pawn of that color attacks it
_PAWN_ATTACKER_MASKS = (
    tuple(_mask(_on_board_targets(sq, ((-1, -1), (1, -1)))) for sq in range(64)),
    tuple(_mask(_on_board_targets(sq, ((-1, 1), (1, 1)))) for sq in range(64)),
)

_BISHOP_RAYS = tuple(tuple(_ray(sq, df, dr) for df, dr in BISHOP_DIRS) for sq in range(64))
_ROOK_RAYS = tuple(tuple(_ray(sq, df, dr) for df, dr in ROOK_DIRS) for sq in range(64))
_QUEEN_RAYS = tuple(b + r for b, r in zip(_BISHOP_RAYS, _ROOK_RAYS))


class MoveGenerator:
    """Generates moves for a given :class:`Position`.

    Legality filtering makes and unmakes each candidate on the position, so
    the position is temporarily mutated but always restored before returning.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move."""
        return [m for m in self.generate_pseudo_legal_moves() if self.is_legal(m)]

    def generate_captures(self) -> list[Move]:
        """Legal captures (including en passant and capturing promotions)."""
        return [
            m
            for m in self.generate_pseudo_legal_moves()
            if m.captured is not None and self.is_legal(m)
        ]

    def generate_pseudo_legal_moves(self, color: Color | None = None) -> list[Move]:
        """Moves obeying piece-movement rules; they may leave the king attacked.

        *color* defaults to the side to move. Generating for the other side is
        used to ask which squares that side could move to.
        """
        if color is None:
            color = self._pos.side_to_move
        moves: list[Move] = []
        board = self._board
        for sq in iter_bits(board.occupancy(color)):
            piece = board[sq]
            assert piece is not None
            self._gen_piece(sq, piece, moves)
        return moves

    def is_legal(self, move: Move) -> bool:
        """Whether pseudo-legal *move* keeps the mover's king safe."""
        mover = move.piece.color
        self._pos.make_move(move)
        try:
            return not self.is_in_check(mover)
        finally:
            self._pos.unmake_move(move)

    # -- Attack detection ---------------------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        return self.is_square_attacked(self._board.king_square(color), color.opposite)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?"""
        board = self._board

        if board.pieces_bitboard(by_color, PieceType.PAWN) & _PAWN_ATTACKER_MASKS[by_color][sq]:
            return True
        if board.pieces_bitboard(by_color, PieceType.KNIGHT) & _KNIGHT_MASKS[sq]:
            return True
        if board.pieces_bitboard(by_color, PieceType.KING) & _KING_MASKS[sq]:
            return True

        queens = board.pieces_bitboard(by_color, PieceType.QUEEN)
        diagonal = board.pieces_bitboard(by_color, PieceType.BISHOP) | queens
        if diagonal and self._ray_hits(_BISHOP_RAYS[sq], diagonal):
            return True
        straight = board.pieces_bitboard(by_color, PieceType.ROOK) | queens
        return bool(straight) and self._ray_hits(_ROOK_RAYS[sq], straight)

    def _ray_hits(self, rays: tuple[tuple[Square, ...], ...], attackers: int) -> bool:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                if board[to_sq] is None:
                    continue
                if attackers >> to_sq & 1:
                    return True
                break
        return False

    # -- Piece-specific generators -----------------------------------------

    def _gen_piece(self, sq: Square, piece: Piece, moves: list[Move]) -> None:
        match piece.piece_type:
            case PieceType.PAWN:
                self._gen_pawn(sq, piece, moves)
            case PieceType.KNIGHT:
                self._gen_steps(sq, piece, _KNIGHT_TARGETS[sq], moves)
            case PieceType.BISHOP:
                self._gen_sliding(sq, piece, _BISHOP_RAYS[sq], moves)
            case PieceType.ROOK:
                self._gen_sliding(sq, piece, _ROOK_RAYS[sq], moves)
            case PieceType.QUEEN:
                self._gen_sliding(sq, piece, _QUEEN_RAYS[sq], moves)
            case PieceType.KING:
                self._gen_steps(sq, piece, _KING_TARGETS[sq], moves)
                self._gen_castling(sq, piece, moves)
            case _:
                assert_never(piece.piece_type)

    def _gen_pawn(self, sq: Square, pawn: Piece, moves: list[Move]) -> None:
        board = self._board
        file_idx, rank_idx = sq & 7, sq >> 3
        if pawn.color == Color.WHITE:
            step, start_rank, last_rank = 1, 1, 7
        else:
            step, start_rank, last_rank = -1, 6, 0

        next_rank = rank_idx + step
        if not 0 <= next_rank < 8:
            return
        promotes = next_rank == last_rank

        one_step = make_square(file_idx, next_rank)
        if board.is_empty(one_step):
            if promotes:
                self._add_promotions(sq, one_step, pawn, None, moves)
            else:
                moves.append(Move(sq, one_step, pawn))
                if rank_idx == start_rank:
                    two_step = make_square(file_idx, next_rank + step)
                    if board.is_empty(two_step):
                        moves.append(Move(sq, two_step, pawn))

        ep_square = self._pos.en_passant if pawn.color == self._pos.side_to_move else None
        for df in (-1, 1):
            cap_file = file_idx + df
            if not 0 <= cap_file < 8:
                continue
            cap_sq = make_square(cap_file, next_rank)
            target = board[cap_sq]
            if target is not None:
                if target.color == pawn.color:
                    continue
                if promotes:
                    self._add_promotions(sq, cap_sq, pawn, target, moves)
                else:
                    moves.append(Move(sq, cap_sq, pawn, captured=target))
            elif cap_sq == ep_square:
                victim = board[make_square(cap_file, rank_idx)]
                if (
                    victim is not None
                    and victim.piece_type == PieceType.PAWN
                    and victim.color != pawn.color
                ):
                    moves.append(Move(sq, cap_sq, pawn, captured=victim, en_passant=True))

    @staticmethod
    def _add_promotions(
        from_sq: Square,
        to_sq: Square,
        pawn: Piece,
        captured: Piece | None,
        moves: list[Move],
    ) -> None:
        for ptype in PROMOTION_TYPES:
            moves.append(Move(from_sq, to_sq, pawn, captured=captured, promotion=ptype))

    def _gen_steps(
        self,
        sq: Square,
        piece: Piece,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for to_sq in targets:
            target = board[to_sq]
            if target is None:
                moves.append(Move(sq, to_sq, piece))
            elif target.color != piece.color:
                moves.append(Move(sq, to_sq, piece, captured=target))

    def _gen_sliding(
        self,
        sq: Square,
        piece: Piece,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq, piece))
                    continue
                if target.color != piece.color:
                    moves.append(Move(sq, to_sq, piece, captured=target))
                break

    def _gen_castling(self, king_sq: Square, king: Piece, moves: list[Move]) -> None:
        color = king.color
        if king_sq != _KING_HOME[color]:
            return
        rights = self._pos.castling
        if not rights & (
            CastlingRights.WHITE_BOTH if color == Color.WHITE else CastlingRights.BLACK_BOTH
        ):
            return

        board = self._board
        opponent = color.opposite
        in_check: bool | None = None
        for side in (CastlingSide.KINGSIDE, CastlingSide.QUEENSIDE):
            if not rights & CastlingRights.for_side(color, side):
                continue
            rook_home, rook_target = rook_squares(color, side)
            if board[rook_home] != Piece(color, PieceType.ROOK):
                continue
            if any(board[s] is not None for s in squares_between(king_sq, rook_home)):
                continue

            # The king may not castle out of, through or into check.
            if in_check is None:
                in_check = self.is_square_attacked(king_sq, opponent)
            if in_check:
                return
            king_target = king_sq + 2 if side is CastlingSide.KINGSIDE else king_sq - 2
            if self.is_square_attacked(rook_target, opponent):
                continue
            if self.is_square_attacked(king_target, opponent):
                continue
            moves.append(Move(king_sq, king_target, king, castling=side))


# -- Snapshot-level helpers ---------------------------------------------------


def generate_legal_moves(state: GameState) -> list[Move]:
    """Legal moves for the side to move in an immutable snapshot."""
    return MoveGenerator(state.to_position()).generate_legal_moves()


def is_in_check(state: GameState, color: Color) -> bool:
    """Whether *color*'s king is attacked in *state*."""
    return MoveGenerator(state.to_position()).is_in_check(color)

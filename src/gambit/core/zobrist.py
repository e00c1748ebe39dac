"""Zobrist keys used to hash positions for the transposition table."""

from __future__ import annotations

from typing import Final

from gambit.core.board import Board
from gambit.core.enums import CastlingRights, Color
from gambit.core.piece import Piece
from gambit.core.types import Square, file_of

_SEED: Final = 0x5EED_C0FF_EE15_B1A5
_MASK_64: Final = 0xFFFFFFFFFFFFFFFF


def _splitmix64(state: int) -> int:
    """Deterministic 64-bit bit-mixer; the same keys on every run."""
    z = (state + 0x9E3779B97F4A7C15) & _MASK_64
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & _MASK_64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & _MASK_64
    return z ^ (z >> 31)


def _key_stream(start: int, count: int) -> tuple[int, ...]:
    return tuple(_splitmix64(_SEED + start + i) for i in range(count))


# [color][piece_type][square]; piece_type 0 is a placeholder so PieceType indexes directly.
_PIECE_KEYS: Final = tuple(
    tuple(_key_stream(color * 7 * 64 + ptype * 64, 64) for ptype in range(7))
    for color in range(2)
)
_BASE: Final = 2 * 7 * 64
_BLACK_TO_MOVE_KEY: Final = _splitmix64(_SEED + _BASE)
_CASTLING_KEYS: Final = _key_stream(_BASE + 1, 16)
_EN_PASSANT_FILE_KEYS: Final = _key_stream(_BASE + 17, 8)


def piece_key(piece: Piece, sq: Square) -> int:
    return _PIECE_KEYS[piece.color][piece.piece_type][sq]


def side_key() -> int:
    """Toggle applied whenever the side to move changes."""
    return _BLACK_TO_MOVE_KEY


def castling_key(castling: CastlingRights) -> int:
    return _CASTLING_KEYS[int(castling) & 0xF]


def en_passant_key(ep_square: Square) -> int:
    """Only the file matters: the rank follows from the side to move."""
    return _EN_PASSANT_FILE_KEYS[file_of(ep_square)]


def hash_position(
    board: Board,
    side_to_move: Color,
    castling: CastlingRights,
    en_passant: Square | None,
) -> int:
    """Full (non-incremental) key of a position."""
    key = castling_key(castling)
    if side_to_move == Color.BLACK:
        key ^= _BLACK_TO_MOVE_KEY
    if en_passant is not None:
        key ^= en_passant_key(en_passant)
    for sq, piece in board.occupied():
        key ^= piece_key(piece, sq)
    return key

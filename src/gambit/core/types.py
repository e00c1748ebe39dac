"""Square type alias and board geometry helpers.

Board layout (Little-Endian Rank-File mapping):
    a1=0, b1=1, ..., h1=7
    a2=8, b2=9, ..., h2=15
    ...
    a8=56, b8=57, ..., h8=63

Every helper here is a pure function of its arguments.
"""

from __future__ import annotations

from typing import NamedTuple, TypeAlias

Square: TypeAlias = int  # 0–63

_FILES = "abcdefgh"
_RANKS = "12345678"


class Distance(NamedTuple):
    """Absolute file and rank separation between two squares."""

    files: int
    ranks: int


def file_of(sq: Square) -> int:
    """File index 0–7 (a–h)."""
    return sq & 7


def rank_of(sq: Square) -> int:
    """Rank index 0–7 (1–8)."""
    return sq >> 3


def make_square(file: int, rank: int) -> Square:
    """Create square from file (0–7) and rank (0–7)."""
    return rank * 8 + file


def square_name(sq: Square) -> str:
    """Human-readable name, e.g. 0 → 'a1', 63 → 'h8'."""
    return _FILES[file_of(sq)] + _RANKS[rank_of(sq)]


def parse_square(name: str) -> Square:
    """Parse square name, e.g. 'e4' → 28."""
    if len(name) != 2 or name[0] not in _FILES or name[1] not in _RANKS:
        raise ValueError(f"Invalid square name: {name!r}")
    return make_square(_FILES.index(name[0]), _RANKS.index(name[1]))


def is_valid_square(value: int | str) -> bool:
    """Whether *value* is a square index 0–63 or a name such as ``'e4'``."""
    if isinstance(value, str):
        return len(value) == 2 and value[0] in _FILES and value[1] in _RANKS
    return 0 <= value < 64


def square_to_coordinates(sq: Square) -> tuple[int, int]:
    """``(file, rank)`` pair, both 0–7."""
    return file_of(sq), rank_of(sq)


def coordinates_to_square(file: int, rank: int) -> Square | None:
    """Square at *file*/*rank*, or ``None`` when off the board."""
    if not (0 <= file < 8 and 0 <= rank < 8):
        return None
    return make_square(file, rank)


def distance(from_sq: Square, to_sq: Square) -> Distance:
    return Distance(
        abs(file_of(to_sq) - file_of(from_sq)),
        abs(rank_of(to_sq) - rank_of(from_sq)),
    )


def squares_between(from_sq: Square, to_sq: Square) -> list[Square]:
    """Squares strictly between two squares sharing a rank, file or diagonal.

    The result is ordered from *from_sq* towards *to_sq*. Adjacent or equal
    squares yield an empty list; unaligned pairs raise :class:`ValueError`.
    """
    df = file_of(to_sq) - file_of(from_sq)
    dr = rank_of(to_sq) - rank_of(from_sq)
    if df and dr and abs(df) != abs(dr):
        raise ValueError(
            f"Squares are not aligned: {square_name(from_sq)!r}, {square_name(to_sq)!r}"
        )

    step_f = (df > 0) - (df < 0)
    step_r = (dr > 0) - (dr < 0)
    steps = max(abs(df), abs(dr))
    return [
        make_square(file_of(from_sq) + i * step_f, rank_of(from_sq) + i * step_r)
        for i in range(1, steps)
    ]


def is_light_square(sq: Square) -> bool:
    """a1 is dark; colors alternate along ranks and files."""
    return (file_of(sq) + rank_of(sq)) % 2 == 1


# ── Named square constants ──────────────────────────────────────────────────

A1, B1, C1, D1, E1, F1, G1, H1 = range(0, 8)
A2, B2, C2, D2, E2, F2, G2, H2 = range(8, 16)
A3, B3, C3, D3, E3, F3, G3, H3 = range(16, 24)
A4, B4, C4, D4, E4, F4, G4, H4 = range(24, 32)
A5, B5, C5, D5, E5, F5, G5, H5 = range(32, 40)
A6, B6, C6, D6, E6, F6, G6, H6 = range(40, 48)
A7, B7, C7, D7, E7, F7, G7, H7 = range(48, 56)
A8, B8, C8, D8, E8, F8, G8, H8 = range(56, 64)

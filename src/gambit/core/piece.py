"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass

from gambit.core.enums import Color, PieceType

_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "p",
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
    PieceType.KING: "k",
}
_TYPES_BY_LETTER: dict[str, PieceType] = {v: k for k, v in _LETTERS.items()}


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable value object: a piece kind owned by one side."""

    color: Color
    piece_type: PieceType

    def __str__(self) -> str:
        """FEN character (uppercase = white, lowercase = black)."""
        letter = _LETTERS[self.piece_type]
        return letter.upper() if self.color == Color.WHITE else letter

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Create piece from FEN character, e.g. 'N' → white knight."""
        ptype = _TYPES_BY_LETTER.get(char.lower()) if len(char) == 1 else None
        if ptype is None:
            raise ValueError(f"Invalid piece character: {char!r}")
        color = Color.WHITE if char.isupper() else Color.BLACK
        return cls(color, ptype)


def promotion_letter(piece_type: PieceType) -> str:
    """Lowercase letter used for *piece_type* in long-algebraic promotions."""
    return _LETTERS[piece_type]


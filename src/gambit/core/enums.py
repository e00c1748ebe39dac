"""Core enumerations and flags for the chess domain."""

from __future__ import annotations

from enum import Enum, IntEnum, IntFlag, auto


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Chess piece kinds ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6


class CastlingSide(Enum):
    """Wing on which a castling move is played."""

    KINGSIDE = "kingside"
    QUEENSIDE = "queenside"


class CastlingRights(IntFlag):
    """Four independent castling availability bits."""

    NONE = 0
    WHITE_KINGSIDE = auto()
    WHITE_QUEENSIDE = auto()
    BLACK_KINGSIDE = auto()
    BLACK_QUEENSIDE = auto()

    WHITE_BOTH = WHITE_KINGSIDE | WHITE_QUEENSIDE
    BLACK_BOTH = BLACK_KINGSIDE | BLACK_QUEENSIDE
    ALL = WHITE_BOTH | BLACK_BOTH

    @classmethod
    def for_side(cls, color: Color, side: CastlingSide) -> CastlingRights:
        """The single right bit for *color* castling on *side*."""
        if color == Color.WHITE:
            if side is CastlingSide.KINGSIDE:
                return cls.WHITE_KINGSIDE
            return cls.WHITE_QUEENSIDE
        if side is CastlingSide.KINGSIDE:
            return cls.BLACK_KINGSIDE
        return cls.BLACK_QUEENSIDE


class GameEndReason(Enum):
    """Why a game reached a terminal state."""

    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    FIFTY_MOVE = "fifty-move"
    THREEFOLD_REPETITION = "threefold-repetition"
    INSUFFICIENT_MATERIAL = "insufficient-material"

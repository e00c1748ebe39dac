"""Move value object."""

from __future__ import annotations

from dataclasses import dataclass

from gambit.core.enums import CastlingSide, PieceType
from gambit.core.piece import Piece, promotion_letter
from gambit.core.types import Square, rank_of, square_name


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable description of a single ply.

    Moves are produced by :class:`~gambit.core.move_generator.MoveGenerator`
    and carry everything needed to apply them: the moving piece, the captured
    piece (for en passant, the pawn beside the landing square), the promotion
    kind and the castling wing.
    """

    from_sq: Square
    to_sq: Square
    piece: Piece
    captured: Piece | None = None
    promotion: PieceType | None = None
    castling: CastlingSide | None = None
    en_passant: bool = False

    # ── Classification ───────────────────────────────────────────────────

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    @property
    def is_double_push(self) -> bool:
        return (
            self.piece.piece_type == PieceType.PAWN
            and abs(rank_of(self.to_sq) - rank_of(self.from_sq)) == 2
        )

    def matches(
        self,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType | None = None,
    ) -> bool:
        """True if this move has the given origin, destination and promotion kind."""
        return (
            self.from_sq == from_sq
            and self.to_sq == to_sq
            and self.promotion == promotion
        )

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += promotion_letter(self.promotion)
        return base

    @property
    def uci(self) -> str:
        """Long-algebraic coordinate notation, e.g. ``e7e8q``."""
        return str(self)

"""Immutable game-state snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field

from gambit.core.board import Board, Placement
from gambit.core.enums import CastlingRights, Color
from gambit.core.move import Move
from gambit.core.piece import Piece
from gambit.core.position import Position
from gambit.core.types import Square


@dataclass(frozen=True, slots=True)
class GameState:
    """Value snapshot of a game: placement, side to move, rights, clocks, history.

    Snapshots never change. :meth:`apply_move` returns a new snapshot, which is
    how the game layer advances one ply at a time. The search engine converts a
    snapshot to a mutable :class:`Position` with :meth:`to_position` instead of
    cloning snapshots per node.
    """

    placement: Placement
    active_color: Color = Color.WHITE
    castling: CastlingRights = CastlingRights.ALL
    en_passant: Square | None = None
    halfmove_clock: int = 0
    fullmove_number: int = 1
    move_history: tuple[Move, ...] = field(default=())

    def __post_init__(self) -> None:
        if len(self.placement) != 64:
            raise ValueError(f"Placement must have 64 squares, got {len(self.placement)}")

    # ── Construction ─────────────────────────────────────────────────────

    @classmethod
    def initial(cls) -> GameState:
        """Standard starting position, white to move, full castling rights."""
        return cls(placement=Board.initial().placement())

    @classmethod
    def from_position(
        cls,
        position: Position,
        move_history: tuple[Move, ...] = (),
    ) -> GameState:
        return cls(
            placement=position.board.placement(),
            active_color=position.side_to_move,
            castling=position.castling,
            en_passant=position.en_passant,
            halfmove_clock=position.halfmove_clock,
            fullmove_number=position.fullmove_number,
            move_history=move_history,
        )

    def to_position(self) -> Position:
        """Fresh mutable position; changes to it never affect this snapshot."""
        return Position(
            board=Board.from_placement(self.placement),
            side_to_move=self.active_color,
            castling=self.castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
        )

    # ── Functional update ────────────────────────────────────────────────

    def apply_move(self, move: Move) -> GameState:
        """Snapshot after *move*; legality is the caller's responsibility."""
        position = self.to_position()
        position.make_move(move)
        return GameState.from_position(position, self.move_history + (move,))

    # ── Query helpers ────────────────────────────────────────────────────

    def piece_at(self, sq: Square) -> Piece | None:
        return self.placement[sq]

    @property
    def white_kingside(self) -> bool:
        return bool(self.castling & CastlingRights.WHITE_KINGSIDE)

    @property
    def white_queenside(self) -> bool:
        return bool(self.castling & CastlingRights.WHITE_QUEENSIDE)

    @property
    def black_kingside(self) -> bool:
        return bool(self.castling & CastlingRights.BLACK_KINGSIDE)

    @property
    def black_queenside(self) -> bool:
        return bool(self.castling & CastlingRights.BLACK_QUEENSIDE)

    @property
    def last_move(self) -> Move | None:
        return self.move_history[-1] if self.move_history else None

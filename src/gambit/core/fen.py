"""FEN parsing and serialization for game-state snapshots."""

from __future__ import annotations

from gambit.core.board import Placement
from gambit.core.enums import CastlingRights, Color
from gambit.core.piece import Piece
from gambit.core.state import GameState
from gambit.core.types import Square, make_square, parse_square, rank_of, square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_CHARS: tuple[tuple[str, CastlingRights], ...] = (
    ("K", CastlingRights.WHITE_KINGSIDE),
    ("Q", CastlingRights.WHITE_QUEENSIDE),
    ("k", CastlingRights.BLACK_KINGSIDE),
    ("q", CastlingRights.BLACK_QUEENSIDE),
)


def _parse_placement(text: str, fen: str) -> Placement:
    ranks = text.split("/")
    if len(ranks) != 8:
        raise ValueError(f"Invalid FEN board (must contain 8 ranks): {fen!r}")

    squares: list[Piece | None] = [None] * 64
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch.isdigit():
                if not 1 <= int(ch) <= 8:
                    raise ValueError(f"Invalid FEN digit {ch!r}: {fen!r}")
                file += int(ch)
            else:
                if file >= 8:
                    raise ValueError(f"Invalid FEN rank width: {fen!r}")
                squares[make_square(file, rank)] = Piece.from_char(ch)
                file += 1
        if file != 8:
            raise ValueError(f"Invalid FEN rank width: {fen!r}")
    return tuple(squares)


def state_from_fen(fen: str) -> GameState:
    """Parse a FEN string into a :class:`GameState` with empty history."""
    parts = fen.split()
    if not 4 <= len(parts) <= 6:
        raise ValueError(f"Invalid FEN (need 4-6 fields): {fen!r}")
    placement_part, side_part, castling_part, ep_part = parts[:4]

    placement = _parse_placement(placement_part, fen)

    if side_part not in ("w", "b"):
        raise ValueError(f"Invalid FEN side-to-move field: {side_part!r}")
    side = Color.WHITE if side_part == "w" else Color.BLACK

    castling = CastlingRights.NONE
    if castling_part != "-":
        rights = dict(_CASTLING_CHARS)
        if len(set(castling_part)) != len(castling_part) or any(
            ch not in rights for ch in castling_part
        ):
            raise ValueError(f"Invalid FEN castling field: {castling_part!r}")
        for ch in castling_part:
            castling |= rights[ch]

    ep: Square | None = None
    if ep_part != "-":
        ep = parse_square(ep_part)
        if rank_of(ep) != (5 if side == Color.WHITE else 2):
            raise ValueError(f"Invalid FEN en-passant square for side to move: {ep_part!r}")

    try:
        halfmove = int(parts[4]) if len(parts) > 4 else 0
        fullmove = int(parts[5]) if len(parts) > 5 else 1
    except ValueError:
        raise ValueError(f"Invalid FEN clock fields: {fen!r}") from None
    if halfmove < 0 or fullmove < 1:
        raise ValueError(f"Invalid FEN clock fields: {fen!r}")

    return GameState(
        placement=placement,
        active_color=side,
        castling=castling,
        en_passant=ep,
        halfmove_clock=halfmove,
        fullmove_number=fullmove,
    )


def placement_to_fen(placement: Placement) -> str:
    """Board field of a FEN string."""
    rows: list[str] = []
    for rank in range(7, -1, -1):
        row = ""
        empty = 0
        for file in range(8):
            piece = placement[make_square(file, rank)]
            if piece is None:
                empty += 1
                continue
            if empty:
                row += str(empty)
                empty = 0
            row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    return "/".join(rows)


def state_to_fen(state: GameState) -> str:
    """Serialise a :class:`GameState` to FEN."""
    castling = "".join(ch for ch, right in _CASTLING_CHARS if state.castling & right)
    ep = square_name(state.en_passant) if state.en_passant is not None else "-"
    side = "w" if state.active_color == Color.WHITE else "b"
    return (
        f"{placement_to_fen(state.placement)} {side} {castling or '-'} {ep} "
        f"{state.halfmove_clock} {state.fullmove_number}"
    )


def repetition_key(state: GameState) -> str:
    """Reduced key for repetition counting: piece placement and side to move."""
    side = "w" if state.active_color == Color.WHITE else "b"
    return f"{placement_to_fen(state.placement)} {side}"

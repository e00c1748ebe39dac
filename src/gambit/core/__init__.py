"""Core domain layer: pure chess rules with zero external dependencies.

Quick start::

    from gambit.core import GameState, generate_legal_moves

    state = GameState.initial()
    for move in generate_legal_moves(state):
        print(move)
"""

from gambit.core.board import Board
from gambit.core.enums import (
    CastlingRights,
    CastlingSide,
    Color,
    GameEndReason,
    PieceType,
)
from gambit.core.fen import STARTING_FEN, repetition_key, state_from_fen, state_to_fen
from gambit.core.move import Move
from gambit.core.move_generator import MoveGenerator, generate_legal_moves, is_in_check
from gambit.core.piece import Piece
from gambit.core.position import Position
from gambit.core.rules import GameResult, Rules
from gambit.core.state import GameState
from gambit.core.types import (
    Distance,
    Square,
    coordinates_to_square,
    distance,
    file_of,
    is_light_square,
    is_valid_square,
    make_square,
    parse_square,
    rank_of,
    square_name,
    square_to_coordinates,
    squares_between,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "CastlingSide",
    "Color",
    "GameEndReason",
    "PieceType",
    # Geometry
    "Distance",
    "Square",
    "coordinates_to_square",
    "distance",
    "file_of",
    "is_light_square",
    "is_valid_square",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    "square_to_coordinates",
    "squares_between",
    # Domain objects
    "Board",
    "GameResult",
    "GameState",
    "Move",
    "MoveGenerator",
    "Piece",
    "Position",
    "Rules",
    "generate_legal_moves",
    "is_in_check",
    # Notation
    "STARTING_FEN",
    "repetition_key",
    "state_from_fen",
    "state_to_fen",
]

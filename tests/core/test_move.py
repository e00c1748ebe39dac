"""Tests for the Move value object."""

from gambit.core.enums import Color, PieceType
from gambit.core.move import Move
from gambit.core.piece import Piece
from gambit.core.types import D7, D8, E2, E3, E4, E7, E5, G1, F3

WHITE_PAWN = Piece(Color.WHITE, PieceType.PAWN)
BLACK_PAWN = Piece(Color.BLACK, PieceType.PAWN)
WHITE_KNIGHT = Piece(Color.WHITE, PieceType.KNIGHT)


class TestDoublePush:
    def test_white_two_square_advance(self) -> None:
        assert Move(E2, E4, WHITE_PAWN).is_double_push

    def test_black_two_square_advance(self) -> None:
        assert Move(E7, E5, BLACK_PAWN).is_double_push

    def test_single_step_is_not_double_push(self) -> None:
        assert not Move(E2, E3, WHITE_PAWN).is_double_push

    def test_only_pawns_double_push(self) -> None:
        # Knight jump g1-f3 spans two ranks but is not a pawn move.
        assert not Move(G1, F3, WHITE_KNIGHT).is_double_push


class TestMatches:
    def test_same_coordinates(self) -> None:
        assert Move(E2, E4, WHITE_PAWN).matches(E2, E4)

    def test_ignores_moving_piece_and_capture(self) -> None:
        move = Move(E2, E4, WHITE_PAWN, captured=BLACK_PAWN)
        assert move.matches(E2, E4, None)

    def test_different_destination(self) -> None:
        assert not Move(E2, E4, WHITE_PAWN).matches(E2, E3)

    def test_promotion_kind_must_agree(self) -> None:
        move = Move(D7, D8, WHITE_PAWN, promotion=PieceType.QUEEN)
        assert move.matches(D7, D8, PieceType.QUEEN)
        assert not move.matches(D7, D8, PieceType.KNIGHT)
        assert not move.matches(D7, D8)


class TestNotation:
    def test_uci(self) -> None:
        assert Move(E2, E4, WHITE_PAWN).uci == "e2e4"

    def test_promotion_suffix(self) -> None:
        move = Move(D7, D8, WHITE_PAWN, promotion=PieceType.KNIGHT)
        assert str(move) == "d7d8n"

"""Tests for square geometry helpers."""

import pytest

from gambit.core.types import (
    A1, A8, B2, C1, C3, D4, E1, E4, E5, F6, G1, H1, H8,
    Distance,
    coordinates_to_square,
    distance,
    file_of,
    is_light_square,
    is_valid_square,
    parse_square,
    rank_of,
    square_name,
    square_to_coordinates,
    squares_between,
)  # fmt: skip


class TestSquareNames:
    def test_corners(self) -> None:
        assert square_name(A1) == "a1"
        assert square_name(H8) == "h8"
        assert parse_square("a8") == A8

    def test_parse_round_trip(self) -> None:
        for sq in range(64):
            assert parse_square(square_name(sq)) == sq

    @pytest.mark.parametrize("name", ["", "e", "e9", "i1", "E4", "e44"])
    def test_parse_rejects_bad_names(self, name: str) -> None:
        with pytest.raises(ValueError, match="Invalid square name"):
            parse_square(name)

    def test_file_and_rank(self) -> None:
        assert file_of(E4) == 4
        assert rank_of(E4) == 3


class TestValidity:
    @pytest.mark.parametrize("value", [0, 63, "a1", "h8", "e4"])
    def test_valid(self, value: int | str) -> None:
        assert is_valid_square(value)

    @pytest.mark.parametrize("value", [-1, 64, "z9", "a0", "", "a10"])
    def test_invalid(self, value: int | str) -> None:
        assert not is_valid_square(value)


class TestCoordinates:
    def test_round_trip(self) -> None:
        for sq in range(64):
            assert coordinates_to_square(*square_to_coordinates(sq)) == sq

    def test_off_board_is_none(self) -> None:
        assert coordinates_to_square(8, 0) is None
        assert coordinates_to_square(0, -1) is None

    def test_distance(self) -> None:
        assert distance(A1, H8) == Distance(7, 7)
        assert distance(G1, E1) == Distance(files=2, ranks=0)
        assert distance(E4, E4) == Distance(0, 0)


class TestSquaresBetween:
    def test_rank(self) -> None:
        assert squares_between(E1, H1) == [parse_square("f1"), parse_square("g1")]

    def test_ordered_from_first_argument(self) -> None:
        assert squares_between(H1, E1) == [parse_square("g1"), parse_square("f1")]

    def test_diagonal(self) -> None:
        assert squares_between(A1, F6) == [B2, C3, D4, E5]

    def test_adjacent_is_empty(self) -> None:
        assert squares_between(E4, E5) == []

    def test_unaligned_raises(self) -> None:
        with pytest.raises(ValueError, match="not aligned"):
            squares_between(A1, C1 + 8)


class TestSquareColor:
    def test_a1_is_dark(self) -> None:
        assert not is_light_square(A1)

    def test_h1_is_light(self) -> None:
        assert is_light_square(H1)

    def test_colors_alternate(self) -> None:
        assert is_light_square(E4) != is_light_square(E5)

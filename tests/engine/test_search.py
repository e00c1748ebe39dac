"""Tests for the alpha-beta search engine."""

from __future__ import annotations

import logging
from time import perf_counter

import pytest

from gambit.core.enums import Color, PieceType
from gambit.core.fen import STARTING_FEN, state_from_fen
from gambit.core.move import Move
from gambit.core.move_generator import generate_legal_moves
from gambit.core.piece import Piece
from gambit.core.rules import Rules
from gambit.core.state import GameState
from gambit.core.types import parse_square
from gambit.engine import (
    DIFFICULTY_PRESETS,
    Difficulty,
    SearchConfig,
    SearchDeadline,
    SearchEngine,
    TranspositionTable,
)
from gambit.engine.alphabeta import INF_SCORE, MATE_SCORE, MATE_THRESHOLD, mvv_lva
from gambit.engine.search import POLL_INTERVAL_NODES

UNLIMITED_MS = 600_000
WHITE_KNIGHT = Piece(Color.WHITE, PieceType.KNIGHT)
WHITE_PAWN = Piece(Color.WHITE, PieceType.PAWN)


def _config(depth: int) -> SearchConfig:
    return SearchConfig(depth=depth, time_limit_ms=UNLIMITED_MS)


def _quiet(uci: str, piece: Piece) -> Move:
    return Move(parse_square(uci[:2]), parse_square(uci[2:]), piece)


class TestSearchEngine:
    def test_returns_legal_move_from_start(self) -> None:
        state = GameState.initial()
        engine = SearchEngine()

        result = engine.search(state, _config(2))

        assert result.best_move in generate_legal_moves(state)
        assert result.depth == 2
        assert result.nodes > 0

    def test_get_best_move_uses_engine_config(self) -> None:
        engine = SearchEngine(_config(1))
        move = engine.get_best_move(GameState.initial())
        assert move in generate_legal_moves(GameState.initial())

    def test_captures_hanging_queen(self) -> None:
        state = state_from_fen("4k3/8/8/4q3/3P4/8/8/K7 w - - 0 1")
        move = SearchEngine().get_best_move(state, _config(2))
        assert move is not None
        assert move.uci == "d4e5"

    def test_captures_hanging_queen_as_black(self) -> None:
        state = state_from_fen("4k3/8/8/3p4/4Q3/8/8/K7 b - - 0 1")
        move = SearchEngine().get_best_move(state, _config(2))
        assert move is not None
        assert move.uci == "d5e4"

    def test_finds_mate_in_one(self) -> None:
        state = state_from_fen("7k/Q7/6K1/8/8/8/8/8 w - - 0 1")

        result = SearchEngine().search(state, _config(3))

        assert result.best_move is not None
        assert result.score > MATE_THRESHOLD
        pos = state.to_position()
        pos.make_move(result.best_move)
        assert Rules.is_checkmate(pos)

    def test_stops_deepening_after_mate_found(self) -> None:
        state = state_from_fen("7k/Q7/6K1/8/8/8/8/8 w - - 0 1")
        result = SearchEngine().search(state, _config(5))
        assert result.depth == 2

    def test_returns_none_for_checkmated_side(self) -> None:
        state = state_from_fen(
            "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
        )
        result = SearchEngine().search(state, _config(3))
        assert result.best_move is None
        assert result.score == -MATE_SCORE

    def test_returns_none_for_stalemate(self) -> None:
        state = state_from_fen("7k/8/5KQ1/8/8/8/8/8 b - - 0 1")
        result = SearchEngine().search(state, _config(3))
        assert result.best_move is None
        assert result.score == 0

    def test_does_not_mutate_state(self) -> None:
        state = state_from_fen(STARTING_FEN)
        SearchEngine().search(state, _config(2))
        assert state == GameState.initial()

    def test_logs_progress(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="gambit.engine.alphabeta"):
            SearchEngine().search(GameState.initial(), _config(1))
        assert "depth=1" in caplog.text


class TestMinimax:
    def test_direct_call_restores_position(self) -> None:
        state = GameState.initial()
        pos = state.to_position()
        key = pos.hash_key

        score, move = SearchEngine().minimax(pos, 2, -INF_SCORE, INF_SCORE, True, 0)

        assert move in generate_legal_moves(state)
        assert abs(score) < MATE_THRESHOLD
        assert pos.hash_key == key
        assert pos.ply_depth == 0

    def test_mated_maximizing_side_scores_negative(self) -> None:
        pos = state_from_fen("R2k4/8/3K4/8/8/8/8/8 b - - 0 1").to_position()
        score, move = SearchEngine().minimax(pos, 1, -INF_SCORE, INF_SCORE, True, 3)
        assert move is None
        assert score == -(MATE_SCORE - 3)

    def test_mated_minimizing_side_scores_positive(self) -> None:
        pos = state_from_fen("R2k4/8/3K4/8/8/8/8/8 b - - 0 1").to_position()
        score, _ = SearchEngine().minimax(pos, 1, -INF_SCORE, INF_SCORE, False, 1)
        assert score == MATE_SCORE - 1


class TestCancellation:
    def test_honors_cancel_callback(self) -> None:
        state = GameState.initial()
        result = SearchEngine().search(state, _config(6), is_cancelled=lambda: True)

        assert result.best_move in generate_legal_moves(state)
        assert result.depth == 0

    def test_time_limit_bounds_deep_search(self) -> None:
        state = GameState.initial()
        started = perf_counter()
        shallow = SearchEngine().search(state, _config(2))
        shallow_cost = perf_counter() - started
        assert shallow.depth == 2
        # Overrun past the deadline is at most one poll interval of nodes.
        poll_cost = shallow_cost / max(shallow.nodes, 1) * POLL_INTERVAL_NODES
        limit_s = 0.2

        started = perf_counter()
        result = SearchEngine().search(state, SearchConfig(depth=8, time_limit_ms=200))
        elapsed = perf_counter() - started

        assert result.best_move in generate_legal_moves(state)
        assert result.depth < 8
        assert elapsed < limit_s + 2 * (shallow_cost + poll_cost) + 0.1


class TestSearchDeadline:
    def test_polls_every_interval(self) -> None:
        calls: list[int] = []

        def cancelled() -> bool:
            calls.append(1)
            return False

        deadline = SearchDeadline(is_cancelled=cancelled)
        for _ in range(POLL_INTERVAL_NODES - 1):
            assert not deadline.tick()
        assert calls == []
        assert not deadline.tick()
        assert len(calls) == 1

    def test_expiry_is_sticky(self) -> None:
        flag = [True]
        deadline = SearchDeadline(is_cancelled=lambda: flag[0])
        assert deadline.check()
        flag[0] = False
        assert deadline.tick()
        assert deadline.expired

    def test_unbounded_never_expires(self) -> None:
        deadline = SearchDeadline()
        assert not any(deadline.tick() for _ in range(3 * POLL_INTERVAL_NODES))


class TestMoveOrdering:
    def test_mvv_lva(self) -> None:
        black_queen = Piece(Color.BLACK, PieceType.QUEEN)
        black_pawn = Piece(Color.BLACK, PieceType.PAWN)
        white_queen = Piece(Color.WHITE, PieceType.QUEEN)
        pawn_takes_queen = Move(0, 9, WHITE_PAWN, captured=black_queen)
        queen_takes_pawn = Move(0, 9, white_queen, captured=black_pawn)
        assert mvv_lva(pawn_takes_queen) == 9000 - 100
        assert mvv_lva(queen_takes_pawn) == 1000 - 900
        assert mvv_lva(_quiet("g1f3", WHITE_KNIGHT)) == 0

    def test_captures_ordered_by_victim(self) -> None:
        state = state_from_fen("4k3/8/8/2q1n3/3P4/8/8/K7 w - - 0 1")
        pos = state.to_position()
        ordered = SearchEngine().order_moves(pos, generate_legal_moves(state))
        assert ordered[0].uci == "d4c5"
        assert ordered[1].uci == "d4e5"

    def test_promotion_bonus(self) -> None:
        state = state_from_fen("4k3/P7/8/8/8/8/8/K7 w - - 0 1")
        ordered = SearchEngine().order_moves(state.to_position(), generate_legal_moves(state))
        assert ordered[0].promotion is not None

    def test_tt_move_first(self) -> None:
        state = GameState.initial()
        moves = generate_legal_moves(state)
        last = moves[-1]
        ordered = SearchEngine().order_moves(state.to_position(), moves, tt_move=last)
        assert ordered[0] == last

    def test_killer_move_is_prioritized_among_quiet_moves(self) -> None:
        pos = GameState.initial().to_position()
        engine = SearchEngine()
        killer = _quiet("g1f3", WHITE_KNIGHT)
        other = _quiet("b1c3", WHITE_KNIGHT)

        engine._record_killer(killer, ply=2)
        ordered = engine.order_moves(pos, [other, killer], ply=2)

        assert ordered[0] == killer
        assert engine.killer_moves(2) == (killer,)
        assert engine.order_moves(pos, [other, killer], ply=1)[0] == other

    def test_killer_list_keeps_two_most_recent(self) -> None:
        engine = SearchEngine()
        first = _quiet("g1f3", WHITE_KNIGHT)
        second = _quiet("b1c3", WHITE_KNIGHT)
        third = _quiet("e2e4", WHITE_PAWN)

        for move in (first, second, second, third):
            engine._record_killer(move, ply=0)

        assert engine.killer_moves(0) == (third, second)

    def test_history_heuristic_prioritizes_quiet_move(self) -> None:
        pos = GameState.initial().to_position()
        engine = SearchEngine()
        favored = _quiet("d2d4", WHITE_PAWN)
        other = _quiet("e2e4", WHITE_PAWN)

        for _ in range(3):
            engine._update_history(Color.WHITE, favored, depth=3)
        ordered = engine.order_moves(pos, [other, favored], ply=1)

        assert engine.history_score(Color.WHITE, favored) == 27
        assert engine.history_score(Color.BLACK, favored) == 0
        assert ordered[0] == favored

    def test_history_is_capped(self) -> None:
        engine = SearchEngine()
        move = _quiet("d2d4", WHITE_PAWN)
        for _ in range(100):
            engine._update_history(Color.WHITE, move, depth=8)
        assert engine.history_score(Color.WHITE, move) == 400

    def test_search_records_heuristics(self) -> None:
        engine = SearchEngine()
        engine.search(GameState.initial(), _config(3))

        killers = [m for ply in range(1, 3) for m in engine.killer_moves(ply)]
        assert killers
        assert all(engine.history_score(m.piece.color, m) > 0 for m in killers)


class TestTranspositionTable:
    def test_search_populates_table(self) -> None:
        engine = SearchEngine()
        engine.search(GameState.initial(), _config(2))
        assert len(engine.transposition_table) > 0
        assert GameState.initial().to_position().hash_key in engine.transposition_table

    def test_clear_drops_caches(self) -> None:
        engine = SearchEngine()
        engine.search(GameState.initial(), _config(3))
        engine.clear()
        assert len(engine.transposition_table) == 0
        assert all(not engine.killer_moves(ply) for ply in range(8))

    def test_depth_preferred_replacement(self) -> None:
        table = TranspositionTable(capacity=4)
        table.store(1, depth=5, score=10, bound=0, best_move=None)
        table.store(1, depth=2, score=99, bound=0, best_move=None)
        entry = table.get(1)
        assert entry is not None
        assert entry.depth == 5
        assert entry.score == 10

    def test_evicts_oldest_when_full(self) -> None:
        table = TranspositionTable(capacity=2)
        for key in (1, 2, 3):
            table.store(key, depth=1, score=0, bound=0, best_move=None)
        assert len(table) == 2
        assert 1 not in table
        assert 2 in table and 3 in table

    def test_rejects_zero_capacity(self) -> None:
        with pytest.raises(ValueError, match="capacity"):
            TranspositionTable(capacity=0)

    def test_repeated_searches_agree(self) -> None:
        state = state_from_fen("4k3/8/8/4q3/3P4/8/8/K7 w - - 0 1")
        engine = SearchEngine()
        first = engine.get_best_move(state, _config(3))
        second = engine.get_best_move(state, _config(3))
        assert first == second
        assert second is not None and second.uci == "d4e5"


class TestConfiguration:
    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            ("easy", SearchConfig(2, 1000, False, False)),
            ("medium", SearchConfig(4, 3000, True, False)),
            ("hard", SearchConfig(6, 5000, True, True)),
            ("expert", SearchConfig(8, 10000, True, True)),
        ],
    )
    def test_set_difficulty(self, level: str, expected: SearchConfig) -> None:
        engine = SearchEngine()
        engine.set_difficulty(level)
        assert engine.config == expected
        assert DIFFICULTY_PRESETS[Difficulty(level)] == expected

    def test_unknown_difficulty(self) -> None:
        engine = SearchEngine()
        before = engine.config
        with pytest.raises(ValueError, match="Unknown difficulty"):
            engine.set_difficulty("grandmaster")
        assert engine.config == before

    @pytest.mark.parametrize(("depth", "time_limit_ms"), [(0, 1000), (-1, 1000), (3, -5)])
    def test_invalid_config(self, depth: int, time_limit_ms: int) -> None:
        with pytest.raises(ValueError):
            SearchConfig(depth=depth, time_limit_ms=time_limit_ms)

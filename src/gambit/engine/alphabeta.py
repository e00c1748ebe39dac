"""Pure-Python chess search (minimax + alpha-beta, quiescence, iterative deepening)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from time import perf_counter

from gambit.core.enums import Color
from gambit.core.move import Move
from gambit.core.move_generator import MoveGenerator
from gambit.core.position import Position
from gambit.core.state import GameState
from gambit.engine.evaluate import PIECE_VALUES, evaluate
from gambit.engine.search import (
    CancelCheck,
    Difficulty,
    IEngine,
    SearchConfig,
    SearchDeadline,
    SearchResult,
)

_LOGGER = logging.getLogger(__name__)

INF_SCORE = 1_000_000
MATE_SCORE = 10_000
MATE_THRESHOLD = 9_000

_TT_EXACT = 0
_TT_LOWER = 1
_TT_UPPER = 2
_TT_DEFAULT_CAPACITY = 200_000

_MAX_KILLER_PLY = 128
_TT_MOVE_BONUS = 1_000_000
_PROMOTION_BONUS = 900
_KILLER_PRIMARY_BONUS = 800
_KILLER_SECONDARY_BONUS = 700
_HISTORY_MAX_SCORE = 400
_QUIESCENCE_MAX_DEPTH = 10


def mvv_lva(move: Move) -> int:
    """Most-valuable-victim / least-valuable-attacker score of a capture."""
    if move.captured is None:
        return 0
    return PIECE_VALUES[move.captured.piece_type] * 10 - PIECE_VALUES[move.piece.piece_type]


@dataclass(slots=True)
class _TTEntry:
    depth: int
    score: int
    bound: int
    best_move: Move | None


class TranspositionTable:
    """Capacity-bounded cache of searched positions keyed by Zobrist hash.

    Scores are stored from the point of view of the side to move in the
    stored position. A key is only overwritten by an entry of equal or
    greater depth; when the table is full the oldest key is evicted.
    """

    __slots__ = ("_entries", "_capacity")

    def __init__(self, capacity: int = _TT_DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"Transposition table capacity must be >= 1, got {capacity!r}")
        self._entries: dict[int, _TTEntry] = {}
        self._capacity = capacity

    def get(self, key: int) -> _TTEntry | None:
        return self._entries.get(key)

    def store(
        self,
        key: int,
        depth: int,
        score: int,
        bound: int,
        best_move: Move | None,
    ) -> None:
        existing = self._entries.get(key)
        if existing is not None:
            if existing.depth > depth:
                return
        elif len(self._entries) >= self._capacity:
            del self._entries[next(iter(self._entries))]
        self._entries[key] = _TTEntry(depth, score, bound, best_move)

    def clear(self) -> None:
        self._entries.clear()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: int) -> bool:
        return key in self._entries


class SearchEngine(IEngine):
    """Classical searcher with iterative deepening and quiescence.

    Scores inside :meth:`minimax` are from the root side's point of view: the
    root side maximizes, its opponent minimizes. Killer moves, history weights
    and the transposition table survive between searches on the same
    instance; :meth:`clear` drops them.
    """

    __slots__ = ("_config", "_nodes", "_tt", "_killer_moves", "_history_scores")

    def __init__(
        self,
        config: SearchConfig | None = None,
        *,
        tt_capacity: int = _TT_DEFAULT_CAPACITY,
    ) -> None:
        self._config = config if config is not None else SearchConfig()
        self._nodes = 0
        self._tt = TranspositionTable(tt_capacity)
        self._killer_moves: list[list[Move | None]] = [
            [None, None] for _ in range(_MAX_KILLER_PLY)
        ]
        self._history_scores: list[list[list[int]]] = [
            [[0 for _ in range(64)] for _ in range(64)] for _ in range(2)
        ]

    # -- Configuration ------------------------------------------------------

    @property
    def config(self) -> SearchConfig:
        return self._config

    @config.setter
    def config(self, config: SearchConfig) -> None:
        self._config = config

    def set_difficulty(self, level: Difficulty | str) -> None:
        """Replace the search configuration with the preset for *level*."""
        self._config = SearchConfig.for_difficulty(level)
        _LOGGER.info("Engine difficulty set to %s: %s", level, self._config)

    def clear(self) -> None:
        """Forget the transposition table and move-ordering heuristics."""
        self._tt.clear()
        self._killer_moves = [[None, None] for _ in range(_MAX_KILLER_PLY)]
        self._history_scores = [
            [[0 for _ in range(64)] for _ in range(64)] for _ in range(2)
        ]

    @property
    def transposition_table(self) -> TranspositionTable:
        return self._tt

    # -- Search entry points ------------------------------------------------

    def get_best_move(
        self,
        state: GameState,
        config: SearchConfig | None = None,
        is_cancelled: CancelCheck | None = None,
    ) -> Move | None:
        """Best move for the side to move, or ``None`` in a terminal position."""
        return self.search(state, config, is_cancelled).best_move

    def search(
        self,
        state: GameState,
        config: SearchConfig | None = None,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult:
        config = config if config is not None else self._config
        self._nodes = 0
        deadline = SearchDeadline(config.time_limit_ms, is_cancelled)
        position = state.to_position()

        root_gen = MoveGenerator(position)
        root_moves = root_gen.generate_legal_moves()
        if not root_moves:
            if root_gen.is_in_check(position.side_to_move):
                return SearchResult(None, -MATE_SCORE, 0, 0)
            return SearchResult(None, 0, 0, 0)

        # Returned when not even depth 1 completes in time.
        best_move = self.order_moves(position, root_moves, ply=0)[0]
        best_score = evaluate(position)
        completed_depth = 0
        started = perf_counter()

        for depth in range(1, config.depth + 1):
            elapsed_ms = (perf_counter() - started) * 1000.0
            if elapsed_ms > config.time_limit_ms or deadline.check():
                break

            score, move = self.minimax(
                position, depth, -INF_SCORE, INF_SCORE, True, 0, deadline
            )
            if deadline.expired:
                _LOGGER.debug("Depth %d abandoned after %d nodes", depth, self._nodes)
                break
            if move is None:
                break

            best_move = move
            best_score = score
            completed_depth = depth
            _LOGGER.debug(
                "depth=%d score=%d move=%s nodes=%d", depth, score, move, self._nodes
            )

            if abs(score) > MATE_THRESHOLD:
                break

        return SearchResult(best_move, best_score, completed_depth, self._nodes)

    # -- Tree search --------------------------------------------------------

    def minimax(
        self,
        position: Position,
        depth: int,
        alpha: int,
        beta: int,
        maximizing: bool,
        ply: int,
        deadline: SearchDeadline | None = None,
    ) -> tuple[int, Move | None]:
        """Fail-soft alpha-beta returning ``(score, best_move)``.

        *position* is restored before returning. When *deadline* expires the
        returned pair is a partial result that callers must discard.
        """
        if deadline is None:
            deadline = SearchDeadline()

        self._nodes += 1
        if deadline.tick():
            return self._static_score(position, maximizing), None

        key = position.hash_key
        entry = self._tt.get(key)
        tt_move = entry.best_move if entry is not None else None

        if ply > 0 and entry is not None and entry.depth >= depth:
            score, bound = entry.score, entry.bound
            if not maximizing:
                score, bound = -score, _flip_bound(bound)
            if (
                bound == _TT_EXACT
                or (bound == _TT_LOWER and score >= beta)
                or (bound == _TT_UPPER and score <= alpha)
            ):
                return score, entry.best_move

        if depth <= 0:
            return self._quiescence(position, alpha, beta, maximizing, 0, deadline), None

        gen = MoveGenerator(position)
        legal = gen.generate_legal_moves()
        if not legal:
            if gen.is_in_check(position.side_to_move):
                mate = MATE_SCORE - ply
                return (-mate if maximizing else mate), None
            return 0, None

        alpha_orig, beta_orig = alpha, beta
        side = position.side_to_move
        best_score = -INF_SCORE if maximizing else INF_SCORE
        best_move: Move | None = None

        for move in self.order_moves(position, legal, ply=ply, tt_move=tt_move):
            position.make_move(move)
            try:
                score, _ = self.minimax(
                    position, depth - 1, alpha, beta, not maximizing, ply + 1, deadline
                )
            finally:
                position.unmake_move(move)

            if deadline.expired:
                break

            if maximizing:
                if score > best_score:
                    best_score, best_move = score, move
                alpha = max(alpha, best_score)
            else:
                if score < best_score:
                    best_score, best_move = score, move
                beta = min(beta, best_score)

            if beta <= alpha:
                if move.captured is None:
                    self._record_killer(move, ply)
                    self._update_history(side, move, depth)
                break

        if deadline.expired:
            if best_move is None:
                return self._static_score(position, maximizing), None
            return best_score, best_move

        if best_score <= alpha_orig:
            bound = _TT_UPPER
        elif best_score >= beta_orig:
            bound = _TT_LOWER
        else:
            bound = _TT_EXACT
        stored, stored_bound = best_score, bound
        if not maximizing:
            stored, stored_bound = -best_score, _flip_bound(bound)
        self._tt.store(key, depth, stored, stored_bound, best_move)
        return best_score, best_move

    def _quiescence(
        self,
        position: Position,
        alpha: int,
        beta: int,
        maximizing: bool,
        q_depth: int,
        deadline: SearchDeadline,
    ) -> int:
        self._nodes += 1
        stand_pat = self._static_score(position, maximizing)
        if q_depth > _QUIESCENCE_MAX_DEPTH or deadline.tick():
            return stand_pat

        if maximizing:
            if stand_pat >= beta:
                return beta
            alpha = max(alpha, stand_pat)
        else:
            if stand_pat <= alpha:
                return alpha
            beta = min(beta, stand_pat)

        captures = sorted(MoveGenerator(position).generate_captures(), key=mvv_lva, reverse=True)
        for move in captures:
            position.make_move(move)
            try:
                score = self._quiescence(
                    position, alpha, beta, not maximizing, q_depth + 1, deadline
                )
            finally:
                position.unmake_move(move)

            if maximizing:
                if score >= beta:
                    return beta
                alpha = max(alpha, score)
            else:
                if score <= alpha:
                    return alpha
                beta = min(beta, score)

        return alpha if maximizing else beta

    @staticmethod
    def _static_score(position: Position, maximizing: bool) -> int:
        score = evaluate(position)
        return score if maximizing else -score

    # -- Move ordering ------------------------------------------------------

    def order_moves(
        self,
        position: Position,
        moves: list[Move],
        ply: int = 0,
        tt_move: Move | None = None,
    ) -> list[Move]:
        """*moves* sorted best-first for the side to move in *position*."""
        side = position.side_to_move
        return sorted(
            moves,
            key=lambda move: self._move_order_score(side, move, ply, tt_move),
            reverse=True,
        )

    def _move_order_score(
        self,
        side: Color,
        move: Move,
        ply: int,
        tt_move: Move | None,
    ) -> int:
        if tt_move is not None and move == tt_move:
            return _TT_MOVE_BONUS
        score = mvv_lva(move)
        if move.promotion is not None:
            score += _PROMOTION_BONUS
        if move.captured is None:
            score += self._killer_score(move, ply)
            score += self.history_score(side, move)
        return score

    def killer_moves(self, ply: int) -> tuple[Move, ...]:
        """Killer moves recorded for *ply*, most recent first."""
        if not 0 <= ply < _MAX_KILLER_PLY:
            return ()
        return tuple(m for m in self._killer_moves[ply] if m is not None)

    def _record_killer(self, move: Move, ply: int) -> None:
        if not 0 <= ply < _MAX_KILLER_PLY:
            return
        killers = self._killer_moves[ply]
        if killers[0] == move:
            return
        killers[1] = killers[0]
        killers[0] = move

    def _killer_score(self, move: Move, ply: int) -> int:
        if not 0 <= ply < _MAX_KILLER_PLY:
            return 0
        killers = self._killer_moves[ply]
        if killers[0] == move:
            return _KILLER_PRIMARY_BONUS
        if killers[1] == move:
            return _KILLER_SECONDARY_BONUS
        return 0

    def history_score(self, side: Color, move: Move) -> int:
        return self._history_scores[side][move.from_sq][move.to_sq]

    def _update_history(self, side: Color, move: Move, depth: int) -> None:
        bonus = max(depth, 1) * max(depth, 1)
        side_scores = self._history_scores[side]
        current = side_scores[move.from_sq][move.to_sq]
        side_scores[move.from_sq][move.to_sq] = min(_HISTORY_MAX_SCORE, current + bonus)


def _flip_bound(bound: int) -> int:
    if bound == _TT_LOWER:
        return _TT_UPPER
    if bound == _TT_UPPER:
        return _TT_LOWER
    return bound

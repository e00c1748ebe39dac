"""Qt bridge to run engine search in a worker thread."""

from __future__ import annotations

import logging
import threading

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from gambit.core.state import GameState
from gambit.engine.alphabeta import SearchEngine
from gambit.engine.search import SearchConfig

_LOGGER = logging.getLogger(__name__)


class EngineWorker(QObject):
    """Thread-affine worker that computes engine moves on demand.

    Move the worker to a ``QThread`` and connect a queued signal to
    :meth:`request_move`; every answer carries the caller's ``request_id``
    so stale replies can be dropped. :meth:`cancel` may be called from any
    thread.
    """

    best_move_ready = pyqtSignal(int, object, int, int, int)
    search_cancelled = pyqtSignal(int)
    search_no_move = pyqtSignal(int, int, int, int)
    search_error = pyqtSignal(int, str)

    __slots__ = ("_cancel_event", "_engine")

    def __init__(self, config: SearchConfig | None = None) -> None:
        super().__init__()
        self._engine = SearchEngine(config)
        self._cancel_event = threading.Event()

    @property
    def engine(self) -> SearchEngine:
        return self._engine

    @pyqtSlot(object, int)
    def request_move(self, state_obj: object, request_id: int) -> None:
        """Search for the best move in *state_obj* and emit the result."""
        if not isinstance(state_obj, GameState):
            _LOGGER.warning(
                "Engine request %d carried %s instead of a GameState",
                request_id,
                type(state_obj).__name__,
            )
            self.search_error.emit(request_id, "Engine received invalid game state")
            return

        self._cancel_event.clear()
        try:
            result = self._engine.search(
                state_obj,
                is_cancelled=self._cancel_event.is_set,
            )
        except Exception as exc:
            _LOGGER.exception("Engine search %d failed", request_id)
            self.search_error.emit(request_id, str(exc))
            return

        if self._cancel_event.is_set():
            self.search_cancelled.emit(request_id)
            return

        if result.best_move is None:
            self.search_no_move.emit(
                request_id,
                result.score,
                result.depth,
                result.nodes,
            )
            return

        self.best_move_ready.emit(
            request_id,
            result.best_move,
            result.score,
            result.depth,
            result.nodes,
        )

    @pyqtSlot()
    def cancel(self) -> None:
        """Request cancellation of the current search."""
        self._cancel_event.set()

    @pyqtSlot(int, int)
    def set_limits(self, depth: int, time_limit_ms: int) -> None:
        """Update search limits (takes effect on the next search)."""
        try:
            config = SearchConfig(depth=depth, time_limit_ms=time_limit_ms)
        except ValueError as exc:
            _LOGGER.warning("Ignoring invalid engine limits: %s", exc)
            return
        self._engine.config = config

    @pyqtSlot(str)
    def set_difficulty(self, level: str) -> None:
        """Switch to a difficulty preset (takes effect on the next search)."""
        try:
            self._engine.set_difficulty(level)
        except ValueError as exc:
            _LOGGER.warning("Ignoring invalid difficulty: %s", exc)

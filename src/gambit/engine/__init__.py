"""Chess engine package: search implementation and Qt worker bridge.

The Qt worker lives in :mod:`gambit.engine.qt_bridge` and is not imported
here, so the searcher can be used without loading Qt.
"""

from gambit.engine.alphabeta import SearchEngine, TranspositionTable
from gambit.engine.evaluate import PIECE_VALUES, evaluate
from gambit.engine.search import (
    DIFFICULTY_PRESETS,
    CancelCheck,
    Difficulty,
    IEngine,
    SearchConfig,
    SearchDeadline,
    SearchResult,
)

__all__ = [
    "CancelCheck",
    "DIFFICULTY_PRESETS",
    "Difficulty",
    "IEngine",
    "PIECE_VALUES",
    "SearchConfig",
    "SearchDeadline",
    "SearchEngine",
    "SearchResult",
    "TranspositionTable",
    "evaluate",
]

"""Game management layer: authoritative state and move validation.

Quick start::

    from gambit.game import GameManager

    game = GameManager()
    move = game.get_legal_moves()[0]
    game.make_move(move)
    print(game.is_game_over())
"""

from gambit.game.interfaces import IGameManager
from gambit.game.manager import GameManager

__all__ = [
    "GameManager",
    "IGameManager",
]

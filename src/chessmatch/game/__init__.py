"""Game layer — the match state machine and its settings.

Quick start::

    from chessmatch.game import ChessMatch

    match = ChessMatch()
    match.legal_destinations("e2")
    match.execute_move("e2", "e4")

The Qt bridge lives in :mod:`chessmatch.game.qt_bridge` and is imported
explicitly so the rules engine does not require a Qt runtime.
"""

from chessmatch.game.match import ChessMatch, MatchEvents
from chessmatch.game.settings import MatchSettings

__all__ = [
    "ChessMatch",
    "MatchEvents",
    "MatchSettings",
]

"""Exception hierarchy for the board and the chess rules."""

from __future__ import annotations


class BoardError(Exception):
    """Base class for errors raised by the board layer."""


class BoundsError(BoardError, IndexError):
    """A position lies outside the board."""


class OccupiedSquareError(BoardError):
    """A piece was placed on a square that already holds one."""


class ChessError(BoardError):
    """Base class for caller-visible rule violations."""


class CoordinateFormatError(ChessError, ValueError):
    """Algebraic coordinate outside a1..h8."""


class SourceError(ChessError):
    """The selected source square cannot be moved from."""


class EmptySourceError(SourceError):
    pass


class WrongOwnerError(SourceError):
    pass


class NoMovesError(SourceError):
    pass


class IllegalTargetError(ChessError):
    """The destination is not reachable by the selected piece."""


class SelfCheckError(ChessError):
    """The move would leave the mover's own king in check."""


class NoPendingPromotionError(ChessError):
    pass


class InvalidPromotionTypeError(ChessError, ValueError):
    pass


class PromotionPendingError(ChessError):
    """A promotion choice must be made before the next move."""


class MatchOverError(ChessError):
    """The match ended in checkmate and accepts no further moves."""


class MissingKingError(RuntimeError):
    """No king of the requested color is on the board.

    Engine-controlled setup never produces this; it signals an internal
    consistency violation rather than a user mistake.
    """

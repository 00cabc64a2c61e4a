"""Core enumerations for the chess domain."""

from __future__ import annotations

from enum import IntEnum, auto

from chessmatch.core.errors import InvalidPromotionTypeError


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Chess piece types ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6

    @property
    def letter(self) -> str:
        """One-letter code, e.g. ``N`` for knight."""
        return _LETTERS[self]

    @classmethod
    def from_letter(cls, letter: str) -> PieceType:
        try:
            return _FROM_LETTER[letter.upper()]
        except KeyError:
            raise ValueError(f"Invalid piece letter: {letter!r}") from None

    @classmethod
    def for_promotion(cls, value: PieceType | str) -> PieceType:
        """Resolve a promotion choice given as a type or a letter (B/N/Q/R)."""
        piece_type = value
        if isinstance(value, str):
            piece_type = _FROM_LETTER.get(value.strip().upper())
        if piece_type not in PROMOTION_TYPES:
            raise InvalidPromotionTypeError(
                f"Invalid promotion type: {value!r} (expected B, N, Q or R)"
            )
        return piece_type


class MatchPhase(IntEnum):
    """States of the match state machine."""

    PLAYING = auto()
    CHECKMATE = auto()


_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "P",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}
_FROM_LETTER: dict[str, PieceType] = {v: k for k, v in _LETTERS.items()}

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.QUEEN,
    PieceType.ROOK,
)

"""Board coordinates and algebraic-square helpers.

Internal layout (row-major, row 0 at the top):
    a8=(0, 0), b8=(0, 1), ..., h8=(0, 7)
    ...
    a1=(7, 0), b1=(7, 1), ..., h1=(7, 7)
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from chessmatch.core.errors import CoordinateFormatError

BOARD_SIZE = 8
FILES = "abcdefgh"
RANKS = "12345678"


@dataclass(frozen=True, slots=True)
class Position:
    """Zero-based (row, column) pair used for all internal geometry."""

    row: int
    column: int

    def offset(self, d_row: int, d_column: int) -> Position:
        return Position(self.row + d_row, self.column + d_column)

    def __iter__(self) -> Iterator[int]:
        yield self.row
        yield self.column


@dataclass(frozen=True, slots=True)
class ChessSquare:
    """External-facing square: file letter ``a``-``h`` and rank ``1``-``8``."""

    column: str
    row: int

    def __post_init__(self) -> None:
        if len(self.column) != 1 or self.column not in FILES:
            raise CoordinateFormatError(
                f"Error instantiating ChessSquare: invalid column {self.column!r}"
            )
        if not 1 <= self.row <= BOARD_SIZE:
            raise CoordinateFormatError(
                f"Error instantiating ChessSquare: invalid row {self.row!r}"
            )

    def to_position(self) -> Position:
        return Position(BOARD_SIZE - self.row, ord(self.column) - ord("a"))

    @classmethod
    def from_position(cls, position: Position) -> ChessSquare:
        return cls(chr(ord("a") + position.column), BOARD_SIZE - position.row)

    @classmethod
    def parse(cls, name: str) -> ChessSquare:
        """Parse a square name, e.g. ``'e4'``."""
        text = name.strip().lower()
        if len(text) != 2 or text[1] not in RANKS:
            raise CoordinateFormatError(
                f"Invalid square name: {name!r}. Valid values are from a1 to h8."
            )
        return cls(text[0], int(text[1]))

    def __str__(self) -> str:
        return f"{self.column}{self.row}"


def parse_square(name: str) -> Position:
    """Parse square name into a position, e.g. ``'e2'`` → ``Position(6, 4)``."""
    return ChessSquare.parse(name).to_position()


def square_name(position: Position) -> str:
    """Human-readable name, e.g. ``Position(7, 0)`` → ``'a1'``."""
    return str(ChessSquare.from_position(position))


def as_position(square: str | ChessSquare | Position) -> Position:
    """Normalise any accepted square representation to a :class:`Position`."""
    if isinstance(square, Position):
        return square
    if isinstance(square, ChessSquare):
        return square.to_position()
    return parse_square(square)

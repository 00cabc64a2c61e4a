"""Board - raw piece placement on a rectangular grid."""

from __future__ import annotations

from chessmatch.core.enums import Color
from chessmatch.core.errors import BoundsError, OccupiedSquareError
from chessmatch.core.piece import Piece
from chessmatch.core.types import BOARD_SIZE, FILES, Position


class Board:
    """Mutable grid holding at most one piece per cell.

    The board knows nothing about chess rules; it only keeps each cell and
    the occupant's ``position`` field in agreement.
    """

    __slots__ = ("_rows", "_columns", "_grid")

    def __init__(self, rows: int = BOARD_SIZE, columns: int = BOARD_SIZE) -> None:
        if rows < 1 or columns < 1:
            raise ValueError(
                "Error creating board: there must be at least 1 row and 1 column"
            )
        self._rows = rows
        self._columns = columns
        self._grid: list[list[Piece | None]] = [[None] * columns for _ in range(rows)]

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._columns

    # -- Element access -----------------------------------------------------

    def position_exists(self, position: Position) -> bool:
        return 0 <= position.row < self._rows and 0 <= position.column < self._columns

    def piece_at(self, position: Position) -> Piece | None:
        self._require(position)
        return self._grid[position.row][position.column]

    def is_occupied(self, position: Position) -> bool:
        return self.piece_at(position) is not None

    def place(self, piece: Piece, position: Position) -> None:
        """Put *piece* on the empty cell at *position*."""
        if self.is_occupied(position):
            raise OccupiedSquareError(f"There is already a piece on {tuple(position)}")
        self._grid[position.row][position.column] = piece
        piece.position = position

    def remove_piece(self, position: Position) -> Piece | None:
        """Clear the cell at *position* and return its previous occupant."""
        piece = self.piece_at(position)
        if piece is None:
            return None
        self._grid[position.row][position.column] = None
        piece.position = None
        return piece

    # -- Query helpers ------------------------------------------------------

    def pieces(self, color: Color | None = None) -> list[Piece]:
        """Occupants in row-major order, optionally filtered by *color*."""
        return [
            piece
            for row in self._grid
            for piece in row
            if piece is not None and (color is None or piece.color == color)
        ]

    def grid(self) -> list[list[Piece | None]]:
        """Shallow copy of the cell matrix."""
        return [row.copy() for row in self._grid]

    def _require(self, position: Position) -> None:
        if not self.position_exists(position):
            raise BoundsError(f"Position {tuple(position)} is not on the board")

    # -- Dunder helpers -----------------------------------------------------

    def __repr__(self) -> str:
        lines: list[str] = []
        for r, row in enumerate(self._grid):
            cells = " ".join(str(p) if p else "." for p in row)
            lines.append(f"{self._rows - r} {cells}")
        lines.append("  " + " ".join(FILES[: self._columns]))
        return "\n".join(lines)

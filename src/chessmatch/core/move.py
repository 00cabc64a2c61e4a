"""Move value object and the reversible record of an applied move."""

from __future__ import annotations

from dataclasses import dataclass

from chessmatch.core.piece import Piece
from chessmatch.core.types import Position, square_name


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable source/target pair."""

    source: Position
    target: Position

    @property
    def column_delta(self) -> int:
        return self.target.column - self.source.column

    @property
    def row_delta(self) -> int:
        return self.target.row - self.source.row

    def __str__(self) -> str:
        return f"{square_name(self.source)}{square_name(self.target)}"


@dataclass(frozen=True, slots=True)
class CastlingSide:
    """Column geometry of one castling side, relative to the king's column."""

    king_step: int
    rook_from: int
    rook_to: int

    def rook_move(self, king_source: Position) -> Move:
        return Move(
            king_source.offset(0, self.rook_from),
            king_source.offset(0, self.rook_to),
        )

    def between(self, king_source: Position) -> list[Position]:
        """Squares strictly between the king and the rook."""
        step = 1 if self.rook_from > 0 else -1
        return [king_source.offset(0, c) for c in range(step, self.rook_from, step)]


KINGSIDE = CastlingSide(king_step=2, rook_from=3, rook_to=1)
QUEENSIDE = CastlingSide(king_step=-2, rook_from=-4, rook_to=-1)
CASTLING_SIDES: tuple[CastlingSide, ...] = (KINGSIDE, QUEENSIDE)


def castling_side(column_delta: int) -> CastlingSide | None:
    """Castling side for a king move spanning *column_delta* columns."""
    for side in CASTLING_SIDES:
        if side.king_step == column_delta:
            return side
    return None


@dataclass(slots=True)
class AppliedMove:
    """Everything needed to reverse a move exactly.

    ``captured_at`` differs from ``move.target`` only for en passant.
    ``rook`` and ``rook_move`` are set only for castling.
    """

    piece: Piece
    move: Move
    captured: Piece | None = None
    captured_at: Position | None = None
    rook: Piece | None = None
    rook_move: Move | None = None

    @property
    def is_castling(self) -> bool:
        return self.rook is not None

    @property
    def is_en_passant(self) -> bool:
        return self.captured is not None and self.captured_at != self.move.target

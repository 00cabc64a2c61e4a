"""Piece entity."""

from __future__ import annotations

from dataclasses import dataclass

from chessmatch.core.enums import Color, PieceType
from chessmatch.core.types import Position


@dataclass(eq=False, slots=True)
class Piece:
    """A chess piece with identity, location and move history.

    Two pieces of the same type and color are still distinct objects; the
    registries and the en passant/promotion references rely on identity.
    The piece never refers to the board it stands on: move generation
    receives the board explicitly.
    """

    color: Color
    piece_type: PieceType
    position: Position | None = None
    move_count: int = 0

    def increase_move_count(self) -> None:
        self.move_count += 1

    def decrease_move_count(self) -> None:
        self.move_count -= 1

    # ── Serialisation ────────────────────────────────────────────────────

    def __str__(self) -> str:
        """Piece letter (uppercase = white, lowercase = black)."""
        letter = self.piece_type.letter
        return letter if self.color == Color.WHITE else letter.lower()

    def __repr__(self) -> str:
        where = "off-board" if self.position is None else f"at {tuple(self.position)}"
        return f"Piece({self.color!s}, {self.piece_type.name}, {where})"

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Create piece from its letter, e.g. 'N' → white knight."""
        if len(char) != 1:
            raise ValueError(f"Invalid piece character: {char!r}")
        color = Color.WHITE if char.isupper() else Color.BLACK
        return cls(color, PieceType.from_letter(char))


"""Match configuration."""

from __future__ import annotations

from dataclasses import dataclass

from chessmatch.core.enums import PROMOTION_TYPES, PieceType


@dataclass(frozen=True, slots=True)
class MatchSettings:
    """Immutable rule options for a :class:`~chessmatch.game.match.ChessMatch`.

    Args:
        auto_promote: Piece type a pawn becomes as soon as it reaches the
            last rank. The choice can still be overridden with
            ``choose_promotion`` until the next move. ``None`` leaves the
            pawn pending until a type is chosen.
        strict_castling: Reject castling out of check or across an attacked
            square instead of relying only on the landing-square check.
    """

    auto_promote: PieceType | None = PieceType.QUEEN
    strict_castling: bool = False

    def __post_init__(self) -> None:
        if self.auto_promote is not None and self.auto_promote not in PROMOTION_TYPES:
            raise ValueError(f"Cannot auto-promote to {self.auto_promote.name}")

    # Common presets
    @classmethod
    def standard(cls) -> MatchSettings:
        return cls()

    @classmethod
    def strict(cls) -> MatchSettings:
        """Full castling rules and an explicit promotion choice."""
        return cls(auto_promote=None, strict_castling=True)

    def __repr__(self) -> str:
        promote = self.auto_promote.name if self.auto_promote is not None else "ask"
        return (
            f"MatchSettings(promote={promote}, "
            f"strict_castling={self.strict_castling})"
        )

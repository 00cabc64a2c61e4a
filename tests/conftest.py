"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable

import pytest

from chessmatch.core.enums import Color
from chessmatch.core.piece import Piece
from chessmatch.game.match import ChessMatch
from chessmatch.game.settings import MatchSettings

# Linux CI runners are often headless. Force an offscreen backend only there.
if (
    sys.platform.startswith("linux")
    and "QT_QPA_PLATFORM" not in os.environ
    and "DISPLAY" not in os.environ
    and "WAYLAND_DISPLAY" not in os.environ
):
    os.environ["QT_QPA_PLATFORM"] = "offscreen"

MatchBuilder = Callable[..., ChessMatch]


def make_match(
    layout: dict[str, str],
    *,
    current_player: Color = Color.WHITE,
    settings: MatchSettings | None = None,
) -> ChessMatch:
    """Build a match from ``{"e1": "K", "e8": "k", ...}`` (uppercase = white)."""
    match = ChessMatch(settings, setup=False, current_player=current_player)
    for square, char in layout.items():
        template = Piece.from_char(char)
        match.place_new_piece(square, template.color, template.piece_type)
    return match


@pytest.fixture
def build_match() -> MatchBuilder:
    """Factory for matches set up from a square → letter layout."""
    return make_match


@pytest.fixture
def match() -> ChessMatch:
    """A match in the standard starting position."""
    return ChessMatch()

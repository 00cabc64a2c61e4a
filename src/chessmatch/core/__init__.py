"""Core domain layer — pure chess logic with zero external dependencies.

Quick start::

    from chessmatch.core import Board, Color, MoveGenerator, Piece, PieceType
    from chessmatch.core import parse_square

    board = Board()
    rook = Piece(Color.WHITE, PieceType.ROOK)
    board.place(rook, parse_square("d4"))
    matrix = MoveGenerator(board).possible_moves(rook)
"""

from chessmatch.core.board import Board
from chessmatch.core.enums import PROMOTION_TYPES, Color, MatchPhase, PieceType
from chessmatch.core.errors import (
    BoardError,
    BoundsError,
    ChessError,
    CoordinateFormatError,
    EmptySourceError,
    IllegalTargetError,
    InvalidPromotionTypeError,
    MatchOverError,
    MissingKingError,
    NoMovesError,
    NoPendingPromotionError,
    OccupiedSquareError,
    PromotionPendingError,
    SelfCheckError,
    SourceError,
    WrongOwnerError,
)
from chessmatch.core.move import AppliedMove, CastlingSide, Move
from chessmatch.core.move_generator import MoveGenerator, MoveMatrix
from chessmatch.core.piece import Piece
from chessmatch.core.types import (
    BOARD_SIZE,
    ChessSquare,
    Position,
    as_position,
    parse_square,
    square_name,
)

__all__ = [
    # Enums
    "Color",
    "MatchPhase",
    "PieceType",
    "PROMOTION_TYPES",
    # Types / helpers
    "BOARD_SIZE",
    "ChessSquare",
    "Position",
    "as_position",
    "parse_square",
    "square_name",
    # Domain objects
    "AppliedMove",
    "Board",
    "CastlingSide",
    "Move",
    "MoveGenerator",
    "MoveMatrix",
    "Piece",
    # Errors
    "BoardError",
    "BoundsError",
    "ChessError",
    "CoordinateFormatError",
    "EmptySourceError",
    "IllegalTargetError",
    "InvalidPromotionTypeError",
    "MatchOverError",
    "MissingKingError",
    "NoMovesError",
    "NoPendingPromotionError",
    "OccupiedSquareError",
    "PromotionPendingError",
    "SelfCheckError",
    "SourceError",
    "WrongOwnerError",
]

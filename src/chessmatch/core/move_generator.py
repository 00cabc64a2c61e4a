"""Per-piece move generation as dense reachability matrices."""

from __future__ import annotations

from collections.abc import Callable

from chessmatch.core.board import Board
from chessmatch.core.enums import Color, PieceType
from chessmatch.core.move import CASTLING_SIDES
from chessmatch.core.piece import Piece
from chessmatch.core.types import Position

KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS


def pawn_direction(color: Color) -> int:
    """Row step of a forward pawn move (white moves up, towards row 0)."""
    return -1 if color == Color.WHITE else 1


def promotion_row(color: Color, rows: int) -> int:
    return 0 if color == Color.WHITE else rows - 1


class MoveMatrix:
    """Boolean grid; a true cell is a square the piece can reach."""

    __slots__ = ("_rows", "_columns", "_cells")

    def __init__(self, rows: int, columns: int) -> None:
        self._rows = rows
        self._columns = columns
        self._cells: list[list[bool]] = [[False] * columns for _ in range(rows)]

    def mark(self, position: Position) -> None:
        self._cells[position.row][position.column] = True

    def clear(self, position: Position) -> None:
        self._cells[position.row][position.column] = False

    def __getitem__(self, position: Position) -> bool:
        return self._cells[position.row][position.column]

    def __contains__(self, position: object) -> bool:
        if not isinstance(position, Position):
            return False
        rows, columns = self._rows, self._columns
        if not (0 <= position.row < rows and 0 <= position.column < columns):
            return False
        return self[position]

    def __len__(self) -> int:
        return sum(row.count(True) for row in self._cells)

    def any(self) -> bool:
        return any(any(row) for row in self._cells)

    def targets(self) -> list[Position]:
        """Reachable positions in row-major order."""
        return [
            Position(r, c)
            for r, row in enumerate(self._cells)
            for c, reachable in enumerate(row)
            if reachable
        ]

    def to_lists(self) -> list[list[bool]]:
        return [row.copy() for row in self._cells]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MoveMatrix):
            return NotImplemented
        return self._cells == other._cells

    def __repr__(self) -> str:
        return "\n".join(
            " ".join("x" if cell else "." for cell in row) for row in self._cells
        )


class MoveGenerator:
    """Computes move matrices for pieces standing on *board*.

    The matrices ignore whether a move would expose the mover's own king;
    that filter belongs to the match.
    """

    __slots__ = ("_board", "_en_passant")

    def __init__(
        self, board: Board, en_passant_vulnerable: Piece | None = None
    ) -> None:
        self._board = board
        self._en_passant = en_passant_vulnerable

    # -- Public API ---------------------------------------------------------

    def possible_moves(self, piece: Piece) -> MoveMatrix:
        """All squares *piece* could move to from its current position."""
        if piece.position is None:
            raise ValueError(f"{piece!r} is not on the board")
        matrix = MoveMatrix(self._board.rows, self._board.columns)
        _GENERATORS[piece.piece_type](self, piece, piece.position, matrix)
        return matrix

    def has_any_move(self, piece: Piece) -> bool:
        return self.possible_moves(piece).any()

    def can_move(self, piece: Piece, target: Position) -> bool:
        return target in self.possible_moves(piece)

    # -- Square predicates (private) ---------------------------------------

    def _is_empty(self, position: Position) -> bool:
        return self._board.position_exists(position) and not self._board.is_occupied(
            position
        )

    def _is_opponent(self, position: Position, color: Color) -> bool:
        if not self._board.position_exists(position):
            return False
        target = self._board.piece_at(position)
        return target is not None and target.color != color

    def _can_land(self, position: Position, color: Color) -> bool:
        return self._is_empty(position) or self._is_opponent(position, color)

    # -- Piece-specific generators (private) -------------------------------

    def _gen_pawn(self, piece: Piece, pos: Position, matrix: MoveMatrix) -> None:
        color = piece.color
        direction = pawn_direction(color)
        start_row = self._board.rows - 2 if color == Color.WHITE else 1

        one_step = pos.offset(direction, 0)
        if self._is_empty(one_step):
            matrix.mark(one_step)
            two_step = pos.offset(2 * direction, 0)
            if (
                piece.move_count == 0
                and pos.row == start_row
                and self._is_empty(two_step)
            ):
                matrix.mark(two_step)

        for d_column in (-1, 1):
            diagonal = pos.offset(direction, d_column)
            if self._is_opponent(diagonal, color):
                matrix.mark(diagonal)

        # En passant: only from the row three steps past the start row
        if self._en_passant is None or pos.row != start_row + 3 * direction:
            return
        for d_column in (-1, 1):
            side = pos.offset(0, d_column)
            if (
                self._is_opponent(side, color)
                and self._board.piece_at(side) is self._en_passant
            ):
                matrix.mark(pos.offset(direction, d_column))

    def _gen_knight(self, piece: Piece, pos: Position, matrix: MoveMatrix) -> None:
        for d_row, d_column in KNIGHT_OFFSETS:
            target = pos.offset(d_row, d_column)
            if self._can_land(target, piece.color):
                matrix.mark(target)

    def _gen_sliding(
        self,
        piece: Piece,
        pos: Position,
        matrix: MoveMatrix,
        directions: tuple[tuple[int, int], ...],
    ) -> None:
        board = self._board
        for d_row, d_column in directions:
            target = pos.offset(d_row, d_column)
            while board.position_exists(target):
                occupant = board.piece_at(target)
                if occupant is None:
                    matrix.mark(target)
                    target = target.offset(d_row, d_column)
                    continue
                if occupant.color != piece.color:
                    matrix.mark(target)
                break

    def _gen_bishop(self, piece: Piece, pos: Position, matrix: MoveMatrix) -> None:
        self._gen_sliding(piece, pos, matrix, BISHOP_DIRS)

    def _gen_rook(self, piece: Piece, pos: Position, matrix: MoveMatrix) -> None:
        self._gen_sliding(piece, pos, matrix, ROOK_DIRS)

    def _gen_queen(self, piece: Piece, pos: Position, matrix: MoveMatrix) -> None:
        self._gen_sliding(piece, pos, matrix, QUEEN_DIRS)

    def _gen_king(self, piece: Piece, pos: Position, matrix: MoveMatrix) -> None:
        for d_row, d_column in KING_OFFSETS:
            target = pos.offset(d_row, d_column)
            if self._can_land(target, piece.color):
                matrix.mark(target)

        if piece.move_count == 0:
            self._gen_castling(piece, pos, matrix)

    def _gen_castling(self, king: Piece, pos: Position, matrix: MoveMatrix) -> None:
        board = self._board
        for side in CASTLING_SIDES:
            rook_square = pos.offset(0, side.rook_from)
            if not board.position_exists(rook_square):
                continue
            rook = board.piece_at(rook_square)
            if (
                rook is None
                or rook.piece_type != PieceType.ROOK
                or rook.color != king.color
                or rook.move_count != 0
            ):
                continue
            if all(not board.is_occupied(sq) for sq in side.between(pos)):
                matrix.mark(pos.offset(0, side.king_step))


_Generator = Callable[[MoveGenerator, Piece, Position, MoveMatrix], None]

_GENERATORS: dict[PieceType, _Generator] = {
    PieceType.PAWN: MoveGenerator._gen_pawn,
    PieceType.KNIGHT: MoveGenerator._gen_knight,
    PieceType.BISHOP: MoveGenerator._gen_bishop,
    PieceType.ROOK: MoveGenerator._gen_rook,
    PieceType.QUEEN: MoveGenerator._gen_queen,
    PieceType.KING: MoveGenerator._gen_king,
}

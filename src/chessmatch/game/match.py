"""ChessMatch — the match state machine.

Owns the board and every piece, drives turns, validates and executes moves,
and tracks check, checkmate, en passant and promotion state. Listeners
subscribe through :class:`MatchEvents`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from chessmatch.core.board import Board
from chessmatch.core.enums import Color, MatchPhase, PieceType
from chessmatch.core.errors import (
    EmptySourceError,
    IllegalTargetError,
    InvalidPromotionTypeError,
    MatchOverError,
    MissingKingError,
    NoMovesError,
    NoPendingPromotionError,
    PromotionPendingError,
    SelfCheckError,
    WrongOwnerError,
)
from chessmatch.core.move import AppliedMove, Move, castling_side
from chessmatch.core.move_generator import (
    MoveGenerator,
    MoveMatrix,
    pawn_direction,
    promotion_row,
)
from chessmatch.core.piece import Piece
from chessmatch.core.types import BOARD_SIZE, ChessSquare, Position, as_position
from chessmatch.game.settings import MatchSettings

_LOGGER = logging.getLogger(__name__)

Square = str | ChessSquare | Position

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[Move, "Piece | None"], None]  # move, captured
CheckCallback = Callable[[Color], None]  # color in check
CheckMateCallback = Callable[[Color], None]  # winner
PromotionCallback = Callable[[Piece], None]  # piece now on the last rank


@dataclass
class MatchEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_check: list[CheckCallback] = field(default_factory=list)
    on_checkmate: list[CheckMateCallback] = field(default_factory=list)
    on_promotion: list[PromotionCallback] = field(default_factory=list)


# ── Match ────────────────────────────────────────────────────────────────────


class ChessMatch:
    """A single game of chess between two local players.

    Squares are accepted as algebraic strings (``"e2"``), :class:`ChessSquare`
    or internal :class:`Position` values.

    Thread-safety: none. All calls on one match must be serialized by the
    caller.
    """

    __slots__ = (
        "_settings",
        "_board",
        "_turn",
        "_current_player",
        "_check",
        "_check_mate",
        "_en_passant_vulnerable",
        "_promoted",
        "_captured",
        "events",
    )

    def __init__(
        self,
        settings: MatchSettings | None = None,
        *,
        setup: bool = True,
        current_player: Color = Color.WHITE,
    ) -> None:
        self._settings = settings if settings is not None else MatchSettings()
        self._board = Board(BOARD_SIZE, BOARD_SIZE)
        self._turn = 1
        self._current_player = current_player
        self._check = False
        self._check_mate = False
        self._en_passant_vulnerable: Piece | None = None
        self._promoted: Piece | None = None
        self._captured: list[Piece] = []
        self.events = MatchEvents()
        if setup:
            self._initial_setup()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def settings(self) -> MatchSettings:
        return self._settings

    @property
    def turn(self) -> int:
        return self._turn

    @property
    def current_player(self) -> Color:
        return self._current_player

    @property
    def check(self) -> bool:
        return self._check

    @property
    def check_mate(self) -> bool:
        return self._check_mate

    @property
    def phase(self) -> MatchPhase:
        return MatchPhase.CHECKMATE if self._check_mate else MatchPhase.PLAYING

    @property
    def en_passant_vulnerable(self) -> Piece | None:
        return self._en_passant_vulnerable

    @property
    def promoted(self) -> Piece | None:
        """Piece awaiting a promotion choice, if any."""
        return self._promoted

    @property
    def captured_pieces(self) -> tuple[Piece, ...]:
        return tuple(self._captured)

    def pieces_on_board(self, color: Color | None = None) -> list[Piece]:
        return self._board.pieces(color)

    def pieces(self) -> list[list[Piece | None]]:
        """Copy of the board contents, row 0 being rank 8."""
        return self._board.grid()

    def piece_at(self, square: Square) -> Piece | None:
        return self._board.piece_at(as_position(square))

    def place_new_piece(
        self, square: Square, color: Color, piece_type: PieceType
    ) -> Piece:
        """Create a piece and put it on the board (setup only)."""
        piece = Piece(color, piece_type)
        self._board.place(piece, as_position(square))
        return piece

    # ── Public API ───────────────────────────────────────────────────────

    def legal_destinations(self, source: Square) -> MoveMatrix:
        """Move matrix of the current player's piece on *source*.

        Moves that would expose the player's own king are still included;
        they are rejected when executed.
        """
        position = as_position(source)
        self._validate_source(position)
        return self._generator().possible_moves(self._board.piece_at(position))

    def safe_destinations(self, source: Square) -> MoveMatrix:
        """Like :meth:`legal_destinations`, minus moves that self-check."""
        position = as_position(source)
        matrix = self.legal_destinations(position)
        color = self._current_player
        for target in matrix.targets():
            if self._exposes_king(color, position, target):
                matrix.clear(target)
        return matrix

    def execute_move(self, source: Square, target: Square) -> Piece | None:
        """Validate and play a move. Returns the captured piece, if any."""
        if self._check_mate:
            raise MatchOverError("The match is over")
        if self._promoted is not None and self._settings.auto_promote is None:
            raise PromotionPendingError(
                "Choose a piece for the pending promotion first"
            )

        source_pos = as_position(source)
        target_pos = as_position(target)
        self._validate_source(source_pos)
        self._validate_target(source_pos, target_pos)

        mover = self._current_player
        piece = self._board.piece_at(source_pos)
        if self._settings.strict_castling and self._is_castling(
            piece, source_pos, target_pos
        ):
            self._validate_castling_path(piece, source_pos, target_pos)

        applied = self._make_move(source_pos, target_pos)
        if self.is_in_check(mover):
            self._undo_move(applied)
            _LOGGER.debug("Rolled back %s: own king left in check", applied.move)
            raise SelfCheckError("You can't put yourself in check")

        self._promoted = None
        self._en_passant_vulnerable = (
            piece
            if piece.piece_type == PieceType.PAWN and abs(applied.move.row_delta) == 2
            else None
        )
        if (
            piece.piece_type == PieceType.PAWN
            and target_pos.row == promotion_row(piece.color, self._board.rows)
        ):
            self._promoted = piece
            if self._settings.auto_promote is not None:
                self._promoted = self._replace_promoted(self._settings.auto_promote)

        _LOGGER.debug("Turn %d: %s played %s", self._turn, mover, applied.move)
        self._conclude_move(mover)

        self._emit_move(applied.move, applied.captured)
        if self._promoted is not None:
            self._emit_promotion(self._promoted)
        self._emit_outcome(mover)
        return applied.captured

    def choose_promotion(self, piece_type: PieceType | str) -> Piece:
        """Replace the pending piece with one of type B, N, Q or R.

        An unknown type leaves the pending piece in place and returns it so
        the caller can ask again. A pawn still waiting on the last rank can
        be replaced even after the move that carried it there gave mate.
        """
        promoted = self._promoted
        if promoted is None:
            raise NoPendingPromotionError("There is no piece to be promoted")
        if self._check_mate and promoted.piece_type != PieceType.PAWN:
            raise MatchOverError("The match is over")
        try:
            chosen = PieceType.for_promotion(piece_type)
        except InvalidPromotionTypeError as exc:
            _LOGGER.warning("%s", exc)
            return promoted

        mover = promoted.color
        new_piece = self._replace_promoted(chosen)
        self._promoted = None
        if self._check_mate:
            # Same occupancy and only added attacks: the mate stands.
            self._emit_promotion(new_piece)
            return new_piece

        # The turn already passed to the opponent; re-evaluate it with the
        # new piece in place.
        was_check = self._check
        self._turn -= 1
        self._current_player = mover
        self._conclude_move(mover)

        self._emit_promotion(new_piece)
        self._emit_outcome(mover, check_reported=was_check)
        return new_piece

    # ── Check / checkmate ────────────────────────────────────────────────

    def is_in_check(self, color: Color) -> bool:
        """Whether any opposing piece can reach *color*'s king."""
        king_position = self._king(color).position
        generator = self._generator()
        return any(
            generator.can_move(piece, king_position)
            for piece in self._board.pieces(color.opposite)
        )

    def is_checkmate(self, color: Color) -> bool:
        """In check, and no move of *color* gets the king out of it."""
        if not self.is_in_check(color):
            return False
        generator = self._generator()
        skip_castling = self._settings.strict_castling
        for piece in self._board.pieces(color):
            source = piece.position
            for target in generator.possible_moves(piece).targets():
                if skip_castling and self._is_castling(piece, source, target):
                    continue
                if not self._exposes_king(color, source, target):
                    return False
        return True

    # ── Make / undo ──────────────────────────────────────────────────────

    def _make_move(
        self, source: Position, target: Position, *, record: bool = True
    ) -> AppliedMove:
        """Apply a move on the board, including castling and en passant.

        With ``record=False`` the captured registry is left untouched, which
        is what speculative trials need.
        """
        board = self._board
        piece = board.remove_piece(source)
        assert piece is not None
        piece.increase_move_count()
        captured = board.remove_piece(target)
        board.place(piece, target)

        applied = AppliedMove(
            piece=piece,
            move=Move(source, target),
            captured=captured,
            captured_at=target if captured is not None else None,
        )

        if piece.piece_type == PieceType.KING:
            side = castling_side(applied.move.column_delta)
            if side is not None:
                rook_move = side.rook_move(source)
                rook = board.remove_piece(rook_move.source)
                assert rook is not None
                board.place(rook, rook_move.target)
                rook.increase_move_count()
                applied.rook = rook
                applied.rook_move = rook_move

        if (
            piece.piece_type == PieceType.PAWN
            and source.column != target.column
            and captured is None
        ):
            behind = target.offset(-pawn_direction(piece.color), 0)
            applied.captured = board.remove_piece(behind)
            applied.captured_at = behind

        if record and applied.captured is not None:
            self._captured.append(applied.captured)
        return applied

    def _undo_move(self, applied: AppliedMove, *, record: bool = True) -> None:
        """Exact inverse of :meth:`_make_move`."""
        board = self._board
        move = applied.move
        piece = board.remove_piece(move.target)
        assert piece is applied.piece
        piece.decrease_move_count()
        board.place(piece, move.source)

        if applied.captured is not None:
            board.place(applied.captured, applied.captured_at)
            if record:
                self._captured.remove(applied.captured)

        if applied.rook is not None:
            rook_move = applied.rook_move
            board.remove_piece(rook_move.target)
            board.place(applied.rook, rook_move.source)
            applied.rook.decrease_move_count()

    def _exposes_king(self, color: Color, source: Position, target: Position) -> bool:
        """Trial move: would *color*'s king be in check after it?"""
        applied = self._make_move(source, target, record=False)
        try:
            return self.is_in_check(color)
        finally:
            self._undo_move(applied, record=False)

    # ── Validation ───────────────────────────────────────────────────────

    def _validate_source(self, position: Position) -> None:
        piece = self._board.piece_at(position)
        if piece is None:
            raise EmptySourceError("There is no piece on source position")
        if piece.color != self._current_player:
            raise WrongOwnerError("The chosen piece is not yours")
        if not self._generator().has_any_move(piece):
            raise NoMovesError("There are no possible moves for the chosen piece")

    def _validate_target(self, source: Position, target: Position) -> None:
        piece = self._board.piece_at(source)
        if not self._generator().can_move(piece, target):
            raise IllegalTargetError("The chosen piece can't move to target position")

    def _validate_castling_path(
        self, king: Piece, source: Position, target: Position
    ) -> None:
        if self.is_in_check(king.color):
            raise IllegalTargetError("You can't castle out of check")
        passing = source.offset(0, (target.column - source.column) // 2)
        if self._exposes_king(king.color, source, passing):
            raise IllegalTargetError("You can't castle through an attacked square")

    # ── Internal helpers ─────────────────────────────────────────────────

    def _generator(self) -> MoveGenerator:
        return MoveGenerator(self._board, self._en_passant_vulnerable)

    def _king(self, color: Color) -> Piece:
        for piece in self._board.pieces(color):
            if piece.piece_type == PieceType.KING:
                return piece
        raise MissingKingError(f"There is no {color!s} king on the board")

    @staticmethod
    def _is_castling(piece: Piece, source: Position, target: Position) -> bool:
        return (
            piece.piece_type == PieceType.KING
            and castling_side(target.column - source.column) is not None
        )

    def _replace_promoted(self, piece_type: PieceType) -> Piece:
        old = self._promoted
        assert old is not None and old.position is not None
        position = old.position
        self._board.remove_piece(position)
        new_piece = Piece(old.color, piece_type, move_count=old.move_count)
        self._board.place(new_piece, position)
        _LOGGER.debug("Promoted %s to %s", old, new_piece.piece_type.name)
        return new_piece

    def _conclude_move(self, mover: Color) -> None:
        """Update check/checkmate for the opponent and pass the turn."""
        opponent = mover.opposite
        self._check = self.is_in_check(opponent)
        if self._check and self.is_checkmate(opponent):
            self._check_mate = True
            _LOGGER.info("Checkmate on turn %d: %s wins", self._turn, mover)
            return
        self._next_turn()

    def _next_turn(self) -> None:
        self._turn += 1
        self._current_player = self._current_player.opposite

    def _initial_setup(self) -> None:
        for column, piece_type in enumerate(_BACK_RANK):
            self._board.place(Piece(Color.WHITE, piece_type), Position(7, column))
            self._board.place(Piece(Color.WHITE, PieceType.PAWN), Position(6, column))
            self._board.place(Piece(Color.BLACK, piece_type), Position(0, column))
            self._board.place(Piece(Color.BLACK, PieceType.PAWN), Position(1, column))

    def _emit_move(self, move: Move, captured: Piece | None) -> None:
        for cb in self.events.on_move:
            cb(move, captured)

    def _emit_promotion(self, piece: Piece) -> None:
        for cb in self.events.on_promotion:
            cb(piece)

    def _emit_outcome(self, mover: Color, *, check_reported: bool = False) -> None:
        """Notify listeners; a check already reported is not repeated."""
        if self._check and not check_reported:
            _LOGGER.info("%s is in check", mover.opposite)
            for cb in self.events.on_check:
                cb(mover.opposite)
        if self._check_mate:
            for cb in self.events.on_checkmate:
                cb(mover)

    def __repr__(self) -> str:
        return (
            f"ChessMatch(turn={self._turn}, player={self._current_player}, "
            f"phase={self.phase.name})"
        )

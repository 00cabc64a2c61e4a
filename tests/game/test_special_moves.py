"""Tests for en passant, promotion and castling."""

import pytest

from chessmatch.core.enums import Color, PieceType
from chessmatch.core.errors import (
    IllegalTargetError,
    MatchOverError,
    NoPendingPromotionError,
    PromotionPendingError,
    SelfCheckError,
)
from chessmatch.core.piece import Piece
from chessmatch.game.settings import MatchSettings


class TestEnPassant:
    def test_capture_removes_passed_pawn(self, build_match) -> None:
        match = build_match({"a1": "K", "h8": "k", "e2": "P", "d4": "p"})
        match.execute_move("e2", "e4")
        white_pawn = match.piece_at("e4")
        assert match.en_passant_vulnerable is white_pawn

        captured = match.execute_move("d4", "e3")

        assert captured is white_pawn
        assert match.piece_at("e4") is None
        black_pawn = match.piece_at("e3")
        assert black_pawn is not None
        assert (black_pawn.color, black_pawn.piece_type) == (Color.BLACK, PieceType.PAWN)
        assert match.captured_pieces == (white_pawn,)
        assert white_pawn.position is None

    def test_white_captures_en_passant(self, build_match) -> None:
        match = build_match({"a1": "K", "h8": "k", "d5": "P", "e7": "p"})
        match.piece_at("d5").move_count = 2
        match.execute_move("a1", "b1")
        match.execute_move("e7", "e5")
        assert match.execute_move("d5", "e6") is not None
        assert match.piece_at("e5") is None

    def test_window_lasts_one_half_move(self, build_match) -> None:
        match = build_match(
            {"a1": "K", "h8": "k", "e2": "P", "d4": "p", "a7": "p"}
        )
        match.execute_move("e2", "e4")
        match.execute_move("a7", "a6")  # black declines
        assert match.en_passant_vulnerable is None
        match.execute_move("a1", "b1")
        with pytest.raises(IllegalTargetError):
            match.execute_move("d4", "e3")

    def test_single_step_is_not_vulnerable(self, build_match) -> None:
        match = build_match({"a1": "K", "h8": "k", "e2": "P"})
        match.execute_move("e2", "e3")
        assert match.en_passant_vulnerable is None

    def test_en_passant_escapes_check(self, build_match) -> None:
        # b2-b4 checks the boxed-in a5 king; only an en passant capture helps
        match = build_match(
            {
                "a5": "k", "a6": "p", "b6": "p", "b5": "p", "a4": "p", "c4": "p",
                "h1": "K", "a3": "P", "b2": "P",
            }
        )
        match.execute_move("b2", "b4")
        assert match.check
        assert not match.check_mate
        assert match.current_player == Color.BLACK

        double_stepped = match.piece_at("b4")
        assert match.execute_move("c4", "b3") is double_stepped
        assert match.piece_at("b4") is None
        assert not match.check

    def test_en_passant_exposing_king_is_rolled_back(self, build_match) -> None:
        # Removing both pawns from the fourth rank opens it for the rook
        match = build_match({"a4": "k", "h4": "R", "e2": "P", "d4": "p", "a1": "K"})
        match.execute_move("e2", "e4")
        with pytest.raises(SelfCheckError):
            match.execute_move("d4", "e3")
        assert match.piece_at("e4") is not None
        assert match.piece_at("d4") is not None
        assert match.captured_pieces == ()


class TestPromotion:
    def test_default_promotes_to_queen(self, build_match) -> None:
        match = build_match({"a1": "K", "h8": "k", "e7": "P"})
        match.piece_at("e7").move_count = 5
        match.execute_move("e7", "e8")
        queen = match.piece_at("e8")
        assert queen is not None
        assert (queen.color, queen.piece_type) == (Color.WHITE, PieceType.QUEEN)
        assert match.promoted is queen
        assert queen.move_count == 6

    def test_choose_knight(self, build_match) -> None:
        match = build_match({"a1": "K", "h8": "k", "e7": "P"})
        match.piece_at("e7").move_count = 5
        match.execute_move("e7", "e8")
        knight = match.choose_promotion("N")
        assert match.piece_at("e8") is knight
        assert knight.piece_type == PieceType.KNIGHT
        assert knight.color == Color.WHITE
        assert knight.move_count == 6
        assert match.promoted is None
        assert match.current_player == Color.BLACK
        assert match.turn == 2

    def test_choice_accepts_piece_type_and_lowercase(self, build_match) -> None:
        match = build_match({"a1": "K", "h8": "k", "e7": "P"})
        match.execute_move("e7", "e8")
        assert match.choose_promotion("r").piece_type == PieceType.ROOK

        match = build_match({"a1": "K", "h8": "k", "e7": "P"})
        match.execute_move("e7", "e8")
        assert match.choose_promotion(PieceType.BISHOP).piece_type == PieceType.BISHOP

    @pytest.mark.parametrize("choice", ["K", "P", "X", "", PieceType.KING])
    def test_invalid_choice_keeps_pending(self, build_match, choice) -> None:
        match = build_match({"a1": "K", "h8": "k", "e7": "P"})
        match.execute_move("e7", "e8")
        pending = match.promoted
        assert match.choose_promotion(choice) is pending
        assert match.promoted is pending
        assert match.piece_at("e8") is pending

    def test_no_pending_promotion(self, match) -> None:
        with pytest.raises(NoPendingPromotionError):
            match.choose_promotion("Q")

    def test_pending_cleared_by_next_move(self, build_match) -> None:
        match = build_match({"a1": "K", "h8": "k", "e7": "P"})
        match.execute_move("e7", "e8")
        match.execute_move("h8", "g7")
        assert match.promoted is None

    def test_black_promotes_on_first_rank(self, build_match) -> None:
        match = build_match(
            {"a8": "K", "h1": "k", "d2": "p"}, current_player=Color.BLACK
        )
        match.execute_move("d2", "d1")
        queen = match.piece_at("d1")
        assert (queen.color, queen.piece_type) == (Color.BLACK, PieceType.QUEEN)

    def test_capture_promotion_registers_capture(self, build_match) -> None:
        match = build_match({"a1": "K", "h8": "k", "e7": "P", "f8": "r"})
        rook = match.piece_at("f8")
        assert match.execute_move("e7", "f8") is rook
        assert match.captured_pieces == (rook,)
        assert match.piece_at("f8").piece_type == PieceType.QUEEN

    def test_underpromotion_reevaluates_check(self, build_match) -> None:
        # A queen on e8 checks h8 along the rank; a knight does not
        match = build_match({"a1": "K", "h8": "k", "e7": "P", "a7": "p"})
        match.execute_move("e7", "e8")
        assert match.check
        match.choose_promotion("N")
        assert not match.check
        assert match.current_player == Color.BLACK

    def test_promotion_event(self, build_match) -> None:
        match = build_match({"a1": "K", "h8": "k", "e7": "P"})
        promoted: list[Piece] = []
        match.events.on_promotion.append(promoted.append)
        match.execute_move("e7", "e8")
        knight = match.choose_promotion("N")
        assert [p.piece_type for p in promoted] == [PieceType.QUEEN, PieceType.KNIGHT]
        assert promoted[-1] is knight

    def test_check_kept_by_choice_is_reported_once(self, build_match) -> None:
        match = build_match({"a1": "K", "h8": "k", "e7": "P"})
        in_check: list[Color] = []
        match.events.on_check.append(in_check.append)
        match.execute_move("e7", "e8")
        match.choose_promotion("R")
        assert match.check
        assert in_check == [Color.BLACK]

    def test_check_given_by_choice_is_reported(self, build_match) -> None:
        # A queen on e8 misses g7; a knight attacks it
        match = build_match({"a1": "K", "g7": "k", "e7": "P"})
        in_check: list[Color] = []
        match.events.on_check.append(in_check.append)
        match.execute_move("e7", "e8")
        assert not match.check
        match.choose_promotion("N")
        assert match.check
        assert in_check == [Color.BLACK]

    def test_choice_rejected_after_checkmate(self, build_match) -> None:
        match = build_match(
            {"a1": "K", "h8": "k", "g7": "p", "h7": "p", "b7": "P"}
        )
        match.execute_move("b7", "b8")
        assert match.check_mate
        with pytest.raises(MatchOverError):
            match.choose_promotion("N")


class TestManualPromotion:
    def test_pawn_waits_for_choice(self, build_match) -> None:
        match = build_match(
            {"a1": "K", "h8": "k", "e7": "P"}, settings=MatchSettings.strict()
        )
        match.execute_move("e7", "e8")
        pawn = match.piece_at("e8")
        assert pawn.piece_type == PieceType.PAWN
        assert match.promoted is pawn
        with pytest.raises(PromotionPendingError):
            match.execute_move("h8", "g8")

        queen = match.choose_promotion("Q")
        assert match.piece_at("e8") is queen
        assert match.check
        match.execute_move("h8", "h7")
        assert match.turn == 3

    def test_pawn_replaced_after_discovered_mate(self, build_match) -> None:
        # Leaving e7 opens the seventh rank for the a7 rook
        match = build_match(
            {
                "a1": "K", "a7": "R", "e7": "P", "c4": "B",
                "h7": "k", "g6": "p", "h6": "p", "h8": "r",
            },
            settings=MatchSettings.strict(),
        )
        match.execute_move("e7", "e8")
        assert match.check_mate
        assert match.piece_at("e8").piece_type == PieceType.PAWN

        queen = match.choose_promotion("Q")

        assert match.piece_at("e8") is queen
        assert queen.piece_type == PieceType.QUEEN
        assert match.promoted is None
        assert match.check_mate
        assert match.turn == 1
        assert match.current_player == Color.WHITE
        with pytest.raises(NoPendingPromotionError):
            match.choose_promotion("N")
        with pytest.raises(MatchOverError):
            match.execute_move("a1", "b1")


class TestCastling:
    def test_kingside(self, build_match) -> None:
        match = build_match({"e1": "K", "h1": "R", "e8": "k"})
        assert match.execute_move("e1", "g1") is None
        king = match.piece_at("g1")
        rook = match.piece_at("f1")
        assert king is not None and king.piece_type == PieceType.KING
        assert rook is not None and rook.piece_type == PieceType.ROOK
        assert match.piece_at("e1") is None
        assert match.piece_at("h1") is None
        assert (king.move_count, rook.move_count) == (1, 1)

    def test_queenside(self, build_match) -> None:
        match = build_match(
            {"e8": "k", "a8": "r", "e1": "K"}, current_player=Color.BLACK
        )
        match.execute_move("e8", "c8")
        assert match.piece_at("c8").piece_type == PieceType.KING
        assert match.piece_at("d8").piece_type == PieceType.ROOK
        assert match.piece_at("a8") is None

    def test_fails_after_rook_moved(self, build_match) -> None:
        match = build_match({"e1": "K", "h1": "R", "e8": "k", "a7": "p"})
        match.execute_move("h1", "h2")
        match.execute_move("a7", "a6")
        match.execute_move("h2", "h1")
        match.execute_move("a6", "a5")
        with pytest.raises(IllegalTargetError):
            match.execute_move("e1", "g1")
        assert match.piece_at("e1") is not None

    def test_fails_with_piece_in_between(self, build_match) -> None:
        match = build_match({"e1": "K", "h1": "R", "g1": "N", "e8": "k"})
        with pytest.raises(IllegalTargetError):
            match.execute_move("e1", "g1")

    def test_landing_in_check_rolled_back(self, build_match) -> None:
        match = build_match({"e1": "K", "h1": "R", "e8": "k", "g8": "r"})
        with pytest.raises(SelfCheckError):
            match.execute_move("e1", "g1")
        assert match.piece_at("h1").move_count == 0
        assert match.piece_at("e1").move_count == 0

    def test_through_attacked_square_allowed_by_default(self, build_match) -> None:
        match = build_match({"e1": "K", "h1": "R", "e8": "k", "f8": "r"})
        match.execute_move("e1", "g1")
        assert match.piece_at("g1").piece_type == PieceType.KING


class TestStrictCastling:
    def test_through_attacked_square_rejected(self, build_match) -> None:
        match = build_match(
            {"e1": "K", "h1": "R", "e8": "k", "f8": "r"},
            settings=MatchSettings(strict_castling=True),
        )
        with pytest.raises(IllegalTargetError, match="through"):
            match.execute_move("e1", "g1")
        assert match.piece_at("e1").move_count == 0

    def test_out_of_check_rejected(self, build_match) -> None:
        match = build_match(
            {"e1": "K", "h1": "R", "e8": "k", "e5": "r"},
            settings=MatchSettings(strict_castling=True),
        )
        with pytest.raises(IllegalTargetError, match="out of check"):
            match.execute_move("e1", "g1")

    def test_castling_is_no_mate_escape(self, build_match) -> None:
        # Knight check on e8; f8 is covered by the h6 bishop, g8 is safe
        layout = {
            "e8": "k", "h8": "r", "d8": "n", "d7": "p", "e7": "p", "f7": "p",
            "c7": "N", "h6": "B", "a1": "K",
        }
        lenient = build_match(layout)
        strict = build_match(layout, settings=MatchSettings(strict_castling=True))
        assert lenient.is_in_check(Color.BLACK)
        assert not lenient.is_checkmate(Color.BLACK)
        assert strict.is_checkmate(Color.BLACK)

    def test_clear_path_allowed(self, build_match) -> None:
        match = build_match(
            {"e1": "K", "a1": "R", "e8": "k"},
            settings=MatchSettings(strict_castling=True),
        )
        match.execute_move("e1", "c1")
        assert match.piece_at("d1").piece_type == PieceType.ROOK

"""Qt bridge exposing a match to a signal/slot driven front end."""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from chessmatch.core.errors import ChessError
from chessmatch.game.match import ChessMatch

_LOGGER = logging.getLogger(__name__)


class MatchBridge(QObject):
    """Thread-affine adapter that plays moves and reports the outcome.

    Rule violations never escape a slot; they are reported through
    ``move_rejected`` so the UI can re-prompt.
    """

    move_executed = pyqtSignal(str, str, object)  # source, target, captured
    move_rejected = pyqtSignal(str)
    check_changed = pyqtSignal(bool)
    promotion_pending = pyqtSignal(object)
    promotion_chosen = pyqtSignal(object)
    checkmate = pyqtSignal(object)  # winner

    def __init__(self, match: ChessMatch | None = None) -> None:
        super().__init__()
        self._match = match if match is not None else ChessMatch()

    @property
    def match(self) -> ChessMatch:
        return self._match

    @pyqtSlot(str, str)
    def request_move(self, source: str, target: str) -> None:
        """Play *source* → *target* for the side to move."""
        try:
            captured = self._match.execute_move(source, target)
        except ChessError as exc:
            _LOGGER.debug("Move %s%s rejected: %s", source, target, exc)
            self.move_rejected.emit(str(exc))
            return

        self.move_executed.emit(source, target, captured)
        if self._match.promoted is not None:
            self.promotion_pending.emit(self._match.promoted)
        self._report_outcome()

    @pyqtSlot(str)
    def choose_promotion(self, letter: str) -> None:
        """Resolve the pending promotion; unknown letters re-emit the prompt."""
        pending = self._match.promoted
        already_over = self._match.check_mate
        try:
            piece = self._match.choose_promotion(letter)
        except ChessError as exc:
            self.move_rejected.emit(str(exc))
            return

        if piece is pending:
            self.promotion_pending.emit(piece)
            return
        self.promotion_chosen.emit(piece)
        if not already_over:
            self._report_outcome()

    def _report_outcome(self) -> None:
        self.check_changed.emit(self._match.check)
        if self._match.check_mate:
            self.checkmate.emit(self._match.current_player)

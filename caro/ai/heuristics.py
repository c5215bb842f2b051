"""Streak-based evaluation of board states (no capture)."""

from typing import Iterator, Optional

import numpy as np

from caro.core.board import Board, Player, Position, WIN_LENGTH
from caro.core.window import Window
from caro.ai.config import EvaluatorWeights
from caro.ai.streak import StreakProfile, scan_all


class StreakEvaluator:
    """Scores boards from one player's perspective using run counts."""

    def __init__(self, weights: Optional[EvaluatorWeights] = None) -> None:
        self.weights = weights or EvaluatorWeights()

    # ---------- Profiles ----------

    def profile_for_player(self, board: Board, player: Player) -> StreakProfile:
        """Runs of player over every row, column and long-enough diagonal."""
        return scan_all(board.lines(WIN_LENGTH), player)

    def local_profile(
        self,
        board: Board,
        pos: Position,
        player: Player,
        radius: int = WIN_LENGTH,
    ) -> StreakProfile:
        """Runs of player on the four lines through pos, inside Window.around(pos, radius)."""
        window = Window.around(pos, radius, board.dimension)
        return scan_all(self._lines_through(board, pos, window), player)

    @staticmethod
    def _lines_through(board: Board, pos: Position, window: Window) -> Iterator[np.ndarray]:
        yield board.row(pos.row)[window.left_col:window.right_col + 1]
        yield board.column(pos.col)[window.top_row:window.bottom_row + 1]
        for dr, dc in ((1, 1), (1, -1)):
            start = pos
            while window.contains(Position(start.row - dr, start.col - dc)):
                start = Position(start.row - dr, start.col - dc)
            end = pos
            while window.contains(Position(end.row + dr, end.col + dc)):
                end = Position(end.row + dr, end.col + dc)
            yield board.diagonal(start, end)

    def is_winning_move(self, board: Board, pos: Position) -> bool:
        """True if the stone at pos is part of a run of at least WIN_LENGTH."""
        player = board.owner(pos)
        if player is None:
            return False
        return self.local_profile(board, pos, player).max_length >= WIN_LENGTH

    # ---------- Utility ----------

    def utility(self, profile: StreakProfile) -> float:
        """
        Utility of one player's runs, in [0, win_utility].

        Non-winning profiles are capped at utility_cap so that no pile of
        threats reads as a win.
        """
        w = self.weights
        longest = profile.max_length
        if longest >= WIN_LENGTH:
            return w.win_utility
        if longest == 0:
            return 0.0

        score = 0.0
        for length in range(longest, 1, -1):
            streak = profile.get_streak(length)
            score += (
                streak.unblocked_count * w.open_weight(length)
                + streak.blocked_count * w.blocked_weight(length)
            )
            # an open four, or two blocked fours, cannot be stopped
            if w.promote_fours and length == WIN_LENGTH - 1 and score >= w.win_utility:
                return w.win_utility
        return min(score, w.utility_cap)

    def state_utility(self, board: Board, player: Player, opponent: Player) -> float:
        """
        utility(player) - utility(opponent); a win on one side only
        collapses to +/- win_utility.
        """
        mine = self.utility(self.profile_for_player(board, player))
        theirs = self.utility(self.profile_for_player(board, opponent))
        win = self.weights.win_utility

        if mine == win and theirs < win:
            return win
        if mine < win and theirs == win:
            return -win
        return mine - theirs

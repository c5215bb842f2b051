from __future__ import annotations

import random
from typing import List, Optional

from caro.core.board import Board, Position
from caro.core.errors import IllegalMoveError, OutOfRangeError
from caro.core.window import Window
from caro.ai.config import CENTER_SAMPLES

MAX_OPENING_DRAWS = 100


class ActionGenerator:
    """
    Produces candidate moves for the search.

    Only empty cells next to an existing stone are considered: a move is
    played either to extend a run or to block one, and a disconnected cell
    does neither.
    """

    def __init__(self, rng: Optional[random.Random] = None, center_samples: int = CENTER_SAMPLES) -> None:
        if center_samples < 1:
            raise ValueError("center_samples must be >= 1")
        self.rng = rng or random.Random()
        self.center_samples = center_samples

    def candidates(self, board: Board, last_move: Optional[Position], radius: int) -> List[Position]:
        """
        Connected empty cells inside Window.around(last_move, radius), row-major.
        On an empty board the only candidate is a center-biased opening move.

        Raises:
            OutOfRangeError if last_move is off the board.
        """
        if last_move is not None and not board.is_on_board(last_move):
            raise OutOfRangeError(f"Last move {last_move} is off the board")
        if board.is_empty_board():
            return [self.center_biased_move(board)]
        if last_move is None:
            return self.all_candidates(board)

        window = Window.around(last_move, radius, board.dimension)
        return [pos for pos in window.positions() if not board.is_disconnected(pos)]

    def all_candidates(self, board: Board) -> List[Position]:
        """Connected empty cells anywhere on the board, row-major."""
        window = Window(0, board.dimension - 1, 0, board.dimension - 1)
        return [pos for pos in window.positions() if not board.is_disconnected(pos)]

    def center_biased_move(self, board: Board) -> Position:
        """
        Random empty cell, biased toward the center.

        Each coordinate is the mean of several uniform draws, so corners
        (where few winning lines fit) come up rarely.
        """
        if board.is_full():
            raise IllegalMoveError("Board is full")
        n = board.dimension
        for _ in range(MAX_OPENING_DRAWS):
            row = sum(self.rng.randrange(n) for _ in range(self.center_samples)) // self.center_samples
            col = sum(self.rng.randrange(n) for _ in range(self.center_samples)) // self.center_samples
            pos = Position(row, col)
            if board.is_empty(pos):
                return pos
        # crowded center: any empty cell will do
        window = Window(0, n - 1, 0, n - 1)
        return self.rng.choice([pos for pos in window.positions() if board.is_empty(pos)])

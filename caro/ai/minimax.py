"""Minimax with single-bound pruning over streak heuristics."""

import logging
import math
import random
from concurrent.futures import ProcessPoolExecutor
from typing import List, Optional, Tuple

from caro.core.board import Board, Player, Position, MIN_DIMENSION, MAX_DIMENSION
from caro.core.errors import ConstructionError, OutOfRangeError
from caro.ai.config import (
    DEFAULT_SEARCH_DEPTH,
    TERMINAL_SCORE,
    EvaluatorWeights,
    default_search_radius,
)
from caro.ai.heuristics import StreakEvaluator
from caro.ai.movegen import ActionGenerator

logger = logging.getLogger(__name__)

# (move, utility, longest run through move)
ScoredMove = Tuple[Position, float, int]


def _score_candidate(engine: "SearchEngine", board: Board, move: Position) -> Tuple[ScoredMove, int]:
    """Process-pool worker: full-window value of one root move."""
    engine.nodes_explored = 0
    child = board.successor(move, engine.player)
    value = engine.minimize(child, -math.inf, move, 1)
    return (move, value, child.longest_run_through(move)), engine.nodes_explored


class SearchEngine:
    """
    Depth-limited minimax for one player.

    Each node threads a single bound (the parent's running best) and stops
    expanding once its own running value passes it. Comparisons are strict,
    so every root move whose value ties the best is scored exactly and the
    tie-break below sees the true tie set.
    """

    def __init__(
        self,
        dimension: int,
        player: Player,
        opponent: Player,
        search_depth: int = DEFAULT_SEARCH_DEPTH,
        search_radius: Optional[int] = None,
        weights: Optional[EvaluatorWeights] = None,
        use_multiprocessing: bool = False,
        rng: Optional[random.Random] = None,
    ) -> None:
        if not isinstance(dimension, int) or not MIN_DIMENSION <= dimension <= MAX_DIMENSION:
            raise ConstructionError(f"dimension must be in [{MIN_DIMENSION}, {MAX_DIMENSION}], got {dimension!r}")
        if not isinstance(player, Player) or not isinstance(opponent, Player):
            raise ConstructionError("player and opponent are required")
        if player is opponent:
            raise ConstructionError("player and opponent must be different")
        if search_depth < 1:
            raise ConstructionError("search_depth must be >= 1")
        if search_radius is None:
            search_radius = default_search_radius(dimension)
        if search_radius <= 0:
            raise ConstructionError("search_radius must be positive")

        self.dimension = dimension
        self.player = player
        self.opponent = opponent
        self.search_depth = search_depth
        self.search_radius = search_radius
        self.use_multiprocessing = use_multiprocessing
        self.rng = rng or random.Random()
        self.evaluator = StreakEvaluator(weights)
        self.move_gen = ActionGenerator(self.rng)
        self.nodes_explored = 0

    def choose_move(self, board: Board, last_move: Optional[Position], is_first_move: bool = False) -> Optional[Position]:
        """
        Pick the move for self.player.

        Returns:
            A position on the board, or None if the board is full.

        Raises:
            OutOfRangeError if last_move is off the board.
        """
        if board is None:
            raise ConstructionError("board is required")
        if board.dimension != self.dimension:
            raise ConstructionError(f"board dimension {board.dimension} != engine dimension {self.dimension}")
        if last_move is not None and not board.is_on_board(last_move):
            raise OutOfRangeError(f"Last move {last_move} is off the board")
        if board.is_full():
            return None
        if is_first_move or board.is_empty_board():
            return self.move_gen.center_biased_move(board)

        candidates = self._candidates(board, last_move)
        self.nodes_explored = 0
        if self.use_multiprocessing and len(candidates) > 1:
            scored = self._score_parallel(board, candidates)
        else:
            scored = self._score_sequential(board, candidates)

        move, utility = self._select(scored)
        logger.debug(
            "%s plays %s: utility %.3f over %d candidates, %d nodes",
            self.player, move, utility, len(candidates), self.nodes_explored,
        )
        return move

    def _candidates(self, board: Board, last_move: Optional[Position]) -> List[Position]:
        moves = self.move_gen.candidates(board, last_move, self.search_radius)
        if not moves:
            moves = self.move_gen.all_candidates(board)
        return moves

    def _score_sequential(self, board: Board, candidates: List[Position]) -> List[ScoredMove]:
        scored: List[ScoredMove] = []
        best = -math.inf
        for move in candidates:
            child = board.successor(move, self.player)
            value = self.minimize(child, best, move, 1)
            scored.append((move, value, child.longest_run_through(move)))
            best = max(best, value)
        return scored

    def _score_parallel(self, board: Board, candidates: List[Position]) -> List[ScoredMove]:
        """Root fan-out: every worker gets its own pickled board and an open bound."""
        with ProcessPoolExecutor() as executor:
            futures = [executor.submit(_score_candidate, self, board, move) for move in candidates]
            results = [f.result() for f in futures]
        self.nodes_explored = sum(nodes for _, nodes in results)
        return [scored for scored, _ in results]

    def _select(self, scored: List[ScoredMove]) -> Tuple[Position, float]:
        """Best utility, then longest run through the move, then random."""
        best_value = max(value for _, value, _ in scored)
        tied = [(move, run) for move, value, run in scored if value == best_value]
        longest = max(run for _, run in tied)
        return self.rng.choice([move for move, run in tied if run == longest]), best_value

    # ---------- Recursion ----------

    def _terminal_value(self, board: Board, last_move: Optional[Position]) -> Optional[float]:
        if last_move is None or not self.evaluator.is_winning_move(board, last_move):
            return None
        return TERMINAL_SCORE if board.owner(last_move) is self.player else -TERMINAL_SCORE

    def _is_horizon(self, board: Board, depth: int) -> bool:
        return board.is_full() or depth >= self.search_depth

    def maximize(self, board: Board, bound: float, last_move: Optional[Position], depth: int) -> float:
        """Value of board with self.player to move; stops once above bound."""
        self.nodes_explored += 1
        terminal = self._terminal_value(board, last_move)
        if terminal is not None:
            return terminal
        if self._is_horizon(board, depth):
            return self.evaluator.state_utility(board, self.player, self.opponent)

        utility = -math.inf
        for move in self._candidates(board, last_move):
            child = board.successor(move, self.player)
            utility = max(utility, self.minimize(child, utility, move, depth + 1))
            if utility > bound:
                break
        return utility

    def minimize(self, board: Board, bound: float, last_move: Optional[Position], depth: int) -> float:
        """Value of board with self.opponent to move; stops once below bound."""
        self.nodes_explored += 1
        terminal = self._terminal_value(board, last_move)
        if terminal is not None:
            return terminal
        if self._is_horizon(board, depth):
            return self.evaluator.state_utility(board, self.player, self.opponent)

        utility = math.inf
        for move in self._candidates(board, last_move):
            child = board.successor(move, self.opponent)
            utility = min(utility, self.maximize(child, utility, move, depth + 1))
            if utility < bound:
                break
        return utility

import random
from typing import Optional

from caro.core.board import Board, Player, Position
from caro.ai.minimax import SearchEngine
from caro.ai.config import AI_LEVELS

class CaroAI:
    def __init__(
        self,
        player: Player,
        dimension: int,
        lvl: int = 2,
        use_multiprocessing: bool = False,
        rng: Optional[random.Random] = None,
    ) -> None:
        if lvl not in AI_LEVELS:
            raise ValueError(f"Unknown AI level {lvl}; choose from {sorted(AI_LEVELS)}")
        self.player = player
        self.opponent = player.opponent()
        cfg = AI_LEVELS[lvl]
        self.engine = SearchEngine(
            dimension,
            player,
            self.opponent,
            search_depth=cfg.search_depth,
            search_radius=cfg.search_radius,
            use_multiprocessing=use_multiprocessing,
            rng=rng,
        )

    def get_move(self, board: Board, last_move: Optional[Position], is_first_move: bool) -> Optional[Position]:
        """
        Get the move for the AI's player.
        0-based (row, col) Position, or None on a full board.
        """
        return self.engine.choose_move(board, last_move, is_first_move)

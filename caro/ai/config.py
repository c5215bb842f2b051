import math
from dataclasses import dataclass
from typing import Optional, Tuple

from caro.core.board import WIN_LENGTH
from caro.core.errors import ConstructionError


# Heuristic weights per run length 2, 3, 4 (open = no blocked side)
OPEN_WEIGHTS = (0.04, 0.5, 1.0)
BLOCKED_WEIGHTS = (0.01, 0.1, 0.5)
# Utility of a profile holding a winning run
WIN_UTILITY = 1.0
# Non-winning profiles never score above this
UTILITY_CAP = 0.9
# Search value of a decided game; must exceed any static evaluation
TERMINAL_SCORE = 4.0
DEFAULT_SEARCH_DEPTH = 2
# Uniform draws averaged per axis for the opening move
CENTER_SAMPLES = 5


def default_search_radius(dimension: int) -> int:
    return math.ceil(dimension / 2) + 1


@dataclass(frozen=True)
class EvaluatorWeights:
    """
    Weight table for StreakEvaluator.utility.

    open_weights / blocked_weights are indexed by run length - 2 and cover
    every length from 2 to WIN_LENGTH - 1.
    promote_fours: treat a set of (WIN_LENGTH - 1)-runs worth at least
    win_utility as already won.
    """
    open_weights: Tuple[float, ...] = OPEN_WEIGHTS
    blocked_weights: Tuple[float, ...] = BLOCKED_WEIGHTS
    utility_cap: float = UTILITY_CAP
    win_utility: float = WIN_UTILITY
    promote_fours: bool = False

    def __post_init__(self):
        expected = WIN_LENGTH - 2
        if len(self.open_weights) != expected or len(self.blocked_weights) != expected:
            raise ConstructionError(f"weight tables must hold {expected} entries")
        for table in (self.open_weights, self.blocked_weights):
            if any(b <= a for a, b in zip(table, table[1:])):
                raise ConstructionError("weights must increase with run length")
        if any(o <= b for o, b in zip(self.open_weights, self.blocked_weights)):
            raise ConstructionError("open runs must outweigh blocked runs of the same length")
        if not 0 < self.utility_cap < self.win_utility:
            raise ConstructionError("utility_cap must lie strictly between 0 and win_utility")
        if self.win_utility >= TERMINAL_SCORE:
            raise ConstructionError("win_utility must stay below TERMINAL_SCORE")

    def open_weight(self, length: int) -> float:
        return self.open_weights[length - 2]

    def blocked_weight(self, length: int) -> float:
        return self.blocked_weights[length - 2]


@dataclass(frozen=True)
class AILevelConfig:
    search_depth: int
    search_radius: Optional[int] = None  # None = default_search_radius(dimension)

AI_LEVELS = {
    1: AILevelConfig(search_depth=1),
    2: AILevelConfig(search_depth=2),
    3: AILevelConfig(search_depth=3, search_radius=3),
}

import logging
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from caro.core.errors import ConstructionError, IllegalMoveError, OutOfRangeError

logger = logging.getLogger(__name__)

# Rules
WIN_LENGTH = 5
MIN_DIMENSION = 5
MAX_DIMENSION = 99


class Cell(IntEnum):
    """Cell states stored in the grid."""
    EMPTY = 0
    X = 1
    O = 2

    def symbol(self) -> str:
        return {0: ".", 1: "X", 2: "O"}[self.value]


class Player(Enum):
    """The two sides. Values match the Cell they occupy."""
    X = 1
    O = 2

    @property
    def cell(self) -> Cell:
        return Cell(self.value)

    def symbol(self) -> str:
        return self.cell.symbol()

    def opponent(self) -> "Player":
        return Player.O if self is Player.X else Player.X

    def __str__(self) -> str:
        return self.symbol()


@dataclass(frozen=True)
class Position:
    """
    Immutable coordinate on the board.
    Coordinates are 0-based (row, col); off-board values are allowed so that
    bounds checks stay total.
    """
    row: int
    col: int

    def __post_init__(self):
        if not isinstance(self.row, int) or not isinstance(self.col, int):
            raise TypeError("Position coordinates must be integers")

    def __str__(self) -> str:
        return f"({self.row}, {self.col})"

    def in_bounds(self, size: int) -> bool:
        """Check if this position is within board size."""
        return 0 <= self.row < size and 0 <= self.col < size


class Board:
    """
    Square caro board.

    - Uses 0-based Position (row, col) externally.
    - Internally stores a dimension x dimension numpy grid of Cell values.
    """

    def __init__(self, dimension: int = 15) -> None:
        if not isinstance(dimension, int) or isinstance(dimension, bool):
            raise ConstructionError("dimension must be an integer")
        if dimension < MIN_DIMENSION:
            raise ConstructionError(f"dimension {dimension} is below minimum {MIN_DIMENSION}")
        if dimension > MAX_DIMENSION:
            raise ConstructionError(f"dimension {dimension} exceeds maximum {MAX_DIMENSION}")
        self._dimension: int = dimension
        self._grid: np.ndarray = np.zeros((dimension, dimension), dtype=np.int8)
        self._moves: int = 0  # number of placed stones

    @classmethod
    def from_strings(cls, rows: Sequence[str]) -> "Board":
        """
        Build a board from rows of symbols ('X', 'O', anything else empty).
        Handy for setting up positions in tests and scripts.
        """
        board = cls(len(rows))
        for r, line in enumerate(rows):
            if len(line) != board.dimension:
                raise ConstructionError(f"row {r} has length {len(line)}, expected {board.dimension}")
            for c, ch in enumerate(line):
                if ch in ("X", "O"):
                    board.apply(Position(r, c), Player[ch])
        return board

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def moves(self) -> int:
        return self._moves

    def clone(self) -> "Board":
        """Create a deep copy of the board."""
        new_board = Board(self._dimension)
        new_board._grid = np.copy(self._grid)
        new_board._moves = self._moves
        return new_board

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._dimension == other._dimension and np.array_equal(self._grid, other._grid)

    __hash__ = None  # mutable

    # ---------- Bounds / indexing ----------

    def is_on_board(self, pos: Position) -> bool:
        return pos.in_bounds(self._dimension)

    def _idx(self, pos: Position) -> Tuple[int, int]:
        if not self.is_on_board(pos):
            raise OutOfRangeError(f"Out of bounds: {pos} for dimension={self._dimension}")
        return pos.row, pos.col

    # ---------- Cell access ----------

    def get(self, pos: Position) -> Cell:
        r, c = self._idx(pos)
        return Cell(int(self._grid[r, c]))

    def owner(self, pos: Position) -> Optional[Player]:
        """Player whose stone is at pos, or None if empty."""
        cell = self.get(pos)
        return None if cell == Cell.EMPTY else Player(cell.value)

    def is_empty(self, pos: Position) -> bool:
        return self.get(pos) == Cell.EMPTY

    def is_legal_move(self, pos: Position) -> bool:
        return self.is_on_board(pos) and self.is_empty(pos)

    def apply(self, pos: Position, player: Player) -> bool:
        """
        Place a stone at pos.

        Returns:
            True if placed, False if out of bounds, occupied, or player is not a Player.
            The grid is only mutated on success.
        """
        if not isinstance(player, Player):
            logger.warning("Rejected move at %s: %r is not a player", pos, player)
            return False
        if not self.is_legal_move(pos):
            return False
        self._grid[pos.row, pos.col] = player.value
        self._moves += 1
        return True

    def successor(self, pos: Position, player: Player) -> "Board":
        """
        Return a new board with the move applied; this board is left untouched.

        Raises:
            IllegalMoveError if the move is out of bounds or the cell is occupied.
        """
        new_board = self.clone()
        if not new_board.apply(pos, player):
            raise IllegalMoveError(f"Invalid move {pos} for {player}")
        return new_board

    def is_full(self) -> bool:
        return self._moves == self._dimension * self._dimension

    def is_empty_board(self) -> bool:
        return self._moves == 0

    # ---------- Iteration / helpers ----------

    def stones(self) -> Iterator[Tuple[Position, Player]]:
        """Yield all non-empty cells as (Position, Player), row-major."""
        rows, cols = np.nonzero(self._grid)
        for r, c in zip(rows.tolist(), cols.tolist()):
            yield Position(r, c), Player(int(self._grid[r, c]))

    def is_disconnected(self, pos: Position) -> bool:
        """
        True if pos is not a legal move or none of its 8 neighbours holds a stone.
        An off-board position counts as disconnected.
        """
        if not self.is_legal_move(pos):
            return True
        top = max(0, pos.row - 1)
        left = max(0, pos.col - 1)
        neighbourhood = self._grid[top:pos.row + 2, left:pos.col + 2]
        return not neighbourhood.any()

    # ---------- Lines ----------

    def row(self, r: int) -> np.ndarray:
        if not 0 <= r < self._dimension:
            raise OutOfRangeError(f"Row index {r} is out of board")
        return self._grid[r, :].copy()

    def column(self, c: int) -> np.ndarray:
        if not 0 <= c < self._dimension:
            raise OutOfRangeError(f"Column index {c} is out of board")
        return self._grid[:, c].copy()

    def diagonal(self, start: Position, end: Position) -> np.ndarray:
        """
        Cells on the diagonal from start to end, both inclusive.

        Raises:
            OutOfRangeError if either endpoint is off the board.
            ConstructionError if the endpoints do not share a diagonal.
        """
        self._idx(start)
        self._idx(end)
        same_diag = start.row - start.col == end.row - end.col
        same_anti = start.row + start.col == end.row + end.col
        if not (same_diag or same_anti):
            raise ConstructionError(f"{start} and {end} are not on a diagonal")
        length = abs(end.row - start.row) + 1
        steps = np.arange(length)
        rows = start.row + int(np.sign(end.row - start.row)) * steps
        cols = start.col + int(np.sign(end.col - start.col)) * steps
        return self._grid[rows, cols]

    def lines(self, min_length: int = WIN_LENGTH) -> Iterator[np.ndarray]:
        """Yield every row, column and diagonal holding at least min_length cells."""
        n = self._dimension
        if min_length <= n:
            for i in range(n):
                yield self.row(i)
            for i in range(n):
                yield self.column(i)
        # "\" diagonals, keyed by col - row
        for offset in range(-(n - min_length), n - min_length + 1):
            start = Position(max(0, -offset), max(0, offset))
            span = n - abs(offset) - 1
            yield self.diagonal(start, Position(start.row + span, start.col + span))
        # "/" diagonals, keyed by row + col
        for total in range(min_length - 1, 2 * n - min_length):
            start = Position(max(0, total - (n - 1)), min(total, n - 1))
            end = Position(min(total, n - 1), max(0, total - (n - 1)))
            yield self.diagonal(start, end)

    # ---------- Directional scan ----------

    @staticmethod
    def directions() -> Tuple[Tuple[int, int], ...]:
        """4 unique directions (opposites are implied)."""
        return ((0, 1), (1, 0), (1, 1), (1, -1))

    def step(self, pos: Position, dr: int, dc: int) -> Optional[Position]:
        """Return next position by (dr,dc) or None if out of bounds."""
        nxt = Position(pos.row + dr, pos.col + dc)
        return nxt if self.is_on_board(nxt) else None

    def count_in_direction(self, start: Position, player: Player, dr: int, dc: int) -> int:
        """
        Count consecutive stones of `player` from `start` outward in direction (dr,dc),
        excluding the start cell itself.
        """
        count = 0
        cur = self.step(start, dr, dc)
        while cur is not None and self._grid[cur.row, cur.col] == player.value:
            count += 1
            cur = self.step(cur, dr, dc)
        return count

    def line_length_through(self, pos: Position, player: Player, dr: int, dc: int) -> int:
        """
        Total consecutive length of `player` stones passing through `pos`
        along direction (dr,dc), including pos.
        """
        return (
            1
            + self.count_in_direction(pos, player, dr, dc)
            + self.count_in_direction(pos, player, -dr, -dc)
        )

    def longest_run_through(self, pos: Position) -> int:
        """Longest run of the stone at pos over all four directions; 0 if pos is empty."""
        player = self.owner(pos)
        if player is None:
            return 0
        return max(self.line_length_through(pos, player, dr, dc) for dr, dc in self.directions())

    # ---------- String form ----------

    def to_ascii(self, last_move: Optional[Position] = None) -> str:
        """
        Render board as text with 0-based coordinates.
        The last move, if given, is shown in lowercase.
        """
        width = len(str(self._dimension - 1))
        lines: List[str] = [" " * (width + 1) + " ".join(str(c).rjust(width + 1) for c in range(self._dimension))]
        for r in range(self._dimension):
            cells = []
            for c in range(self._dimension):
                sym = Cell(int(self._grid[r, c])).symbol()
                if last_move is not None and last_move == Position(r, c):
                    sym = sym.lower()
                cells.append(sym.rjust(width + 1))
            lines.append(str(r).rjust(width) + " " + " ".join(cells))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.to_ascii()

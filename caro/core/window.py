from dataclasses import dataclass
from typing import Iterator

from caro.core.board import Position
from caro.core.errors import ConstructionError


@dataclass(frozen=True)
class Window:
    """Rectangular part of the board, bounds inclusive."""
    top_row: int
    bottom_row: int
    left_col: int
    right_col: int

    def __post_init__(self):
        if min(self.top_row, self.bottom_row, self.left_col, self.right_col) < 0:
            raise ConstructionError("Window bounds cannot be negative")

    @classmethod
    def around(cls, center: Position, radius: int, dimension: int) -> "Window":
        """
        All cells less than `radius` steps away from center on both axes,
        clipped to [0, dimension-1].
        """
        if radius <= 0:
            raise ConstructionError(f"Window radius must be positive, got {radius}")
        reach = radius - 1
        return cls(
            top_row=max(0, center.row - reach),
            bottom_row=min(dimension - 1, center.row + reach),
            left_col=max(0, center.col - reach),
            right_col=min(dimension - 1, center.col + reach),
        )

    def contains(self, pos: Position) -> bool:
        return (
            self.top_row <= pos.row <= self.bottom_row
            and self.left_col <= pos.col <= self.right_col
        )

    def positions(self) -> Iterator[Position]:
        """Yield every cell of the window, row-major."""
        for row in range(self.top_row, self.bottom_row + 1):
            for col in range(self.left_col, self.right_col + 1):
                yield Position(row, col)

class CaroError(Exception):
    """Base class for engine errors."""


class ConstructionError(CaroError, ValueError):
    """Invalid argument when building a board, window or engine."""


class OutOfRangeError(CaroError, IndexError):
    """Coordinate or line index outside the board."""


class IllegalMoveError(CaroError, ValueError):
    """Move onto an occupied or off-board cell."""

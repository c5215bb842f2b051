"""Run detection along a single line of cells."""

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from caro.core.board import Cell, Player, WIN_LENGTH


@dataclass
class Streak:
    """Counts of runs sharing one length."""
    length: int
    count: int = 0
    unblocked_count: int = 0

    def __post_init__(self):
        if self.length < 0 or self.count < 0 or self.unblocked_count < 0:
            raise ValueError("Streak fields cannot be negative")
        if self.unblocked_count > self.count:
            raise ValueError("unblocked_count cannot exceed count")

    @property
    def blocked_count(self) -> int:
        return self.count - self.unblocked_count

    def record(self, block_count: int, *, completed: bool = False) -> None:
        """
        Record one run with `block_count` blocked sides.
        Runs blocked on both sides are dropped unless `completed` (already a win).
        """
        if block_count < 0:
            raise ValueError("block_count cannot be negative")
        if block_count >= 2 and not completed:
            return
        self.count += 1
        if block_count == 0:
            self.unblocked_count += 1

    def merge(self, other: "Streak") -> None:
        if other.length != self.length:
            raise ValueError(f"cannot merge length {other.length} into length {self.length}")
        self.count += other.count
        self.unblocked_count += other.unblocked_count

    def __str__(self) -> str:
        return f"length {self.length}: count={self.count}, unblocked={self.unblocked_count}"


class StreakProfile:
    """
    Streaks of one player indexed by run length 2..WIN_LENGTH.
    The WIN_LENGTH bucket also holds every longer run.
    """

    MIN_LENGTH = 2

    def __init__(self) -> None:
        self._streaks: List[Streak] = [
            Streak(length) for length in range(self.MIN_LENGTH, WIN_LENGTH + 1)
        ]

    def add_run(self, length: int, block_count: int) -> None:
        if length < 0:
            raise ValueError("Run length cannot be negative")
        if length < self.MIN_LENGTH:
            return
        completed = length >= WIN_LENGTH
        self.get_streak(min(length, WIN_LENGTH)).record(block_count, completed=completed)

    def merge(self, other: "StreakProfile") -> "StreakProfile":
        """Add other's counts into this profile; returns self for chaining."""
        for mine, theirs in zip(self._streaks, other._streaks):
            mine.merge(theirs)
        return self

    def get_streak(self, length: int) -> Streak:
        if not self.MIN_LENGTH <= length <= WIN_LENGTH:
            raise ValueError(f"No bucket for run length {length}")
        return self._streaks[length - self.MIN_LENGTH]

    @property
    def max_length(self) -> int:
        """Longest recorded run length, WIN_LENGTH for any win, 0 if empty."""
        for streak in reversed(self._streaks):
            if streak.count > 0:
                return streak.length
        return 0

    def is_empty(self) -> bool:
        return self.max_length == 0

    def __iter__(self):
        return iter(self._streaks)

    def __str__(self) -> str:
        lines = [str(s) for s in self._streaks if s.count > 0]
        return "\n".join(lines) if lines else "no streak"


def scan(cells: Sequence[int], player: Player) -> StreakProfile:
    """
    Find the runs of `player` in a line of cells.

    A side of a run is blocked by the end of the line or by the other
    player's stone. e.g. _XXX_OXXX_OXXXO gives two length-3 runs:
    one open, one blocked on the left; the last is blocked on both sides
    and is dropped.
    """
    profile = StreakProfile()
    values = [int(v) for v in cells]
    target = player.value
    run = 0
    blocks = 0
    for i, v in enumerate(values):
        if v == target:
            if run == 0 and (i == 0 or values[i - 1] != Cell.EMPTY):
                blocks += 1
            run += 1
        elif run:
            if v != Cell.EMPTY:
                blocks += 1
            profile.add_run(run, blocks)
            run = 0
            blocks = 0
    if run:
        profile.add_run(run, blocks + 1)
    return profile


def scan_all(lines: Iterable[Sequence[int]], player: Player) -> StreakProfile:
    """Union of scan() over several lines."""
    profile = StreakProfile()
    for line in lines:
        profile.merge(scan(line, player))
    return profile

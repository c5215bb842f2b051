from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol

from caro.core.board import Board, Player, Position
from caro.core.errors import ConstructionError, IllegalMoveError
from caro.ai.heuristics import StreakEvaluator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Move:
    """One stone of the match record. ply counts from 1."""
    ply: int
    player: Player
    position: Position


@dataclass(frozen=True)
class TurnResult:
    """Outcome of one attempted move; move is None when it was rejected."""
    move: Optional[Move] = None
    winner: Optional[Player] = None
    error_message: str = ""

    @property
    def success(self) -> bool:
        return self.move is not None

    @property
    def is_winning_move(self) -> bool:
        return self.winner is not None


class Agent(Protocol):
    def get_move(self, board: Board, last_move: Optional[Position], is_first_move: bool) -> Optional[Position]:
        ...


@dataclass
class MatchResult:
    """Outcome of a finished match. winner is None for a draw."""
    winner: Optional[Player]
    board: Board
    moves: List[Move] = field(default_factory=list)


class Match:
    """
    Driver loop between two agents.

    Owns:
      - Board
      - Current state fields (current_player, winner, history, last_move)

    Alternates turns until a win or a full board. Illegal moves from an agent
    are re-requested up to max_retries times.
    """

    def __init__(
        self,
        dimension: int,
        agents: Dict[Player, Agent],
        starting_player: Player = Player.X,
        *,
        max_retries: int = 3,
        evaluator: Optional[StreakEvaluator] = None,
    ) -> None:
        if set(agents) != {Player.X, Player.O}:
            raise ConstructionError("an agent is required for each player")
        if max_retries < 0:
            raise ConstructionError("max_retries cannot be negative")
        self.board = Board(dimension)
        self.agents = agents
        self.max_retries = max_retries
        self.evaluator = evaluator or StreakEvaluator()

        self.current_player: Player = starting_player
        self.winner: Optional[Player] = None
        self.move_history: List[Move] = []
        self.last_move: Optional[Position] = None

    def is_game_over(self) -> bool:
        return self.winner is not None or self.board.is_full()

    def make_move(self, position: Position) -> TurnResult:
        """
        Play a move for the current player.

        Returns:
            TurnResult carrying the recorded Move, or an error_message
        """
        if self.is_game_over():
            return TurnResult(error_message="Game is already over.")
        if not self.board.apply(position, self.current_player):
            if not self.board.is_on_board(position):
                return TurnResult(error_message="Move is out of bounds.")
            return TurnResult(error_message="Cell is already occupied.")

        move = Move(ply=len(self.move_history) + 1, player=self.current_player, position=position)
        self.move_history.append(move)
        self.last_move = position

        if self.evaluator.is_winning_move(self.board, position):
            self.winner = self.current_player
            return TurnResult(move=move, winner=self.winner)

        self.switch_player()
        return TurnResult(move=move)

    def switch_player(self) -> None:
        self.current_player = self.current_player.opponent()

    def play_turn(self) -> TurnResult:
        """
        Ask the current agent for a move and play it.

        Raises:
            IllegalMoveError if the agent keeps proposing illegal moves.
        """
        agent = self.agents[self.current_player]
        is_first_move = not self.move_history
        for attempt in range(self.max_retries + 1):
            position = agent.get_move(self.board.clone(), self.last_move, is_first_move)
            if position is None:
                break
            player = self.current_player
            result = self.make_move(position)
            if result.success:
                logger.info("%s plays %s", player, position)
                return result
            logger.warning("%s proposed %s: %s (attempt %d)", player, position, result.error_message, attempt + 1)
        raise IllegalMoveError(f"{self.current_player} failed to produce a legal move")

    def run(self, max_turns: Optional[int] = None) -> MatchResult:
        """Play turns until the game ends (or max_turns moves were made)."""
        turns = 0
        while not self.is_game_over():
            if max_turns is not None and turns >= max_turns:
                break
            self.play_turn()
            turns += 1

        if self.winner is not None:
            logger.info("%s wins after %d moves", self.winner, len(self.move_history))
        elif self.board.is_full():
            logger.info("Draw: board is full")
        return MatchResult(winner=self.winner, board=self.board, moves=list(self.move_history))

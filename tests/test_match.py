import random
import unittest

from caro.core.board import Player, Position
from caro.core.errors import ConstructionError, IllegalMoveError
from caro.ai.caro_ai import CaroAI
from caro.app.match import Match, Move


class ScriptedAgent:
    def __init__(self, moves):
        self.moves = list(moves)
        self.calls = []

    def get_move(self, board, last_move, is_first_move):
        self.calls.append((last_move, is_first_move))
        return self.moves.pop(0)


class TestMatch(unittest.TestCase):
    def test_row_win(self):
        x = ScriptedAgent(Position(0, c) for c in range(5))
        o = ScriptedAgent(Position(1, c) for c in range(4))
        result = Match(5, {Player.X: x, Player.O: o}).run()

        self.assertEqual(result.winner, Player.X)
        self.assertEqual(len(result.moves), 9)
        self.assertEqual(result.moves[-1].position, Position(0, 4))
        self.assertEqual(x.calls[0], (None, True))
        self.assertEqual(o.calls[0], (Position(0, 0), False))

    def test_illegal_move_is_retried(self):
        x = ScriptedAgent([Position(2, 2), Position(3, 3)])
        o = ScriptedAgent([Position(2, 2), Position(9, 9), Position(2, 3)])
        match = Match(5, {Player.X: x, Player.O: o})
        match.play_turn()
        result = match.play_turn()
        self.assertTrue(result.success)
        self.assertEqual(match.board.owner(Position(2, 3)), Player.O)
        self.assertEqual(len(o.calls), 3)
        self.assertEqual(match.current_player, Player.X)

    def test_gives_up_after_max_retries(self):
        x = ScriptedAgent([Position(0, 0)])
        o = ScriptedAgent([Position(0, 0)] * 3)
        match = Match(5, {Player.X: x, Player.O: o}, max_retries=2)
        match.play_turn()
        with self.assertRaises(IllegalMoveError):
            match.play_turn()
        self.assertEqual(len(o.calls), 3)

    def test_turn_result_records_move_and_winner(self):
        match = Match(5, {Player.X: ScriptedAgent([]), Player.O: ScriptedAgent([])})
        first = match.make_move(Position(2, 2))
        self.assertEqual(first.move, Move(ply=1, player=Player.X, position=Position(2, 2)))
        self.assertIsNone(first.winner)
        self.assertEqual(match.make_move(Position(3, 3)).move.ply, 2)

        rejected = match.make_move(Position(3, 3))
        self.assertIsNone(rejected.move)
        self.assertFalse(rejected.is_winning_move)

    def test_winning_turn_names_winner(self):
        match = Match(5, {Player.X: ScriptedAgent([]), Player.O: ScriptedAgent([])}, starting_player=Player.O)
        for c in range(4):
            match.make_move(Position(4, c))
            match.make_move(Position(0, c))
        result = match.make_move(Position(4, 4))
        self.assertEqual(result.winner, Player.O)
        self.assertEqual(result.move.ply, 9)
        self.assertEqual([m.ply for m in match.move_history], list(range(1, 10)))

    def test_make_move_failures(self):
        match = Match(5, {Player.X: ScriptedAgent([]), Player.O: ScriptedAgent([])})
        self.assertFalse(match.make_move(Position(5, 0)).success)
        self.assertTrue(match.make_move(Position(0, 0)).success)
        result = match.make_move(Position(0, 0))
        self.assertFalse(result.success)
        self.assertIn("occupied", result.error_message)

    def test_no_moves_after_game_over(self):
        match = Match(5, {Player.X: ScriptedAgent([]), Player.O: ScriptedAgent([])})
        for c in range(4):
            match.make_move(Position(0, c))
            match.make_move(Position(1, c))
        self.assertTrue(match.make_move(Position(0, 4)).is_winning_move)
        self.assertTrue(match.is_game_over())
        self.assertFalse(match.make_move(Position(4, 4)).success)

    def test_requires_both_agents(self):
        with self.assertRaises(ConstructionError):
            Match(5, {Player.X: ScriptedAgent([])})

    def test_max_turns(self):
        x = ScriptedAgent([Position(0, 0), Position(0, 1)])
        o = ScriptedAgent([Position(4, 4)])
        result = Match(5, {Player.X: x, Player.O: o}).run(max_turns=2)
        self.assertIsNone(result.winner)
        self.assertEqual(len(result.moves), 2)


class TestComputerMatch(unittest.TestCase):
    def test_selfplay_finishes(self):
        agents = {
            Player.X: CaroAI(Player.X, 5, lvl=1, rng=random.Random(1)),
            Player.O: CaroAI(Player.O, 5, lvl=1, rng=random.Random(2)),
        }
        result = Match(5, agents).run()
        self.assertTrue(result.winner is not None or result.board.is_full())
        self.assertEqual(len(result.moves), result.board.moves)

    def test_computer_finishes_its_row(self):
        x = CaroAI(Player.X, 7, lvl=2, rng=random.Random(3))
        o = ScriptedAgent([Position(6, 0), Position(6, 2), Position(6, 4), Position(6, 6)])
        match = Match(7, {Player.X: x, Player.O: o}, starting_player=Player.O)
        for c in range(1, 5):
            match.board.apply(Position(2, c), Player.X)
        match.play_turn()
        result = match.play_turn()
        self.assertTrue(result.is_winning_move)
        self.assertEqual(match.winner, Player.X)

    def test_unknown_level(self):
        with self.assertRaises(ValueError):
            CaroAI(Player.X, 7, lvl=9)


if __name__ == '__main__':
    unittest.main()

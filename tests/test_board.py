import unittest

from caro.core.board import Board, Cell, Player, Position
from caro.core.errors import ConstructionError, IllegalMoveError, OutOfRangeError


class TestBoard(unittest.TestCase):
    def test_dimension_limits(self):
        Board(5)
        Board(99)
        for bad in (4, 100, 0, -3):
            with self.assertRaises(ConstructionError):
                Board(bad)
        with self.assertRaises(ConstructionError):
            Board("7")

    def test_apply_success_and_failures(self):
        board = Board(5)
        self.assertTrue(board.apply(Position(2, 2), Player.X))
        self.assertEqual(board.get(Position(2, 2)), Cell.X)
        self.assertEqual(board.owner(Position(2, 2)), Player.X)

        # occupied, off board, not a player: rejected without mutation
        self.assertFalse(board.apply(Position(2, 2), Player.O))
        self.assertFalse(board.apply(Position(-1, 0), Player.O))
        self.assertFalse(board.apply(Position(5, 5), Player.O))
        self.assertFalse(board.apply(Position(0, 0), Cell.EMPTY))
        self.assertEqual(board.moves, 1)
        self.assertEqual(board.get(Position(2, 2)), Cell.X)
        self.assertTrue(board.is_empty(Position(0, 0)))

    def test_out_of_range_reads_raise(self):
        board = Board(5)
        for pos in (Position(5, 0), Position(0, -1), Position(-1, -1)):
            self.assertFalse(board.is_on_board(pos))
            with self.assertRaises(OutOfRangeError):
                board.get(pos)
            with self.assertRaises(OutOfRangeError):
                board.is_empty(pos)
        with self.assertRaises(OutOfRangeError):
            board.row(5)
        with self.assertRaises(OutOfRangeError):
            board.column(-1)

    def test_clone_is_independent(self):
        board = Board.from_strings([
            "X....",
            ".O...",
            ".....",
            ".....",
            ".....",
        ])
        copy = board.clone()
        self.assertEqual(copy, board)

        copy.apply(Position(4, 4), Player.X)
        self.assertTrue(board.is_empty(Position(4, 4)))
        self.assertEqual(board.moves, 2)
        self.assertEqual(copy.moves, 3)
        self.assertNotEqual(copy, board)

    def test_successor(self):
        board = Board(5)
        board.apply(Position(1, 1), Player.O)
        child = board.successor(Position(0, 0), Player.X)
        self.assertEqual(child.owner(Position(0, 0)), Player.X)
        self.assertTrue(board.is_empty(Position(0, 0)))

        with self.assertRaises(IllegalMoveError):
            board.successor(Position(1, 1), Player.X)
        with self.assertRaises(IllegalMoveError):
            board.successor(Position(7, 1), Player.X)

    def test_is_full(self):
        board = Board(5)
        self.assertTrue(board.is_empty_board())
        players = (Player.X, Player.O)
        for r in range(5):
            for c in range(5):
                self.assertFalse(board.is_full())
                board.apply(Position(r, c), players[(r + c) % 2])
        self.assertTrue(board.is_full())
        self.assertFalse(board.is_empty_board())

    def test_from_strings_rejects_ragged_rows(self):
        with self.assertRaises(ConstructionError):
            Board.from_strings(["....."] * 4 + ["...."])

    def test_rows_and_columns(self):
        board = Board.from_strings([
            "XO...",
            ".....",
            "X....",
            ".....",
            "....O",
        ])
        self.assertEqual(board.row(0).tolist(), [1, 2, 0, 0, 0])
        self.assertEqual(board.column(0).tolist(), [1, 0, 1, 0, 0])
        self.assertEqual(board.column(4).tolist(), [0, 0, 0, 0, 2])

    def test_diagonal_extraction(self):
        board = Board.from_strings([
            "X...O",
            ".X.O.",
            "..X..",
            ".O...",
            "O...X",
        ])
        self.assertEqual(board.diagonal(Position(0, 0), Position(4, 4)).tolist(), [1, 1, 1, 0, 1])
        self.assertEqual(board.diagonal(Position(4, 4), Position(2, 2)).tolist(), [1, 0, 1])
        self.assertEqual(board.diagonal(Position(0, 4), Position(4, 0)).tolist(), [2, 2, 1, 2, 2])
        self.assertEqual(board.diagonal(Position(1, 1), Position(1, 1)).tolist(), [1])

    def test_diagonal_validation(self):
        board = Board(5)
        with self.assertRaises(ConstructionError):
            board.diagonal(Position(0, 0), Position(1, 3))
        with self.assertRaises(ConstructionError):
            board.diagonal(Position(0, 0), Position(0, 4))
        with self.assertRaises(OutOfRangeError):
            board.diagonal(Position(-1, -1), Position(2, 2))

    def test_lines_cover_long_enough_diagonals_only(self):
        self.assertEqual(len(list(Board(5).lines(5))), 5 + 5 + 1 + 1)
        self.assertEqual(len(list(Board(6).lines(5))), 6 + 6 + 3 + 3)
        lengths = sorted(len(line) for line in Board(7).lines(5))
        self.assertEqual(lengths[0], 5)

    def test_is_disconnected(self):
        board = Board(5)
        self.assertTrue(board.is_disconnected(Position(2, 2)))
        board.apply(Position(2, 2), Player.X)
        self.assertFalse(board.is_disconnected(Position(1, 1)))
        self.assertFalse(board.is_disconnected(Position(3, 2)))
        self.assertTrue(board.is_disconnected(Position(0, 0)))
        self.assertTrue(board.is_disconnected(Position(2, 2)))  # occupied
        self.assertTrue(board.is_disconnected(Position(-1, 2)))  # off board

    def test_longest_run_through(self):
        board = Board.from_strings([
            ".....",
            "XXX..",
            "...X.",
            "....X",
            ".....",
        ])
        self.assertEqual(board.longest_run_through(Position(1, 1)), 3)
        self.assertEqual(board.longest_run_through(Position(3, 4)), 3)
        self.assertEqual(board.longest_run_through(Position(0, 0)), 0)

    def test_to_ascii_marks_last_move(self):
        board = Board(5)
        board.apply(Position(0, 0), Player.X)
        text = board.to_ascii(last_move=Position(0, 0))
        self.assertIn("x", text)
        self.assertEqual(len(text.splitlines()), 6)


if __name__ == '__main__':
    unittest.main()

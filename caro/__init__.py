"""Caro (five-in-a-row) board, evaluator and minimax opponent."""

__version__ = "0.1.0"

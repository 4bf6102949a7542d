"""Gomoku (five in a row) engine with a minimax / alpha-beta computer player."""

__version__ = "1.0.0"

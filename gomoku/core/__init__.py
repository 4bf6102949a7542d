"""Core engine components: board, line scanner, evaluator, and search."""

from .board import Board, Cell, Move
from .evaluator import Evaluator
from .search import SearchEngine

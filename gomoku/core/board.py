"""15x15 Gomoku board with undo/redo move history."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, List, Optional, Set, Tuple

BOARD_SIZE = 15
CENTER = (BOARD_SIZE // 2, BOARD_SIZE // 2)


class Cell(IntEnum):
    EMPTY = 0
    BLACK = 1  # moves first
    WHITE = 2

    @property
    def opponent(self) -> "Cell":
        if self is Cell.EMPTY:
            raise ValueError("EMPTY has no opponent")
        return Cell.WHITE if self is Cell.BLACK else Cell.BLACK

    @property
    def symbol(self) -> str:
        return CELL_SYMBOLS[self]


CELL_SYMBOLS = {Cell.EMPTY: ".", Cell.BLACK: "X", Cell.WHITE: "O"}


@dataclass(frozen=True)
class Move:
    row: int
    col: int
    side: Cell
    sequence_number: int = 0

    @property
    def position(self) -> Tuple[int, int]:
        return self.row, self.col

    def __str__(self):
        return f"#{self.sequence_number}: {self.side.name.capitalize()} ({self.row}, {self.col})"


class Board:
    def __init__(self):
        self._grid = [[Cell.EMPTY] * BOARD_SIZE for _ in range(BOARD_SIZE)]
        self._applied: List[Move] = []
        self._undone: List[Move] = []

    def reset(self):
        """Clear every cell and both history stacks."""
        for row in self._grid:
            row[:] = [Cell.EMPTY] * BOARD_SIZE
        self._applied.clear()
        self._undone.clear()

    def get_cell(self, row: int, col: int) -> Cell:
        if not self.is_valid_position(row, col):
            return Cell.EMPTY
        return self._grid[row][col]

    def place(self, row: int, col: int, side: Cell) -> bool:
        """Mark a cell for `side`. Returns False (and changes nothing) if illegal."""
        if side not in (Cell.BLACK, Cell.WHITE):
            return False
        if not self.is_empty(row, col):
            return False
        self._grid[row][col] = Cell(side)
        self._applied.append(Move(row, col, Cell(side), len(self._applied) + 1))
        # divergent play invalidates the redo history
        self._undone.clear()
        return True

    def undo(self) -> Optional[Move]:
        """Take back the last applied move and return it."""
        if not self._applied:
            return None
        move = self._applied.pop()
        self._grid[move.row][move.col] = Cell.EMPTY
        self._undone.append(move)
        return move

    def redo(self) -> Optional[Move]:
        """Replay the last undone move and return it."""
        if not self._undone:
            return None
        move = self._undone.pop()
        self._grid[move.row][move.col] = move.side
        self._applied.append(move)
        return move

    @property
    def can_undo(self) -> bool:
        return bool(self._applied)

    @property
    def can_redo(self) -> bool:
        return bool(self._undone)

    @property
    def move_count(self) -> int:
        return len(self._applied)

    def is_valid_position(self, row: int, col: int) -> bool:
        return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE

    def is_empty(self, row: int, col: int) -> bool:
        return self.is_valid_position(row, col) and self._grid[row][col] == Cell.EMPTY

    def is_full(self) -> bool:
        return all(cell != Cell.EMPTY for row in self._grid for cell in row)

    def move_history(self) -> List[Move]:
        """Applied moves in play order (a copy)."""
        return list(self._applied)

    def undone_moves(self) -> List[Move]:
        """Undone moves, most recently undone last (a copy)."""
        return list(self._undone)

    def last_move(self) -> Optional[Move]:
        return self._applied[-1] if self._applied else None

    def empty_positions(self) -> List[Tuple[int, int]]:
        return [(r, c) for r in range(BOARD_SIZE) for c in range(BOARD_SIZE)
                if self._grid[r][c] == Cell.EMPTY]

    def empty_positions_near(self, moves: Optional[Iterable[Move]] = None,
                             radius: int = 2) -> Set[Tuple[int, int]]:
        """Empty cells within Chebyshev `radius` of any of `moves` (default: applied history)."""
        moves = list(self._applied if moves is None else moves)
        if not moves:
            return {CENTER}
        near = set()
        for move in moves:
            for r in range(move.row - radius, move.row + radius + 1):
                for c in range(move.col - radius, move.col + radius + 1):
                    if self.is_empty(r, c):
                        near.add((r, c))
        return near

    def grid_copy(self) -> List[List[int]]:
        """Plain int grid for search scratch work."""
        return [[int(cell) for cell in row] for row in self._grid]

    def __str__(self):
        lines = ["   " + "".join(f"{c:3d}" for c in range(BOARD_SIZE))]
        for r, row in enumerate(self._grid):
            lines.append(f"{r:2d} " + "".join(f"{cell.symbol:>3}" for cell in row))
        return "\n".join(lines)

    def print_board(self):
        """Print ASCII representation."""
        print(self)

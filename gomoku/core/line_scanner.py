"""Run-length scans along the four board axes.

Grid-level helpers (`count_consecutive`, `line_info`, `check_win_at`) work on
the plain int grids the search mutates; `check_win` and
`scan_board_for_winner` read a `Board` through its public accessors.
"""

from typing import List, Optional, Tuple

from gomoku.core.board import BOARD_SIZE, Board, Cell

WIN_LENGTH = 5

# horizontal, vertical, diagonal down-right, diagonal down-left
DIRECTIONS = ((0, 1), (1, 0), (1, 1), (1, -1))

Grid = List[List[int]]


def _in_range(row: int, col: int) -> bool:
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def count_consecutive(grid: Grid, row: int, col: int, d_row: int, d_col: int, side: int) -> int:
    """Count `side` stones from one step past (row, col) in one direction."""
    count = 0
    r, c = row + d_row, col + d_col
    while _in_range(r, c) and grid[r][c] == side:
        count += 1
        r += d_row
        c += d_col
    return count


def line_info(grid: Grid, row: int, col: int, d_row: int, d_col: int, side: int) -> Tuple[int, int]:
    """Return (run_length, open_ends) of the run through (row, col) along one axis.

    The origin counts as a `side` stone whatever it holds. An end is open when
    the cell just past the run is on the board and empty.
    """
    run = 1
    open_ends = 0
    for sign in (1, -1):
        dr, dc = d_row * sign, d_col * sign
        r, c = row + dr, col + dc
        while _in_range(r, c) and grid[r][c] == side:
            run += 1
            r += dr
            c += dc
        if _in_range(r, c) and grid[r][c] == Cell.EMPTY:
            open_ends += 1
    return run, open_ends


def check_win_at(grid: Grid, row: int, col: int, side: int) -> bool:
    """True if (row, col) completes WIN_LENGTH or more in a row for `side`."""
    for dr, dc in DIRECTIONS:
        total = 1 + count_consecutive(grid, row, col, dr, dc, side) \
            + count_consecutive(grid, row, col, -dr, -dc, side)
        if total >= WIN_LENGTH:
            return True
    return False


def _count_on_board(board: Board, row: int, col: int, d_row: int, d_col: int, side: Cell) -> int:
    count = 0
    r, c = row + d_row, col + d_col
    while board.is_valid_position(r, c) and board.get_cell(r, c) == side:
        count += 1
        r += d_row
        c += d_col
    return count


def check_win(board: Board, row: int, col: int, side: Cell) -> bool:
    """Win test for the stone at (row, col). Overlines count."""
    if side == Cell.EMPTY:
        return False
    for dr, dc in DIRECTIONS:
        total = 1 + _count_on_board(board, row, col, dr, dc, side) \
            + _count_on_board(board, row, col, -dr, -dc, side)
        if total >= WIN_LENGTH:
            return True
    return False


def scan_board_for_winner(board: Board) -> Optional[Cell]:
    """Full-board recheck; returns the first side found with a winning run."""
    for row in range(BOARD_SIZE):
        for col in range(BOARD_SIZE):
            cell = board.get_cell(row, col)
            if cell != Cell.EMPTY and check_win(board, row, col, cell):
                return cell
    return None

"""Static pattern evaluator: candidate ranking and leaf scores."""

from typing import List

from gomoku.config import CONFIG
from gomoku.core.board import BOARD_SIZE, CENTER, Cell
from gomoku.core.line_scanner import DIRECTIONS, WIN_LENGTH, line_info

Grid = List[List[int]]


class Evaluator:
    def __init__(self, cfg=None):
        self.cfg = cfg or CONFIG.eval
        s = self.cfg.pattern_scores
        # (run_length, open_ends) -> score; anything missing scores 0
        self._table = {
            (4, 2): s["OPEN_FOUR"], (4, 1): s["FOUR"],
            (3, 2): s["OPEN_THREE"], (3, 1): s["THREE"],
            (2, 2): s["OPEN_TWO"], (2, 1): s["TWO"],
            (1, 2): s["ONE"], (1, 1): s["ONE"],
        }
        self._win = s["WIN"]

    def pattern_score(self, run_length: int, open_ends: int) -> int:
        if run_length >= WIN_LENGTH:
            return self._win
        return self._table.get((run_length, open_ends), 0)

    def _line_total(self, grid: Grid, row: int, col: int, side: int) -> int:
        total = 0
        for dr, dc in DIRECTIONS:
            total += self.pattern_score(*line_info(grid, row, col, dr, dc, side))
        return total

    def evaluate_position(self, grid: Grid, row: int, col: int, side: int) -> int:
        """Rank an empty cell for `side`: own patterns plus weighted blocking value."""
        opponent = Cell(side).opponent

        grid[row][col] = side
        offense = self._line_total(grid, row, col, side)
        grid[row][col] = opponent
        defense = self._line_total(grid, row, col, opponent)
        grid[row][col] = Cell.EMPTY

        return offense + round(defense * self.cfg.defense_weight)

    def evaluate_board(self, grid: Grid, ai_side: int, opponent_side: int) -> int:
        """Leaf score from `ai_side`'s point of view."""
        score = 0
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                cell = grid[row][col]
                if cell == ai_side:
                    score += self._piece_value(grid, row, col, ai_side)
                elif cell == opponent_side:
                    score -= self._piece_value(grid, row, col, opponent_side)
        return score

    def _piece_value(self, grid: Grid, row: int, col: int, side: int) -> int:
        score = 0
        # every stone of a run sees the whole run, halve to damp the repetition
        for dr, dc in DIRECTIONS:
            score += self.pattern_score(*line_info(grid, row, col, dr, dc, side)) // 2

        distance = abs(row - CENTER[0]) + abs(col - CENTER[1])
        score += self.cfg.center_bonus_base - distance
        return score
